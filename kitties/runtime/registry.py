"""Kitty registry - kitty records, owners, and the id counter.

Ids come from a single counter (KittiesCount) and are never reused:
next_kitty_id() refuses to hand out max_kitty_index, so the counter
can never wrap.

Every insert goes through insert_kitty(), which writes the record, the
owner, and links the id into the owner's ownership chain. The two maps
(KittyOwner and the ownership index) are therefore always written
together.

Usage:
    registry = KittyRegistry(store, OwnedKitties(store), RandomnessSource())
    kitty_id = registry.create("alice")
    registry.owner_of(kitty_id)  # "alice"
"""

from __future__ import annotations

import logging

from .constants import PREFIX_KITTIES, PREFIX_KITTIES_COUNT, PREFIX_KITTY_OWNER, U32_MAX
from .errors import KittyIndexOverflow, KittyNotFound
from .owned_kitties import OwnershipIndex
from .randomness import Randomness
from .storage import KeyValueStore, StorageMap, StorageValue
from .types import AccountId, Balance, Kitty, KittyIndex
from .validation import check_price

logger = logging.getLogger(__name__)


class KittyRegistry:
    """Holds kitty records keyed by id and the next-id counter.

    Thread-safety: not thread-safe. The runtime applies calls one at a
    time.
    """

    kitties: StorageMap[Kitty]
    owners: StorageMap[AccountId]
    count: StorageValue[int]
    index: OwnershipIndex
    randomness: Randomness
    max_kitty_index: int

    def __init__(
        self,
        store: KeyValueStore,
        index: OwnershipIndex,
        randomness: Randomness,
        max_kitty_index: int = U32_MAX,
    ) -> None:
        self.kitties = StorageMap(store, PREFIX_KITTIES)
        self.owners = StorageMap(store, PREFIX_KITTY_OWNER)
        self.count = StorageValue(store, PREFIX_KITTIES_COUNT, 0)
        self.index = index
        self.randomness = randomness
        self.max_kitty_index = max_kitty_index

    # ===== QUERIES =====

    def get(self, kitty_id: KittyIndex) -> Kitty | None:
        return self.kitties.get(kitty_id)

    def require(self, kitty_id: KittyIndex) -> Kitty:
        """Get a kitty or raise KittyNotFound."""
        kitty = self.kitties.get(kitty_id)
        if kitty is None:
            raise KittyNotFound(f"Kitty {kitty_id} does not exist", kitty_id=kitty_id)
        return kitty

    def exists(self, kitty_id: KittyIndex) -> bool:
        return self.kitties.contains(kitty_id)

    def owner_of(self, kitty_id: KittyIndex) -> AccountId | None:
        return self.owners.get(kitty_id)

    def kitties_count(self) -> int:
        """Number of kitties ever created, i.e. the next kitty id."""
        return self.count.get()

    # ===== MUTATION =====

    def next_kitty_id(self) -> KittyIndex:
        """Return the id the next kitty will get.

        Raises:
            KittyIndexOverflow: If the counter has reached max_kitty_index
        """
        kitty_id = self.kitties_count()
        if kitty_id >= self.max_kitty_index:
            raise KittyIndexOverflow(
                "Kitties count overflow",
                kitty_id=kitty_id,
                max_kitty_index=self.max_kitty_index,
            )
        return kitty_id

    def insert_kitty(self, owner: AccountId, kitty_id: KittyIndex, kitty: Kitty) -> None:
        """Store a new kitty, advance the counter and link it under owner."""
        self.kitties.insert(kitty_id, kitty)
        self.count.put(kitty_id + 1)
        self.owners.insert(kitty_id, owner)
        self.index.append(owner, kitty_id)
        logger.debug("Inserted kitty %d for %s", kitty_id, owner)

    def create(self, owner: AccountId) -> KittyIndex:
        """Create a kitty with random dna, owned by owner.

        Raises:
            KittyIndexOverflow: If no id is left
        """
        kitty_id = self.next_kitty_id()
        dna = self.randomness.random_bytes(owner)
        self.insert_kitty(owner, kitty_id, Kitty(dna=dna, price=0))
        return kitty_id

    def set_price(self, kitty_id: KittyIndex, price: Balance) -> None:
        """Set a kitty's price (0 delists it).

        Raises:
            KittyNotFound: If the kitty does not exist
            InvalidPrice: If price is negative or not an int
        """
        kitty = self.require(kitty_id)
        check_price(price)
        self.kitties.insert(kitty_id, kitty.with_price(price))

    def set_owner(self, kitty_id: KittyIndex, owner: AccountId) -> None:
        """Rewrite KittyOwner. Only the marketplace calls this, together
        with the matching ownership index remove/append."""
        self.owners.insert(kitty_id, owner)

    def all_kitties(self) -> list[tuple[KittyIndex, Kitty]]:
        return sorted(self.kitties.items())
