"""Slot index - the swap-with-last-slot ownership scheme.

Each account owns a dense array of slots:

    (account, slot) -> kitty_id      OwnedKittiesSlot
    account -> count                 OwnedKittiesCount
    kitty_id -> slot                 OwnedKittiesIndex

Removing a kitty moves the account's last kitty into the vacated slot and
shrinks the array. This is O(1), but the moved kitty silently changes
slot number. Do not use this index if anything outside the runtime
treats slot numbers as stable references; OwnedKitties (the linked list)
never moves an unrelated kitty.

Counter checks happen before any write, so a failing append/remove
leaves storage untouched.
"""

from __future__ import annotations

from .constants import (
    PREFIX_OWNED_KITTIES_COUNT,
    PREFIX_OWNED_KITTIES_INDEX,
    PREFIX_OWNED_KITTIES_SLOT,
    U32_MAX,
)
from .errors import CountOverflow, CountUnderflow
from .storage import KeyValueStore, StorageMap
from .types import AccountId, KittyIndex


class SlotIndex:
    """Dense per-account arrays with a reverse index."""

    slots: StorageMap[KittyIndex]
    counts: StorageMap[int]
    positions: StorageMap[int]
    max_count: int

    def __init__(self, store: KeyValueStore, max_count: int = U32_MAX) -> None:
        self.slots = StorageMap(store, PREFIX_OWNED_KITTIES_SLOT)
        self.counts = StorageMap(store, PREFIX_OWNED_KITTIES_COUNT)
        self.positions = StorageMap(store, PREFIX_OWNED_KITTIES_INDEX)
        self.max_count = max_count

    def count(self, account: AccountId) -> int:
        return self.counts.get(account) or 0

    def slot_of(self, kitty_id: KittyIndex) -> int | None:
        return self.positions.get(kitty_id)

    def kitty_at(self, account: AccountId, slot: int) -> KittyIndex | None:
        return self.slots.get((account, slot))

    def append(self, account: AccountId, kitty_id: KittyIndex) -> None:
        """Put kitty_id in the account's next free slot.

        Raises:
            CountOverflow: If the account's count is already at max_count
        """
        count = self.count(account)
        if count >= self.max_count:
            raise CountOverflow(
                f"Owned kitties count overflow for '{account}'",
                account=account,
                count=count,
            )
        self.slots.insert((account, count), kitty_id)
        self.positions.insert(kitty_id, count)
        self.counts.insert(account, count + 1)

    def remove(self, account: AccountId, kitty_id: KittyIndex) -> None:
        """Remove kitty_id, moving the account's last kitty into its slot.

        Raises:
            CountUnderflow: If the account owns nothing, or kitty_id is not
                in the account's array
        """
        count = self.count(account)
        if count == 0:
            raise CountUnderflow(
                f"Owned kitties count underflow for '{account}'",
                account=account,
                kitty_id=kitty_id,
            )
        slot = self.positions.get(kitty_id)
        if slot is None or self.kitty_at(account, slot) != kitty_id:
            raise CountUnderflow(
                f"Kitty {kitty_id} is not held by '{account}'",
                account=account,
                kitty_id=kitty_id,
            )

        last = count - 1
        if slot != last:
            last_kitty = self.slots.get((account, last))
            if last_kitty is not None:
                self.slots.insert((account, slot), last_kitty)
                self.positions.insert(last_kitty, slot)

        self.slots.remove((account, last))
        self.positions.remove(kitty_id)
        self.counts.insert(account, last)

    def contains(self, account: AccountId, kitty_id: KittyIndex) -> bool:
        slot = self.positions.get(kitty_id)
        return slot is not None and self.kitty_at(account, slot) == kitty_id

    def accounts(self) -> list[AccountId]:
        """Accounts that have (or had) an array."""
        return [account for account, _ in self.counts.items()]

    def kitties_of(self, account: AccountId) -> list[KittyIndex]:
        """Kitties in slot order."""
        result: list[KittyIndex] = []
        for slot in range(self.count(account)):
            kitty_id = self.kitty_at(account, slot)
            if kitty_id is not None:
                result.append(kitty_id)
        return result
