"""Kitties runtime module - the public call surface.

Composes the store, ledger, randomness, registry, ownership index,
breeding engine and marketplace. Each public call:

1. resolves the caller with ensure_signed() (Unauthenticated otherwise)
2. runs inside store.transaction(): a raised KittyError undoes every
   write the call made, including balance changes
3. is logged (DEBUG on success, WARNING on rejection) and, once
   committed, recorded in the optional EventLogger

Calls are applied one at a time; nothing here is thread-safe.

Usage:
    module = KittiesModule.from_config(get_validated_config())
    alice = Origin.signed("alice")

    kitty_id = module.create(alice)
    module.set_price(alice, kitty_id, 50)
    module.buy_kitty(Origin.signed("bob"), kitty_id, max_price=60)

    # Or by name, with a response dict instead of exceptions
    module.dispatch(alice, "create", [])
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, TypeVar

from ..config_schema import AppConfig
from .breeding import BreedingEngine
from .constants import INDEX_LINKED_LIST, INDEX_SLOT_ARRAY, U32_MAX
from .errors import KittyError, UnknownCall, validation_error
from .ledger import Ledger
from .logger import EventLogger
from .marketplace import Marketplace
from .origin import Origin, ensure_signed
from .owned_kitties import OwnedKitties, OwnershipIndex
from .randomness import BlockContext, Randomness, RandomnessSource
from .registry import KittyRegistry
from .slot_index import SlotIndex
from .storage import KeyValueStore
from .types import AccountId, Balance, CallResult, Kitty, KittyIndex, KittyInfo

logger = logging.getLogger(__name__)

T = TypeVar("T")


class KittiesModule:
    """Create, breed, transfer, buy and price kitties."""

    store: KeyValueStore
    ledger: Ledger
    context: BlockContext
    randomness: Randomness
    index: OwnershipIndex
    registry: KittyRegistry
    breeding: BreedingEngine
    marketplace: Marketplace
    events: EventLogger | None

    def __init__(
        self,
        store: KeyValueStore | None = None,
        ledger: Ledger | None = None,
        randomness: Randomness | None = None,
        context: BlockContext | None = None,
        max_kitty_index: int = U32_MAX,
        ownership_index: str = INDEX_LINKED_LIST,
        events: EventLogger | None = None,
        seed: str = "kitties",
    ) -> None:
        """
        Args:
            store: Shared key-value store (fresh if omitted)
            ledger: Balances; must use the same store so purchases roll back
            randomness: Randomness source (seeded blake2b source if omitted)
            context: Block context for the default randomness source
            max_kitty_index: Largest value of the kitty index type
            ownership_index: "linked_list" or "slot_array"
            events: Optional event log for committed calls
            seed: Seed for the default randomness source
        """
        self.store = store if store is not None else KeyValueStore()
        self.ledger = ledger if ledger is not None else Ledger(self.store)
        if self.ledger.store is not self.store:
            raise ValueError("Ledger must share the module's KeyValueStore")

        self.context = context or BlockContext()
        self.randomness = randomness or RandomnessSource(seed, self.context)

        if ownership_index == INDEX_LINKED_LIST:
            self.index = OwnedKitties(self.store)
        elif ownership_index == INDEX_SLOT_ARRAY:
            self.index = SlotIndex(self.store, max_count=max_kitty_index)
        else:
            raise ValueError(f"Unknown ownership index: {ownership_index!r}")

        self.registry = KittyRegistry(self.store, self.index, self.randomness, max_kitty_index)
        self.breeding = BreedingEngine(self.registry, self.randomness)
        self.marketplace = Marketplace(self.registry, self.index, self.ledger)
        self.events = events

        self._calls: dict[str, Callable[..., Any]] = {
            "create": self.create,
            "breed": self.breed,
            "transfer": self.transfer,
            "buy_kitty": self.buy_kitty,
            "set_price": self.set_price,
        }

    @classmethod
    def from_config(cls, config: AppConfig, events: EventLogger | None = None) -> "KittiesModule":
        """Build a module from validated config, crediting genesis balances.

        An EventLogger is created from logging.output_file when events is
        not given.
        """
        store = KeyValueStore()
        ledger = Ledger.from_config(config.model_dump(), store)
        if events is None:
            events = EventLogger(
                output_file=config.logging.output_file,
                default_recent=config.logging.default_recent,
            )
        return cls(
            store=store,
            ledger=ledger,
            max_kitty_index=config.kitties.max_kitty_index,
            ownership_index=config.kitties.ownership_index,
            events=events,
            seed=config.randomness.seed,
        )

    # ===== CALL PLUMBING =====

    def _execute(
        self, call: str, origin: Origin, action: Callable[[AccountId], T]
    ) -> tuple[AccountId, T]:
        """Authenticate, run action atomically, and log the outcome."""
        sender: AccountId | None = None
        try:
            sender = ensure_signed(origin)
            with self.store.transaction():
                result = action(sender)
        except KittyError as e:
            logger.warning("%s by %s rejected (%s): %s", call, sender, e.code.value, e.message)
            if self.events is not None:
                self.events.log_call_failed(call, sender, e.code.value, e.message)
            raise
        logger.debug("%s by %s committed", call, sender)
        return sender, result

    # ===== DISPATCHABLE CALLS =====

    def create(self, origin: Origin) -> KittyIndex:
        """Create a kitty with random dna for the caller."""
        sender, kitty_id = self._execute("create", origin, self.registry.create)
        if self.events is not None:
            self.events.log_kitty_created(
                kitty_id, sender, self.registry.require(kitty_id).dna, self.context.block_number
            )
        return kitty_id

    def breed(self, origin: Origin, kitty_id_1: KittyIndex, kitty_id_2: KittyIndex) -> KittyIndex:
        """Breed two existing kitties into a new one owned by the caller."""
        sender, kitty_id = self._execute(
            "breed",
            origin,
            lambda s: self.breeding.breed(kitty_id_1, kitty_id_2, s),
        )
        if self.events is not None:
            self.events.log_kitty_bred(
                kitty_id,
                sender,
                (kitty_id_1, kitty_id_2),
                self.registry.require(kitty_id).dna,
                self.context.block_number,
            )
        return kitty_id

    def transfer(self, origin: Origin, to: AccountId, kitty_id: KittyIndex) -> None:
        """Give one of the caller's kitties to another account."""
        sender, _ = self._execute(
            "transfer",
            origin,
            lambda s: self.marketplace.transfer(s, to, kitty_id),
        )
        if self.events is not None:
            self.events.log_kitty_transferred(kitty_id, sender, to)

    def buy_kitty(self, origin: Origin, kitty_id: KittyIndex, max_price: Balance) -> None:
        """Buy a listed kitty, paying at most max_price."""
        seller: list[AccountId] = []

        def do_buy(sender: AccountId) -> Balance:
            owner = self.registry.owner_of(kitty_id)
            price = self.marketplace.buy(sender, kitty_id, max_price)
            if owner is not None:
                seller.append(owner)
            return price

        sender, price = self._execute("buy_kitty", origin, do_buy)
        if self.events is not None and seller:
            self.events.log_kitty_sold(kitty_id, seller[0], sender, price)

    def set_price(self, origin: Origin, kitty_id: KittyIndex, price: Balance) -> None:
        """List (price > 0) or delist (price == 0) one of the caller's kitties."""
        sender, _ = self._execute(
            "set_price",
            origin,
            lambda s: self.marketplace.set_price(s, kitty_id, price),
        )
        if self.events is not None:
            self.events.log_price_set(kitty_id, sender, price)

    def dispatch(
        self, origin: Origin, call: str, args: list[Any] | dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Invoke a call by name and return a response dict.

        Success: {"success": True, "call", "sender", "kitty_id"?, "message"}
        Failure: the KittyError's to_response() dict.
        """
        method = self._calls.get(call)
        if method is None:
            return UnknownCall(
                f"Unknown call '{call}'. Available: {sorted(self._calls)}", call=call
            ).to_response()

        positional = list(args) if isinstance(args, list) else []
        keywords = dict(args) if isinstance(args, dict) else {}
        try:
            bound = inspect.signature(method).bind(origin, *positional, **keywords)
        except TypeError as e:
            return validation_error(f"Bad arguments for '{call}': {e}", call=call)

        try:
            outcome = method(*bound.args, **bound.kwargs)
        except KittyError as e:
            return e.to_response()

        response: CallResult = {"success": True, "call": call, "sender": origin.account or ""}
        if call in ("create", "breed"):
            response["kitty_id"] = outcome
            response["message"] = f"Kitty {outcome} created for {origin.account}"
        else:
            kitty_id = bound.arguments["kitty_id"]
            response["kitty_id"] = kitty_id
            response["message"] = f"{call} applied to kitty {kitty_id}"
        return dict(response)

    # ===== QUERIES =====

    @property
    def block_number(self) -> int:
        return self.context.block_number

    def new_block(self) -> int:
        """Advance ledger context to the next block."""
        return self.context.new_block()

    def kitty(self, kitty_id: KittyIndex) -> Kitty | None:
        return self.registry.get(kitty_id)

    def owner_of(self, kitty_id: KittyIndex) -> AccountId | None:
        return self.registry.owner_of(kitty_id)

    def kitties_count(self) -> int:
        return self.registry.kitties_count()

    def kitties_of(self, account: AccountId) -> list[KittyIndex]:
        return self.index.kitties_of(account)

    def balance_of(self, account: AccountId) -> Balance:
        return self.ledger.get_balance(account)

    def kitty_info(self, kitty_id: KittyIndex) -> KittyInfo | None:
        kitty = self.registry.get(kitty_id)
        owner = self.registry.owner_of(kitty_id)
        if kitty is None or owner is None:
            return None
        return {"kitty_id": kitty_id, "owner": owner, "dna": kitty.dna.hex(), "price": kitty.price}

    def check_integrity(self) -> list[str]:
        """Cross-check registry, KittyOwner and the ownership index.

        Returns a list of human-readable problems; empty when consistent.
        """
        issues: list[str] = []
        count = self.registry.kitties_count()
        kitties = dict(self.registry.all_kitties())

        for kitty_id in range(count):
            if kitty_id not in kitties:
                issues.append(f"kitty {kitty_id} below counter has no record")
        for kitty_id in kitties:
            if kitty_id >= count:
                issues.append(f"kitty {kitty_id} is at or above counter {count}")
            owner = self.registry.owner_of(kitty_id)
            if owner is None:
                issues.append(f"kitty {kitty_id} has no owner")
            elif not self.index.contains(owner, kitty_id):
                issues.append(f"kitty {kitty_id} missing from chain of owner '{owner}'")

        linked = 0
        for account in self.index.accounts():
            if isinstance(self.index, OwnedKitties):
                issues.extend(self.index.check_account(account))
            for kitty_id in self.index.kitties_of(account):
                linked += 1
                if self.registry.owner_of(kitty_id) != account:
                    issues.append(
                        f"kitty {kitty_id} linked under '{account}' but owned by "
                        f"'{self.registry.owner_of(kitty_id)}'"
                    )
        if linked != len(kitties):
            issues.append(f"{linked} kitties linked in chains but {len(kitties)} exist")
        return issues

    def state_summary(self) -> dict[str, Any]:
        """Snapshot of kitties, chains and balances (JSON-serializable)."""
        return {
            "block_number": self.block_number,
            "kitties_count": self.kitties_count(),
            "kitties": [
                self.kitty_info(kitty_id) for kitty_id, _ in self.registry.all_kitties()
            ],
            "owned": {
                account: self.index.kitties_of(account) for account in self.index.accounts()
            },
            "balances": self.ledger.get_all_balances(),
            "total_issuance": self.ledger.total_issuance(),
            "integrity_issues": self.check_integrity(),
        }
