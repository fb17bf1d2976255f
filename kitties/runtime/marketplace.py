"""Marketplace - price setting, purchases and transfers.

Trading flow:
1. Owner lists a kitty with set_price(owner, kitty_id, price)
2. Buyer calls buy(buyer, kitty_id, max_price):
   - every precondition is checked first, including that the ownership
     move itself is valid
   - the ledger moves exactly `price` from buyer to owner
   - ownership is re-parented and the price reset to 0

A purchase is one unit: if the money cannot move, nothing changes. The
runtime runs each call inside a store transaction, so if re-parenting
ever raised after the money moved, the money move is rolled back too.
"""

from __future__ import annotations

import logging

from .errors import (
    CannotBuyOwn,
    InsufficientBalance,
    KittyNotFound,
    NotForSale,
    NotOwner,
    PriceTooHigh,
)
from .ledger import Ledger
from .owned_kitties import OwnershipIndex
from .registry import KittyRegistry
from .types import AccountId, Balance, KittyIndex
from .validation import check_account, check_kitty_id, check_price

logger = logging.getLogger(__name__)


class Marketplace:
    """Ownership-changing operations over the registry and ownership index."""

    registry: KittyRegistry
    index: OwnershipIndex
    ledger: Ledger

    def __init__(self, registry: KittyRegistry, index: OwnershipIndex, ledger: Ledger) -> None:
        self.registry = registry
        self.index = index
        self.ledger = ledger

    def _require_owner(self, sender: AccountId, kitty_id: KittyIndex) -> AccountId:
        """Return the kitty's owner after checking sender is that owner."""
        self.registry.require(kitty_id)
        owner = self.registry.owner_of(kitty_id)
        if owner is None:
            raise KittyNotFound(f"No owner for kitty {kitty_id}", kitty_id=kitty_id)
        if owner != sender:
            raise NotOwner(
                f"'{sender}' does not own kitty {kitty_id}",
                kitty_id=kitty_id,
                sender=sender,
            )
        return owner

    def _check_movable(self, owner: AccountId, kitty_id: KittyIndex) -> None:
        """Verify the ownership index really holds kitty_id under owner.

        KittyOwner and the index are written together, so this only
        fails if storage was corrupted outside the runtime.
        """
        if not self.index.contains(owner, kitty_id):
            raise KittyNotFound(
                f"Kitty {kitty_id} is not in the ownership index of '{owner}'",
                kitty_id=kitty_id,
                owner=owner,
            )

    def _move(self, from_id: AccountId, to_id: AccountId, kitty_id: KittyIndex) -> None:
        self.registry.set_owner(kitty_id, to_id)
        self.index.remove(from_id, kitty_id)
        self.index.append(to_id, kitty_id)

    def transfer(self, sender: AccountId, to: AccountId, kitty_id: KittyIndex) -> None:
        """Give a kitty away. Its price is kept.

        Raises:
            KittyNotFound: If the kitty does not exist
            NotOwner: If sender does not own it
            InvalidArgument: If kitty_id is not an int id
            InvalidRecipient: If to is not a non-empty account id
        """
        check_kitty_id(kitty_id)
        check_account(to)
        owner = self._require_owner(sender, kitty_id)
        self._check_movable(owner, kitty_id)
        self._move(owner, to, kitty_id)
        logger.debug("Transferred kitty %d from %s to %s", kitty_id, owner, to)

    def set_price(self, sender: AccountId, kitty_id: KittyIndex, price: Balance) -> None:
        """List (price > 0) or delist (price == 0) a kitty.

        Raises:
            KittyNotFound: If the kitty does not exist
            NotOwner: If sender does not own it
            InvalidPrice: If price is negative or not an int
        """
        check_kitty_id(kitty_id)
        self._require_owner(sender, kitty_id)
        check_price(price)
        self.registry.set_price(kitty_id, price)

    def buy(self, sender: AccountId, kitty_id: KittyIndex, max_price: Balance) -> Balance:
        """Buy a listed kitty for its price. Returns the price paid.

        Raises:
            KittyNotFound: If the kitty does not exist
            CannotBuyOwn: If sender already owns it
            NotForSale: If its price is 0
            PriceTooHigh: If its price exceeds max_price
            InsufficientBalance: If sender cannot pay
            InvalidArgument, InvalidPrice: If kitty_id or max_price is not an int
        """
        check_kitty_id(kitty_id)
        check_price(max_price, "max_price")
        kitty = self.registry.require(kitty_id)
        owner = self.registry.owner_of(kitty_id)
        if owner is None:
            raise KittyNotFound(f"No owner for kitty {kitty_id}", kitty_id=kitty_id)
        if owner == sender:
            raise CannotBuyOwn("You can't buy your own kitty", kitty_id=kitty_id)

        price = kitty.price
        if price == 0:
            raise NotForSale(f"Kitty {kitty_id} is not for sale", kitty_id=kitty_id)
        if price > max_price:
            raise PriceTooHigh(
                f"Kitty {kitty_id} costs {price}, more than max price {max_price}",
                kitty_id=kitty_id,
                price=price,
                max_price=max_price,
            )

        # Validate the ownership move before any money moves
        self._check_movable(owner, kitty_id)

        if not self.ledger.transfer(sender, owner, price):
            raise InsufficientBalance(
                f"Insufficient balance. Need {price}, have {self.ledger.get_balance(sender)}",
                kitty_id=kitty_id,
                price=price,
            )

        self._move(owner, sender, kitty_id)
        self.registry.set_price(kitty_id, 0)
        logger.debug("Sold kitty %d from %s to %s for %d", kitty_id, owner, sender, price)
        return price
