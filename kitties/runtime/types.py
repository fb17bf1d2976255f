"""Kitties runtime - type definitions

Stored records are frozen dataclasses so the store can roll them back
by reference. Call results are TypedDicts, like the rest of the
response dicts.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TypedDict

from .constants import DNA_SIZE

KittyIndex = int
AccountId = str
Balance = int


@dataclass(frozen=True)
class Kitty:
    """A kitty record: immutable dna plus a sale price (0 = not for sale)."""

    dna: bytes
    price: Balance = 0

    def __post_init__(self) -> None:
        if len(self.dna) != DNA_SIZE:
            raise ValueError(f"dna must be {DNA_SIZE} bytes, got {len(self.dna)}")
        if isinstance(self.price, bool) or not isinstance(self.price, int):
            raise TypeError(f"price must be an int, got {self.price!r}")
        if self.price < 0:
            raise ValueError(f"price must be >= 0, got {self.price}")

    def with_price(self, price: Balance) -> "Kitty":
        return replace(self, price=price)

    def to_dict(self) -> dict[str, object]:
        return {"dna": self.dna.hex(), "price": self.price}


@dataclass(frozen=True)
class KittyLinkedItem:
    """One link of an account's ownership chain.

    Stored under (account, kitty_id). The entry stored under
    (account, None) is the sentinel: next is the head, prev the tail.
    """

    prev: KittyIndex | None = None
    next: KittyIndex | None = None


EMPTY_LINK = KittyLinkedItem()


class KittyInfo(TypedDict):
    """Query result for a single kitty."""
    kitty_id: KittyIndex
    owner: AccountId
    dna: str
    price: Balance


class CallResult(TypedDict, total=False):
    """Successful dispatch() response."""
    success: bool
    call: str
    sender: AccountId
    kitty_id: KittyIndex
    message: str
