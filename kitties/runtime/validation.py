"""Argument validation for dispatchable calls.

Arguments arrive from dispatch() and scenario files untyped. No
coercion is done: a quoted "50" price or a True kitty id is rejected
rather than guessed at. bool is excluded explicitly because it is an
int subclass and would alias kitty ids 0 and 1.
"""

from __future__ import annotations

from typing import Any

from .errors import InvalidArgument, InvalidPrice, InvalidRecipient
from .types import AccountId, Balance, KittyIndex


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def check_kitty_id(value: Any, name: str = "kitty_id") -> KittyIndex:
    """Return value if it is a non-negative int kitty id.

    Raises:
        InvalidArgument: Otherwise
    """
    if not _is_int(value) or value < 0:
        raise InvalidArgument(f"{name} must be a non-negative int, got {value!r}", argument=name)
    return value


def check_price(value: Any, name: str = "price") -> Balance:
    """Return value if it is a non-negative int balance.

    Raises:
        InvalidPrice: Otherwise
    """
    if not _is_int(value) or value < 0:
        raise InvalidPrice(f"{name} must be an int >= 0, got {value!r}", argument=name)
    return value


def check_account(value: Any) -> AccountId:
    """Return value if it is a non-empty account id.

    Raises:
        InvalidRecipient: Otherwise
    """
    if not isinstance(value, str) or not value:
        raise InvalidRecipient(f"Recipient must be a non-empty account id, got {value!r}")
    return value
