"""Error taxonomy for the kitties runtime.

Every failure of a dispatchable call is raised as a KittyError subclass.
Each carries a machine-readable code and a category so callers can
switch on them, and converts to the standard response dict used by
KittiesModule.dispatch().

Usage:
    from kitties.runtime.errors import KittyNotFound, ErrorCode

    try:
        module.transfer(origin, "bob", 7)
    except KittyNotFound as e:
        assert e.code == ErrorCode.NOT_FOUND
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error classification.

    - VALIDATION: Caller provided bad input or violated a precondition
    - PERMISSION: Caller not authorized, or cannot pay
    - RESOURCE: Kitty not found, id space exhausted
    - SYSTEM: Internal bookkeeping counters out of range
    """

    VALIDATION = "validation"
    PERMISSION = "permission"
    RESOURCE = "resource"
    SYSTEM = "system"


class ErrorCode(str, Enum):
    """Specific error codes for programmatic handling."""

    # Validation errors
    SAME_PARENT = "same_parent"
    INVALID_PARENT = "invalid_parent"
    NOT_FOR_SALE = "not_for_sale"
    PRICE_TOO_HIGH = "price_too_high"
    CANNOT_BUY_OWN = "cannot_buy_own"
    INVALID_PRICE = "invalid_price"
    INVALID_RECIPIENT = "invalid_recipient"
    INVALID_ARGUMENT = "invalid_argument"
    UNKNOWN_CALL = "unknown_call"

    # Permission errors
    NOT_OWNER = "not_owner"
    UNAUTHENTICATED = "unauthenticated"
    INSUFFICIENT_FUNDS = "insufficient_funds"

    # Resource errors
    NOT_FOUND = "not_found"
    OVERFLOW = "overflow"

    # System errors
    UNDERFLOW = "underflow"


@dataclass
class ErrorResponse:
    """Standardized error response.

    This schema is compatible with the plain
    {"success": False, "error": "message"} pattern.
    """

    success: bool = False  # Always False for errors
    error: str = ""  # Human-readable message
    code: str = ""  # Machine-readable error code
    category: str = ""  # Error category (validation, permission, etc.)
    retriable: bool = False  # Ledger calls are never retried
    details: dict[str, object] | None = None  # Optional additional context

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for serialization."""
        result: dict[str, object] = {
            "success": self.success,
            "error": self.error,
            "code": self.code,
            "category": self.category,
            "retriable": self.retriable,
        }
        if self.details:
            result["details"] = self.details
        return result


class KittyError(Exception):
    """Base class for every error a kitties call can surface."""

    code: ErrorCode = ErrorCode.NOT_FOUND
    category: ErrorCategory = ErrorCategory.RESOURCE

    def __init__(self, message: str, **details: object) -> None:
        self.message = message
        self.details = dict(details)
        super().__init__(message)

    def to_response(self) -> dict[str, object]:
        """Convert to the standard error response dict."""
        return ErrorResponse(
            error=self.message,
            code=self.code.value,
            category=self.category.value,
            retriable=False,
            details=self.details or None,
        ).to_dict()


class KittyIndexOverflow(KittyError):
    """Raised when the kitty id counter is exhausted."""

    code = ErrorCode.OVERFLOW
    category = ErrorCategory.RESOURCE


class KittyNotFound(KittyError):
    """Raised when a referenced kitty does not exist."""

    code = ErrorCode.NOT_FOUND
    category = ErrorCategory.RESOURCE


class NotOwner(KittyError):
    """Raised when the caller does not own the kitty."""

    code = ErrorCode.NOT_OWNER
    category = ErrorCategory.PERMISSION


class Unauthenticated(KittyError):
    """Raised when a call arrives without a signed origin."""

    code = ErrorCode.UNAUTHENTICATED
    category = ErrorCategory.PERMISSION


class SameParent(KittyError):
    code = ErrorCode.SAME_PARENT
    category = ErrorCategory.VALIDATION


class InvalidParent(KittyError):
    code = ErrorCode.INVALID_PARENT
    category = ErrorCategory.VALIDATION


class NotForSale(KittyError):
    code = ErrorCode.NOT_FOR_SALE
    category = ErrorCategory.VALIDATION


class PriceTooHigh(KittyError):
    code = ErrorCode.PRICE_TOO_HIGH
    category = ErrorCategory.VALIDATION


class CannotBuyOwn(KittyError):
    code = ErrorCode.CANNOT_BUY_OWN
    category = ErrorCategory.VALIDATION


class InvalidPrice(KittyError):
    code = ErrorCode.INVALID_PRICE
    category = ErrorCategory.VALIDATION


class InvalidRecipient(KittyError):
    """Raised when a transfer target is not a non-empty account id."""

    code = ErrorCode.INVALID_RECIPIENT
    category = ErrorCategory.VALIDATION


class InvalidArgument(KittyError):
    """Raised when a kitty id argument is not an int."""

    code = ErrorCode.INVALID_ARGUMENT
    category = ErrorCategory.VALIDATION


class UnknownCall(KittyError):
    code = ErrorCode.UNKNOWN_CALL
    category = ErrorCategory.VALIDATION


class InsufficientBalance(KittyError):
    """Raised when the balance transfer backing a purchase fails."""

    code = ErrorCode.INSUFFICIENT_FUNDS
    category = ErrorCategory.PERMISSION


class CountUnderflow(KittyError):
    """Raised by the slot index when removing from an empty account."""

    code = ErrorCode.UNDERFLOW
    category = ErrorCategory.SYSTEM


class CountOverflow(KittyError):
    """Raised by the slot index when an account's count would overflow."""

    code = ErrorCode.OVERFLOW
    category = ErrorCategory.SYSTEM


def validation_error(
    message: str,
    code: ErrorCode = ErrorCode.UNKNOWN_CALL,
    **details: object,
) -> dict[str, object]:
    """Create a validation error response without raising.

    Used by dispatch() for malformed requests that never reach a call.
    """
    return ErrorResponse(
        error=message,
        code=code.value,
        category=ErrorCategory.VALIDATION.value,
        retriable=False,
        details=dict(details) if details else None,
    ).to_dict()
