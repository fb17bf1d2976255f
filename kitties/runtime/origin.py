"""Call origins and the identity resolver.

Every dispatchable call receives an Origin. Only signed origins carry an
account; ensure_signed() is the single place that turns an origin into
an authenticated AccountId.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import Unauthenticated


@dataclass(frozen=True)
class Origin:
    """Who is making a call. account is None for unsigned origins."""

    account: str | None = None

    @classmethod
    def signed(cls, account: str) -> "Origin":
        return cls(account=account)

    @classmethod
    def none(cls) -> "Origin":
        return cls(account=None)

    @property
    def is_signed(self) -> bool:
        return bool(self.account)


def ensure_signed(origin: Origin) -> str:
    """Resolve the authenticated account of an origin.

    Raises:
        Unauthenticated: If the origin is unsigned or has an empty account
    """
    if not origin.is_signed or origin.account is None:
        raise Unauthenticated("Call requires a signed origin")
    return origin.account
