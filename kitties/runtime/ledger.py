"""Ledger for tracking account balances.

The kitties runtime only needs one thing from the currency system: an
atomic transfer that either moves the full amount or changes nothing.
Balances are stored as int (discrete currency units) in the same
KeyValueStore as the kitties, so a call transaction that rolls back
also rolls back any money it moved.

Accounts can be any string ID. Unknown accounts have balance 0 and are
created on their first incoming transfer.
"""

from __future__ import annotations

from typing import Any

from .constants import PREFIX_BALANCES
from .storage import KeyValueStore, StorageMap


class Ledger:
    """Tracks balances per account.

    Never allows negative balances: every debit checks affordability
    first and fails without writing.
    """

    store: KeyValueStore
    balances: StorageMap[int]

    def __init__(self, store: KeyValueStore | None = None) -> None:
        self.store = store if store is not None else KeyValueStore()
        self.balances = StorageMap(self.store, PREFIX_BALANCES)

    @classmethod
    def from_config(cls, config: dict[str, Any], store: KeyValueStore | None = None) -> "Ledger":
        """Create Ledger from config, crediting genesis balances.

        Args:
            config: Configuration dict, may contain a 'balances.genesis'
                    mapping of account -> starting balance
            store: Shared store (a fresh one if omitted)

        Returns:
            Configured Ledger instance
        """
        ledger = cls(store)
        genesis = config.get("balances", {}).get("genesis", {}) or {}
        for account, amount in genesis.items():
            ledger.create_account(account, int(amount))
        return ledger

    def create_account(self, account: str, starting_balance: int = 0) -> None:
        """Create an account with a starting balance (overwrites any existing one)."""
        if starting_balance < 0:
            raise ValueError(f"Starting balance must be >= 0, got {starting_balance}")
        self.balances.insert(account, starting_balance)

    def get_balance(self, account: str) -> int:
        """Get balance (0 for unknown accounts)."""
        return self.balances.get(account) or 0

    def can_afford(self, account: str, amount: int) -> bool:
        """Check if account can afford amount."""
        return self.get_balance(account) >= amount

    def transfer(self, from_id: str, to_id: str, amount: int) -> bool:
        """Transfer between accounts. Returns False if insufficient funds.

        Auto-creates recipient with 0 balance if not exists. Both balances
        are untouched when the transfer fails.
        """
        if amount <= 0:
            return False
        if not self.can_afford(from_id, amount):
            return False
        if from_id == to_id:
            return True
        self.balances.insert(from_id, self.get_balance(from_id) - amount)
        self.balances.insert(to_id, self.get_balance(to_id) + amount)
        return True

    def get_all_balances(self) -> dict[str, int]:
        """Get snapshot of all balances."""
        return {account: balance for account, balance in self.balances.items()}

    def total_issuance(self) -> int:
        """Sum of all balances. Constant across transfers."""
        return sum(self.get_all_balances().values())
