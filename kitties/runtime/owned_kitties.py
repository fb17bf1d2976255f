"""Ownership index - per-account doubly linked list over storage entries.

Each account's kitties form a chain of KittyLinkedItem records stored
under (account, kitty_id). There are no in-memory pointers: prev/next
are kitty ids resolved through the store. The entry stored under
(account, None) is the account's sentinel:

    sentinel.next -> head (oldest kitty)
    sentinel.prev -> tail (newest kitty)

A missing neighbour (None) always means "the sentinel", so the chain is
circular only through the sentinel. Appending writes three entries and
removing writes at most two, whatever the chain length or the position
of the removed kitty. No other kitty moves.

    index = OwnedKitties(store)
    index.append("alice", 1)
    index.append("alice", 2)
    index.kitties_of("alice")   # [1, 2]
    index.remove("alice", 1)
    index.kitties_of("alice")   # [2]
"""

from __future__ import annotations

from typing import Iterator, Protocol

from .constants import PREFIX_OWNED_KITTIES
from .storage import KeyValueStore, StorageMap
from .types import EMPTY_LINK, AccountId, KittyIndex, KittyLinkedItem


class OwnershipIndex(Protocol):
    """What the registry and marketplace need from an ownership index."""

    def append(self, account: AccountId, kitty_id: KittyIndex) -> None: ...

    def remove(self, account: AccountId, kitty_id: KittyIndex) -> None: ...

    def contains(self, account: AccountId, kitty_id: KittyIndex) -> bool: ...

    def kitties_of(self, account: AccountId) -> list[KittyIndex]: ...

    def accounts(self) -> list[AccountId]: ...


class OwnedKitties:
    """Intrusive doubly linked list of kitty ids, one chain per account.

    Callers must only remove a kitty from the account that owns it;
    removing from the wrong account is a silent no-op and would leave
    KittyOwner pointing at a chain that no longer holds the kitty.
    """

    links: StorageMap[KittyLinkedItem]

    def __init__(self, store: KeyValueStore) -> None:
        self.links = StorageMap(store, PREFIX_OWNED_KITTIES)

    # ===== RAW ENTRIES =====

    def get(self, account: AccountId, key: KittyIndex | None) -> KittyLinkedItem | None:
        """Raw stored entry for (account, key); key None is the sentinel."""
        return self.links.get((account, key))

    def _read(self, account: AccountId, key: KittyIndex | None) -> KittyLinkedItem:
        return self.links.get((account, key)) or EMPTY_LINK

    def _write(self, account: AccountId, key: KittyIndex | None, item: KittyLinkedItem) -> None:
        self.links.insert((account, key), item)

    def _read_head(self, account: AccountId) -> KittyLinkedItem:
        return self._read(account, None)

    def _write_head(self, account: AccountId, item: KittyLinkedItem) -> None:
        self._write(account, None, item)

    # ===== MUTATION =====

    def append(self, account: AccountId, kitty_id: KittyIndex) -> None:
        """Link kitty_id as the new tail of account's chain."""
        head = self._read_head(account)
        self._write_head(account, KittyLinkedItem(prev=kitty_id, next=head.next))

        # Old tail, or the (just rewritten) sentinel when the chain was empty
        prev = self._read(account, head.prev)
        self._write(account, head.prev, KittyLinkedItem(prev=prev.prev, next=kitty_id))

        self._write(account, kitty_id, KittyLinkedItem(prev=head.prev, next=None))

    def remove(self, account: AccountId, kitty_id: KittyIndex) -> None:
        """Unlink kitty_id from account's chain. No-op if not linked there."""
        item = self.links.take((account, kitty_id))
        if item is None:
            return

        prev = self._read(account, item.prev)
        self._write(account, item.prev, KittyLinkedItem(prev=prev.prev, next=item.next))

        # Re-read: prev and next are the same entry when both are the sentinel
        nxt = self._read(account, item.next)
        self._write(account, item.next, KittyLinkedItem(prev=item.prev, next=nxt.next))

    # ===== QUERIES =====

    def contains(self, account: AccountId, kitty_id: KittyIndex) -> bool:
        return self.links.contains((account, kitty_id))

    def head(self, account: AccountId) -> KittyIndex | None:
        """Oldest kitty in the chain."""
        return self._read_head(account).next

    def tail(self, account: AccountId) -> KittyIndex | None:
        """Newest kitty in the chain."""
        return self._read_head(account).prev

    def iter_kitties(self, account: AccountId) -> Iterator[KittyIndex]:
        """Walk the chain from head to tail."""
        current = self.head(account)
        while current is not None:
            yield current
            current = self._read(account, current).next

    def iter_kitties_reversed(self, account: AccountId) -> Iterator[KittyIndex]:
        """Walk the chain from tail to head."""
        current = self.tail(account)
        while current is not None:
            yield current
            current = self._read(account, current).prev

    def kitties_of(self, account: AccountId) -> list[KittyIndex]:
        return list(self.iter_kitties(account))

    def kitties_of_reversed(self, account: AccountId) -> list[KittyIndex]:
        return list(self.iter_kitties_reversed(account))

    def accounts(self) -> list[AccountId]:
        """Accounts that have (or had) a chain."""
        return [key[0] for key, _ in self.links.items() if key[1] is None]

    def check_account(self, account: AccountId) -> list[str]:
        """Report broken links in account's chain (empty list when well-formed)."""
        issues: list[str] = []
        limit = len(self.links.store)
        forward: list[KittyIndex] = []
        previous: KittyIndex | None = None
        current = self.head(account)
        while current is not None:
            if len(forward) > limit:
                issues.append(f"{account}: cycle in forward walk")
                return issues
            item = self.get(account, current)
            if item is None:
                issues.append(f"{account}: kitty {current} linked but has no entry")
                return issues
            if item.prev != previous:
                issues.append(
                    f"{account}: kitty {current}.prev is {item.prev}, expected {previous}"
                )
            forward.append(current)
            previous = current
            current = item.next
        if self.tail(account) != previous:
            issues.append(f"{account}: sentinel tail is {self.tail(account)}, expected {previous}")
        backward = self.kitties_of_reversed(account) if not issues else []
        if not issues and backward != list(reversed(forward)):
            issues.append(f"{account}: backward walk does not mirror forward walk")
        stored = {
            key[1] for key, _ in self.links.items()
            if key[0] == account and key[1] is not None
        }
        if stored != set(forward):
            issues.append(f"{account}: unreachable entries {sorted(stored - set(forward))}")
        return issues
