"""Key-value storage for the kitties runtime.

A single KeyValueStore backs every map and counter in the runtime
(kitties, owners, ownership links, balances). Each primitive
(get/insert/remove/take) is atomic on its own. transaction() groups
the writes of one call: if the block raises, every write made inside it
is undone, so a failed call never leaves partial state behind.

StorageMap and StorageValue give each logical map its own key prefix,
so callers never build raw keys.

Usage:
    store = KeyValueStore()
    owners = StorageMap(store, "KittyOwner")

    with store.transaction():
        owners.insert(0, "alice")
        raise NotOwner("...")   # owners.get(0) is None again afterwards

Thread-safety: not thread-safe. Calls are applied sequentially by the
runtime, one at a time.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Generic, Hashable, Iterator, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")

_MISSING = object()


class KeyValueStore:
    """In-memory transactional key-value store.

    Values must be immutable (ints, strings, frozen dataclasses): rollback
    restores the previous object for a key, it does not deep-copy.
    """

    _data: dict[Hashable, Any]
    _journals: list[dict[Hashable, Any]]

    def __init__(self) -> None:
        self._data = {}
        # One journal per open transaction: key -> value before first write
        self._journals = []

    # ===== PRIMITIVES =====

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Get the value stored under key, or default."""
        return self._data.get(key, default)

    def contains(self, key: Hashable) -> bool:
        """Check if a value is stored under key."""
        return key in self._data

    def insert(self, key: Hashable, value: Any) -> None:
        """Store value under key, replacing any previous value."""
        self._record(key)
        self._data[key] = value

    def remove(self, key: Hashable) -> None:
        """Delete key. No-op if absent."""
        if key in self._data:
            self._record(key)
            del self._data[key]

    def take(self, key: Hashable) -> Any:
        """Delete key and return its previous value (None if absent)."""
        if key not in self._data:
            return None
        self._record(key)
        return self._data.pop(key)

    def keys(self, prefix: str | None = None) -> list[Hashable]:
        """List stored keys, optionally only those under a map prefix."""
        if prefix is None:
            return list(self._data.keys())
        return [
            k for k in self._data
            if isinstance(k, tuple) and k and k[0] == prefix
        ]

    def __len__(self) -> int:
        return len(self._data)

    # ===== TRANSACTIONS =====

    @property
    def in_transaction(self) -> bool:
        return bool(self._journals)

    def begin(self) -> None:
        """Open a (possibly nested) transaction."""
        self._journals.append({})

    def commit(self) -> None:
        """Close the innermost transaction, keeping its writes.

        A nested commit folds its journal into the parent so that a
        later rollback of the parent still undoes these writes.
        """
        if not self._journals:
            raise RuntimeError("commit() called outside a transaction")
        journal = self._journals.pop()
        if self._journals:
            parent = self._journals[-1]
            for key, previous in journal.items():
                parent.setdefault(key, previous)

    def rollback(self) -> None:
        """Close the innermost transaction, undoing its writes."""
        if not self._journals:
            raise RuntimeError("rollback() called outside a transaction")
        journal = self._journals.pop()
        for key, previous in journal.items():
            if previous is _MISSING:
                self._data.pop(key, None)
            else:
                self._data[key] = previous
        logger.debug("Rolled back %d storage key(s)", len(journal))

    @contextmanager
    def transaction(self) -> Iterator["KeyValueStore"]:
        """Run a block atomically: commit on success, roll back on any exception."""
        self.begin()
        try:
            yield self
        except BaseException:
            self.rollback()
            raise
        else:
            self.commit()

    def _record(self, key: Hashable) -> None:
        """Remember a key's value before its first write in the open transaction."""
        if self._journals:
            journal = self._journals[-1]
            if key not in journal:
                journal[key] = self._data.get(key, _MISSING)


class StorageMap(Generic[V]):
    """A named map inside a KeyValueStore, keyed by (prefix, key)."""

    def __init__(self, store: KeyValueStore, prefix: str) -> None:
        self.store = store
        self.prefix = prefix

    def _key(self, key: Hashable) -> tuple[str, Hashable]:
        return (self.prefix, key)

    def get(self, key: Hashable) -> V | None:
        value: V | None = self.store.get(self._key(key))
        return value

    def contains(self, key: Hashable) -> bool:
        return self.store.contains(self._key(key))

    def insert(self, key: Hashable, value: V) -> None:
        self.store.insert(self._key(key), value)

    def remove(self, key: Hashable) -> None:
        self.store.remove(self._key(key))

    def take(self, key: Hashable) -> V | None:
        value: V | None = self.store.take(self._key(key))
        return value

    def items(self) -> list[tuple[Any, V]]:
        """All (key, value) pairs in this map, in insertion order."""
        return [(k[1], self.store.get(k)) for k in self.store.keys(self.prefix)]


class StorageValue(Generic[V]):
    """A single named value inside a KeyValueStore with a default."""

    def __init__(self, store: KeyValueStore, prefix: str, default: V) -> None:
        self.store = store
        self.key = (prefix,)
        self.default = default

    def get(self) -> V:
        value: V = self.store.get(self.key, self.default)
        return value

    def put(self, value: V) -> None:
        self.store.insert(self.key, value)
