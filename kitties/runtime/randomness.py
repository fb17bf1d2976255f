"""Deterministic randomness for genomes and breeding selectors.

The runtime never uses the process RNG. Every random value is a 16-byte
blake2b digest of (seed, subject, block number, request counter), so a
replay of the same calls against the same seed yields the same kitties.
The request counter advances on every draw and resets with each block,
which keeps two draws in the same block distinct.
"""

from __future__ import annotations

import hashlib
import json
from typing import Protocol

from .constants import DNA_SIZE


class Randomness(Protocol):
    """Anything that can hand out 16 random bytes for a subject."""

    def random_bytes(self, subject: str) -> bytes: ...


class BlockContext:
    """Ledger context visible to a call: block height and request counter."""

    block_number: int
    request_index: int

    def __init__(self, block_number: int = 0) -> None:
        self.block_number = block_number
        self.request_index = 0

    def next_request(self) -> int:
        """Return the current request index and advance it."""
        index = self.request_index
        self.request_index += 1
        return index

    def new_block(self) -> int:
        """Advance to the next block and reset the request counter."""
        self.block_number += 1
        self.request_index = 0
        return self.block_number


class RandomnessSource:
    """Seeded blake2b randomness bound to a BlockContext."""

    seed: bytes
    context: BlockContext

    def __init__(self, seed: str | bytes = b"kitties", context: BlockContext | None = None) -> None:
        self.seed = seed.encode() if isinstance(seed, str) else bytes(seed)
        self.context = context or BlockContext()

    def random_bytes(self, subject: str) -> bytes:
        """Draw DNA_SIZE bytes for subject (usually the calling account)."""
        payload = json.dumps(
            [
                self.seed.hex(),
                subject,
                self.context.next_request(),
                self.context.block_number,
            ],
            separators=(",", ":"),
        )
        return hashlib.blake2b(payload.encode(), digest_size=DNA_SIZE).digest()
