"""Breeding - derive a child genome from two parents.

Every bit of the child comes from exactly one parent: where the random
selector has a 1 the bit is taken from parent 1, otherwise from parent 2.
No averaging or blending, so each bit's origin can be traced.

    combine_dna(0b11110000, 0b11001100, 0b10101010) == 0b11100100
"""

from __future__ import annotations

import logging

from .errors import InvalidParent, SameParent
from .randomness import Randomness
from .registry import KittyRegistry
from .types import AccountId, Kitty, KittyIndex
from .validation import check_kitty_id

logger = logging.getLogger(__name__)


def combine_dna(dna1: int, dna2: int, selector: int) -> int:
    """Per-bit multiplexer over one byte."""
    return ((selector & dna1) | (~selector & dna2)) & 0xFF


def combine_genomes(dna1: bytes, dna2: bytes, selector: bytes) -> bytes:
    """Apply combine_dna byte by byte across whole genomes."""
    if not len(dna1) == len(dna2) == len(selector):
        raise ValueError(
            f"Genome lengths differ: {len(dna1)}, {len(dna2)}, selector {len(selector)}"
        )
    return bytes(combine_dna(a, b, s) for a, b, s in zip(dna1, dna2, selector))


class BreedingEngine:
    """Creates child kitties from two existing parents."""

    def __init__(self, registry: KittyRegistry, randomness: Randomness) -> None:
        self.registry = registry
        self.randomness = randomness

    def breed(self, parent1: KittyIndex, parent2: KittyIndex, breeder: AccountId) -> KittyIndex:
        """Breed a new kitty owned by breeder.

        The breeder does not need to own either parent.

        Raises:
            InvalidParent: If either parent does not exist
            SameParent: If both parents are the same kitty
            KittyIndexOverflow: If no id is left
            InvalidArgument: If a parent id is not an int
        """
        check_kitty_id(parent1, "kitty_id_1")
        check_kitty_id(parent2, "kitty_id_2")
        kitty1 = self.registry.get(parent1)
        if kitty1 is None:
            raise InvalidParent(f"Invalid kitty_id_1: {parent1}", kitty_id=parent1)
        kitty2 = self.registry.get(parent2)
        if kitty2 is None:
            raise InvalidParent(f"Invalid kitty_id_2: {parent2}", kitty_id=parent2)
        if parent1 == parent2:
            raise SameParent("Needs different parent", kitty_id=parent1)

        kitty_id = self.registry.next_kitty_id()
        selector = self.randomness.random_bytes(breeder)
        dna = combine_genomes(kitty1.dna, kitty2.dna, selector)

        self.registry.insert_kitty(breeder, kitty_id, Kitty(dna=dna, price=0))
        logger.debug("Bred kitty %d from %d and %d for %s", kitty_id, parent1, parent2, breeder)
        return kitty_id
