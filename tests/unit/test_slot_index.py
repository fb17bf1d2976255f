"""Unit tests for the swap-with-last-slot ownership index."""

import pytest

from kitties.runtime.errors import CountOverflow, CountUnderflow
from kitties.runtime.slot_index import SlotIndex
from kitties.runtime.storage import KeyValueStore


@pytest.fixture
def slots() -> SlotIndex:
    return SlotIndex(KeyValueStore())


class TestSlotAppend:

    def test_append_fills_slots_in_order(self, slots: SlotIndex) -> None:
        for kitty_id in (10, 11, 12):
            slots.append("alice", kitty_id)

        assert slots.count("alice") == 3
        assert slots.kitties_of("alice") == [10, 11, 12]
        assert slots.slot_of(12) == 2

    def test_append_overflow(self) -> None:
        """Count at max_count fails before any write."""
        slots = SlotIndex(KeyValueStore(), max_count=2)
        slots.append("alice", 1)
        slots.append("alice", 2)

        with pytest.raises(CountOverflow):
            slots.append("alice", 3)

        assert slots.count("alice") == 2
        assert slots.slot_of(3) is None


class TestSlotRemove:

    def test_remove_last_slot(self, slots: SlotIndex) -> None:
        slots.append("alice", 1)
        slots.append("alice", 2)

        slots.remove("alice", 2)

        assert slots.kitties_of("alice") == [1]
        assert slots.slot_of(2) is None

    def test_remove_moves_last_kitty_into_gap(self, slots: SlotIndex) -> None:
        """The unrelated last kitty changes slot: the scheme's known drawback."""
        for kitty_id in (1, 2, 3):
            slots.append("alice", kitty_id)
        assert slots.slot_of(3) == 2

        slots.remove("alice", 1)

        assert slots.kitties_of("alice") == [3, 2]
        assert slots.slot_of(3) == 0
        assert slots.count("alice") == 2

    def test_remove_from_empty_underflows(self, slots: SlotIndex) -> None:
        with pytest.raises(CountUnderflow):
            slots.remove("alice", 1)

    def test_remove_foreign_kitty_underflows(self, slots: SlotIndex) -> None:
        """Removing a kitty held by another account fails without writes."""
        slots.append("alice", 1)
        slots.append("bob", 2)

        with pytest.raises(CountUnderflow):
            slots.remove("alice", 2)

        assert slots.kitties_of("alice") == [1]
        assert slots.kitties_of("bob") == [2]

    def test_contains_and_accounts(self, slots: SlotIndex) -> None:
        slots.append("alice", 1)
        slots.append("bob", 2)

        assert slots.contains("alice", 1)
        assert not slots.contains("alice", 2)
        assert sorted(slots.accounts()) == ["alice", "bob"]
