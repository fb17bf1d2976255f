"""Unit tests for the seeded randomness source."""

from kitties.runtime.constants import DNA_SIZE
from kitties.runtime.randomness import BlockContext, RandomnessSource


class TestRandomnessSource:

    def test_length(self) -> None:
        assert len(RandomnessSource().random_bytes("alice")) == DNA_SIZE

    def test_replay_is_deterministic(self) -> None:
        first = RandomnessSource("seed")
        second = RandomnessSource("seed")

        assert [first.random_bytes("alice") for _ in range(3)] == [
            second.random_bytes("alice") for _ in range(3)
        ]

    def test_draws_differ_within_block(self) -> None:
        source = RandomnessSource("seed")

        assert source.random_bytes("alice") != source.random_bytes("alice")

    def test_subject_and_seed_matter(self) -> None:
        assert RandomnessSource("seed").random_bytes("alice") != RandomnessSource("seed").random_bytes("bob")
        assert RandomnessSource("a").random_bytes("alice") != RandomnessSource("b").random_bytes("alice")

    def test_str_and_bytes_seed_agree(self) -> None:
        assert RandomnessSource("seed").random_bytes("x") == RandomnessSource(b"seed").random_bytes("x")

    def test_block_changes_output(self) -> None:
        context = BlockContext()
        source = RandomnessSource("seed", context)
        in_block_0 = source.random_bytes("alice")

        context.new_block()

        assert source.random_bytes("alice") != in_block_0


class TestBlockContext:

    def test_new_block_resets_counter(self) -> None:
        context = BlockContext(block_number=4)
        assert context.next_request() == 0
        assert context.next_request() == 1

        assert context.new_block() == 5
        assert context.request_index == 0
