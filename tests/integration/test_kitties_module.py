"""Integration tests for KittiesModule: calls, dispatch, events and integrity."""

import random
from pathlib import Path

import pytest

from kitties.config_schema import load_validated_config, validate_config_dict
from kitties.runtime import (
    EventLogger,
    InvalidParent,
    KittiesModule,
    KittyError,
    KittyIndexOverflow,
    Ledger,
    Origin,
    SameParent,
    SlotIndex,
    Unauthenticated,
)
from tests.testing_utils import FixedRandomness, dna


class TestCreate:

    def test_create_assigns_sequential_ids(self, module: KittiesModule, alice: Origin) -> None:
        assert [module.create(alice) for _ in range(3)] == [0, 1, 2]
        assert module.kitties_count() == 3
        assert module.kitties_of("alice") == [0, 1, 2]

    def test_create_uses_randomness(self, module: KittiesModule, alice: Origin) -> None:
        kitty_id = module.create(alice)

        assert module.kitty(kitty_id).dna == dna(0x11)
        assert module.kitty_info(kitty_id) == {
            "kitty_id": 0,
            "owner": "alice",
            "dna": "11" * 16,
            "price": 0,
        }

    def test_unsigned_origin(self, module: KittiesModule) -> None:
        with pytest.raises(Unauthenticated):
            module.create(Origin.none())
        assert module.kitties_count() == 0

    def test_overflow(self, store, randomness: FixedRandomness, alice: Origin) -> None:
        module = KittiesModule(store=store, randomness=randomness, max_kitty_index=1)
        module.create(alice)

        with pytest.raises(KittyIndexOverflow):
            module.create(alice)
        assert module.kitties_count() == 1

    def test_kitty_info_missing(self, module: KittiesModule) -> None:
        assert module.kitty_info(0) is None
        assert module.kitty(0) is None


class TestBreed:

    def test_breed_mixes_parents(
        self, store, events: EventLogger, alice: Origin, bob: Origin
    ) -> None:
        randomness = FixedRandomness([
            bytes([0b11110000]) * 16,
            bytes([0b11001100]) * 16,
            bytes([0b10101010]) * 16,
        ])
        module = KittiesModule(store=store, randomness=randomness, events=events)
        module.create(alice)
        module.create(alice)

        child = module.breed(bob, 0, 1)

        assert child == 2
        assert module.kitty(child).dna == bytes([0b11100100]) * 16
        assert module.owner_of(child) == "bob"
        assert module.kitties_of("bob") == [2]

    def test_breed_errors(self, module: KittiesModule, alice: Origin) -> None:
        module.create(alice)

        with pytest.raises(SameParent):
            module.breed(alice, 0, 0)
        with pytest.raises(InvalidParent):
            module.breed(alice, 0, 1)
        assert module.kitties_count() == 1


class TestEvents:

    def test_committed_calls_logged(
        self, module: KittiesModule, events: EventLogger, alice: Origin, bob: Origin
    ) -> None:
        module.create(alice)
        module.create(alice)
        module.breed(alice, 0, 1)
        module.set_price(alice, 2, 50)
        module.buy_kitty(bob, 2, 50)
        module.transfer(bob, "charlie", 2)

        assert [e["event_type"] for e in events.events] == [
            "kitty_created",
            "kitty_created",
            "kitty_bred",
            "price_set",
            "kitty_sold",
            "kitty_transferred",
        ]
        sold = events.events[4]
        assert (sold["seller"], sold["buyer"], sold["price"]) == ("alice", "bob", 50)

    def test_rejected_call_logged(
        self, module: KittiesModule, events: EventLogger, bob: Origin
    ) -> None:
        with pytest.raises(KittyError):
            module.transfer(bob, "alice", 0)

        (failed,) = events.events
        assert failed["event_type"] == "call_failed"
        assert failed["call"] == "transfer"
        assert failed["sender"] == "bob"
        assert failed["code"] == "not_found"

    def test_unauthenticated_logged_without_sender(
        self, module: KittiesModule, events: EventLogger
    ) -> None:
        with pytest.raises(Unauthenticated):
            module.create(Origin.none())

        assert events.events[0]["sender"] is None
        assert events.events[0]["code"] == "unauthenticated"


class TestDispatch:

    def test_create_by_name(self, module: KittiesModule, alice: Origin) -> None:
        response = module.dispatch(alice, "create")

        assert response["success"] is True
        assert response["kitty_id"] == 0
        assert response["sender"] == "alice"

    def test_positional_and_keyword_args(
        self, module: KittiesModule, alice: Origin, bob: Origin
    ) -> None:
        module.dispatch(alice, "create")
        assert module.dispatch(alice, "set_price", [0, 20])["success"]

        response = module.dispatch(bob, "buy_kitty", {"kitty_id": 0, "max_price": 20})

        assert response["success"] is True
        assert response["kitty_id"] == 0
        assert module.owner_of(0) == "bob"

    def test_error_response(self, module: KittiesModule, bob: Origin) -> None:
        response = module.dispatch(bob, "transfer", ["alice", 7])

        assert response["success"] is False
        assert response["code"] == "not_found"
        assert response["category"] == "resource"

    def test_unknown_call(self, module: KittiesModule, alice: Origin) -> None:
        response = module.dispatch(alice, "fly")

        assert response["success"] is False
        assert response["code"] == "unknown_call"

    def test_bad_arguments(self, module: KittiesModule, alice: Origin) -> None:
        response = module.dispatch(alice, "breed", [0])

        assert response["success"] is False
        assert response["code"] == "unknown_call"
        assert response["category"] == "validation"

    def test_unsigned(self, module: KittiesModule) -> None:
        assert module.dispatch(Origin.none(), "create")["code"] == "unauthenticated"


class TestBlocks:

    def test_new_block(self, module: KittiesModule) -> None:
        assert module.block_number == 0
        assert module.new_block() == 1
        assert module.block_number == 1

    def test_request_counter_advances_per_draw(self, alice: Origin) -> None:
        """Only calls that draw randomness advance the counter."""
        module = KittiesModule(seed="counter")
        module.create(alice)
        module.create(alice)
        assert module.context.request_index == 2

        module.breed(alice, 0, 1)
        module.set_price(alice, 2, 10)
        module.transfer(alice, "bob", 2)
        assert module.context.request_index == 3

        module.new_block()
        assert module.context.request_index == 0

    def test_default_randomness_is_replayable(self, alice: Origin) -> None:
        first = KittiesModule(seed="replay")
        second = KittiesModule(seed="replay")
        for module in (first, second):
            module.create(alice)
            module.new_block()
            module.create(alice)

        assert first.kitty(0) == second.kitty(0)
        assert first.kitty(1) == second.kitty(1)
        assert first.kitty(0) != first.kitty(1)


class TestConstruction:

    def test_ledger_must_share_store(self) -> None:
        with pytest.raises(ValueError):
            KittiesModule(ledger=Ledger())

    def test_unknown_ownership_index(self) -> None:
        with pytest.raises(ValueError):
            KittiesModule(ownership_index="btree")

    def test_from_config(self, config_file: Path, alice: Origin) -> None:
        module = KittiesModule.from_config(load_validated_config(config_file))

        assert module.balance_of("alice") == 100
        assert module.balance_of("bob") == 50
        assert module.registry.max_kitty_index == 1000
        assert module.events is not None

        module.create(alice)
        assert module.events.events[0]["event_type"] == "kitty_created"

    def test_from_config_slot_array(self) -> None:
        config = validate_config_dict({"kitties": {"ownership_index": "slot_array"}})
        module = KittiesModule.from_config(config)

        assert isinstance(module.index, SlotIndex)


class TestIntegrity:

    def test_fresh_module_consistent(self, module: KittiesModule) -> None:
        assert module.check_integrity() == []

    def test_detects_owner_mismatch(self, module: KittiesModule, alice: Origin) -> None:
        module.create(alice)
        module.registry.set_owner(0, "bob")

        assert module.check_integrity() != []

    def test_state_summary(self, module: KittiesModule, alice: Origin) -> None:
        module.create(alice)
        summary = module.state_summary()

        assert summary["kitties_count"] == 1
        assert summary["owned"] == {"alice": [0]}
        assert summary["balances"]["alice"] == 1000
        assert summary["total_issuance"] == sum(summary["balances"].values())
        assert summary["integrity_issues"] == []

    @pytest.mark.parametrize("ownership_index", ["linked_list", "slot_array"])
    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_random_calls_keep_consistency(self, ownership_index: str, seed: int) -> None:
        """Every call either commits fully or changes nothing."""
        rng = random.Random(seed)
        module = KittiesModule(ownership_index=ownership_index, seed=f"seed-{seed}")
        accounts = ["alice", "bob", "charlie"]
        for account in accounts:
            module.ledger.create_account(account, 200)

        for _ in range(200):
            origin = Origin.signed(rng.choice(accounts))
            count = module.kitties_count()
            kitty_id = rng.randrange(count + 1)
            call = rng.choice(["create", "breed", "transfer", "set_price", "buy_kitty"])
            args: list = {
                "create": [],
                "breed": [kitty_id, rng.randrange(count + 1)],
                "transfer": [rng.choice(accounts), kitty_id],
                "set_price": [kitty_id, rng.choice([0, 5, 50])],
                "buy_kitty": [kitty_id, rng.choice([10, 100])],
            }[call]
            before = module.state_summary()

            response = module.dispatch(origin, call, args)

            if not response["success"]:
                assert module.state_summary() == before
            assert module.check_integrity() == []
            assert module.ledger.total_issuance() == 600

        owned = sum(len(module.kitties_of(a)) for a in accounts)
        assert owned == module.kitties_count()
