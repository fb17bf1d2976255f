"""Tests for the scenario runner in run.py."""

from pathlib import Path

import pytest

from kitties.config_schema import validate_config_dict
from kitties.runtime import KittiesModule
from run import load_scenario, run_scenario


@pytest.fixture
def funded_module() -> KittiesModule:
    config = validate_config_dict({
        "randomness": {"seed": "scenario"},
        "balances": {"genesis": {"alice": 100, "bob": 100}},
    })
    return KittiesModule.from_config(config)


class TestLoadScenario:

    def test_list_format(self, tmp_path: Path) -> None:
        path = tmp_path / "scenario.yaml"
        path.write_text("- {origin: alice, call: create}\n- {new_block: true}\n")

        assert load_scenario(str(path)) == [
            {"origin": "alice", "call": "create"},
            {"new_block": True},
        ]

    def test_mapping_with_calls(self, tmp_path: Path) -> None:
        path = tmp_path / "scenario.yaml"
        path.write_text("calls:\n  - {origin: bob, call: create}\n")

        assert load_scenario(str(path)) == [{"origin": "bob", "call": "create"}]

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "scenario.yaml"
        path.write_text("")

        assert load_scenario(str(path)) == []

    def test_scalar_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "scenario.yaml"
        path.write_text("just a string\n")

        with pytest.raises(ValueError):
            load_scenario(str(path))


class TestRunScenario:

    def test_trade_flow(self, funded_module: KittiesModule) -> None:
        steps = [
            {"origin": "alice", "call": "create"},
            {"origin": "alice", "call": "set_price", "args": [0, 40]},
            {"new_block": True},
            {"origin": "bob", "call": "buy_kitty", "args": {"kitty_id": 0, "max_price": 30}},
            {"origin": "bob", "call": "buy_kitty", "args": {"kitty_id": 0, "max_price": 40}},
        ]

        responses = run_scenario(funded_module, steps, verbose=False)

        assert [r["success"] for r in responses] == [True, True, False, True]
        assert responses[2]["code"] == "price_too_high"
        assert funded_module.block_number == 1
        assert funded_module.owner_of(0) == "bob"
        assert funded_module.balance_of("alice") == 140
        assert funded_module.balance_of("bob") == 60

    def test_missing_origin_is_unsigned(self, funded_module: KittiesModule) -> None:
        responses = run_scenario(funded_module, [{"call": "create"}], verbose=False)

        assert responses[0]["code"] == "unauthenticated"

    def test_prints_responses(
        self, funded_module: KittiesModule, capsys: pytest.CaptureFixture[str]
    ) -> None:
        run_scenario(funded_module, [{"origin": "alice", "call": "create"}])

        assert '"success": true' in capsys.readouterr().out

    def test_example_scenario(self, funded_module: KittiesModule) -> None:
        """The shipped example replays without integrity problems."""
        path = Path(__file__).parent.parent.parent / "config" / "scenario.example.yaml"

        responses = run_scenario(funded_module, load_scenario(str(path)), verbose=False)

        assert all("success" in r for r in responses)
        assert funded_module.check_integrity() == []
