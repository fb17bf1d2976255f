#!/usr/bin/env python3
"""
Kitties - scenario runner

Replays a YAML list of calls against a fresh runtime and prints one JSON
response per call, then a JSON summary of the final state.

Usage:
    python run.py scenario.yaml                    # Use config/config.yaml
    python run.py scenario.yaml --config my.yaml   # Use another config
    python run.py scenario.yaml --quiet            # Only print the summary

Scenario format:
    - {origin: alice, call: create}
    - {origin: alice, call: set_price, args: [0, 50]}
    - {new_block: true}
    - {origin: bob, call: buy_kitty, args: {kitty_id: 0, max_price: 60}}
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, TypedDict

import yaml
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from kitties.config import load_config, get_validated_config, set_config_value
from kitties.runtime import KittiesModule, Origin


class ScenarioStep(TypedDict, total=False):
    """One entry of a scenario file."""

    origin: str | None
    call: str
    args: list[Any] | dict[str, Any]
    new_block: bool


def load_scenario(path: str) -> list[ScenarioStep]:
    """Load scenario steps from YAML (a list, or a mapping with 'calls')."""
    with open(path) as f:
        loaded: Any = yaml.safe_load(f) or []
    if isinstance(loaded, dict):
        loaded = loaded.get("calls", [])
    if not isinstance(loaded, list):
        raise ValueError(f"Scenario {path} must be a list of calls")
    steps: list[ScenarioStep] = loaded
    return steps


def run_scenario(
    module: KittiesModule,
    steps: list[ScenarioStep],
    verbose: bool = True,
) -> list[dict[str, Any]]:
    """Apply every step in order and return the responses."""
    responses: list[dict[str, Any]] = []
    for step in steps:
        if step.get("new_block"):
            block = module.new_block()
            if verbose:
                print(json.dumps({"new_block": block}))
            if "call" not in step:
                continue

        account = step.get("origin")
        origin = Origin.signed(account) if account else Origin.none()
        response = module.dispatch(origin, step.get("call", ""), step.get("args"))
        responses.append(response)
        if verbose:
            print(json.dumps(response))
    return responses


def main() -> None:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        description="Replay a kitties scenario"
    )
    parser.add_argument("scenario", help="Path to scenario YAML file")
    parser.add_argument(
        "--config", default="config/config.yaml", help="Path to config file"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override logging.level",
    )
    parser.add_argument("--quiet", action="store_true", help="Only print the final state")
    args: argparse.Namespace = parser.parse_args()

    if not Path(args.config).exists():
        print(f"Config file not found: {args.config}", file=sys.stderr)
        sys.exit(1)
    load_config(args.config)
    if args.log_level:
        set_config_value("logging.level", args.log_level)
    config = get_validated_config()

    logging.basicConfig(
        level=config.logging.level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    module = KittiesModule.from_config(config)
    run_scenario(module, load_scenario(args.scenario), verbose=not args.quiet)
    print(json.dumps(module.state_summary(), indent=2))


if __name__ == "__main__":
    main()
