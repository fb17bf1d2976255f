"""Pydantic schema for configuration validation.

All config values are validated at startup. Typos and invalid values
fail fast with clear error messages.

Usage:
    from kitties.config_schema import load_validated_config, AppConfig
    config = load_validated_config("config/config.yaml")
    # config is now a validated AppConfig instance
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# BASE MODEL WITH STRICT VALIDATION
# =============================================================================

class StrictModel(BaseModel):
    """Base model that rejects unknown fields (catches typos)."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# KITTIES MODEL
# =============================================================================

class KittiesConfig(StrictModel):
    """Kitty index sizing and ownership index selection."""

    max_kitty_index: int = Field(
        default=2**32 - 1,
        gt=0,
        description="Largest value of the kitty index type; ids stop one below it"
    )
    ownership_index: Literal["linked_list", "slot_array"] = Field(
        default="linked_list",
        description="Per-account ownership index: linked list (stable) or slot array"
    )


# =============================================================================
# RANDOMNESS MODEL
# =============================================================================

class RandomnessConfig(StrictModel):
    """Seed for the deterministic randomness source."""

    seed: str = Field(
        default="kitties",
        min_length=1,
        description="Global seed mixed into every genome and breeding selector"
    )


# =============================================================================
# BALANCES MODEL
# =============================================================================

class BalancesConfig(StrictModel):
    """Starting balances."""

    genesis: dict[str, int] = Field(
        default_factory=dict,
        description="Account -> balance credited when the runtime is built"
    )

    @field_validator("genesis")
    @classmethod
    def check_genesis(cls, v: dict[str, int]) -> dict[str, int]:
        for account, amount in v.items():
            if not account:
                raise ValueError("genesis account names must be non-empty")
            if amount < 0:
                raise ValueError(f"genesis balance for '{account}' must be >= 0, got {amount}")
        return v


# =============================================================================
# LOGGING MODEL
# =============================================================================

class LoggingConfig(StrictModel):
    """Logging configuration."""

    output_file: str | None = Field(
        default=None,
        description="JSONL file for kitty events (None keeps events in memory)"
    )
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Level for the Python logging root handler"
    )
    default_recent: int = Field(
        default=50,
        gt=0,
        description="Default number of recent events to return"
    )


# =============================================================================
# ROOT CONFIG
# =============================================================================

class AppConfig(StrictModel):
    """Root configuration model.

    All fields have sensible defaults, so an empty config file is valid.
    """

    kitties: KittiesConfig = Field(default_factory=KittiesConfig)
    randomness: RandomnessConfig = Field(default_factory=RandomnessConfig)
    balances: BalancesConfig = Field(default_factory=BalancesConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# LOADING FUNCTIONS
# =============================================================================

def load_validated_config(config_path: str | Path = "config/config.yaml") -> AppConfig:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to config YAML file.

    Returns:
        Validated AppConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid (with detailed error message).
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw_config = yaml.safe_load(f) or {}

    return AppConfig.model_validate(raw_config)


def validate_config_dict(config_dict: dict[str, Any]) -> AppConfig:
    """Validate a configuration dictionary.

    Raises:
        pydantic.ValidationError: If config is invalid.
    """
    return AppConfig.model_validate(config_dict)


# =============================================================================
# EXPORTS
# =============================================================================

__all__ = [
    "AppConfig",
    "KittiesConfig",
    "RandomnessConfig",
    "BalancesConfig",
    "LoggingConfig",
    "StrictModel",
    "load_validated_config",
    "validate_config_dict",
]
