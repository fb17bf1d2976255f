"""Process-wide configuration for the kitties runtime

Holds the raw YAML mapping next to its validated AppConfig so that CLI
overrides can edit the mapping and be checked again before use.

Usage:
    from kitties.config import load_config, get_validated_config, set_config_value

    load_config("config/config.yaml")
    set_config_value("logging.level", "DEBUG")   # e.g. from --log-level

    config = get_validated_config()
    module = KittiesModule.from_config(config)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .config_schema import AppConfig, load_validated_config, validate_config_dict


_raw: dict[str, Any] | None = None
_validated: AppConfig | None = None

DEFAULT_CONFIG_PATH: Path = Path(__file__).parent.parent / "config" / "config.yaml"


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Read, validate and install a config file (config/config.yaml by default).

    Raises:
        FileNotFoundError: If the file is missing
        pydantic.ValidationError: If a value is invalid or a key is unknown
    """
    global _raw, _validated

    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    validated = load_validated_config(path)
    with open(path) as f:
        loaded: Any = yaml.safe_load(f)

    _raw = loaded if isinstance(loaded, dict) else {}
    _validated = validated
    return validated


def get_validated_config() -> AppConfig:
    """The installed config, loading the default file on first use."""
    if _validated is None:
        return load_config()
    return _validated


def set_config_value(key: str, value: Any) -> AppConfig:
    """Override one dot-path value (e.g. "logging.level") and re-validate.

    The override only replaces the installed config when the result
    validates.

    Raises:
        pydantic.ValidationError: If the override makes the config invalid
    """
    global _raw, _validated

    if _raw is None:
        load_config()
    if _raw is None:
        raise RuntimeError("Config failed to load. Call load_config() first.")

    *parents, leaf = key.split(".")
    updated: dict[str, Any] = dict(_raw)
    node = updated
    for name in parents:
        child = node.get(name)
        node[name] = dict(child) if isinstance(child, dict) else {}
        node = node[name]
    node[leaf] = value

    _validated = validate_config_dict(updated)
    _raw = updated
    return _validated


def reset_config() -> None:
    """Forget the installed config. Mainly for tests."""
    global _raw, _validated
    _raw = None
    _validated = None
