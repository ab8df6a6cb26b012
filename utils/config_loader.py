"""YAML configuration loader for hashcheck."""

from __future__ import annotations

import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, MutableMapping, cast

import yaml

CONFIG_ENV_VAR = "HASHCHECK_CONFIG"
DEFAULT_CONFIG_PATH = Path("/etc/hashcheck/config.yaml")
DEFAULT_CONFIG_FILE = Path(__file__).resolve().parent.parent / "config" / "default_config.yaml"


def _load_default_config() -> Dict[str, Any]:
    """Read the repository default configuration YAML."""

    if DEFAULT_CONFIG_FILE.exists():
        with DEFAULT_CONFIG_FILE.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        if isinstance(data, dict):
            return cast(Dict[str, Any], data)
        raise ValueError("Default configuration file must contain a mapping at the top level")

    # Fallback values mirror the documented defaults.
    return {
        "hashing": {
            "default_algorithm": "sha256",
            "chunk_size": 1024 * 1024,
        },
        "matcher": {
            "threshold_divisor": 5,
        },
        "report": {
            "output_path": "",
        },
        "system": {
            "log_level": "INFO",
        },
    }


DEFAULT_CONFIG: Dict[str, Any] = _load_default_config()


def _deep_merge(
    base: MutableMapping[str, Any], override: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    for key, value in override.items():
        if (
            key in base
            and isinstance(base[key], MutableMapping)
            and isinstance(value, MutableMapping)
        ):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def resolve_config_path(path: Path | str | None = None) -> Path:
    """Resolve the configuration file path using overrides or defaults."""

    if path is not None:
        text = str(path).strip()
        if text:
            return Path(text).expanduser()

    env_override = os.getenv(CONFIG_ENV_VAR, "").strip()
    if env_override:
        return Path(env_override).expanduser()
    return DEFAULT_CONFIG_PATH


def load_raw_config(path: Path | str | None = None) -> Dict[str, Any]:
    """Load configuration data from YAML without applying defaults."""

    candidate = resolve_config_path(path)
    if candidate.exists():
        with candidate.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    else:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Configuration file must contain a mapping at the top level")
    return data


def merge_configs(
    base: MutableMapping[str, Any], override: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Return a deep-merged copy of *base* updated with *override*."""

    merged = deepcopy(base)
    _deep_merge(merged, override)
    return merged


def save_config(data: MutableMapping[str, Any], path: Path | str | None = None) -> Path:
    """Persist configuration data to YAML on disk."""

    candidate = resolve_config_path(path)
    candidate.parent.mkdir(parents=True, exist_ok=True)
    with candidate.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(dict(data), handle, sort_keys=True, allow_unicode=True)
    return candidate


def load_config(path: Path | str | None = None) -> Dict[str, Any]:
    """Load configuration from YAML, falling back to defaults when absent."""

    data = load_raw_config(path)

    merged = deepcopy(DEFAULT_CONFIG)
    _deep_merge(merged, data)
    return merged


def get_config_value(
    *keys: str, default: Any | None = None, config: Dict[str, Any] | None = None
) -> Any:
    """Retrieve a nested configuration value by walking *keys*."""

    current: Any = config if config is not None else load_config()
    for key in keys:
        if not isinstance(current, MutableMapping) or key not in current:
            return default
        current = current[key]
    return current


__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG",
    "DEFAULT_CONFIG_PATH",
    "get_config_value",
    "load_config",
    "load_raw_config",
    "merge_configs",
    "resolve_config_path",
    "save_config",
]
