"""Utility helpers for loading project-wide configuration."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - fallback for older Python
    import tomli as tomllib  # type: ignore[import-untyped]


_CONFIG_FILENAME = "config.toml"
_CONFIG_ENV = "BREACH_CONFIG"
_MISSING = object()


def _config_path() -> Path:
    override = os.environ.get(_CONFIG_ENV)
    if override:
        return Path(override)
    return Path(__file__).resolve().parents[1] / _CONFIG_FILENAME


@lru_cache(maxsize=1)
def get_config() -> Dict[str, Any]:
    """Load and cache the project configuration as a dictionary."""
    path = _config_path()
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except FileNotFoundError as exc:
        raise RuntimeError(f"Configuration file '{path}' was not found") from exc


def reload() -> None:
    """Clear the cached configuration."""

    get_config.cache_clear()


def get_section(path: str, default: Any = _MISSING) -> Any:
    """Retrieve a nested configuration value using dotted notation."""

    data: Any = get_config()
    for part in path.split("."):
        if isinstance(data, dict) and part in data:
            data = data[part]
        else:
            if default is not _MISSING:
                return default
            raise KeyError(f"Configuration path '{path}' not found")
    return data


def get_int(path: str, default: Any = _MISSING) -> int:
    value = get_section(path, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Configuration value '{path}' must be an integer, got {value!r}")
    return value


def get_str(path: str, default: Any = _MISSING) -> str:
    value = get_section(path, default)
    if not isinstance(value, str):
        raise TypeError(f"Configuration value '{path}' must be a string, got {value!r}")
    return value


def get_bool(path: str, default: Any = _MISSING) -> bool:
    value = get_section(path, default)
    if not isinstance(value, bool):
        raise TypeError(f"Configuration value '{path}' must be a boolean, got {value!r}")
    return value


__all__ = ["get_bool", "get_config", "get_int", "get_section", "get_str", "reload"]
