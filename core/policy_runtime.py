"""Configuration loading and logging bootstrap."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

CONFIG_LAYERS = ("default.yaml", "local.yaml")


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse one YAML config layer; an absent layer contributes nothing."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Top level of {path.name} must be a mapping, got {type(data).__name__}")
    return data


def layer_config(base: dict[str, Any], layer: dict[str, Any]) -> dict[str, Any]:
    """Overlay ``layer`` on ``base``: sections merge key by key, anything else replaces."""
    result = dict(base)
    for key, value in layer.items():
        below = result.get(key)
        result[key] = layer_config(below, value) if isinstance(below, dict) and isinstance(value, dict) else value
    return result


def load_effective_config(root: Path) -> dict[str, Any]:
    """Stack every layer under ``config/``, later layers winning."""
    config: dict[str, Any] = {}
    for name in CONFIG_LAYERS:
        config = layer_config(config, read_config_file(root / "config" / name))
    return config


def configure_logging(config: dict[str, Any], debug: bool = False) -> int:
    """Set the root log level from config; debug wins when requested."""
    application = config.get("application") or {}
    level_name = str((config.get("logging") or {}).get("level", "WARNING")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level in config: {level_name}")
    if debug or bool(application.get("debug_logging", False)):
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(level)
    return level
