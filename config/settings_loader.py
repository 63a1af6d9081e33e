"""
YAML settings loader for the SRES optimizer.
Provides cached, dot-path access to base.yaml settings.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


_settings_cache: Optional[Dict[str, Any]] = None


def get_config_path() -> Path:
    """Return path to the settings file."""
    # Check environment variable first, then default to project config
    env_path = os.getenv("SRES_CONFIG_PATH")
    if env_path:
        return Path(env_path)
    # Default: relative to this module
    return Path(__file__).parent / "base.yaml"


def load_settings(force_reload: bool = False, path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load and cache settings from YAML.

    An explicit `path` bypasses the cache.
    """
    global _settings_cache
    if path is not None:
        return _read_yaml(Path(path))

    if _settings_cache is not None and not force_reload:
        return _settings_cache

    _settings_cache = _read_yaml(get_config_path())
    return _settings_cache


def _read_yaml(config_path: Path) -> Dict[str, Any]:
    if not config_path.exists():
        return {}
    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_setting(path: str, default: Any = None) -> Any:
    """
    Get a nested setting by dot-notation path.
    Example: get_setting("sres.mu", 30)
    """
    settings = load_settings()
    keys = path.split(".")
    value = settings
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value

