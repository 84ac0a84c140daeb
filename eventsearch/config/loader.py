"""YAML configuration loader with environment variable overrides.

Configuration is resolved in layers (later layers override earlier):

  1. ``_DEFAULTS`` below        -- always present, so a missing file is fine
  2. ``config/config.yaml``     -- static site data checked into the repo
                                   (content locales, popular searches)
  3. Environment / ``.env``     -- deploy-time values via :class:`Settings`

``_deep_merge`` merges nested dicts key by key:

  base = {"search": {"suggestion_limit": 6}}
  overrides = {"search": {"result_limit": 50}}
  result = {"search": {"suggestion_limit": 6, "result_limit": 50}}
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

from eventsearch.config.settings import Settings

# The twelve content locales the site translates every event into.
DEFAULT_LOCALES: list[str] = [
    "en", "vi", "ko", "zh", "ru", "fr", "ja", "ms", "th", "de", "es", "id",
]

DEFAULT_POPULAR_SEARCHES: list[str] = [
    "music",
    "yoga",
    "workshop",
    "art",
    "food",
    "coffee",
    "hiking",
    "photography",
    "meditation",
    "market",
    "festival",
    "concert",
    "dance",
    "fitness",
    "cooking",
]

_DEFAULTS: dict[str, Any] = {
    "site": {
        "name": "Da Lat events",
        "city": "Da Lat, Vietnam",
        "locales": DEFAULT_LOCALES,
    },
    "search": {
        "fields": ["title", "description", "location_name"],
        "popular": DEFAULT_POPULAR_SEARCHES,
    },
}


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict[str, Any]:
    """Load YAML config and merge it with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.  A missing file is
            not an error; the built-in defaults are used.
        settings: Settings instance to take overrides from.  A fresh
            ``Settings()`` is read from the environment when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    resolved = copy.deepcopy(_DEFAULTS)

    config_path = Path(path)
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}
        _deep_merge(resolved, yaml_config)

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "llm": {
            "available_providers": settings.get_available_llm_providers(),
        },
        "search": {
            "suggestion_limit": settings.suggestion_limit,
            "result_limit": settings.search_result_limit,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(resolved, env_overrides)
    return resolved


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
