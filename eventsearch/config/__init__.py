"""Configuration module: exports Settings, load_config and the locale defaults."""

from eventsearch.config.loader import DEFAULT_LOCALES, DEFAULT_POPULAR_SEARCHES, load_config
from eventsearch.config.settings import Settings

__all__ = ["DEFAULT_LOCALES", "DEFAULT_POPULAR_SEARCHES", "Settings", "load_config"]
