"""Configuration management for hoverdict."""
from __future__ import annotations

from .constants import (
    CACHE_FILENAME_TEMPLATE,
    CONF_DIR,
    DEFAULT_CONFIG_PATH,
    DEFAULT_FREE_DICTIONARY_URL,
    DEFAULT_LOCAL_CONFIG_PATH,
    DEFAULT_PROVIDER,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_STORAGE_DIR,
    DEFAULT_WORDS_API_URL,
)
from .loader import get_settings, load_configuration, reset_settings
from .settings import (
    EnvironmentOverrides,
    HoverDictSettings,
    apply_settings_updates,
    load_environment_overrides,
    resolve_cache_path,
)

__all__ = [
    "CACHE_FILENAME_TEMPLATE",
    "CONF_DIR",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_FREE_DICTIONARY_URL",
    "DEFAULT_LOCAL_CONFIG_PATH",
    "DEFAULT_PROVIDER",
    "DEFAULT_REQUEST_TIMEOUT_SECONDS",
    "DEFAULT_STORAGE_DIR",
    "DEFAULT_WORDS_API_URL",
    "EnvironmentOverrides",
    "HoverDictSettings",
    "apply_settings_updates",
    "get_settings",
    "load_configuration",
    "load_environment_overrides",
    "reset_settings",
    "resolve_cache_path",
]
