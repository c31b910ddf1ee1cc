"""Pydantic models and helper utilities for configuration values."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from hoverdict import logging_manager

from .constants import (
    CACHE_FILENAME_TEMPLATE,
    DEFAULT_FREE_DICTIONARY_URL,
    DEFAULT_PROVIDER,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_STORAGE_DIR,
    DEFAULT_WORDS_API_URL,
)

logger = logging_manager.get_logger().getChild("config")


class HoverDictSettings(BaseModel):
    """Typed representation of the application configuration."""

    model_config = ConfigDict(extra="allow")

    storage_dir: str = str(DEFAULT_STORAGE_DIR)
    persist_cache: bool = True
    default_provider: str = DEFAULT_PROVIDER
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    free_dictionary_url: str = DEFAULT_FREE_DICTIONARY_URL
    words_api_url: str = DEFAULT_WORDS_API_URL
    words_api_key: Optional[SecretStr] = None
    debug: bool = False


class EnvironmentOverrides(BaseSettings):
    """Configuration overrides sourced from environment variables."""

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")

    storage_dir: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("HOVERDICT_STORAGE_DIR")
    )
    persist_cache: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("HOVERDICT_PERSIST_CACHE")
    )
    default_provider: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("HOVERDICT_DEFAULT_PROVIDER")
    )
    request_timeout_seconds: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices(
            "HOVERDICT_REQUEST_TIMEOUT", "HOVERDICT_REQUEST_TIMEOUT_SECONDS"
        ),
    )
    words_api_key: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("WORDS_API_KEY", "HOVERDICT_WORDS_API_KEY"),
    )
    debug: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("HOVERDICT_DEBUG")
    )


def load_environment_overrides() -> Dict[str, Any]:
    """Return configuration overrides sourced from environment variables."""

    try:
        overrides = EnvironmentOverrides()
    except ValidationError as exc:
        logger.warning(
            "Invalid environment configuration detected; using defaults.",
            extra={"event": "config.env.validation_error", "error": str(exc)},
        )
        return {}
    return overrides.model_dump(exclude_none=True)


def apply_settings_updates(
    settings: HoverDictSettings, updates: Dict[str, Any]
) -> HoverDictSettings:
    """Return a copy of ``settings`` updated with ``updates`` if any values exist."""

    if not updates:
        return settings
    return settings.model_copy(update=updates)


def resolve_cache_path(settings: HoverDictSettings, provider_id: str) -> Optional[Path]:
    """Return the cache file for ``provider_id``, or ``None`` without persistence."""

    if not settings.persist_cache or not settings.storage_dir:
        return None
    storage_dir = Path(settings.storage_dir).expanduser()
    return storage_dir / CACHE_FILENAME_TEMPLATE.format(provider_id=provider_id)


__all__ = [
    "EnvironmentOverrides",
    "HoverDictSettings",
    "apply_settings_updates",
    "load_environment_overrides",
    "resolve_cache_path",
]
