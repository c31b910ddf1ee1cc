"""Host-owned registry of definition providers."""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, Optional

import requests

from hoverdict import logging_manager as log_mgr
from hoverdict.clients import free_dictionary, words_api
from hoverdict.config_manager import HoverDictSettings, get_settings, resolve_cache_path
from hoverdict.definition_cache import DefinitionCache
from hoverdict.provider import DefinitionProvider
from hoverdict.render import render_free_dictionary, render_words_api

logger = log_mgr.get_logger().getChild("registry")


class ProviderId(str, Enum):
    """Dictionary provider identifiers."""

    FREE_DICTIONARY = free_dictionary.PROVIDER_ID
    WORDS_API = words_api.PROVIDER_ID


ProviderFactory = Callable[
    [HoverDictSettings, Optional[requests.Session]],
    Optional[DefinitionProvider[Any]],
]


def _load_cache(settings: HoverDictSettings, provider_id: ProviderId, model_codec) -> DefinitionCache:
    cache_path = resolve_cache_path(settings, provider_id.value)
    if cache_path is None:
        logger.info(
            "%s: definition cache not persisted",
            provider_id.value,
            extra={"event": "registry.cache.memory_only"},
        )
        return DefinitionCache(model_codec=model_codec)
    return DefinitionCache.load(cache_path, model_codec=model_codec)


def build_free_dictionary_provider(
    settings: HoverDictSettings,
    session: Optional[requests.Session] = None,
) -> DefinitionProvider[Any]:
    client = free_dictionary.create_client(
        base_url=settings.free_dictionary_url,
        session=session,
        timeout_seconds=settings.request_timeout_seconds,
    )
    return DefinitionProvider(
        provider_id=ProviderId.FREE_DICTIONARY.value,
        client=client,
        cache=_load_cache(settings, ProviderId.FREE_DICTIONARY, free_dictionary.MODEL_CODEC),
        render=render_free_dictionary,
    )


def build_words_api_provider(
    settings: HoverDictSettings,
    session: Optional[requests.Session] = None,
) -> Optional[DefinitionProvider[Any]]:
    api_key = settings.words_api_key.get_secret_value() if settings.words_api_key else ""
    if not api_key:
        logger.info(
            "%s: no API key configured",
            ProviderId.WORDS_API.value,
            extra={"event": "registry.provider.unavailable"},
        )
        return None
    client = words_api.create_client(
        api_key=api_key,
        base_url=settings.words_api_url,
        session=session,
        timeout_seconds=settings.request_timeout_seconds,
    )
    return DefinitionProvider(
        provider_id=ProviderId.WORDS_API.value,
        client=client,
        cache=_load_cache(settings, ProviderId.WORDS_API, words_api.MODEL_CODEC),
        render=render_words_api,
    )


PROVIDER_FACTORIES: Dict[ProviderId, ProviderFactory] = {
    ProviderId.FREE_DICTIONARY: build_free_dictionary_provider,
    ProviderId.WORDS_API: build_words_api_provider,
}


class ProviderRegistry:
    """Lazily builds and owns one provider per identifier.

    The registry is the host's shutdown point: :meth:`shutdown` flushes
    every provider's cache exactly once.
    """

    def __init__(
        self,
        settings: HoverDictSettings,
        *,
        session: Optional[requests.Session] = None,
        factories: Optional[Dict[ProviderId, ProviderFactory]] = None,
    ) -> None:
        """Initialize the registry.

        Args:
            settings: Active configuration.
            session: Optional requests session shared by every client.
            factories: Optional factory overrides keyed by provider id.
        """
        self._settings = settings
        self._session = session
        self._factories = {**PROVIDER_FACTORIES, **(factories or {})}
        self._providers: Dict[ProviderId, DefinitionProvider[Any]] = {}

    @property
    def settings(self) -> HoverDictSettings:
        return self._settings

    def get_provider(self, provider_id: str) -> Optional[DefinitionProvider[Any]]:
        """Get or create the provider for ``provider_id``.

        Returns:
            The provider, or ``None`` if the id is unknown or the provider is
            not usable with the current configuration.
        """
        try:
            key = ProviderId(provider_id)
        except ValueError:
            logger.warning(
                "Unknown definition provider %r",
                provider_id,
                extra={"event": "registry.provider.unknown"},
            )
            return None

        provider = self._providers.get(key)
        if provider is not None:
            return provider

        provider = self._factories[key](self._settings, self._session)
        if provider is not None:
            self._providers[key] = provider
        return provider

    def clear_caches(self, provider_id: Optional[str] = None) -> int:
        """Clear memory and disk caches for one provider, or all known ones.

        Returns:
            Number of providers whose caches were cleared.
        """
        if provider_id is not None:
            ids = [provider_id]
        else:
            ids = [key.value for key in ProviderId]
        cleared = 0
        for key in ids:
            provider = self.get_provider(key)
            if provider is None:
                continue
            provider.clear()
            provider.clear_cache()
            cleared += 1
        return cleared

    def shutdown(self) -> None:
        """Shut down every provider, logging individual failures."""
        for key, provider in list(self._providers.items()):
            try:
                provider.shutdown()
            except Exception as exc:
                logger.error(
                    "Error shutting down provider %s: %s",
                    key.value,
                    exc,
                    extra={"event": "registry.shutdown.error"},
                    exc_info=True,
                )
        self._providers.clear()

    def __enter__(self) -> "ProviderRegistry":
        return self

    def __exit__(self, *args) -> None:
        self.shutdown()


def create_registry_from_config(
    settings: Optional[HoverDictSettings] = None,
    *,
    session: Optional[requests.Session] = None,
) -> ProviderRegistry:
    """Create a registry from configuration, defaulting to the active settings."""
    return ProviderRegistry(settings or get_settings(), session=session)


__all__ = [
    "PROVIDER_FACTORIES",
    "ProviderId",
    "ProviderRegistry",
    "build_free_dictionary_provider",
    "build_words_api_provider",
    "create_registry_from_config",
]
