"""Resolve hovered words to display hints through the cache and a client."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Generic, Optional

from hoverdict import logging_manager as log_mgr
from hoverdict.clients.base import DefinitionApiClient
from hoverdict.clients.types import FetchStatus
from hoverdict.definition_cache import DefinitionCache, normalize_word
from hoverdict.definition_cache.models import TModel

HintTemplate = Callable[[TModel, str], str]
"""Renders a model for the word the user hovered."""


@dataclass(frozen=True, slots=True)
class Hint:
    """A rendered definition ready for display."""

    word: str
    markup: str
    provider_id: str
    from_cache: bool


class DefinitionProvider(Generic[TModel]):
    """Combines a :class:`DefinitionCache` and a :class:`DefinitionApiClient`.

    Owns the cache-population policy: found definitions are stored under the
    source's canonical word with an alias from the queried spelling,
    confirmed absences are cached as negatives, and indeterminate lookups are
    never cached so the next hover retries.
    """

    def __init__(
        self,
        *,
        provider_id: str,
        client: DefinitionApiClient[TModel],
        cache: DefinitionCache[TModel],
        render: HintTemplate,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.provider_id = provider_id
        self._client = client
        self._cache = cache
        self._render = render
        self._logger = logger or log_mgr.get_logger().getChild("provider")
        self._shutdown_lock = threading.Lock()
        self._shutdown_result: Optional[bool] = None

    @property
    def cache(self) -> DefinitionCache[TModel]:
        return self._cache

    @property
    def closed(self) -> bool:
        return self._shutdown_result is not None

    def resolve(
        self,
        word: str,
        cancel: Optional[threading.Event] = None,
    ) -> Optional[Hint]:
        """Find a definition for ``word`` and render it as a hint.

        Args:
            word: The hovered word. Case is ignored.
            cancel: Optional cancellation event passed to the client.

        Returns:
            The rendered hint, or ``None`` when no definition is available.

        Raises:
            RuntimeError: If the provider has been shut down.
        """
        if self.closed:
            raise RuntimeError(f"Provider {self.provider_id} has been shut down")

        normalized = normalize_word(word)
        if not normalized:
            return None

        with log_mgr.log_context(provider=self.provider_id, word=normalized):
            start = time.perf_counter()
            cached = self._cache.get(normalized)
            if cached.is_negative:
                self._trace("Cached miss for %r", word, "negative_hit", start)
                return None
            if cached.is_found:
                self._trace("Cache hit for %r", word, "hit", start)
                return self._hint(word, cached.model, from_cache=True)

            result = self._client.fetch(normalized, cancel)
            if result.status is FetchStatus.INDETERMINATE:
                self._trace(
                    "Lookup for %r was indeterminate (%s)",
                    word,
                    "indeterminate",
                    start,
                    result.reason,
                )
                return None
            if result.status is FetchStatus.NEGATIVE:
                self._cache.set(normalized, None)
                self._trace("No definition exists for %r", word, "negative", start)
                return None

            canonical = normalize_word(result.word or "") or normalized
            self._cache.set(canonical, result.model)
            if canonical != normalized:
                self._cache.alias(normalized, canonical)
            self._trace("Fetched definition for %r", word, "fetched", start)
            return self._hint(word, result.model, from_cache=False)

    def _hint(self, word: str, model: TModel, *, from_cache: bool) -> Hint:
        return Hint(
            word=word,
            markup=self._render(model, word),
            provider_id=self.provider_id,
            from_cache=from_cache,
        )

    def _trace(self, message: str, word: str, status: str, start: float, *args: object) -> None:
        self._logger.info(
            message,
            word,
            *args,
            extra={
                "event": f"provider.resolve.{status}",
                "status": status,
                "duration_ms": round((time.perf_counter() - start) * 1000.0, 2),
            },
        )

    def clear(self) -> None:
        """Forget every in-memory definition."""
        self._cache.clear()

    def clear_cache(self) -> None:
        """Delete the persisted cache file."""
        self._cache.clear_cache()

    def shutdown(self) -> bool:
        """Flush the cache and release the client. Runs once.

        Returns:
            Whether the cache was written; repeated calls return the first
            call's result without doing any work.
        """
        with self._shutdown_lock:
            if self._shutdown_result is not None:
                return self._shutdown_result
            self._logger.info(
                "%s: Shutting down",
                self.provider_id,
                extra={"event": "provider.shutdown.start"},
            )
            try:
                saved = self._cache.save()
            finally:
                self._client.close()
            self._shutdown_result = saved
            self._logger.info(
                "%s: Shutdown complete",
                self.provider_id,
                extra={"event": "provider.shutdown.complete"},
            )
            return saved

    def __enter__(self) -> "DefinitionProvider[TModel]":
        return self

    def __exit__(self, *args) -> None:
        self.shutdown()


__all__ = ["DefinitionProvider", "Hint", "HintTemplate"]
