"""Generic HTTP client for remote dictionary APIs."""

from __future__ import annotations

import json
import logging
import threading
from typing import Any, Callable, Generic, Optional

import requests

from hoverdict import logging_manager as log_mgr
from hoverdict.definition_cache.models import TModel

from .types import DefinitionRequest, FetchResult

_CHUNK_SIZE = 16 * 1024


def _default_canonical_word(model: Any) -> Optional[str]:
    return None


class DefinitionApiClient(Generic[TModel]):
    """Fetch a word's definition from a remote API with one round trip.

    The provider supplies how a word becomes a request (``to_request``), how
    the decoded JSON body becomes a model (``to_model``) and which spelling
    the source considers canonical (``canonical_word``). The client owns the
    transport, the status-code policy and cancellation.
    """

    def __init__(
        self,
        *,
        to_request: Callable[[str], DefinitionRequest],
        to_model: Callable[[Any], Optional[TModel]],
        canonical_word: Callable[[TModel], Optional[str]] = _default_canonical_word,
        session: Optional[requests.Session] = None,
        timeout_seconds: float = 10.0,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """Initialize the client.

        Args:
            to_request: Builds the HTTP request for a normalized word.
            to_model: Maps the decoded JSON body to a model; returning
                ``None`` means the source has no definition for the word.
            canonical_word: Returns the headword of a model.
            session: Optional requests session for connection pooling.
            timeout_seconds: Connect/read timeout for each request.
            logger: Logger override.
        """
        self._to_request = to_request
        self._to_model = to_model
        self._canonical_word = canonical_word
        self._session = session or requests.Session()
        self._owns_session = session is None
        self._timeout = timeout_seconds
        self._logger = logger or log_mgr.get_logger().getChild("clients")

    def fetch(
        self,
        word: str,
        cancel: Optional[threading.Event] = None,
    ) -> FetchResult[TModel]:
        """Look up ``word`` and classify the outcome.

        Args:
            word: The word to look up.
            cancel: Optional event; once set, the lookup is abandoned at the
                next network boundary.

        Returns:
            FOUND with the model and canonical word; NEGATIVE when the source
            answers 404 or has no usable definition; INDETERMINATE for any
            other failure or cancellation. Never raises for these conditions.
        """
        if cancel is not None and cancel.is_set():
            return FetchResult.indeterminate("cancelled")

        request = self._to_request(word)
        self._logger.debug(
            "Fetching definition for %s",
            word,
            extra={"event": "clients.fetch.request", "url": request.url},
        )

        try:
            response = self._session.get(
                request.url,
                params=request.params,
                headers={"Accept": "application/json", **request.headers},
                timeout=self._timeout,
                stream=True,
            )
        except requests.RequestException as exc:
            return self._failed(word, cancel, f"transport error: {exc}")

        try:
            if response.status_code == 404:
                self._logger.info(
                    "No definition exists for %s",
                    word,
                    extra={"event": "clients.fetch.not_found", "status_code": 404},
                )
                return FetchResult.negative()
            if not 200 <= response.status_code < 300:
                return self._failed(
                    word,
                    cancel,
                    f"HTTP error {response.status_code}: {response.reason}",
                )

            body = bytearray()
            for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                if cancel is not None and cancel.is_set():
                    return FetchResult.indeterminate("cancelled")
                body.extend(chunk)
        except requests.RequestException as exc:
            return self._failed(word, cancel, f"transport error: {exc}")
        finally:
            response.close()

        if cancel is not None and cancel.is_set():
            return FetchResult.indeterminate("cancelled")

        try:
            payload = json.loads(bytes(body))
        except ValueError as exc:
            return self._failed(word, cancel, f"malformed response: {exc}")

        try:
            model = self._to_model(payload)
        except Exception as exc:
            return self._failed(word, cancel, f"unexpected response shape: {exc}")

        if model is None:
            return FetchResult.negative()
        return FetchResult.found(model, self._canonical_word(model))

    def _failed(
        self,
        word: str,
        cancel: Optional[threading.Event],
        reason: str,
    ) -> FetchResult[TModel]:
        if cancel is not None and cancel.is_set():
            return FetchResult.indeterminate("cancelled")
        self._logger.warning(
            "Error looking up %s: %s",
            word,
            reason,
            extra={"event": "clients.fetch.error"},
        )
        return FetchResult.indeterminate(reason)

    def close(self) -> None:
        """Release resources."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "DefinitionApiClient[TModel]":
        return self

    def __exit__(self, *args) -> None:
        self.close()


__all__ = ["DefinitionApiClient"]
