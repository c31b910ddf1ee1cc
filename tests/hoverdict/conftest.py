from __future__ import annotations

import logging
from types import SimpleNamespace
from typing import Any, Dict, Iterator, List, Optional

import pytest

from hoverdict.config_manager import reset_settings


@pytest.fixture
def hoverdict_caplog(caplog: pytest.LogCaptureFixture) -> Iterator[pytest.LogCaptureFixture]:
    """``caplog`` that also sees records from the ``hoverdict`` logger tree.

    The hoverdict logger sets propagate=False, so caplog (which hooks the
    root logger) won't see child records without temporarily enabling it.
    """
    app_logger = logging.getLogger("hoverdict")
    original = app_logger.propagate
    app_logger.propagate = True
    caplog.set_level(logging.DEBUG, logger="hoverdict")
    try:
        yield caplog
    finally:
        app_logger.propagate = original


@pytest.fixture(autouse=True)
def _reset_active_settings() -> Iterator[None]:
    reset_settings()
    yield
    reset_settings()


class FakeResponse:
    def __init__(
        self,
        *,
        status_code: int = 200,
        body: bytes = b"",
        reason: str = "OK",
        chunk_size: Optional[int] = None,
    ) -> None:
        self.status_code = status_code
        self.reason = reason
        self._body = body
        self._chunk_size = chunk_size
        self.closed = False
        self.chunks_read = 0

    def iter_content(self, chunk_size: int = 1) -> Iterator[bytes]:
        size = self._chunk_size or chunk_size
        for offset in range(0, len(self._body), size):
            self.chunks_read += 1
            yield self._body[offset : offset + size]

    def close(self) -> None:
        self.closed = True


class FakeSession:
    def __init__(self, *responses: Any) -> None:
        self._responses: List[Any] = list(responses)
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        response = self._responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def http_fakes() -> SimpleNamespace:
    """Stand-ins for ``requests`` sessions and streamed responses."""
    return SimpleNamespace(Response=FakeResponse, Session=FakeSession)
