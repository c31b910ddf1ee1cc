"""Tests for the generic remote definition client."""

from __future__ import annotations

import json
import threading

import pytest
import requests

from hoverdict.clients import DefinitionApiClient, DefinitionRequest, FetchStatus

pytestmark = pytest.mark.clients


def _client(session, **overrides):
    options = {
        "to_request": lambda word: DefinitionRequest(url=f"https://dict.example/{word}"),
        "to_model": lambda payload: payload or None,
        "canonical_word": lambda model: model.get("word") if isinstance(model, dict) else None,
        "session": session,
        "timeout_seconds": 3.5,
    }
    options.update(overrides)
    return DefinitionApiClient(**options)


def _json_body(payload) -> bytes:
    return json.dumps(payload).encode("utf-8")


def _fetch_errors(caplog):
    return [
        record
        for record in caplog.records
        if getattr(record, "event", "") == "clients.fetch.error"
    ]


def test_found_returns_model_and_canonical_word(http_fakes):
    response = http_fakes.Response(body=_json_body({"word": "run", "senses": 3}))
    session = http_fakes.Session(response)

    result = _client(session).fetch("running")

    assert result.status is FetchStatus.FOUND
    assert result.model == {"word": "run", "senses": 3}
    assert result.word == "run"
    assert response.closed is True

    (call,) = session.calls
    assert call["url"] == "https://dict.example/running"
    assert call["timeout"] == 3.5
    assert call["stream"] is True
    assert call["headers"]["Accept"] == "application/json"


def test_request_headers_and_params_are_forwarded(http_fakes):
    session = http_fakes.Session(http_fakes.Response(body=_json_body({"word": "x"})))
    client = _client(
        session,
        to_request=lambda word: DefinitionRequest(
            url="https://dict.example/lookup",
            headers={"X-Key": "secret"},
            params={"q": word},
        ),
    )

    client.fetch("x")

    (call,) = session.calls
    assert call["headers"] == {"Accept": "application/json", "X-Key": "secret"}
    assert call["params"] == {"q": "x"}


def test_body_is_reassembled_from_chunks(http_fakes):
    response = http_fakes.Response(body=_json_body({"word": "chunked"}), chunk_size=4)

    result = _client(http_fakes.Session(response)).fetch("chunked")

    assert result.model == {"word": "chunked"}
    assert response.chunks_read > 1


def test_not_found_is_negative(http_fakes, hoverdict_caplog):
    response = http_fakes.Response(status_code=404, reason="Not Found")

    result = _client(http_fakes.Session(response)).fetch("xyzzy")

    assert result.status is FetchStatus.NEGATIVE
    assert result.model is None
    assert response.closed is True
    assert _fetch_errors(hoverdict_caplog) == []


@pytest.mark.parametrize(
    "status_code, reason",
    [
        (429, "Too Many Requests"),
        (500, "Internal Server Error"),
        (503, "Service Unavailable"),
        (401, "Unauthorized"),
    ],
)
def test_other_http_errors_are_indeterminate(http_fakes, hoverdict_caplog, status_code, reason):
    response = http_fakes.Response(status_code=status_code, reason=reason)

    result = _client(http_fakes.Session(response)).fetch("cat")

    assert result.status is FetchStatus.INDETERMINATE
    assert str(status_code) in result.reason
    assert response.closed is True
    assert len(_fetch_errors(hoverdict_caplog)) == 1


def test_transport_error_is_indeterminate(http_fakes, hoverdict_caplog):
    session = http_fakes.Session(requests.ConnectionError("connection refused"))

    result = _client(session).fetch("cat")

    assert result.status is FetchStatus.INDETERMINATE
    assert "connection refused" in result.reason
    assert len(_fetch_errors(hoverdict_caplog)) == 1


def test_timeout_is_indeterminate(http_fakes):
    session = http_fakes.Session(requests.Timeout("read timed out"))

    assert _client(session).fetch("cat").status is FetchStatus.INDETERMINATE


def test_malformed_json_is_indeterminate(http_fakes, hoverdict_caplog):
    response = http_fakes.Response(body=b"<html>oops</html>")

    result = _client(http_fakes.Session(response)).fetch("cat")

    assert result.status is FetchStatus.INDETERMINATE
    assert "malformed" in result.reason
    assert len(_fetch_errors(hoverdict_caplog)) == 1


def test_to_model_error_is_indeterminate(http_fakes):
    def _to_model(payload):
        raise ValueError("unexpected shape")

    response = http_fakes.Response(body=_json_body({"word": "cat"}))

    result = _client(http_fakes.Session(response), to_model=_to_model).fetch("cat")

    assert result.status is FetchStatus.INDETERMINATE
    assert "unexpected shape" in result.reason


def test_to_model_returning_none_is_negative(http_fakes):
    response = http_fakes.Response(body=_json_body([]))

    result = _client(http_fakes.Session(response)).fetch("cat")

    assert result.status is FetchStatus.NEGATIVE


def test_cancelled_before_start_makes_no_request(http_fakes):
    session = http_fakes.Session()
    cancel = threading.Event()
    cancel.set()

    result = _client(session).fetch("cat", cancel)

    assert result.status is FetchStatus.INDETERMINATE
    assert session.calls == []


class _CancellingResponse:
    """Streamed response that trips ``cancel`` once the first chunk is consumed."""

    status_code = 200
    reason = "OK"

    def __init__(self, cancel: threading.Event) -> None:
        self._cancel = cancel
        self.closed = False
        self.chunks_read = 0

    def iter_content(self, chunk_size: int = 1):
        for index, chunk in enumerate((b'{"word"', b': "cat"', b"}")):
            if index == 1:
                self._cancel.set()
            self.chunks_read += 1
            yield chunk

    def close(self) -> None:
        self.closed = True


def test_cancelled_mid_stream_abandons_response_quietly(http_fakes, hoverdict_caplog):
    cancel = threading.Event()
    response = _CancellingResponse(cancel)

    result = _client(http_fakes.Session(response)).fetch("cat", cancel)

    assert result.status is FetchStatus.INDETERMINATE
    assert result.reason == "cancelled"
    assert response.chunks_read == 2
    assert response.closed is True
    assert _fetch_errors(hoverdict_caplog) == []


def test_failure_after_cancellation_is_not_logged(http_fakes, hoverdict_caplog):
    cancel = threading.Event()

    class _Session(http_fakes.Session):
        def get(self, url, **kwargs):
            cancel.set()
            raise requests.ConnectionError("aborted")

    result = _client(_Session()).fetch("cat", cancel)

    assert result.status is FetchStatus.INDETERMINATE
    assert result.reason == "cancelled"
    assert _fetch_errors(hoverdict_caplog) == []


def test_close_only_closes_owned_session(http_fakes):
    session = http_fakes.Session()

    with _client(session):
        pass

    assert session.closed is False
