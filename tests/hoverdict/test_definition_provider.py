from __future__ import annotations

import json
import threading
from typing import Any, List, Optional

import pytest

from hoverdict import logging_manager as log_mgr
from hoverdict.clients import DefinitionApiClient, DefinitionRequest, FetchResult
from hoverdict.definition_cache import Alias, DefinitionCache
from hoverdict.provider import DefinitionProvider, Hint

pytestmark = pytest.mark.provider


class _ScriptedClient:
    """Client double returning queued fetch results."""

    def __init__(self, *results: FetchResult) -> None:
        self._results: List[FetchResult] = list(results)
        self.calls: List[tuple] = []
        self.close_calls = 0

    def fetch(self, word: str, cancel: Optional[threading.Event] = None) -> FetchResult:
        self.calls.append((word, cancel))
        return self._results.pop(0)

    def close(self) -> None:
        self.close_calls += 1


def _render(model: Any, hover_word: str) -> str:
    return f"{hover_word}: {model['definition']}"


def _provider(client, cache: Optional[DefinitionCache] = None) -> DefinitionProvider:
    return DefinitionProvider(
        provider_id="test",
        client=client,
        cache=cache if cache is not None else DefinitionCache(),
        render=_render,
    )


def _events(caplog) -> List[str]:
    return [getattr(record, "event", "") for record in caplog.records]


def test_found_definition_is_cached_and_rendered():
    client = _ScriptedClient(FetchResult.found({"definition": "a feline"}, "cat"))
    provider = _provider(client)

    hint = provider.resolve("Cat")

    assert hint == Hint(word="Cat", markup="Cat: a feline", provider_id="test", from_cache=False)
    assert client.calls[0][0] == "cat"
    assert provider.cache.get("cat").model == {"definition": "a feline"}


def test_cache_hit_skips_client():
    cache = DefinitionCache()
    cache.set("cat", {"definition": "a feline"})
    client = _ScriptedClient()
    provider = _provider(client, cache)

    hint = provider.resolve("CAT")

    assert hint.from_cache is True
    assert hint.markup == "CAT: a feline"
    assert client.calls == []


def test_cached_negative_short_circuits():
    cache = DefinitionCache()
    cache.set("xyzzy", None)
    client = _ScriptedClient()

    assert _provider(client, cache).resolve("xyzzy") is None
    assert client.calls == []


def test_negative_result_is_cached():
    client = _ScriptedClient(FetchResult.negative())
    provider = _provider(client)

    assert provider.resolve("xyzzy") is None
    assert provider.resolve("Xyzzy") is None

    assert len(client.calls) == 1
    assert provider.cache.get("xyzzy").is_negative


def test_indeterminate_result_is_not_cached_and_retried():
    client = _ScriptedClient(
        FetchResult.indeterminate("HTTP error 503"),
        FetchResult.found({"definition": "a canine"}, "dog"),
    )
    provider = _provider(client)

    assert provider.resolve("dog") is None
    assert "dog" not in provider.cache
    assert provider.cache.dirty is False

    hint = provider.resolve("dog")

    assert hint is not None
    assert len(client.calls) == 2


def test_canonical_word_gets_alias_from_queried_word():
    client = _ScriptedClient(FetchResult.found({"definition": "move swiftly"}, "Run"))
    provider = _provider(client)

    hint = provider.resolve("Running")

    assert hint.markup == "Running: move swiftly"
    entries = dict(provider.cache.items())
    assert entries["running"] == Alias("run")
    assert provider.cache.get("run").model == {"definition": "move swiftly"}


def test_missing_canonical_word_stores_under_query():
    client = _ScriptedClient(FetchResult.found({"definition": "x"}))
    provider = _provider(client)

    provider.resolve("thing")

    assert [key for key, _ in provider.cache.items()] == ["thing"]


def test_blank_word_is_ignored():
    client = _ScriptedClient()

    assert _provider(client).resolve("  ...  ") is None
    assert client.calls == []


def test_cancel_event_reaches_client():
    cancel = threading.Event()
    client = _ScriptedClient(FetchResult.indeterminate("cancelled"))

    _provider(client).resolve("cat", cancel)

    assert client.calls == [("cat", cancel)]


def test_resolve_emits_trace_events(hoverdict_caplog):
    client = _ScriptedClient(
        FetchResult.found({"definition": "a feline"}, "cat"),
        FetchResult.negative(),
        FetchResult.indeterminate("boom"),
    )
    provider = _provider(client)

    provider.resolve("cat")
    provider.resolve("cat")
    provider.resolve("xyzzy")
    provider.resolve("xyzzy")
    provider.resolve("dog")

    assert [event for event in _events(hoverdict_caplog) if event.startswith("provider.resolve")] == [
        "provider.resolve.fetched",
        "provider.resolve.hit",
        "provider.resolve.negative",
        "provider.resolve.negative_hit",
        "provider.resolve.indeterminate",
    ]
    traced = [r for r in hoverdict_caplog.records if getattr(r, "event", "").startswith("provider.resolve")]
    assert all(record.duration_ms >= 0 for record in traced)
    assert [record.status for record in traced][-1] == "indeterminate"


def test_resolve_scopes_log_context_to_the_lookup():
    seen = []

    class _Client(_ScriptedClient):
        def fetch(self, word, cancel=None):
            seen.append(log_mgr.get_log_context())
            return super().fetch(word, cancel)

    provider = _provider(_Client(FetchResult.negative()))

    provider.resolve("Cat")

    assert seen == [{"provider": "test", "word": "cat"}]
    assert log_mgr.get_log_context() == {}


def test_shutdown_saves_once_and_closes_client(tmp_path):
    cache = DefinitionCache(cache_path=tmp_path / "test.cache.ndjson")
    client = _ScriptedClient(FetchResult.found({"definition": "a feline"}, "cat"))
    provider = _provider(client, cache)
    provider.resolve("cat")

    assert provider.shutdown() is True
    assert provider.shutdown() is True

    assert client.close_calls == 1
    assert provider.closed is True
    assert (tmp_path / "test.cache.ndjson").exists()


def test_resolve_after_shutdown_raises():
    provider = _provider(_ScriptedClient())
    with provider:
        pass

    with pytest.raises(RuntimeError):
        provider.resolve("cat")


def test_clear_and_clear_cache(tmp_path):
    path = tmp_path / "test.cache.ndjson"
    path.write_text('["cat", {"definition": "a feline"}]\n', encoding="utf-8")
    provider = _provider(_ScriptedClient(), DefinitionCache.load(path))

    provider.clear()
    provider.clear_cache()

    assert len(provider.cache) == 0
    assert not path.exists()


def test_inflected_lookups_share_one_request_across_sessions(tmp_path, http_fakes):
    """One request for run/RUN, and a fresh session reading the file needs none."""
    path = tmp_path / "test.cache.ndjson"
    body = json.dumps({"word": "run", "definition": "move swiftly"}).encode("utf-8")
    session = http_fakes.Session(http_fakes.Response(body=body))

    def _client():
        return DefinitionApiClient(
            to_request=lambda word: DefinitionRequest(url=f"https://dict.example/{word}"),
            to_model=lambda payload: payload,
            canonical_word=lambda model: model["word"],
            session=session,
        )

    with _provider(_client(), DefinitionCache.load(path)) as first:
        assert first.resolve("run").from_cache is False
        assert first.resolve("RUN").from_cache is True

    with _provider(_client(), DefinitionCache.load(path)) as second:
        assert second.resolve("Run").markup == "Run: move swiftly"

    assert len(session.calls) == 1
