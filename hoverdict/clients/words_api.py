"""WordsAPI models and client factory."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from hoverdict import logging_manager as log_mgr
from hoverdict.config_manager.constants import DEFAULT_WORDS_API_URL
from hoverdict.definition_cache.models import ModelCodec

from .base import DefinitionApiClient
from .types import DefinitionRequest

PROVIDER_ID = "words-api"
API_KEY_HEADER = "X-Mashape-Key"

# Optional list fields of a WordsAPI result, keyed by their JSON names.
_RESULT_LIST_FIELDS = {
    "synonyms": "synonyms",
    "typeOf": "type_of",
    "hasTypes": "has_types",
    "derivation": "derivation",
    "examples": "examples",
}


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if isinstance(item, str)]


@dataclass(slots=True)
class WordsApiResult:
    """One meaning of a word with its related words."""

    definition: Optional[str] = None
    part_of_speech: Optional[str] = None
    synonyms: List[str] = field(default_factory=list)
    type_of: List[str] = field(default_factory=list)
    has_types: List[str] = field(default_factory=list)
    derivation: List[str] = field(default_factory=list)
    examples: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.definition is not None:
            payload["definition"] = self.definition
        if self.part_of_speech is not None:
            payload["partOfSpeech"] = self.part_of_speech
        for json_name, attr in _RESULT_LIST_FIELDS.items():
            values = getattr(self, attr)
            if values:
                payload[json_name] = list(values)
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WordsApiResult":
        definition = data.get("definition")
        part_of_speech = data.get("partOfSpeech")
        return cls(
            definition=definition if isinstance(definition, str) else None,
            part_of_speech=part_of_speech if isinstance(part_of_speech, str) else None,
            **{attr: _string_list(data.get(json_name)) for json_name, attr in _RESULT_LIST_FIELDS.items()},
        )


@dataclass(slots=True)
class Syllables:
    count: Optional[int] = None
    items: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.count is not None:
            payload["count"] = self.count
        if self.items:
            payload["list"] = list(self.items)
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Syllables":
        count = data.get("count")
        return cls(
            count=int(count) if isinstance(count, (int, float)) else None,
            items=_string_list(data.get("list")),
        )


@dataclass(slots=True)
class Pronunciation:
    all: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"all": self.all} if self.all is not None else {}

    @classmethod
    def from_dict(cls, data: Any) -> "Pronunciation":
        # WordsAPI sometimes returns a bare string instead of an object.
        if isinstance(data, str):
            return cls(all=data)
        value = data.get("all") if isinstance(data, dict) else None
        return cls(all=value if isinstance(value, str) else None)


@dataclass(slots=True)
class WordsApiEntry:
    """The top-level WordsAPI response for a single word."""

    word: str
    results: List[WordsApiResult] = field(default_factory=list)
    syllables: Optional[Syllables] = None
    pronunciation: Optional[Pronunciation] = None
    frequency: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"word": self.word}
        if self.results:
            payload["results"] = [item.to_dict() for item in self.results]
        if self.syllables is not None:
            payload["syllables"] = self.syllables.to_dict()
        if self.pronunciation is not None:
            payload["pronunciation"] = self.pronunciation.to_dict()
        if self.frequency is not None:
            payload["frequency"] = self.frequency
        return payload

    @classmethod
    def from_dict(cls, data: Any) -> "WordsApiEntry":
        if not isinstance(data, dict):
            raise ValueError(f"Expected a WordsAPI object, got {type(data).__name__}")
        word = data.get("word")
        if not isinstance(word, str) or not word:
            raise ValueError("WordsAPI response is missing its word")
        syllables = data.get("syllables")
        pronunciation = data.get("pronunciation")
        frequency = data.get("frequency")
        return cls(
            word=word,
            results=[
                WordsApiResult.from_dict(item)
                for item in data.get("results") or []
                if isinstance(item, dict)
            ],
            syllables=Syllables.from_dict(syllables) if isinstance(syllables, dict) else None,
            pronunciation=(
                Pronunciation.from_dict(pronunciation)
                if isinstance(pronunciation, (dict, str))
                else None
            ),
            frequency=float(frequency) if isinstance(frequency, (int, float)) else None,
        )


def dump_entry(entry: WordsApiEntry) -> Dict[str, Any]:
    return entry.to_dict()


def parse_response(payload: Any) -> Optional[WordsApiEntry]:
    """Map an API response body to the model."""
    return WordsApiEntry.from_dict(payload)


def canonical_word(entry: WordsApiEntry) -> Optional[str]:
    return entry.word


def build_request(
    word: str,
    *,
    api_key: str,
    base_url: str = DEFAULT_WORDS_API_URL,
) -> DefinitionRequest:
    return DefinitionRequest(
        url=f"{base_url.rstrip('/')}/{quote(word, safe='')}",
        headers={API_KEY_HEADER: api_key},
    )


MODEL_CODEC: ModelCodec[WordsApiEntry] = ModelCodec(dump=dump_entry, load=WordsApiEntry.from_dict)


def create_client(
    *,
    api_key: str,
    base_url: str = DEFAULT_WORDS_API_URL,
    session: Optional[requests.Session] = None,
    timeout_seconds: float = 10.0,
    logger: Optional[logging.Logger] = None,
) -> DefinitionApiClient[WordsApiEntry]:
    """Return a client for WordsAPI.

    Raises:
        ValueError: If ``api_key`` is empty.
    """
    if not api_key:
        raise ValueError("WordsAPI requires an API key")
    return DefinitionApiClient(
        to_request=lambda word: build_request(word, api_key=api_key, base_url=base_url),
        to_model=parse_response,
        canonical_word=canonical_word,
        session=session,
        timeout_seconds=timeout_seconds,
        logger=logger or log_mgr.get_logger().getChild(f"clients.{PROVIDER_ID}"),
    )


__all__ = [
    "API_KEY_HEADER",
    "MODEL_CODEC",
    "PROVIDER_ID",
    "Pronunciation",
    "Syllables",
    "WordsApiEntry",
    "WordsApiResult",
    "build_request",
    "canonical_word",
    "create_client",
    "dump_entry",
    "parse_response",
]
