"""Free Dictionary API (dictionaryapi.dev) models and client factory."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from hoverdict import logging_manager as log_mgr
from hoverdict.config_manager.constants import DEFAULT_FREE_DICTIONARY_URL
from hoverdict.definition_cache.models import ModelCodec

from .base import DefinitionApiClient
from .types import DefinitionRequest

PROVIDER_ID = "free-dictionary"


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if isinstance(item, str)]


def _optional_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


@dataclass(slots=True)
class Phonetic:
    """A phonetic transcription with optional pronunciation audio."""

    text: Optional[str] = None
    audio: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.text is not None:
            payload["text"] = self.text
        if self.audio is not None:
            payload["audio"] = self.audio
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Phonetic":
        return cls(text=_optional_str(data.get("text")), audio=_optional_str(data.get("audio")))


@dataclass(slots=True)
class Definition:
    """A single sense of a word."""

    definition: str
    example: Optional[str] = None
    synonyms: List[str] = field(default_factory=list)
    antonyms: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "definition": self.definition,
            "synonyms": list(self.synonyms),
            "antonyms": list(self.antonyms),
        }
        if self.example is not None:
            payload["example"] = self.example
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Definition":
        return cls(
            definition=str(data.get("definition", "")),
            example=_optional_str(data.get("example")),
            synonyms=_string_list(data.get("synonyms")),
            antonyms=_string_list(data.get("antonyms")),
        )


@dataclass(slots=True)
class Meaning:
    """Definitions of a word for one part of speech."""

    part_of_speech: str
    definitions: List[Definition] = field(default_factory=list)
    synonyms: List[str] = field(default_factory=list)
    antonyms: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "partOfSpeech": self.part_of_speech,
            "definitions": [item.to_dict() for item in self.definitions],
            "synonyms": list(self.synonyms),
            "antonyms": list(self.antonyms),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Meaning":
        return cls(
            part_of_speech=str(data.get("partOfSpeech", "")),
            definitions=[
                Definition.from_dict(item)
                for item in data.get("definitions") or []
                if isinstance(item, dict)
            ],
            synonyms=_string_list(data.get("synonyms")),
            antonyms=_string_list(data.get("antonyms")),
        )


@dataclass(slots=True)
class DictionaryEntry:
    """The complete dictionary entry for one headword."""

    word: str
    phonetic: Optional[str] = None
    phonetics: List[Phonetic] = field(default_factory=list)
    origin: Optional[str] = None
    meanings: List[Meaning] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"word": self.word}
        if self.phonetic is not None:
            payload["phonetic"] = self.phonetic
        if self.phonetics:
            payload["phonetics"] = [item.to_dict() for item in self.phonetics]
        if self.origin is not None:
            payload["origin"] = self.origin
        payload["meanings"] = [item.to_dict() for item in self.meanings]
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DictionaryEntry":
        if not isinstance(data, dict):
            raise ValueError(f"Expected a dictionary entry object, got {type(data).__name__}")
        word = data.get("word")
        if not isinstance(word, str) or not word:
            raise ValueError("Dictionary entry is missing its headword")
        return cls(
            word=word,
            phonetic=_optional_str(data.get("phonetic")),
            phonetics=[
                Phonetic.from_dict(item)
                for item in data.get("phonetics") or []
                if isinstance(item, dict)
            ],
            origin=_optional_str(data.get("origin")),
            meanings=[
                Meaning.from_dict(item)
                for item in data.get("meanings") or []
                if isinstance(item, dict)
            ],
        )


def load_entries(data: Any) -> List[DictionaryEntry]:
    """Build the model from its JSON form (API response or cache payload)."""
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of dictionary entries, got {type(data).__name__}")
    return [DictionaryEntry.from_dict(item) for item in data]


def dump_entries(entries: List[DictionaryEntry]) -> List[Dict[str, Any]]:
    """Return the JSON form of the model."""
    return [entry.to_dict() for entry in entries]


def parse_response(payload: Any) -> Optional[List[DictionaryEntry]]:
    """Map an API response body to the model; an empty list means no definition."""
    entries = load_entries(payload)
    return entries or None


def canonical_word(entries: List[DictionaryEntry]) -> Optional[str]:
    """Return the headword the API reported for the lookup."""
    return entries[0].word if entries else None


def build_request(word: str, *, base_url: str = DEFAULT_FREE_DICTIONARY_URL) -> DefinitionRequest:
    return DefinitionRequest(url=f"{base_url.rstrip('/')}/{quote(word, safe='')}")


MODEL_CODEC: ModelCodec[List[DictionaryEntry]] = ModelCodec(dump=dump_entries, load=load_entries)


def create_client(
    *,
    base_url: str = DEFAULT_FREE_DICTIONARY_URL,
    session: Optional[requests.Session] = None,
    timeout_seconds: float = 10.0,
    logger: Optional[logging.Logger] = None,
) -> DefinitionApiClient[List[DictionaryEntry]]:
    """Return a client for the Free Dictionary API. No API key is required."""
    return DefinitionApiClient(
        to_request=lambda word: build_request(word, base_url=base_url),
        to_model=parse_response,
        canonical_word=canonical_word,
        session=session,
        timeout_seconds=timeout_seconds,
        logger=logger or log_mgr.get_logger().getChild(f"clients.{PROVIDER_ID}"),
    )


__all__ = [
    "MODEL_CODEC",
    "PROVIDER_ID",
    "Definition",
    "DictionaryEntry",
    "Meaning",
    "Phonetic",
    "build_request",
    "canonical_word",
    "create_client",
    "dump_entries",
    "load_entries",
    "parse_response",
]
