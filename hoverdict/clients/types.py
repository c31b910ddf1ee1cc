"""Result and request types shared by definition API clients."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, Optional

from hoverdict.definition_cache.models import TModel


class FetchStatus(str, Enum):
    """Outcome of a single remote lookup."""

    FOUND = "found"  # Definition retrieved
    NEGATIVE = "negative"  # Source confirmed the word does not exist
    INDETERMINATE = "indeterminate"  # Failed or cancelled; never cached


@dataclass(frozen=True, slots=True)
class FetchResult(Generic[TModel]):
    """Tri-state result of :meth:`DefinitionApiClient.fetch`."""

    status: FetchStatus
    model: Optional[TModel] = None
    word: Optional[str] = None
    """Canonical word reported by the source (FOUND only)."""
    reason: Optional[str] = None
    """Why the lookup was indeterminate, for logging."""

    @classmethod
    def found(cls, model: TModel, word: Optional[str] = None) -> "FetchResult[TModel]":
        return cls(FetchStatus.FOUND, model=model, word=word)

    @classmethod
    def negative(cls) -> "FetchResult[TModel]":
        return cls(FetchStatus.NEGATIVE)

    @classmethod
    def indeterminate(cls, reason: str) -> "FetchResult[TModel]":
        return cls(FetchStatus.INDETERMINATE, reason=reason)


@dataclass(slots=True)
class DefinitionRequest:
    """HTTP GET request description produced by a provider for one word."""

    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    params: Optional[Dict[str, Any]] = None


__all__ = ["DefinitionRequest", "FetchResult", "FetchStatus"]
