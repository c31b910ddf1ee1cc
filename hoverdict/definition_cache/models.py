"""Data models for the definition cache.

A cache key maps to exactly one of three entry variants: a resolved
definition (:class:`Found`), a redirect to the canonical spelling
(:class:`Alias`), or a confirmed absence (:class:`Negative`).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar, Union

TModel = TypeVar("TModel")


@dataclass(frozen=True, slots=True)
class Found(Generic[TModel]):
    """A fully resolved definition payload."""

    model: TModel


@dataclass(frozen=True, slots=True)
class Alias:
    """Redirects a spelling variant to the entry stored under ``target``."""

    target: str


@dataclass(frozen=True, slots=True)
class Negative:
    """A prior lookup confirmed that no definition exists."""


NEGATIVE = Negative()

CacheEntry = Union[Found[Any], Alias, Negative]


class CacheStatus(str, Enum):
    """Outcome of a cache read."""

    FOUND = "found"
    NEGATIVE = "negative"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class CacheLookup(Generic[TModel]):
    """Result of :meth:`DefinitionCache.get` after alias resolution."""

    status: CacheStatus
    model: Optional[TModel] = None

    @property
    def is_found(self) -> bool:
        return self.status is CacheStatus.FOUND

    @property
    def is_negative(self) -> bool:
        return self.status is CacheStatus.NEGATIVE

    @property
    def is_unknown(self) -> bool:
        return self.status is CacheStatus.UNKNOWN


UNKNOWN_LOOKUP: CacheLookup[Any] = CacheLookup(CacheStatus.UNKNOWN)
NEGATIVE_LOOKUP: CacheLookup[Any] = CacheLookup(CacheStatus.NEGATIVE)


def _identity(value: Any) -> Any:
    return value


@dataclass(frozen=True, slots=True)
class ModelCodec(Generic[TModel]):
    """Hooks translating an opaque model to and from JSON-compatible data."""

    dump: Callable[[TModel], Any] = _identity
    load: Callable[[Any], TModel] = _identity


__all__ = [
    "Alias",
    "CacheEntry",
    "CacheLookup",
    "CacheStatus",
    "Found",
    "ModelCodec",
    "NEGATIVE",
    "NEGATIVE_LOOKUP",
    "Negative",
    "TModel",
    "UNKNOWN_LOOKUP",
]
