"""In-memory definition cache with alias indirection and disk persistence.

The whole cache lives in memory for the session; the backing file only
carries entries across sessions. Several sessions may share one file, so
:meth:`DefinitionCache.save` first merges entries other sessions wrote
since this one loaded, then replaces the file with the merged set.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Dict, Generic, List, Optional, Tuple

from hoverdict import logging_manager as log_mgr

from .codec import RecordParseError, read_records, write_records
from .models import (
    NEGATIVE,
    NEGATIVE_LOOKUP,
    UNKNOWN_LOOKUP,
    Alias,
    CacheEntry,
    CacheLookup,
    CacheStatus,
    Found,
    ModelCodec,
    Negative,
    TModel,
)
from .normalization import normalize_word

logger = log_mgr.get_logger().getChild("definition_cache")

# Aliases written by the lookup orchestrator are a single hop; anything
# longer than this is treated as corrupt.
MAX_ALIAS_HOPS = 8


class DefinitionCache(Generic[TModel]):
    """Word -> definition cache keyed by normalized word.

    Attributes:
        dirty: True iff the mapping changed since the last successful
            load or save.
    """

    def __init__(
        self,
        *,
        entries: Optional[Dict[str, CacheEntry]] = None,
        cache_path: Optional[Path] = None,
        model_codec: Optional[ModelCodec[TModel]] = None,
    ) -> None:
        """Initialize the cache.

        Args:
            entries: Initial entries keyed by normalized word.
            cache_path: Backing file; ``None`` keeps the cache memory-only.
            model_codec: Hooks converting models to and from JSON data.
        """
        self._entries: Dict[str, CacheEntry] = dict(entries or {})
        self._cache_path = Path(cache_path) if cache_path is not None else None
        self._codec: ModelCodec[TModel] = model_codec or ModelCodec()
        self._lock = threading.RLock()
        self.dirty = False

    @property
    def cache_path(self) -> Optional[Path]:
        """Return the backing file path, if any."""
        return self._cache_path

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, word: object) -> bool:
        if not isinstance(word, str):
            return False
        key = normalize_word(word)
        with self._lock:
            return key in self._entries

    def items(self) -> List[Tuple[str, CacheEntry]]:
        """Return a snapshot of the stored ``(key, entry)`` pairs."""
        with self._lock:
            return list(self._entries.items())

    def get(self, word: str) -> CacheLookup[TModel]:
        """Look up ``word``, following aliases to the canonical entry.

        Returns:
            A :class:`CacheLookup` whose status is FOUND (with the model),
            NEGATIVE, or UNKNOWN when nothing usable is cached.
        """
        key = normalize_word(word)
        visited: List[str] = []
        with self._lock:
            entry = self._entries.get(key)
            while isinstance(entry, Alias):
                visited.append(key)
                key = entry.target
                if key in visited or len(visited) > MAX_ALIAS_HOPS:
                    self._log_alias_anomaly(word, visited + [key], "alias cycle")
                    return UNKNOWN_LOOKUP
                entry = self._entries.get(key)
                if entry is None:
                    self._log_alias_anomaly(word, visited + [key], "dangling alias")
                    return UNKNOWN_LOOKUP

        if isinstance(entry, Found):
            return CacheLookup(CacheStatus.FOUND, entry.model)
        if isinstance(entry, Negative):
            return NEGATIVE_LOOKUP
        return UNKNOWN_LOOKUP

    def set(self, word: str, model: Optional[TModel]) -> None:
        """Store ``model`` under ``word``; ``None`` records a negative entry."""
        key = normalize_word(word)
        entry: CacheEntry = NEGATIVE if model is None else Found(model)
        with self._lock:
            self._entries[key] = entry
            self.dirty = True

    def alias(self, word: str, canonical_word: str) -> None:
        """Redirect ``word`` to the entry stored under ``canonical_word``.

        Raises:
            ValueError: If both words normalize to the same key.
        """
        key = normalize_word(word)
        target = normalize_word(canonical_word)
        if key == target:
            raise ValueError(f"Refusing to alias {word!r} to itself")
        with self._lock:
            self._entries[key] = Alias(target)
            self.dirty = True

    def clear(self) -> None:
        """Drop every in-memory entry. The backing file is left untouched."""
        with self._lock:
            self._entries.clear()
            self.dirty = True

    def clear_cache(self) -> None:
        """Delete the backing file if it exists."""
        if self._cache_path is None:
            return
        try:
            self._cache_path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning(
                "Failed to delete definition cache %s: %s",
                self._cache_path,
                exc,
                extra={"event": "definition_cache.clear_error"},
            )
            return
        logger.info(
            "Deleted definition cache file %s",
            self._cache_path,
            extra={"event": "definition_cache.cleared"},
        )

    def refresh(self) -> int:
        """Merge entries from the backing file that are not in memory.

        In-memory values always win for keys present in both. Never raises:
        a missing file means nothing to merge, and read or parse failures are
        logged and leave memory unchanged.

        Returns:
            Number of entries merged from disk.
        """
        if self._cache_path is None:
            return 0
        try:
            records = list(read_records(self._cache_path, load=self._codec.load))
        except FileNotFoundError:
            return 0
        except (OSError, RecordParseError, UnicodeDecodeError) as exc:
            logger.warning(
                "Error refreshing definition cache from %s: %s",
                self._cache_path,
                exc,
                extra={"event": "definition_cache.refresh_error"},
            )
            return 0

        merged = 0
        with self._lock:
            for key, entry in records:
                if key not in self._entries:
                    self._entries[key] = entry
                    merged += 1
        if merged:
            logger.debug(
                "Merged %d entries from definition cache %s",
                merged,
                self._cache_path,
                extra={"event": "definition_cache.refreshed"},
            )
        return merged

    def save(self) -> bool:
        """Merge with the on-disk cache and replace the file.

        Skipped unless a backing path is configured, the cache is non-empty
        and there are unsaved changes. Write failures are logged and leave
        ``dirty`` set so a later save can retry.

        Returns:
            True if the file was written.
        """
        if self._cache_path is None or not self._entries or not self.dirty:
            return False

        self.refresh()

        with self._lock:
            snapshot = list(self._entries.items())
        try:
            self._cache_path.parent.mkdir(parents=True, exist_ok=True)
            count = write_records(self._cache_path, snapshot, dump=self._codec.dump)
        except Exception as exc:
            logger.error(
                "Error saving definition cache to %s: %s",
                self._cache_path,
                exc,
                extra={"event": "definition_cache.save_error"},
            )
            return False

        self.dirty = False
        logger.info(
            "Saved %d entries to definition cache at %s",
            count,
            self._cache_path,
            extra={"event": "definition_cache.saved"},
        )
        return True

    @classmethod
    def load(
        cls,
        cache_path: Path,
        *,
        model_codec: Optional[ModelCodec[TModel]] = None,
    ) -> "DefinitionCache[TModel]":
        """Load a cache from ``cache_path``.

        A missing file yields an empty cache. Any other failure is logged and
        also yields an empty cache bound to ``cache_path``, so lookups keep
        working without the persisted entries.
        """
        cache_path = Path(cache_path)
        codec: ModelCodec[TModel] = model_codec or ModelCodec()
        entries: Dict[str, CacheEntry] = {}
        try:
            for key, entry in read_records(cache_path, load=codec.load):
                entries[key] = entry
        except FileNotFoundError:
            return cls(cache_path=cache_path, model_codec=codec)
        except (OSError, RecordParseError, UnicodeDecodeError) as exc:
            logger.warning(
                "Error loading definition cache from %s: %s",
                cache_path,
                exc,
                extra={"event": "definition_cache.load_error"},
            )
            return cls(cache_path=cache_path, model_codec=codec)

        logger.info(
            "Loaded %d entries from definition cache at %s",
            len(entries),
            cache_path,
            extra={"event": "definition_cache.loaded"},
        )
        return cls(entries=entries, cache_path=cache_path, model_codec=codec)

    def _log_alias_anomaly(self, word: str, chain: List[str], reason: str) -> None:
        logger.warning(
            "Ignoring %s while resolving %r: %s",
            reason,
            word,
            " -> ".join(chain),
            extra={"event": "definition_cache.alias_anomaly"},
        )


__all__ = ["DefinitionCache", "MAX_ALIAS_HOPS"]
