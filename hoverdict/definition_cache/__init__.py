"""Persistent definition cache with alias resolution.

Key Components:
    - DefinitionCache: in-memory word -> entry mapping with dirty tracking
      and merge-on-save persistence
    - Found / Alias / Negative: the three cache entry variants
    - encode_record / decode_record: newline-delimited JSON record codec

Usage Example:
    from hoverdict.definition_cache import DefinitionCache

    cache = DefinitionCache.load(Path("~/.hoverdict/free-dictionary.cache.ndjson"))
    cache.set("cat", model)
    cache.alias("Cats", "cat")
    assert cache.get("CATS").model is model
    cache.save()
"""

from .models import (
    NEGATIVE,
    Alias,
    CacheEntry,
    CacheLookup,
    CacheStatus,
    Found,
    ModelCodec,
    Negative,
)

from .normalization import normalize_word, word_at_position

from .codec import (
    ALIAS_MARKER,
    RecordParseError,
    decode_record,
    encode_record,
    read_records,
    write_records,
)

from .cache import MAX_ALIAS_HOPS, DefinitionCache

__all__ = [
    # Models
    "NEGATIVE",
    "Alias",
    "CacheEntry",
    "CacheLookup",
    "CacheStatus",
    "Found",
    "ModelCodec",
    "Negative",
    # Normalization
    "normalize_word",
    "word_at_position",
    # Codec
    "ALIAS_MARKER",
    "RecordParseError",
    "decode_record",
    "encode_record",
    "read_records",
    "write_records",
    # Cache
    "MAX_ALIAS_HOPS",
    "DefinitionCache",
]
