"""Newline-delimited JSON record codec for the definition cache file.

Each line holds one ``[key, payload]`` JSON array. The payload is the
model's JSON form for a found entry, ``null`` for a negative entry, or
``{"$alias": "<word>"}`` for an alias.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, Optional, Tuple

from .models import NEGATIVE, Alias, CacheEntry, Found, Negative

ALIAS_MARKER = "$alias"

Record = Tuple[str, CacheEntry]


class RecordParseError(ValueError):
    """Raised when a cache record line is structurally invalid."""

    def __init__(self, message: str, *, line_number: Optional[int] = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


def _identity(value: Any) -> Any:
    return value


def _is_alias_payload(payload: Any) -> bool:
    return (
        isinstance(payload, dict)
        and len(payload) == 1
        and isinstance(payload.get(ALIAS_MARKER), str)
    )


def encode_record(
    key: str,
    entry: CacheEntry,
    *,
    dump: Callable[[Any], Any] = _identity,
) -> str:
    """Serialize one cache record to a single line (without the newline).

    Args:
        key: Normalized cache key.
        entry: Entry variant to store.
        dump: Converts a found model into JSON-compatible data.

    Returns:
        The JSON text for the record. ``json.dumps`` escapes control
        characters, so the result never contains a raw newline.
    """
    if isinstance(entry, Found):
        payload = dump(entry.model)
    elif isinstance(entry, Alias):
        payload = {ALIAS_MARKER: entry.target}
    elif isinstance(entry, Negative):
        payload = None
    else:
        raise TypeError(f"Unsupported cache entry type: {type(entry)!r}")
    return json.dumps([key, payload], ensure_ascii=False)


def decode_record(
    line: str,
    *,
    load: Callable[[Any], Any] = _identity,
    line_number: Optional[int] = None,
) -> Record:
    """Parse one cache record line.

    Raises:
        RecordParseError: If the line is not a ``[str, payload]`` JSON array
            or the model hook rejects the payload.
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as exc:
        raise RecordParseError(f"invalid JSON ({exc.msg})", line_number=line_number) from exc
    except RecursionError as exc:
        raise RecordParseError("JSON nested too deeply", line_number=line_number) from exc

    if not isinstance(data, list) or len(data) != 2:
        raise RecordParseError("expected a [key, value] array", line_number=line_number)
    key, payload = data
    if not isinstance(key, str):
        raise RecordParseError("record key must be a string", line_number=line_number)

    if payload is None:
        return key, NEGATIVE
    if _is_alias_payload(payload):
        return key, Alias(payload[ALIAS_MARKER])
    try:
        model = load(payload)
    except Exception as exc:
        raise RecordParseError(
            f"invalid definition payload for {key!r}: {exc}", line_number=line_number
        ) from exc
    return key, Found(model)


def read_records(
    path: Path,
    *,
    load: Callable[[Any], Any] = _identity,
) -> Iterator[Record]:
    """Yield records from ``path`` in file order, skipping blank lines.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        RecordParseError: On the first malformed line.
    """
    with open(path, "r", encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            yield decode_record(line, load=load, line_number=line_number)


def write_records(
    path: Path,
    records: Iterable[Record],
    *,
    dump: Callable[[Any], Any] = _identity,
) -> int:
    """Replace ``path`` with ``records`` using an atomic write.

    The records are written to a temporary file beside ``path`` which is then
    moved over the target, so readers never observe a partially written file.

    Returns:
        Number of records written.
    """
    path = Path(path)
    temp_path: Optional[Path] = None
    count = 0
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            temp_path = Path(handle.name)
            for key, entry in records:
                handle.write(encode_record(key, entry, dump=dump))
                handle.write("\n")
                count += 1
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_path, path)
    except Exception:
        if temp_path is not None:
            try:
                temp_path.unlink()
            except OSError:
                pass
        raise
    return count


__all__ = [
    "ALIAS_MARKER",
    "Record",
    "RecordParseError",
    "decode_record",
    "encode_record",
    "read_records",
    "write_records",
]
