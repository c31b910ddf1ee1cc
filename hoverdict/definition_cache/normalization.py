"""Word normalization and cursor-word extraction for definition lookups."""

from __future__ import annotations

import re
import unicodedata

# Boundary punctuation stripped from a hovered word, including common
# Unicode quotation marks.
_BOUNDARY_PUNCTUATION = ".,;:!?\"'()[]{}«»„“”‟‘‚’‛"

_WORD_BEFORE_RE = re.compile(r"\w*$")
_WORD_AFTER_RE = re.compile(r"^\w*")


def normalize_word(word: str) -> str:
    """Normalize a word into its cache key.

    Applies Unicode NFC normalization, strips whitespace and boundary
    punctuation, then case-folds so ``"Run"``, ``"RUN"`` and ``"run"`` share
    one key.

    Args:
        word: Word to normalize.

    Returns:
        Normalized word form, or an empty string for blank input.
    """
    if not word:
        return ""

    normalized = unicodedata.normalize("NFC", word).strip()
    normalized = normalized.strip(_BOUNDARY_PUNCTUATION).strip()
    return normalized.casefold()


def word_at_position(line_text: str, column: int) -> str:
    """Return the run of word characters touching ``column`` in ``line_text``."""
    column = max(0, min(column, len(line_text)))
    before = _WORD_BEFORE_RE.search(line_text[:column])
    after = _WORD_AFTER_RE.match(line_text[column:])
    return (before.group(0) if before else "") + (after.group(0) if after else "")


__all__ = ["normalize_word", "word_at_position"]
