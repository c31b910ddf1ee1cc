"""Hover hint templates for the bundled dictionary providers.

Templates are pure functions from a provider model to Markdown with inline
HTML, suitable for a hover widget that supports HTML.
"""

from __future__ import annotations

import html
from typing import Iterable, List, Optional, Sequence

from hoverdict.clients.free_dictionary import DictionaryEntry
from hoverdict.clients.words_api import WordsApiEntry


def _escape(value: str) -> str:
    return html.escape(value, quote=False)


def _join_words(words: Iterable[str]) -> str:
    return ", ".join(_escape(word) for word in words)


def _render_free_dictionary_entry(entry: DictionaryEntry, hover_word: Optional[str]) -> str:
    lines: List[str] = []
    heading = f"**{_escape(entry.word)}**"
    phonetic = entry.phonetic or next(
        (item.text for item in entry.phonetics if item.text), None
    )
    if phonetic:
        heading += f" <code>{_escape(phonetic)}</code>"
    if hover_word and hover_word.casefold() != entry.word.casefold():
        heading += f" <em>(from {_escape(hover_word)})</em>"
    lines.append(heading)

    for meaning in entry.meanings:
        lines.append("")
        lines.append(f"*{_escape(meaning.part_of_speech)}*")
        lines.append("")
        for index, definition in enumerate(meaning.definitions, start=1):
            lines.append(f"{index}. {_escape(definition.definition)}")
            if definition.example:
                lines.append(f"   <em>“{_escape(definition.example)}”</em>")
            if definition.synonyms:
                lines.append(f"   Synonyms: {_join_words(definition.synonyms)}")
        if meaning.synonyms:
            lines.append("")
            lines.append(f"Synonyms: {_join_words(meaning.synonyms)}")
        if meaning.antonyms:
            lines.append("")
            lines.append(f"Antonyms: {_join_words(meaning.antonyms)}")

    if entry.origin:
        lines.append("")
        lines.append(f"Origin: {_escape(entry.origin)}")
    return "\n".join(lines)


def render_free_dictionary(
    entries: Sequence[DictionaryEntry],
    hover_word: Optional[str] = None,
) -> str:
    """Render every Free Dictionary entry, separated by horizontal rules."""
    return "\n\n---\n\n".join(
        _render_free_dictionary_entry(entry, hover_word) for entry in entries
    )


def render_words_api(entry: WordsApiEntry, hover_word: Optional[str] = None) -> str:
    """Render a WordsAPI entry grouped by part of speech."""
    lines: List[str] = []
    heading = f"**{_escape(entry.word)}**"
    if entry.pronunciation and entry.pronunciation.all:
        heading += f" <code>/{_escape(entry.pronunciation.all)}/</code>"
    if entry.syllables and entry.syllables.items:
        heading += f" ({_escape('·'.join(entry.syllables.items))})"
    if hover_word and hover_word.casefold() != entry.word.casefold():
        heading += f" <em>(from {_escape(hover_word)})</em>"
    lines.append(heading)

    sections: dict[str, list] = {}
    for result in entry.results:
        sections.setdefault(result.part_of_speech or "other", []).append(result)

    for part_of_speech, results in sections.items():
        lines.append("")
        lines.append(f"*{_escape(part_of_speech)}*")
        lines.append("")
        for index, result in enumerate(results, start=1):
            lines.append(f"{index}. {_escape(result.definition or '')}")
            for example in result.examples:
                lines.append(f"   <em>“{_escape(example)}”</em>")
            if result.synonyms:
                lines.append(f"   Synonyms: {_join_words(result.synonyms)}")
            if result.type_of:
                lines.append(f"   Type of: {_join_words(result.type_of)}")
    return "\n".join(lines)


__all__ = ["render_free_dictionary", "render_words_api"]
