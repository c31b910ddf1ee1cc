"""Argument parsing helpers for the hoverdict CLI."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence


def _add_shared_arguments(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    parser.add_argument(
        "--config",
        default=None,
        help=(
            "Path to a configuration override JSON file (defaults to conf/config.local.json "
            "if present)."
        ),
    )
    parser.add_argument("--storage-dir", help="Override the directory holding cache files.")
    parser.add_argument(
        "--no-persist",
        action="store_true",
        help="Keep the definition cache in memory only.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging output.")
    return parser


def _add_provider_argument(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    parser.add_argument(
        "--provider",
        default=None,
        help="Dictionary provider id (free-dictionary or words-api).",
    )
    return parser


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hoverdict",
        description="Look up dictionary definitions with a persistent local cache.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    lookup = subparsers.add_parser("lookup", help="Print the definition hint for a word.")
    lookup.add_argument("word", help="Word to look up.")
    _add_provider_argument(lookup)
    _add_shared_arguments(lookup)

    hover = subparsers.add_parser(
        "hover", help="Print the definition hint for the word at a file position."
    )
    hover.add_argument("file", help="Text file containing the word.")
    hover.add_argument("line", type=int, help="1-based line number.")
    hover.add_argument("column", type=int, help="0-based column within the line.")
    _add_provider_argument(hover)
    _add_shared_arguments(hover)

    clear = subparsers.add_parser(
        "clear-cache", help="Delete cached definitions from memory and disk."
    )
    _add_provider_argument(clear)
    _add_shared_arguments(clear)

    return parser


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


__all__ = ["build_parser", "parse_cli_args"]
