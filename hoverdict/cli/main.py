"""Command-line entry point for hoverdict."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from hoverdict import logging_manager as log_mgr
from hoverdict.config_manager import HoverDictSettings, apply_settings_updates, load_configuration
from hoverdict.definition_cache import word_at_position
from hoverdict.registry import ProviderRegistry

from .args import parse_cli_args

logger = log_mgr.get_logger().getChild("cli")


def _build_settings(args: argparse.Namespace) -> HoverDictSettings:
    settings = load_configuration(args.config)
    updates = {}
    if args.storage_dir:
        updates["storage_dir"] = args.storage_dir
    if args.no_persist:
        updates["persist_cache"] = False
    if args.debug:
        updates["debug"] = True
    return apply_settings_updates(settings, updates)


def _read_hover_word(path: str, line: int, column: int) -> str:
    lines = Path(path).read_text(encoding="utf-8").splitlines()
    if line < 1 or line > len(lines):
        return ""
    return word_at_position(lines[line - 1], column)


def _print_hint(
    registry: ProviderRegistry,
    provider_id: str,
    word: str,
    stdout: TextIO,
    stderr: TextIO,
) -> int:
    provider = registry.get_provider(provider_id)
    if provider is None:
        stderr.write(f"Provider {provider_id!r} is not available\n")
        return 1
    hint = provider.resolve(word)
    if hint is None:
        stderr.write(f"No definition found for {word!r}\n")
        return 1
    stdout.write(hint.markup)
    stdout.write("\n")
    return 0


def run(
    argv: Optional[Sequence[str]] = None,
    *,
    registry: Optional[ProviderRegistry] = None,
    stdout: TextIO = sys.stdout,
    stderr: TextIO = sys.stderr,
) -> int:
    """Run the CLI and return the process exit code."""

    args = parse_cli_args(argv)
    if registry is None:
        try:
            settings = _build_settings(args)
        except RuntimeError as exc:
            stderr.write(f"{exc}\n")
            return 2
        registry = ProviderRegistry(settings)
    log_mgr.configure_logging_level(debug_enabled=registry.settings.debug)
    provider_id = getattr(args, "provider", None) or registry.settings.default_provider

    with registry:
        if args.command == "clear-cache":
            cleared = registry.clear_caches(args.provider)
            stdout.write(f"Cleared {cleared} definition cache(s)\n")
            return 0

        if args.command == "hover":
            try:
                word = _read_hover_word(args.file, args.line, args.column)
            except (OSError, UnicodeDecodeError) as exc:
                stderr.write(f"Unable to read {args.file}: {exc}\n")
                return 1
            if not word:
                stderr.write("No word at the given position\n")
                return 1
        else:
            word = args.word

        logger.debug(
            "Resolving %r with %s",
            word,
            provider_id,
            extra={"event": "cli.resolve"},
        )
        return _print_hint(registry, provider_id, word, stdout, stderr)


def main(argv: Optional[Sequence[str]] = None) -> None:
    sys.exit(run(argv))


__all__ = ["main", "run"]
