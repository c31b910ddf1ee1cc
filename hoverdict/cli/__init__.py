"""Command-line interface for hoverdict."""

from .args import build_parser, parse_cli_args
from .main import main, run

__all__ = ["build_parser", "main", "parse_cli_args", "run"]
