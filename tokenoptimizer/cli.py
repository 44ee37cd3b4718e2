# -*- coding: utf-8 -*-
"""Location: ./tokenoptimizer/cli.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Token Optimizer CLI.
This module provides the ``tokenoptimizer`` command line tool:
- ``encode``: convert a JSON document to TOON
- ``decode``: convert a TOON document back to JSON
- ``compare``: measure JSON and TOON renderings of a JSON document and report the selected format

Every command reads from a file, or from stdin when the input is ``-`` or omitted.
"""

# Standard
import argparse
import logging
from pathlib import Path
import sys
from typing import List, Optional

# Third-Party
from pydantic import ValidationError

# First-Party
from tokenoptimizer import __version__
from tokenoptimizer.config import settings
from tokenoptimizer.converter import json_to_toon, toon_to_json
from tokenoptimizer.optimizer import OptimizationCriteria, OptimizationPolicy, OptimizationResult, PayloadFormat, TokenOptimizer
from tokenoptimizer.tokens import EncodingCache, TokenCounter
from tokenoptimizer.toon.errors import InvalidInputError, ToonError

logger = logging.getLogger(__name__)

STDIN_MARKER = "-"


def configure_logging(level: str) -> None:
    """Configure root logging for the CLI process.

    Args:
        level: Logging level name.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


def read_input(path: Optional[str]) -> str:
    """Read command input from a file or stdin.

    Args:
        path: File path, ``-`` or None for stdin.

    Returns:
        The input text.

    Raises:
        InvalidInputError: If the input is not valid UTF-8.
    """
    try:
        if path is None or path == STDIN_MARKER:
            return sys.stdin.read()
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise InvalidInputError(f"Input is not valid UTF-8: {e}") from e


def write_output(text: str, path: Optional[str]) -> None:
    """Write command output to a file or stdout.

    Args:
        text: Output text.
        path: File path, or None for stdout.
    """
    if path:
        Path(path).write_text(text + "\n", encoding="utf-8")
        logger.info(f"Wrote {len(text)} characters to {path}")
    else:
        print(text)


def encode_command(args: argparse.Namespace) -> int:
    """Execute the encode command.

    Args:
        args: Parsed command line arguments

    Returns:
        Process exit code
    """
    write_output(json_to_toon(read_input(args.input)), args.output)
    return 0


def decode_command(args: argparse.Namespace) -> int:
    """Execute the decode command.

    Args:
        args: Parsed command line arguments

    Returns:
        Process exit code
    """
    indent = args.indent or settings.json_indent
    write_output(toon_to_json(read_input(args.input), indent=indent), args.output)
    return 0


def compare_command(args: argparse.Namespace) -> int:
    """Execute the compare command.

    Args:
        args: Parsed command line arguments

    Returns:
        Process exit code
    """
    base = OptimizationPolicy.from_settings()
    policy = OptimizationPolicy(
        prefer_format=args.prefer or base.prefer_format,
        min_savings_percent_for_switch=base.min_savings_percent_for_switch if args.min_savings is None else args.min_savings,
        criteria=args.criteria or base.criteria,
    )
    counter = TokenCounter(model=args.model or settings.token_model, cache=EncodingCache())
    result = TokenOptimizer(policy=policy, counter=counter).optimize_json(read_input(args.input))
    print(format_report(result, show_content=args.show_content))
    return 0


def format_report(result: OptimizationResult, show_content: bool = False) -> str:
    """Render an optimization result for the terminal.

    Args:
        result: Result to render.
        show_content: Append both renderings.

    Returns:
        Report text.
    """
    j, t = result.json_metrics, result.toon_metrics
    lines = [
        f"Optimal format: {result.optimal_format.value}",
        f"Tokens:     json={j.token_count} toon={t.token_count} (savings: {result.token_savings}, {result.token_savings_percent:.2f}%)",
        f"Characters: json={j.character_count} toon={t.character_count} (savings: {result.character_savings}, {result.character_savings_percent:.2f}%)",
        f"Bytes:      json={j.byte_count} toon={t.byte_count} (savings: {result.byte_savings}, {result.byte_savings_percent:.2f}%)",
    ]
    if show_content:
        lines += ["", "--- JSON ---", j.content, "", "--- TOON ---", t.content]
    return "\n".join(lines)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the token optimizer commands.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(prog="tokenoptimizer", description="Convert between JSON and TOON and compare their token cost")

    parser.add_argument("--version", "-V", action="version", version=f"tokenoptimizer {__version__}")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], type=str.upper, help="Logging level (default: LOG_LEVEL setting)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Encode command
    encode_parser = subparsers.add_parser("encode", help="Convert JSON to TOON")
    encode_parser.add_argument("input", nargs="?", help="JSON input file (default: stdin)")
    encode_parser.add_argument("--output", "--out", "-o", help="Output file path (default: stdout)")
    encode_parser.set_defaults(func=encode_command)

    # Decode command
    decode_parser = subparsers.add_parser("decode", help="Convert TOON to JSON")
    decode_parser.add_argument("input", nargs="?", help="TOON input file (default: stdin)")
    decode_parser.add_argument("--output", "--out", "-o", help="Output file path (default: stdout)")
    decode_parser.add_argument("--indent", action="store_true", help="Pretty-print the JSON output")
    decode_parser.set_defaults(func=decode_command)

    # Compare command
    compare_parser = subparsers.add_parser("compare", help="Compare JSON and TOON renderings of a JSON document")
    compare_parser.add_argument("input", nargs="?", help="JSON input file (default: stdin)")
    compare_parser.add_argument("--model", help="tiktoken model or encoding name (default: TOKEN_MODEL setting, else estimate)")
    compare_parser.add_argument("--prefer", choices=[f.value for f in PayloadFormat], help="Format selection mode (default: PREFER_FORMAT setting)")
    compare_parser.add_argument("--min-savings", type=float, help="Minimum TOON savings in percent (default: MIN_SAVINGS_PERCENT setting)")
    compare_parser.add_argument("--criteria", choices=[c.value for c in OptimizationCriteria], help="Metric compared between formats (default: OPTIMIZATION_CRITERIA setting)")
    compare_parser.add_argument("--show-content", action="store_true", help="Print both renderings")
    compare_parser.set_defaults(func=compare_command)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command line arguments, ``sys.argv[1:]`` when omitted.

    Returns:
        Process exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        configure_logging(args.log_level or settings.log_level)
        return args.func(args)
    except (ToonError, ValidationError, OSError) as e:
        logger.debug(f"Command '{args.command}' failed", exc_info=True)
        print(f"❌ {args.command.capitalize()} failed: {e}", file=sys.stderr)
        return 1


def run() -> None:
    """Console script entry point."""
    sys.exit(main())
