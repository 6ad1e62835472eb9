"""Command line interface.

Usage:
    python -m lexidict compile app.lexi -o app_dict.py
    python -m lexidict check app.lexi --format json

Exit codes:
    0 - success (warnings may have been printed)
    1 - the dictionary has an error
    2 - the input could not be read
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from .compiler import CompileResult, compile_file
from .config import CompilerConfig
from .constants import MISSING_TRANSLATION
from .diagnostics import DiagnosticFormatter, LexiError, OutputFormat

__all__ = ["build_parser", "main"]

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lexidict",
        description="Compile translation dictionaries to Python dispatch code.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Write the generated module next to the dictionary:
  python -m lexidict compile i18n/app.lexi -o app/i18n.py

  # Check a dictionary and print diagnostics as JSON:
  python -m lexidict check i18n/app.lexi --format json
""",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("compile", "Compile a dictionary to a Python module"),
        ("check", "Check a dictionary without writing output"),
    ):
        command = commands.add_parser(name, help=help_text)
        command.add_argument("source", type=Path, help="Root dictionary file")
        command.add_argument(
            "--root", type=Path, default=None, help="Module root directory (default: source dir)"
        )
        command.add_argument(
            "--format",
            choices=[fmt.value for fmt in OutputFormat],
            default=OutputFormat.RUST.value,
            help="Diagnostic output format",
        )
        if name == "compile":
            command.add_argument(
                "-o", "--output", type=Path, default=None, help="Output file (default: stdout)"
            )
            command.add_argument(
                "--missing-translation",
                default=MISSING_TRANSLATION,
                help="Value returned for locales a unit does not cover",
            )
            command.add_argument(
                "--no-header", action="store_true", help="Omit the generated-file comment"
            )
    return parser


def _report_warnings(result: CompileResult, formatter: DiagnosticFormatter) -> None:
    if result.warnings:
        print(formatter.format_all(result.warnings), file=sys.stderr)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    formatter = DiagnosticFormatter(output_format=OutputFormat(args.format))
    config = CompilerConfig()
    if args.command == "compile":
        config = CompilerConfig(
            missing_translation=args.missing_translation, emit_header=not args.no_header
        )

    try:
        result = compile_file(args.source, root_dir=args.root, config=config)
    except LexiError as e:
        if e.diagnostic is None:
            print(f"error: {e}", file=sys.stderr)
        else:
            print(formatter.format(e.diagnostic), file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    _report_warnings(result, formatter)
    if args.command == "check":
        print(
            f"{args.source}: {result.generated.unit_count} units, "
            f"{result.check_result.warning_count} warnings"
        )
        return 0

    if args.output is None:
        sys.stdout.write(result.source)
        return 0
    try:
        args.output.write_text(result.source, encoding="utf-8")
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    logger.info("Wrote %s", args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
