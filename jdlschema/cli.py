# File: jdlschema/cli.py
"""
jdlschema - Command-Line Interface
==================================

CLI built with the standard-library ``argparse`` module.

Usage examples::

    # Compile to stdout (JSON)
    python -m jdlschema app.jdl

    # Compile to a YAML file, only rewriting when the content changed
    jdlschema app.jdl -o schema.yaml --format yaml

    # Settings from jdlschema.config.yaml, one plural overridden
    jdlschema -c jdlschema.config.yaml --plural-override Person=people

    # Validate only
    jdlschema app.jdl --check

Exit codes:
    0 — success
    1 — validation error
    2 — compilation error
    3 — write error
    4 — input/argument error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, NoReturn, Optional, Sequence

from jdlschema.compiler import CompilationReport, SchemaCompiler
from jdlschema.config import load_config
from jdlschema.models import GeneratorConfig, OutputFormat, RelationshipPayloadMode

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("jdlschema")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_COMPILATION_ERROR: int = 2
EXIT_WRITE_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the root jdlschema logger based on verbosity level.

    Args:
        verbosity: -1 = ERROR, 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    elif verbosity == 0:
        level = logging.WARNING
    else:
        level = logging.ERROR

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger: logging.Logger = logging.getLogger("jdlschema")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from jdlschema import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="jdlschema",
        description=(
            "jdlschema — JDL to schema compiler.\n\n"
            "Parses a JHipster-style JDL file into a normalized entity/enum "
            "schema and writes it as JSON or YAML for downstream generators."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s app.jdl\n"
            "  %(prog)s app.jdl -o schema.yaml --format yaml\n"
            "  %(prog)s app.jdl --check\n"
            "  %(prog)s -c jdlschema.config.yaml --plural-override Person=people\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"jdlschema v{__version__}",
    )

    parser.add_argument(
        "jdl_file",
        nargs="?",
        default=None,
        metavar="JDL_FILE",
        help="Path to the JDL file (falls back to 'jdlFile' in the config).",
    )
    parser.add_argument(
        "-c", "--config",
        type=str,
        default=None,
        metavar="PATH",
        help=(
            "Config file (YAML or JSON). Defaults to jdlschema.config.yaml "
            "in the current directory when present."
        ),
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        metavar="FILE",
        help="Write the compiled document here instead of stdout.",
    )

    # --- Modes ---
    mode_group = parser.add_argument_group("operation modes")
    mode_group.add_argument(
        "--check",
        action="store_true",
        default=False,
        help="Only parse and validate; print the validation report.",
    )
    mode_group.add_argument(
        "--report",
        action="store_true",
        default=False,
        help="Print the compilation summary to stderr.",
    )

    # --- Config overrides ---
    config_group = parser.add_argument_group("configuration overrides")
    config_group.add_argument(
        "--format",
        dest="output_format",
        type=str,
        default=None,
        choices=[f.value for f in OutputFormat],
        help="Output document format (default: json).",
    )
    config_group.add_argument(
        "--plural-override",
        dest="plural_overrides",
        action="append",
        default=None,
        metavar="WORD=PLURAL",
        help="Plural override; may be repeated.",
    )
    config_group.add_argument(
        "--payload-mode",
        type=str,
        default=None,
        choices=[m.value for m in RelationshipPayloadMode],
        help="Relationship payload mode passed to renderers.",
    )
    config_group.add_argument(
        "--force",
        action="store_true",
        default=None,
        help="Rewrite the output file even when unchanged.",
    )

    # --- Verbosity ---
    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all output except errors.",
    )

    return parser


# ---------------------------------------------------------------------------
# Config override builder
# ---------------------------------------------------------------------------


def parse_plural_overrides(items: Optional[Sequence[str]]) -> Dict[str, str]:
    """
    Turn ``["Person=people", ...]`` into a mapping.

    Raises:
        ValueError: For an item without ``=`` or with an empty word.
    """
    result: Dict[str, str] = {}
    for item in items or ():
        word, sep, plural = item.partition("=")
        if not sep or not word.strip():
            raise ValueError(
                f"Invalid plural override '{item}'. Expected WORD=PLURAL."
            )
        result[word.strip()] = plural.strip()
    return result


def _build_config_overrides(args: argparse.Namespace) -> Dict[str, object]:
    """Build a config override dictionary from CLI arguments."""
    overrides: Dict[str, object] = {}

    if args.jdl_file is not None:
        overrides["jdl_file"] = args.jdl_file

    if args.output is not None:
        overrides["output_file"] = args.output

    if args.output_format is not None:
        overrides["output_format"] = args.output_format

    if args.payload_mode is not None:
        overrides["relationship_payload_mode"] = args.payload_mode

    if args.force:
        overrides["force"] = True

    plurals: Dict[str, str] = parse_plural_overrides(args.plural_overrides)
    if plurals:
        overrides["plural_overrides"] = plurals

    return overrides


# ---------------------------------------------------------------------------
# Check mode
# ---------------------------------------------------------------------------


def _run_check(jdl_path: Path, config: GeneratorConfig, verbosity: int) -> int:
    """Parse and validate only. Returns the exit code."""
    report: CompilationReport = SchemaCompiler().compile_file(jdl_path, config)
    if report.compilation_errors:
        for err in report.compilation_errors:
            logger.error("%s", err)
        return EXIT_INPUT_ERROR

    if report.validation is not None:
        print(report.validation.format_report(include_info=verbosity >= 1))
    for warning in report.parse_warnings:
        print(f"  {warning}")

    return EXIT_VALIDATION_ERROR if report.validation_errors else EXIT_SUCCESS


# ---------------------------------------------------------------------------
# Compilation
# ---------------------------------------------------------------------------


def _run_compile(jdl_path: Path, config: GeneratorConfig, show_report: bool) -> int:
    """Compile, then write or print the document. Returns the exit code."""
    compiler: SchemaCompiler = SchemaCompiler()
    report: CompilationReport = compiler.compile_file(jdl_path, config)

    if report.success:
        if config.output_file:
            compiler.emit(report, config)
        elif report.rendered is not None:
            sys.stdout.write(report.rendered)

    if show_report:
        print(report.summary(), file=sys.stderr)

    if report.success:
        return EXIT_SUCCESS
    if report.validation_errors:
        return EXIT_VALIDATION_ERROR
    if report.compilation_errors and report.rendered is not None:
        return EXIT_WRITE_ERROR
    if report.compilation_errors:
        return EXIT_INPUT_ERROR
    return EXIT_COMPILATION_ERROR


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    verbosity: int = -1 if args.quiet else args.verbose
    _setup_logging(verbosity)

    # --- Configuration ---
    try:
        overrides: Dict[str, object] = _build_config_overrides(args)
        config: GeneratorConfig = load_config(
            Path(args.config) if args.config else None,
            overrides,
        )
    except (FileNotFoundError, ValueError) as exc:
        logger.error("%s", exc)
        sys.exit(EXIT_INPUT_ERROR)

    # --- JDL path ---
    if not config.jdl_file:
        logger.error(
            "No JDL file given. Pass JDL_FILE or set 'jdlFile' in the config."
        )
        parser.print_usage(sys.stderr)
        sys.exit(EXIT_INPUT_ERROR)

    jdl_path: Path = Path(config.jdl_file)
    if not jdl_path.is_file():
        logger.error("JDL file not found: %s", jdl_path)
        sys.exit(EXIT_INPUT_ERROR)

    logger.info("JDL:     %s", jdl_path)
    logger.info("Output:  %s", config.output_file or "<stdout>")
    logger.info("Format:  %s", config.output_format)

    if args.check:
        sys.exit(_run_check(jdl_path, config, verbosity))

    exit_code: int = _run_compile(jdl_path, config, args.report)

    if exit_code == EXIT_SUCCESS:
        logger.info("Compilation completed successfully.")
    else:
        logger.error("Compilation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "parse_plural_overrides",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "EXIT_COMPILATION_ERROR",
    "EXIT_WRITE_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("jdlschema.cli loaded.")
