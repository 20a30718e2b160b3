# File: classgen/cli.py
"""
ClassGen - Command-Line Interface
==================================

Built on the standard-library ``argparse`` module.

Usage examples::

    # Generate every table of the model file in the current directory
    classgen

    # Named model file, custom output and namespace
    classgen -m Model.xml -o ./Entity --namespace Demo.Data

    # Interfaces with the name indexer, printed instead of saved
    classgen -m model.yaml --interface --extend --print

    # Plain batch models (no attributes), keep files that already exist
    classgen -m model.yaml --batch --no-overwrite

    # Check the model only
    classgen -m model.yaml --validate-only

Exit codes:
    0   success
    2   generation error
    3   export error
    4   input/argument error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional, Sequence

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("classgen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_GENERATION_ERROR: int = 2
EXIT_EXPORT_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the classgen logger based on verbosity level.

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

    fmt: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    datefmt: str = "%H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger: logging.Logger = logging.getLogger("classgen")
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
    from classgen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="classgen",
        description=(
            "ClassGen: C# entity class and interface generator.\n\n"
            "Reads table models (XML, YAML or JSON) and writes one source "
            "file per table."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s -m Model.xml -o ./Entity\n"
            "  %(prog)s -m model.yaml --interface --extend --print\n"
            "  %(prog)s -m model.yaml --batch --no-overwrite\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"ClassGen v{__version__}",
    )

    # --- Input / output ---
    parser.add_argument(
        "-m", "--model",
        type=str,
        default=None,
        metavar="PATH",
        help=(
            "Model file (XML, YAML or JSON). "
            "The current directory is searched when omitted."
        ),
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        metavar="DIR",
        help="Output directory (default: Output attribute or model directory).",
    )

    # --- Modes ---
    mode_group = parser.add_argument_group("operation modes")
    mode_group.add_argument(
        "--validate-only",
        action="store_true",
        default=False,
        help="Only check the model; generate nothing.",
    )
    mode_group.add_argument(
        "--print",
        dest="print_only",
        action="store_true",
        default=False,
        help="Print generated code to stdout instead of writing files.",
    )
    mode_group.add_argument(
        "--batch",
        action="store_true",
        default=False,
        help=(
            "Batch mode: plain classes without attributes "
            "(or interfaces with --interface), named after the class."
        ),
    )

    # --- Option overrides ---
    option_group = parser.add_argument_group("option overrides")
    option_group.add_argument(
        "--namespace",
        type=str,
        default=None,
        metavar="NS",
        help="Namespace of the generated types.",
    )
    option_group.add_argument(
        "--base-class",
        type=str,
        default=None,
        metavar="TEMPLATE",
        help="Base type; '{name}' is replaced with the table name.",
    )
    option_group.add_argument(
        "--class-template",
        type=str,
        default=None,
        metavar="TEMPLATE",
        help="Class name template, e.g. 'T{name}Entity'.",
    )
    option_group.add_argument(
        "--using",
        dest="usings",
        action="append",
        default=None,
        metavar="NS",
        help="Extra using directive (repeatable).",
    )
    option_group.add_argument(
        "--interface",
        action="store_true",
        default=None,
        help="Generate interfaces.",
    )
    option_group.add_argument(
        "--pure",
        action="store_true",
        default=None,
        help="Suppress attributes.",
    )
    option_group.add_argument(
        "--partial",
        action="store_true",
        default=None,
        help="Generate partial types.",
    )
    option_group.add_argument(
        "--extend",
        action="store_true",
        default=None,
        help="Add the get/set-by-name indexer.",
    )

    # --- File handling ---
    file_group = parser.add_argument_group("file handling")
    file_group.add_argument(
        "--ext",
        type=str,
        default=None,
        metavar="EXT",
        help="File extension (default '.cs'; 'Biz' gives 'Biz.cs').",
    )
    file_group.add_argument(
        "--no-overwrite",
        action="store_true",
        default=False,
        help="Keep files that already exist.",
    )
    file_group.add_argument(
        "--display-name-files",
        action="store_true",
        default=False,
        help="Name class files after the table display name.",
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
# Option override builder
# ---------------------------------------------------------------------------


def _build_option_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Collect the option values given on the command line."""
    overrides: Dict[str, Any] = {}

    if args.output is not None:
        overrides["output"] = args.output
    if args.namespace is not None:
        overrides["namespace"] = args.namespace
    if args.base_class is not None:
        overrides["base_class"] = args.base_class
    if args.class_template is not None:
        overrides["class_template"] = args.class_template

    for flag in ("interface", "pure", "partial", "extend"):
        if getattr(args, flag):
            overrides[flag] = True

    return overrides


# ---------------------------------------------------------------------------
# Validate-only mode
# ---------------------------------------------------------------------------


def _run_validate_only(
    model_path: Optional[Path],
    args: argparse.Namespace,
) -> int:
    from classgen.loader import load_models
    from classgen.validators import ValidationResult, validate_full

    try:
        schema, option = load_models(model_path)
        option = option.derive(**_build_option_overrides(args))
        if args.usings:
            option = option.with_usings(*args.usings)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("%s", exc)
        return EXIT_INPUT_ERROR

    result: ValidationResult = validate_full(schema, option)
    print(result.summary())
    for item in result.warnings:
        print(f"  {item}")
    return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# Full generation mode
# ---------------------------------------------------------------------------


def _run_generation(
    model_path: Optional[Path],
    args: argparse.Namespace,
) -> int:
    """
    Run the generation pipeline.

    Returns the appropriate exit code.
    """
    from classgen.generator import GenerationReport, generate_from_file

    overrides: Dict[str, Any] = _build_option_overrides(args)

    report: GenerationReport = generate_from_file(
        model_path,
        overrides=overrides or None,
        extra_usings=args.usings or (),
        batch=args.batch,
        write=not args.print_only,
        ext=args.ext,
        overwrite=not args.no_overwrite,
        use_display_name=args.display_name_files,
    )

    if args.print_only:
        for text in report.texts.values():
            sys.stdout.write(text)
    else:
        print(report.summary())

    if report.input_errors:
        for err in report.input_errors:
            logger.error("%s", err)
        return EXIT_INPUT_ERROR
    if report.generation_errors:
        return EXIT_GENERATION_ERROR
    if report.export_errors:
        return EXIT_EXPORT_ERROR
    return EXIT_SUCCESS


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

    model_path: Optional[Path] = None
    if args.model:
        model_path = Path(args.model).resolve()
        if not model_path.is_file():
            logger.error("Model file not found: %s", model_path)
            sys.exit(EXIT_INPUT_ERROR)

    if args.validate_only:
        sys.exit(_run_validate_only(model_path, args))

    logger.info("Model:  %s", model_path or "(search current directory)")

    exit_code: int = _run_generation(model_path, args)
    if exit_code == EXIT_SUCCESS:
        logger.info("Generation completed successfully.")
    else:
        logger.error("Generation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


def main() -> None:
    """Console-script entry point."""
    cli_main()


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "main",
    "EXIT_SUCCESS",
    "EXIT_GENERATION_ERROR",
    "EXIT_EXPORT_ERROR",
    "EXIT_INPUT_ERROR",
]
