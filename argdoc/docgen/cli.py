"""Command-line entry point for generating program documentation.

Usage
-----
``python -m argdoc.docgen mypackage.docs:CATALOG --destination-dir site/args``

The ``catalog`` argument names a :class:`~argdoc.docgen.sources.ProgramCatalog`
(or a zero-argument callable returning one) as ``module:attribute``. Every
option may also be supplied through the matching ``ARGDOC_*`` environment
variable; flags take precedence.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from argdoc import __version__
from argdoc._shared.logging import get_logger, setup_logging
from argdoc._shared.problem_details import (
    PROBLEM_TYPE_ROOT,
    ExceptionProblemDetailsParams,
    ProblemDetailsDict,
    ProblemDetailsParams,
    problem_from_exception,
    render_problem,
)
from argdoc._shared.settings import SettingsError
from argdoc.docgen.config import load_docgen_settings
from argdoc.docgen.doclet import Doclet
from argdoc.docgen.models import ExitStatus, HelpDocError
from argdoc.docgen.sources import ProgramCatalog

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = ["CatalogLoadError", "build_parser", "load_catalog", "main"]

LOGGER = get_logger(__name__)


class CatalogLoadError(HelpDocError):
    """Raised when the ``catalog`` reference cannot be imported."""


def load_catalog(reference: str) -> ProgramCatalog:
    """Import the catalog named by ``module:attribute``.

    Raises
    ------
    CatalogLoadError
        If the reference is malformed, the module or attribute is missing, or
        the attribute is not a catalog.
    """
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        message = f"Catalog reference must look like 'module:attribute', got {reference!r}"
        raise CatalogLoadError(message)
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        message = f"Unable to import catalog module {module_name!r}"
        raise CatalogLoadError(message) from exc
    target: object = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            message = f"Catalog {reference!r} has no attribute {part!r}"
            raise CatalogLoadError(message) from exc
    if callable(target) and not isinstance(target, ProgramCatalog):
        target = target()
    if not isinstance(target, ProgramCatalog):
        message = f"{reference!r} did not resolve to a ProgramCatalog"
        raise CatalogLoadError(message)
    return target


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser of the ``argdoc`` command."""
    parser = argparse.ArgumentParser(
        prog="argdoc",
        description="Generate HTML and JSON documentation for command-line programs.",
    )
    parser.add_argument("catalog", help="Program catalog as module:attribute")
    parser.add_argument(
        "--settings-dir",
        type=Path,
        help="Directory containing the page templates",
    )
    parser.add_argument(
        "--destination-dir",
        type=Path,
        help="Directory receiving generated files (default: argdocs)",
    )
    parser.add_argument("--build-timestamp", help="Build timestamp shown on every page")
    parser.add_argument("--absolute-version", help="Version shown on every page")
    parser.add_argument(
        "--hidden-version",
        action="store_true",
        default=None,
        help="Also document hidden programs and parameters",
    )
    parser.add_argument(
        "--output-file-extension",
        help="Extension of generated pages (default: html)",
    )
    parser.add_argument(
        "--tag-filter-prefix",
        help="Omit comment tags named '@<prefix>.*' from descriptions",
    )
    parser.add_argument(
        "--no-validate-exports",
        dest="validate_exports",
        action="store_false",
        default=None,
        help="Skip schema validation of JSON exports",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
    )
    parser.add_argument(
        "--plain-logs",
        action="store_true",
        help="Write human-readable log lines instead of JSON",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _generic_problem(exc: HelpDocError) -> ProblemDetailsDict:
    return problem_from_exception(
        ExceptionProblemDetailsParams(
            base=ProblemDetailsParams(
                type=f"{PROBLEM_TYPE_ROOT}/generation-failed",
                title="Documentation generation failed",
                status=500,
                detail="",
                instance="urn:argdoc:cli:generation-failed",
            ),
            exception=exc,
        )
    )


def _emit_problem(problem: ProblemDetailsDict) -> None:
    sys.stderr.write(render_problem(problem))
    sys.stderr.write("\n")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the documentation generator.

    Parameters
    ----------
    argv : Sequence[str] | None, optional
        Command-line arguments. If None, uses sys.argv.

    Returns
    -------
    int
        An :class:`ExitStatus` value.
    """
    args = build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level), json_output=not args.plain_logs)
    try:
        settings = load_docgen_settings(
            settings_dir=args.settings_dir,
            destination_dir=args.destination_dir,
            build_timestamp=args.build_timestamp,
            absolute_version=args.absolute_version,
            show_hidden=args.hidden_version,
            output_file_extension=args.output_file_extension,
            tag_filter_prefix=args.tag_filter_prefix,
            validate_exports=args.validate_exports,
        )
    except SettingsError as exc:
        LOGGER.log_failure("Invalid configuration", exception=exc, operation="cli")
        _emit_problem(exc.problem)
        return int(ExitStatus.CONFIG)
    try:
        catalog = load_catalog(args.catalog)
        result = Doclet(catalog, settings).run()
    except HelpDocError as exc:
        LOGGER.log_failure("Documentation generation failed", exception=exc, operation="cli")
        _emit_problem(exc.problem or _generic_problem(exc))
        return int(ExitStatus.ERROR)
    LOGGER.info(
        "Wrote %d pages to %s",
        len(result.pages),
        settings.destination_dir,
        extra={"operation": "cli"},
    )
    return int(ExitStatus.SUCCESS)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
