"""Documentation generator coordinating binding, resolution, rendering and export."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from importlib import import_module
from typing import cast

from argdoc.docgen import binder as binder
from argdoc.docgen import classifier as classifier
from argdoc.docgen import config as config
from argdoc.docgen import doclet as doclet
from argdoc.docgen import export as export
from argdoc.docgen import index as index
from argdoc.docgen import models as models
from argdoc.docgen import render as render
from argdoc.docgen import resolver as resolver
from argdoc.docgen import sources as sources
from argdoc.docgen import types as types
from argdoc.docgen import workunit as workunit

__all__ = [
    "binder",
    "classifier",
    "config",
    "doclet",
    "export",
    "index",
    "main",
    "models",
    "render",
    "resolver",
    "sources",
    "types",
    "workunit",
]


CliMain = Callable[[Sequence[str] | None], int]


def main(argv: Sequence[str] | None = None) -> int:
    """Dispatch to the CLI entry point without eagerly importing it."""
    cli_module = import_module("argdoc.docgen.cli")
    cli_main = cast("CliMain", cli_module.main)
    return cli_main(argv)
