"""Parameter documentation tooling for command-line programs.

The :mod:`argdoc.docgen` package turns declared program parameters and their
attached documentation into rendered pages, JSON exports and a category index.
Shared helpers (structured logging, Problem Details, typed settings) live in
:mod:`argdoc._shared`.
"""

from __future__ import annotations

__version__ = "1.0.0"

__all__ = ["__version__"]
