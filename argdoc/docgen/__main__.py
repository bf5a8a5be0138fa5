"""Allow ``python -m argdoc.docgen``."""

from __future__ import annotations

from argdoc.docgen.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
