"""Tests for the ``argdoc`` command line."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from argdoc.docgen.cli import CatalogLoadError, load_catalog, main
from argdoc.docgen.models import ExitStatus
from argdoc.docgen.sources import ProgramCatalog

if TYPE_CHECKING:
    from pathlib import Path

CATALOG_REF = "tests.docgen.sample_catalog:CATALOG"


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("ARGDOC_SETTINGS_DIR", "ARGDOC_DESTINATION_DIR", "ARGDOC_SHOW_HIDDEN"):
        monkeypatch.delenv(name, raising=False)


def test_load_catalog_accepts_instance_and_factory() -> None:
    assert isinstance(load_catalog(CATALOG_REF), ProgramCatalog)
    assert isinstance(load_catalog("tests.docgen.sample_catalog:build_catalog"), ProgramCatalog)


@pytest.mark.parametrize(
    "reference",
    [
        "tests.docgen.sample_catalog",
        "tests.docgen.no_such_module:CATALOG",
        "tests.docgen.sample_catalog:MISSING",
        "tests.docgen.sample_catalog:FILTER_READS",
    ],
)
def test_load_catalog_rejects_bad_references(reference: str) -> None:
    with pytest.raises(CatalogLoadError):
        load_catalog(reference)


def test_main_generates_documentation(tmp_path: Path) -> None:
    destination = tmp_path / "docs"

    status = main(
        [
            CATALOG_REF,
            "--destination-dir",
            str(destination),
            "--absolute-version",
            "9.9",
            "--output-file-extension",
            "htm",
            "--plain-logs",
        ]
    )

    assert status == ExitStatus.SUCCESS
    assert (destination / "index.htm").exists()
    assert (destination / "demo_tools_FilterReads.htm").exists()
    assert (destination / "demo_tools_FilterReads.htm.json").exists()
    assert "9.9" in (destination / "index.htm").read_text(encoding="utf-8")


def test_main_reports_invalid_settings_dir(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    status = main([CATALOG_REF, "--settings-dir", str(tmp_path / "missing")])

    assert status == ExitStatus.CONFIG
    problem = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert problem["type"].endswith("/settings-invalid")


def test_main_reports_generation_failures(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    status = main(["tests.docgen.sample_catalog:MISSING", "--destination-dir", str(tmp_path)])

    assert status == ExitStatus.ERROR
    problem = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert problem["exception_type"] == "CatalogLoadError"
    assert problem["status"] == 500
