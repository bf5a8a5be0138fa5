"""Shared fixtures for documentation generator tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from argdoc.docgen.config import DocgenSettings
from argdoc.docgen.workunit import ProgramDirectory, WorkUnitBuilder, build_header
from argdoc.docgen.resolver import filename_for
from tests.docgen import sample_catalog

if TYPE_CHECKING:
    from pathlib import Path

    from argdoc.docgen.sources import DocCommentIndex, ProgramCatalog


@pytest.fixture
def catalog() -> ProgramCatalog:
    """Return a fresh copy of the sample program catalog."""
    return sample_catalog.build_catalog()


@pytest.fixture
def comments(catalog: ProgramCatalog) -> DocCommentIndex:
    return catalog.comments


@pytest.fixture
def directory(catalog: ProgramCatalog) -> ProgramDirectory:
    """Return a directory holding every sample program."""
    return ProgramDirectory(
        build_header(program, catalog.comments, filename=filename_for(program.qualname, "html"))
        for program in catalog.programs
    )


@pytest.fixture
def builder(catalog: ProgramCatalog, directory: ProgramDirectory) -> WorkUnitBuilder:
    return WorkUnitBuilder(catalog.source, catalog.comments, directory)


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> DocgenSettings:
    """Return settings writing into a temporary destination directory."""
    for name in (
        "ARGDOC_SETTINGS_DIR",
        "ARGDOC_DESTINATION_DIR",
        "ARGDOC_SHOW_HIDDEN",
        "ARGDOC_OUTPUT_FILE_EXTENSION",
    ):
        monkeypatch.delenv(name, raising=False)
    return DocgenSettings(
        destination_dir=tmp_path / "out",
        build_timestamp="2024-05-01",
        absolute_version="4.2.0",
        tag_filter_prefix="internal",
    )
