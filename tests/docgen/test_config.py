"""Tests for documentation run settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from argdoc._shared.problem_details import render_problem
from argdoc._shared.settings import SettingsError
from argdoc.docgen.config import DEFAULT_DESTINATION_DIR, load_docgen_settings


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "ARGDOC_SETTINGS_DIR",
        "ARGDOC_DESTINATION_DIR",
        "ARGDOC_SHOW_HIDDEN",
        "ARGDOC_OUTPUT_FILE_EXTENSION",
        "ARGDOC_BUILD_TIMESTAMP",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = load_docgen_settings()

    assert settings.destination_dir == DEFAULT_DESTINATION_DIR
    assert settings.output_file_extension == "html"
    assert settings.build_timestamp == "[no timestamp available]"
    assert not settings.show_hidden
    assert settings.settings_dir is None


def test_environment_is_read_and_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ARGDOC_SHOW_HIDDEN", "true")
    monkeypatch.setenv("ARGDOC_BUILD_TIMESTAMP", "from-env")

    settings = load_docgen_settings(build_timestamp="from-flag", output_file_extension=None)

    assert settings.show_hidden
    assert settings.build_timestamp == "from-flag"
    assert settings.output_file_extension == "html"


def test_extension_leading_dot_is_dropped() -> None:
    assert load_docgen_settings(output_file_extension=".md").output_file_extension == "md"


def test_missing_settings_dir_is_a_settings_error(tmp_path: Path) -> None:
    with pytest.raises(SettingsError) as excinfo:
        load_docgen_settings(settings_dir=tmp_path / "missing")

    problem = excinfo.value.problem
    assert str(problem["type"]).endswith("/settings-invalid")
    assert "does not exist" in render_problem(problem)


def test_settings_dir_must_be_a_directory(tmp_path: Path) -> None:
    regular = tmp_path / "file.txt"
    regular.write_text("", encoding="utf-8")

    with pytest.raises(SettingsError, match="Failed to load argdoc settings") as excinfo:
        load_docgen_settings(settings_dir=regular)

    assert excinfo.value.errors
    assert excinfo.value.problem["settings_class"] == "DocgenSettings"
