"""End-to-end tests for a documentation run."""

from __future__ import annotations

import json
from dataclasses import replace
from typing import TYPE_CHECKING

import pytest

from argdoc.docgen.doclet import Doclet
from argdoc.docgen.models import CrossReferenceError, TemplateRenderError
from argdoc.docgen.sources import DocumentedProgram
from tests.docgen.sample_catalog import FILTER_READS

if TYPE_CHECKING:
    from argdoc.docgen.config import DocgenSettings
    from argdoc.docgen.sources import ProgramCatalog


def test_run_writes_pages_exports_and_index(
    catalog: ProgramCatalog, settings: DocgenSettings
) -> None:
    result = Doclet(catalog, settings).run()

    out = settings.destination_dir
    assert [path.name for path in result.pages] == [
        "demo_tools_CountReads.html",
        "demo_tools_FilterReads.html",
        "demo_tools_IndexReference.html",
    ]
    assert [path.name for path in result.exports] == [
        "demo_tools_CountReads.html.json",
        "demo_tools_FilterReads.html.json",
        "demo_tools_IndexReference.html.json",
    ]
    assert result.index == out / "index.html"
    assert all(path.parent == out for path in (*result.pages, *result.exports))


def test_rendered_page_contents(catalog: ProgramCatalog, settings: DocgenSettings) -> None:
    Doclet(catalog, settings).run()

    page = (settings.destination_dir / "demo_tools_FilterReads.html").read_text(encoding="utf-8")
    assert "<h1>FilterReads</h1>" in page
    assert "--threshold" in page
    assert "--debugFlag" not in page
    assert "team-reads" not in page
    assert "Version 4.2.0 built 2024-05-01" in page
    assert '<a href="demo_ReadFilterPluginDescriptor.html">MappedFilter</a>' in page

    count_page = (settings.destination_dir / "demo_tools_CountReads.html").read_text(
        encoding="utf-8"
    )
    assert '<a href="demo_tools_FilterReads.html">FilterReads</a>' in count_page


def test_index_groups_programs(catalog: ProgramCatalog, settings: DocgenSettings) -> None:
    result = Doclet(catalog, settings).run()

    index = result.index.read_text(encoding="utf-8")
    assert index.index("Read Tools") < index.index("Reference Utilities")
    assert '<a href="demo_tools_IndexReference.html">IndexReference</a>' in index


def test_export_matches_work_unit(catalog: ProgramCatalog, settings: DocgenSettings) -> None:
    result = Doclet(catalog, settings).run()

    payload = json.loads(
        (settings.destination_dir / "demo_tools_CountReads.html.json").read_text(encoding="utf-8")
    )
    assert payload["name"] == "CountReads"
    assert payload["group"] == "Read Tools"
    assert [argument["name"] for argument in payload["arguments"]] == ["[NA - Positional]"]
    assert len(result.work_units) == 3


def test_hidden_mode_documents_hidden_parameters(
    catalog: ProgramCatalog, settings: DocgenSettings
) -> None:
    hidden_settings = settings.model_copy(update={"show_hidden": True})

    Doclet(catalog, hidden_settings).run()

    page = (hidden_settings.destination_dir / "demo_tools_FilterReads.html").read_text(
        encoding="utf-8"
    )
    assert "--debugFlag" in page


def test_disabled_program_is_skipped_and_breaks_references(
    catalog: ProgramCatalog, settings: DocgenSettings, caplog: pytest.LogCaptureFixture
) -> None:
    """A related program excluded from the run makes the referencing program fail."""
    programs = tuple(
        replace(program, enabled=False) if program.qualname == FILTER_READS else program
        for program in catalog.programs
    )
    doclet = Doclet(replace(catalog, programs=programs), settings)

    with caplog.at_level("INFO", logger="argdoc.docgen.doclet"):
        assert FILTER_READS not in {program.qualname for program in doclet.included_programs()}
    assert any("Skipping disabled program" in message for message in caplog.messages)

    with pytest.raises(CrossReferenceError):
        doclet.run()


def test_hidden_programs_are_excluded_by_default(
    catalog: ProgramCatalog, settings: DocgenSettings
) -> None:
    secret = DocumentedProgram("demo.tools.Secret", "Read Tools", hidden=True)
    programs = (*catalog.programs, secret)
    doclet = Doclet(replace(catalog, programs=programs), settings)

    assert "demo.tools.Secret" not in doclet.compute_directory()


def test_custom_template_errors_abort_the_run(
    catalog: ProgramCatalog, settings: DocgenSettings
) -> None:
    templates = settings.destination_dir.parent / "templates"
    templates.mkdir()
    (templates / "generic.template.html").write_text("{{ undefined_key }}", encoding="utf-8")
    custom = settings.model_copy(update={"settings_dir": templates})

    with pytest.raises(TemplateRenderError):
        Doclet(catalog, custom).run()
