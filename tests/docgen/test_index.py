"""Tests for category grouping and the index listing."""

from __future__ import annotations

import pytest

from argdoc.docgen.index import build_index, group_headers, supercategory_for
from argdoc.docgen.workunit import ProgramDirectory, WorkUnitBuilder, WorkUnitHeader
from tests.docgen.sample_catalog import build_programs


def _header(category: str, name: str, summary: str = "") -> WorkUnitHeader:
    return WorkUnitHeader(
        category=category,
        name=name,
        qualname=f"demo.{name}",
        filename=f"demo_{name}.html",
        summary=f"{name} summary.",
        category_summary=summary,
    )


def test_groups_keep_first_seen_order() -> None:
    """Categories are not sorted alphabetically."""
    headers = [
        _header("Zeta Tools", "B", "Zeta things."),
        _header("Alpha Utilities", "A", "Alpha things."),
        _header("Zeta Tools", "A", "ignored"),
    ]

    groups = group_headers(headers)

    assert [group.name for group in groups] == ["Zeta Tools", "Alpha Utilities"]
    assert groups[0].summary == "Zeta things."
    assert [member.name for member in groups[0].members] == ["A", "B"]


def test_group_bindings_strip_non_word_characters() -> None:
    index = build_index([_header("Read Filters (Exclude)", "X")])

    assert index.group_bindings() == [
        {
            "id": "ReadFiltersExclude",
            "name": "Read Filters (Exclude)",
            "summary": "",
            "supercat": "exclude",
        }
    ]


def test_listing_is_sorted_by_category_then_name() -> None:
    headers = [_header("B", "one"), _header("A", "two"), _header("A", "one")]

    index = build_index(headers)

    assert [(row["group"], row["name"]) for row in index.data_bindings()] == [
        ("A", "one"),
        ("A", "two"),
        ("B", "one"),
    ]
    assert index.data_bindings()[0] == {
        "name": "one",
        "summary": "one summary.",
        "filename": "demo_one.html",
        "group": "A",
    }


def test_build_index_is_idempotent() -> None:
    headers = [_header("B", "one"), _header("A", "two"), _header("A", "one")]

    assert build_index(headers) == build_index(headers)
    listing = build_index(headers).listing
    assert build_index(listing).listing == listing


def test_build_index_accepts_work_units(
    directory: ProgramDirectory, builder: WorkUnitBuilder
) -> None:
    units = [builder.build(program) for program in build_programs()]

    index = build_index(units)

    assert index.listing == directory.headers
    assert [group.to_bindings()["supercat"] for group in index.groups] == ["tools", "utilities"]


@pytest.mark.parametrize(
    ("category", "expected"),
    [
        ("Read Tools", "tools"),
        ("Reference Utilities", "utilities"),
        ("Engine Components", "engine"),
        ("Experimental (Exclude)", "exclude"),
        ("Miscellaneous", "other"),
    ],
)
def test_supercategory_for(category: str, expected: str) -> None:
    assert supercategory_for(category) == expected
