"""Group documented programs into categories for the index page."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from argdoc.docgen.workunit import ProgramWorkUnit, WorkUnitHeader

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = [
    "CategoryGroup",
    "DocIndex",
    "SuperCategory",
    "build_index",
    "group_headers",
    "supercategory_for",
]

type SuperCategory = Literal["tools", "utilities", "engine", "exclude", "other"]

_NON_WORD = re.compile(r"\W")


def supercategory_for(category: str) -> SuperCategory:
    """Return the coarse section of the index ``category`` belongs to."""
    if category.endswith(" Tools"):
        return "tools"
    if category.endswith(" Utilities"):
        return "utilities"
    if category.startswith("Engine "):
        return "engine"
    if category.endswith(" (Exclude)"):
        return "exclude"
    return "other"


@dataclass(frozen=True, slots=True)
class CategoryGroup:
    """A category of the index and the programs filed under it."""

    id: str
    name: str
    summary: str
    supercat: SuperCategory
    members: tuple[WorkUnitHeader, ...] = ()

    def to_bindings(self) -> dict[str, str]:
        return {
            "id": self.id,
            "name": self.name,
            "summary": self.summary,
            "supercat": self.supercat,
        }


@dataclass(frozen=True, slots=True)
class DocIndex:
    """Category groups and the globally ordered program listing."""

    groups: tuple[CategoryGroup, ...]
    listing: tuple[WorkUnitHeader, ...]

    def group_bindings(self) -> list[dict[str, str]]:
        return [group.to_bindings() for group in self.groups]

    def data_bindings(self) -> list[dict[str, str]]:
        return [header.index_data() for header in self.listing]


def group_headers(headers: Iterable[WorkUnitHeader]) -> tuple[CategoryGroup, ...]:
    """Group ``headers`` by category, keeping categories in first-seen order.

    The first program seen in a category supplies the category summary.
    """
    order: list[str] = []
    first: dict[str, WorkUnitHeader] = {}
    members: dict[str, list[WorkUnitHeader]] = {}
    for header in headers:
        if header.category not in first:
            order.append(header.category)
            first[header.category] = header
            members[header.category] = []
        members[header.category].append(header)
    return tuple(
        CategoryGroup(
            id=_NON_WORD.sub("", category),
            name=category,
            summary=first[category].category_summary,
            supercat=supercategory_for(category),
            members=tuple(sorted(members[category])),
        )
        for category in order
    )


def build_index(work_units: Iterable[ProgramWorkUnit | WorkUnitHeader]) -> DocIndex:
    """Return the category groups and sorted listing for ``work_units``.

    Categories appear in the order their first program appears in
    ``work_units``; the listing is sorted by (category, name). Calling this
    twice on the same input yields equal results.
    """
    headers = [
        unit.header if isinstance(unit, ProgramWorkUnit) else unit for unit in work_units
    ]
    return DocIndex(groups=group_headers(headers), listing=tuple(sorted(headers)))
