"""Machine-readable JSON export of documented programs.

Each program page gets a sibling ``<page filename>.json`` file holding the
program's name, group, summary, description and the flat list of its
parameters. Every field of an exported parameter is a string (or the option
list), so non-finite bounds are always carried as text and never as JSON
numbers.
"""

from __future__ import annotations

from functools import cache
from typing import TYPE_CHECKING, Final

import msgspec
from jsonschema.exceptions import ValidationError as JsonSchemaValidationError
from jsonschema.validators import Draft202012Validator

from argdoc._shared.logging import get_logger
from argdoc.docgen.models import ALL_KEY, DocGenerationError, OutputWriteError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from argdoc.docgen.resolver import DocumentationRecord
    from argdoc.docgen.workunit import ProgramWorkUnit

__all__ = [
    "EXPORT_SCHEMA_ID",
    "ArgumentExport",
    "ExportValidationError",
    "OptionExport",
    "WorkUnitExport",
    "build_export",
    "export_filename",
    "export_schema",
    "validate_export",
    "write_export",
]

LOGGER = get_logger(__name__)

EXPORT_SCHEMA_ID: Final = "https://argdoc.dev/schema/work-unit-export.json"


class OptionExport(msgspec.Struct, frozen=True, kw_only=True):
    """One legal value of an enumerated or plugin-controlled parameter."""

    name: str
    summary: str


class ArgumentExport(msgspec.Struct, frozen=True, kw_only=True, rename="camel"):
    """Exported description of one parameter; absent values are ``"NA"``."""

    summary: str
    name: str
    synonyms: str
    type: str
    required: str
    fulltext: str
    default_value: str
    min_value: str
    max_value: str
    min_rec_value: str
    max_rec_value: str
    kind: str
    options: list[OptionExport] = msgspec.field(default_factory=list)


class WorkUnitExport(msgspec.Struct, frozen=True, kw_only=True):
    """Exported description of one program."""

    summary: str
    arguments: list[ArgumentExport]
    description: str
    name: str
    group: str


class ExportValidationError(DocGenerationError):
    """Raised when an export payload does not match the export schema."""


def _argument_export(record: DocumentationRecord) -> ArgumentExport:
    bindings = record.to_bindings()
    return ArgumentExport(
        summary=record.summary,
        name=record.name,
        synonyms=str(bindings["synonyms"]),
        type=record.type,
        required=str(bindings["required"]),
        fulltext=record.fulltext,
        default_value=str(bindings["defaultValue"]),
        min_value=str(bindings["minValue"]),
        max_value=str(bindings["maxValue"]),
        min_rec_value=str(bindings["minRecValue"]),
        max_rec_value=str(bindings["maxRecValue"]),
        kind=record.kind.value,
        options=[
            OptionExport(name=option.name, summary=option.summary) for option in record.options
        ],
    )


def build_export(work_unit: ProgramWorkUnit) -> WorkUnitExport:
    """Return the export model of ``work_unit``; arguments follow page order."""
    return WorkUnitExport(
        summary=work_unit.summary,
        arguments=[_argument_export(record) for record in work_unit.records(ALL_KEY)],
        description=work_unit.description,
        name=work_unit.name,
        group=work_unit.category,
    )


def export_filename(page_filename: str) -> str:
    return f"{page_filename}.json"


@cache
def export_schema() -> dict[str, object]:
    """Return the JSON Schema (draft 2020-12) describing export files."""
    schema = msgspec.json.schema(WorkUnitExport)
    schema["$schema"] = "https://json-schema.org/draft/2020-12/schema"
    schema["$id"] = EXPORT_SCHEMA_ID
    return schema


def validate_export(payload: Mapping[str, object]) -> None:
    """Validate a decoded export payload.

    Raises
    ------
    ExportValidationError
        If ``payload`` does not match :func:`export_schema`.
    """
    validator = Draft202012Validator(export_schema())
    try:
        validator.validate(payload)
    except JsonSchemaValidationError as exc:
        message = f"Export payload does not match the export schema: {exc.message}"
        raise ExportValidationError(message) from exc


def write_export(
    work_unit: ProgramWorkUnit, destination_dir: Path, *, validate: bool = True
) -> Path:
    """Write the JSON export of ``work_unit`` and return its path.

    Parameters
    ----------
    work_unit : ProgramWorkUnit
        Program to export.
    destination_dir : Path
        Directory receiving the export, next to the rendered page.
    validate : bool, optional
        Check the payload against the export schema before writing.

    Returns
    -------
    Path
        Path of the written ``<page filename>.json`` file.

    Raises
    ------
    ExportValidationError
        If validation is enabled and the payload is rejected.
    OutputWriteError
        If the file cannot be written.
    """
    export = build_export(work_unit)
    if validate:
        validate_export(msgspec.to_builtins(export))
    encoded = msgspec.json.format(msgspec.json.encode(export), indent=2)
    destination = destination_dir / export_filename(work_unit.filename)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(encoded + b"\n")
    except OSError as exc:
        message = f"IOException during documentation creation: {destination}"
        raise OutputWriteError(message) from exc
    LOGGER.debug(
        "Wrote export %s",
        destination,
        extra={"operation": "export", "program": work_unit.name},
    )
    return destination
