"""Resolve declared parameters into fixed-shape documentation records.

:class:`Resolver` fills in everything a rendered page or JSON export shows for
one parameter: display names, rendered type, default value, numeric bounds,
option lists for enumerations and plugin-controlled parameters, mutual
exclusions and attribute tags. Internally absent values are ``None``;
:meth:`DocumentationRecord.to_bindings` replaces each of them with the ``"NA"``
sentinel so templates and consumers always see every key.
"""

from __future__ import annotations

import math
from collections.abc import Set as AbstractSet
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from argdoc._shared.logging import get_logger
from argdoc.docgen.models import (
    NA,
    NO_PLUGIN_SUMMARY,
    POSITIONAL_NAME,
    BindingError,
    Kind,
    UnsupportedTypeError,
)

if TYPE_CHECKING:
    from argdoc.docgen.sources import (
        DocCommentIndex,
        ParameterDeclaration,
        PluginDescriptor,
        PositionalDeclaration,
    )
    from argdoc.docgen.types import TypeDescriptor

__all__ = [
    "DocumentationRecord",
    "OptionDoc",
    "Resolver",
    "display_names",
    "filename_for",
    "pretty_print_value",
]

LOGGER = get_logger(__name__)

type Bindings = dict[str, object]


@dataclass(frozen=True, slots=True)
class OptionDoc:
    """One legal value of an enumerated or plugin-controlled parameter."""

    name: str
    summary: str

    def to_bindings(self) -> dict[str, str]:
        return {"name": self.name, "summary": self.summary}


@dataclass(frozen=True, slots=True)
class DocumentationRecord:
    """Fully resolved description of one parameter."""

    name: str
    kind: Kind
    required: bool
    type: str
    summary: str
    fulltext: str
    synonyms: str | None = None
    default_value: str | None = None
    min_value: str | None = None
    max_value: str | None = None
    min_rec_value: str | None = None
    max_rec_value: str | None = None
    options: tuple[OptionDoc, ...] = ()
    other_argument_required: str | None = None
    exclusive_of: str | None = None
    attributes: str | None = None

    def to_bindings(self) -> Bindings:
        """Return the template/export mapping with ``"NA"`` for absent values."""
        return {
            "name": self.name,
            "synonyms": _or_na(self.synonyms),
            "type": self.type,
            "required": "yes" if self.required else "no",
            "summary": self.summary,
            "fulltext": self.fulltext,
            "otherArgumentRequired": _or_na(self.other_argument_required),
            "exclusiveOf": _or_na(self.exclusive_of),
            "options": [option.to_bindings() for option in self.options],
            "attributes": _or_na(self.attributes),
            "kind": self.kind.value,
            "defaultValue": _or_na(self.default_value),
            "minValue": _or_na(self.min_value),
            "maxValue": _or_na(self.max_value),
            "minRecValue": _or_na(self.min_rec_value),
            "maxRecValue": _or_na(self.max_rec_value),
        }


def _or_na(value: str | None) -> str:
    return NA if value is None else value


def filename_for(qualname: str, extension: str) -> str:
    """Return the output file name of the page documenting ``qualname``."""
    return f"{qualname.replace('.', '_')}.{extension}"


def display_names(short_name: str | None, full_name: str | None) -> tuple[str, str | None]:
    """Return ``(primary, synonym)`` display names.

    The long ``--`` form is always primary when both names exist, and the short
    ``-`` form becomes the synonym. This ordering holds regardless of name
    lengths so that listings stay consistent across programs.
    """
    short = f"-{short_name}" if short_name else None
    full = f"--{full_name}" if full_name else None
    if short is None:
        if full is None:
            message = "A parameter needs a short or full name"
            raise ValueError(message)
        return full, None
    if full is None:
        return short, None
    return full, short


def pretty_print_value(value: object) -> str:
    """Return the display form of a parameter's current value.

    Sequences render as bracketed comma-joined elements, an empty string as
    ``""``, booleans in lower case and everything else through ``str``.
    """
    if isinstance(value, str):
        return '""' if value == "" else value
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_element_text(item) for item in value) + "]"
    if isinstance(value, AbstractSet):
        return "[" + ", ".join(sorted(_element_text(item) for item in value)) + "]"
    return _element_text(value)


def _element_text(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, float):
        return _format_number(value)
    return str(value)


def _format_number(value: float) -> str:
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if math.isnan(value):
        return "NaN"
    return str(value)


class Resolver:
    """Build :class:`DocumentationRecord` objects from declarations.

    Parameters
    ----------
    comments : DocCommentIndex
        Documentation of enumeration and plugin types.
    output_extension : str
        Extension of generated pages; used for plugin option links.
    """

    def __init__(self, comments: DocCommentIndex, *, output_extension: str = "html") -> None:
        self._comments = comments
        self._output_extension = output_extension

    def resolve(
        self,
        declaration: ParameterDeclaration,
        bound_text: str,
        kind: Kind,
        *,
        program: str,
    ) -> DocumentationRecord:
        """Return the record for a named parameter.

        Parameters
        ----------
        declaration : ParameterDeclaration
            Declared parameter.
        bound_text : str
            Full documentation text located by the binder.
        kind : Kind
            Classification of the parameter.
        program : str
            Name of the program being documented, used in error reports.

        Returns
        -------
        DocumentationRecord
            Record with every applicable field populated.

        Raises
        ------
        BindingError
            If the parameter takes an enumeration whose type is undocumented.
        UnsupportedTypeError
            If the declared type contains a wildcard.
        """
        primary, synonym = display_names(declaration.short_name, declaration.full_name)
        min_value, max_value, min_rec, max_rec = self._bounds(declaration)
        attributes = [
            tag
            for tag, present in (
                ("required", not declaration.optional),
                ("deprecated", declaration.deprecated),
            )
            if present
        ]
        plugin = declaration.plugin
        return DocumentationRecord(
            name=primary,
            synonyms=synonym,
            kind=kind,
            required=not declaration.optional,
            type=_render_type(declaration.type, program=program, parameter=declaration.label),
            summary=declaration.doc or "",
            fulltext=bound_text,
            default_value=self._default_value(declaration),
            min_value=min_value,
            max_value=max_value,
            min_rec_value=min_rec,
            max_rec_value=max_rec,
            options=self._options(declaration, program),
            other_argument_required=plugin.display_name if plugin is not None else None,
            exclusive_of=", ".join(declaration.mutually_exclusive) or None,
            attributes=", ".join(attributes) or None,
        )

    def resolve_positional(
        self, positional: PositionalDeclaration, *, program: str
    ) -> DocumentationRecord:
        """Return the record for a program's positional parameter."""
        return DocumentationRecord(
            name=POSITIONAL_NAME,
            kind=Kind.POSITIONAL,
            required=True,
            type=_render_type(positional.type, program=program, parameter=positional.field_name),
            summary=positional.doc,
            fulltext=positional.doc,
        )

    @staticmethod
    def _default_value(declaration: ParameterDeclaration) -> str | None:
        if declaration.value is not None:
            return pretty_print_value(declaration.value)
        return declaration.default_literal

    @staticmethod
    def _bounds(
        declaration: ParameterDeclaration,
    ) -> tuple[str | None, str | None, str | None, str | None]:
        if not declaration.type.is_numeric:
            return None, None, None, None
        bounds = declaration.bounds
        min_rec = (
            None if bounds.min_recommended == -math.inf else _bound_text(bounds.min_recommended)
        )
        max_rec = (
            None if bounds.max_recommended == math.inf else _bound_text(bounds.max_recommended)
        )
        return _bound_text(bounds.min_value), _bound_text(bounds.max_value), min_rec, max_rec

    def _options(self, declaration: ParameterDeclaration, program: str) -> tuple[OptionDoc, ...]:
        if declaration.plugin is not None:
            return self._plugin_options(declaration, declaration.plugin)
        if declaration.type.is_enum:
            return self._enum_options(declaration.type, declaration, program)
        return ()

    def _enum_options(
        self, type_: TypeDescriptor, declaration: ParameterDeclaration, program: str
    ) -> tuple[OptionDoc, ...]:
        enum_qualname = type_.enum_type or ""
        type_doc = self._comments.type_doc(enum_qualname)
        if type_doc is None:
            message = f"Tried to get docs for enum {enum_qualname} but none were found"
            raise BindingError(message, program=program, parameter=declaration.label)
        return tuple(
            OptionDoc(name=field_doc.name, summary=field_doc.comment)
            for field_doc in type_doc.fields
            if field_doc.enum_constant
        )

    def _plugin_options(
        self, declaration: ParameterDeclaration, descriptor: PluginDescriptor
    ) -> tuple[OptionDoc, ...]:
        lookup_name = declaration.full_name or declaration.short_name or declaration.field_name
        link_target = filename_for(descriptor.qualname, self._output_extension)
        return tuple(
            OptionDoc(
                name=f'<a href="{link_target}">{plugin_name}</a>',
                summary=self._plugin_summary(descriptor, plugin_name),
            )
            for plugin_name in descriptor.allowed_values(lookup_name)
        )

    def _plugin_summary(self, descriptor: PluginDescriptor, plugin_name: str) -> str:
        plugin_type = descriptor.class_for(plugin_name)
        if plugin_type is not None:
            type_doc = self._comments.type_doc(plugin_type)
            if type_doc is not None:
                return type_doc.comment
        LOGGER.warning(
            "No documentation for plugin %s of %s; using placeholder summary",
            plugin_name,
            descriptor.display_name,
            extra={"operation": "resolve_plugin", "plugin": plugin_name},
        )
        return NO_PLUGIN_SUMMARY


def _bound_text(value: float) -> str:
    if isinstance(value, float):
        return _format_number(value)
    return str(value)


def _render_type(descriptor: TypeDescriptor, *, program: str, parameter: str) -> str:
    try:
        return descriptor.render()
    except UnsupportedTypeError as exc:
        message = f"Parameter {parameter} of {program} has an unsupported type: {exc}"
        raise UnsupportedTypeError(message, program=program, parameter=parameter) from exc
