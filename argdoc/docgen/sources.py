"""Inputs consumed by the documentation generator.

Two collaborators feed the generator:

* a :class:`ParameterSource` reports, for each documented program, its
  positional parameter, its named parameters in a stable order and its plugin
  descriptors;
* a :class:`DocCommentIndex` holds the free-text documentation of every type
  involved (programs, argument collections, enumerations, plugins) together
  with the composition and inheritance edges between them.

Both are populated through explicit registration rather than runtime
introspection. :class:`ProgramCatalog` bundles the programs with their source
and comment index so the CLI can load everything from a single
``module:attribute`` reference.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Final, Protocol, runtime_checkable

from argdoc.docgen.models import Modifier, ParameterNature
from argdoc.docgen.types import TypeDescriptor

__all__ = [
    "TEXT_TAG",
    "DocCommentIndex",
    "DocTag",
    "DocumentedProgram",
    "FieldDoc",
    "NumericBounds",
    "ParameterDeclaration",
    "ParameterSource",
    "PluginDescriptor",
    "PluginImplementation",
    "PositionalDeclaration",
    "ProgramCatalog",
    "ProgramParameters",
    "StaticParameterSource",
    "TypeDoc",
]

TEXT_TAG: Final = "Text"

_SENTENCE_END = re.compile(r"(?<=[.!?])\s")


@dataclass(frozen=True, slots=True)
class NumericBounds:
    """Hard and recommended limits of a numeric parameter.

    Infinite values mean "no limit"; for recommended limits they are reported
    as absent.
    """

    min_value: float = -math.inf
    max_value: float = math.inf
    min_recommended: float = -math.inf
    max_recommended: float = math.inf


@dataclass(frozen=True, slots=True)
class PluginImplementation:
    """One concrete plugin selectable through a descriptor."""

    name: str
    qualname: str


@dataclass(frozen=True, slots=True, eq=False)
class PluginDescriptor:
    """A family of interchangeable plugins selected through named parameters.

    Attributes
    ----------
    display_name : str
        Name used as a top-level binding key in rendered pages.
    qualname : str
        Qualified name of the descriptor type; plugin option links point at the
        page generated for it.
    plugins : Mapping[str, PluginImplementation]
        Concrete plugins keyed by their display name.
    defaults : tuple[str, ...]
        Names of the plugins enabled when the user selects none.
    controlled : Mapping[str, tuple[str, ...]]
        Allowed plugin names keyed by the long name of each parameter the
        descriptor controls.
    """

    display_name: str
    qualname: str
    plugins: Mapping[str, PluginImplementation] = field(default_factory=dict)
    defaults: tuple[str, ...] = ()
    controlled: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def allowed_values(self, parameter_name: str) -> tuple[str, ...]:
        """Return the plugin names accepted by ``parameter_name``."""
        return self.controlled.get(parameter_name, ())

    def class_for(self, plugin_name: str) -> str | None:
        """Return the qualified type of ``plugin_name`` or ``None`` when unknown."""
        implementation = self.plugins.get(plugin_name)
        return implementation.qualname if implementation is not None else None

    def default_instances(self) -> tuple[PluginImplementation, ...]:
        return tuple(self.plugins[name] for name in self.defaults if name in self.plugins)


@dataclass(frozen=True, slots=True)
class ParameterDeclaration:
    """One declared named parameter of a program.

    ``owner`` is the qualified name of the type that physically declares the
    field; documentation lookup starts there. It defaults to the program when
    left empty. ``collection_chain`` lists the argument collection types the
    field was promoted through, outermost first.
    """

    field_name: str
    type: TypeDescriptor
    full_name: str | None = None
    short_name: str | None = None
    nature: ParameterNature = ParameterNature.NAMED_OPTIONAL
    modifiers: frozenset[Modifier] = frozenset()
    doc: str | None = None
    default_literal: str | None = None
    value: object = None
    owner: str | None = None
    collection_chain: tuple[str, ...] = ()
    plugin: PluginDescriptor | None = None
    mutually_exclusive: tuple[str, ...] = ()
    bounds: NumericBounds = field(default_factory=NumericBounds)
    common: bool = False

    def __post_init__(self) -> None:
        if self.nature is ParameterNature.POSITIONAL:
            message = (
                f"Parameter {self.field_name!r} is positional; "
                "declare it with PositionalDeclaration"
            )
            raise ValueError(message)
        if self.full_name is None and self.short_name is None:
            message = f"Parameter {self.field_name!r} needs a full or short name"
            raise ValueError(message)

    @property
    def optional(self) -> bool:
        return self.nature is ParameterNature.NAMED_OPTIONAL

    @property
    def controlled_by_plugin(self) -> bool:
        return self.plugin is not None

    @property
    def advanced(self) -> bool:
        return Modifier.ADVANCED in self.modifiers

    @property
    def hidden(self) -> bool:
        return Modifier.HIDDEN in self.modifiers

    @property
    def deprecated(self) -> bool:
        return Modifier.DEPRECATED in self.modifiers

    @property
    def label(self) -> str:
        """Return the name used in error messages and logs."""
        return self.full_name or self.short_name or self.field_name


@dataclass(frozen=True, slots=True)
class PositionalDeclaration:
    """The positional parameter of a program; programs declare at most one."""

    field_name: str
    type: TypeDescriptor
    doc: str = ""


@dataclass(frozen=True, slots=True)
class ProgramParameters:
    """Everything a :class:`ParameterSource` reports for one program."""

    named: tuple[ParameterDeclaration, ...] = ()
    positional: PositionalDeclaration | None = None
    plugin_descriptors: tuple[PluginDescriptor, ...] = ()


@dataclass(frozen=True, slots=True)
class DocTag:
    """One segment of a type comment; plain text uses the ``"Text"`` tag name."""

    name: str
    text: str


@dataclass(frozen=True, slots=True)
class FieldDoc:
    """Documentation of one field declared directly on a type.

    ``collection`` names the type of an argument collection field whose own
    fields are promoted into the declaring type's parameter set.
    """

    name: str
    comment: str = ""
    collection: str | None = None
    enum_constant: bool = False


@dataclass(frozen=True, slots=True)
class TypeDoc:
    """Documentation of one type and its outgoing composition edges."""

    qualname: str
    comment: str = ""
    fields: tuple[FieldDoc, ...] = ()
    superclass: str | None = None
    segments: tuple[DocTag, ...] | None = None

    @property
    def name(self) -> str:
        return self.qualname.rpartition(".")[2]

    @property
    def summary(self) -> str:
        """Return the first sentence of the comment."""
        text = " ".join(self.comment.split())
        if not text:
            return ""
        return _SENTENCE_END.split(text, maxsplit=1)[0]

    def inline_tags(self) -> tuple[DocTag, ...]:
        if self.segments is not None:
            return self.segments
        return (DocTag(TEXT_TAG, self.comment),) if self.comment else ()

    def find_field(self, name: str) -> FieldDoc | None:
        for candidate in self.fields:
            if candidate.name == name:
                return candidate
        return None


class DocCommentIndex:
    """Lookup of type documentation by qualified name."""

    def __init__(self, types: Iterable[TypeDoc] = ()) -> None:
        self._types: dict[str, TypeDoc] = {}
        for type_doc in types:
            self.register(type_doc)

    def register(self, type_doc: TypeDoc) -> None:
        if type_doc.qualname in self._types:
            message = f"Type {type_doc.qualname!r} is already registered"
            raise ValueError(message)
        self._types[type_doc.qualname] = type_doc

    def type_doc(self, qualname: str) -> TypeDoc | None:
        return self._types.get(qualname)

    def field_comment(self, qualname: str, field_name: str) -> str | None:
        """Return the comment of a field declared directly on ``qualname``."""
        type_doc = self._types.get(qualname)
        if type_doc is None:
            return None
        field_doc = type_doc.find_field(field_name)
        return field_doc.comment if field_doc is not None else None

    def __contains__(self, qualname: object) -> bool:
        return qualname in self._types

    def __iter__(self) -> Iterator[TypeDoc]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)


@dataclass(frozen=True, slots=True)
class DocumentedProgram:
    """A program type marked for documentation.

    Attributes
    ----------
    qualname : str
        Qualified type name; keys the parameter source and the comment index.
    category : str
        Group the program is listed under in the index.
    category_summary : str
        Summary of the category shown in the index.
    extra_docs : tuple[str, ...]
        Qualified names of related programs linked from this program's page.
    enabled : bool
        Disabled programs are skipped with an informational log line.
    hidden : bool
        Hidden programs are only documented in show-hidden mode.
    concrete : bool
        Abstract program types are never documented.
    """

    qualname: str
    category: str
    category_summary: str = ""
    extra_docs: tuple[str, ...] = ()
    enabled: bool = True
    hidden: bool = False
    concrete: bool = True

    @property
    def name(self) -> str:
        return self.qualname.rpartition(".")[2]


@runtime_checkable
class ParameterSource(Protocol):
    """Reports the declared parameters of a program."""

    def parameters_for(self, program: DocumentedProgram) -> ProgramParameters: ...


class StaticParameterSource:
    """Parameter source backed by explicit registrations."""

    def __init__(self, entries: Mapping[str, ProgramParameters] | None = None) -> None:
        self._entries: dict[str, ProgramParameters] = dict(entries or {})

    def register(self, qualname: str, parameters: ProgramParameters) -> None:
        self._entries[qualname] = parameters

    def parameters_for(self, program: DocumentedProgram) -> ProgramParameters:
        """Return the registered parameters, or an empty set for unknown programs."""
        return self._entries.get(program.qualname, ProgramParameters())


@dataclass(frozen=True, slots=True)
class ProgramCatalog:
    """Programs to document together with their parameter source and comments."""

    programs: tuple[DocumentedProgram, ...]
    source: ParameterSource
    comments: DocCommentIndex
