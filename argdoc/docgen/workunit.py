"""Build one documentation work unit per program.

A run first registers every program that will be documented in a read-only
:class:`ProgramDirectory`, so that related-program references can point at
programs processed later in the run. :class:`WorkUnitBuilder` then turns each
program into a frozen :class:`ProgramWorkUnit` holding its sorted per-kind
parameter records.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from argdoc._shared.logging import get_logger, with_fields
from argdoc.docgen.binder import DocBinder
from argdoc.docgen.classifier import classify
from argdoc.docgen.models import (
    ALL_KEY,
    ARGUMENT_LIST_KEYS,
    POSITIONAL_NAME,
    BindingError,
    CrossReferenceError,
    HelpDocError,
    Kind,
    TemplateRenderError,
)
from argdoc.docgen.resolver import DocumentationRecord, Resolver, filename_for

if TYPE_CHECKING:
    from argdoc.docgen.sources import (
        DocCommentIndex,
        DocumentedProgram,
        ParameterSource,
        PluginDescriptor,
        TypeDoc,
    )

__all__ = [
    "DocumentationHandler",
    "ProgramDirectory",
    "ProgramWorkUnit",
    "WorkUnitBuilder",
    "WorkUnitHeader",
    "argument_sort_key",
    "build_header",
    "filtered_description",
    "sort_records",
]

LOGGER = get_logger(__name__)

POSITIONAL_SORT_KEY = "Positional"


@dataclass(frozen=True, slots=True, order=True)
class WorkUnitHeader:
    """Identity of a documented program; ordered by category, then name."""

    category: str
    name: str
    qualname: str
    filename: str = field(compare=False)
    summary: str = field(default="", compare=False)
    category_summary: str = field(default="", compare=False)

    def index_data(self) -> dict[str, str]:
        """Return the row describing this program in index listings."""
        return {
            "name": self.name,
            "summary": self.summary,
            "filename": self.filename,
            "group": self.category,
        }

    def link(self) -> dict[str, str]:
        return {"name": self.name, "filename": self.filename}


class DocumentationHandler:
    """Per-run policy hooks for deciding and decorating documented programs.

    Subclasses customise which programs are documented, which comment tags are
    hidden from descriptions, and which extra top-level bindings each page
    receives.
    """

    template_name = "generic.template.html"
    index_template_name = "generic.index.template.html"

    def __init__(self, *, tag_filter_prefix: str = "") -> None:
        self.tag_filter_prefix = tag_filter_prefix

    def include_in_docs(self, program: DocumentedProgram, *, show_hidden: bool) -> bool:
        """Return ``True`` when ``program`` should get a page."""
        if program.hidden and not show_hidden:
            return False
        return program.concrete

    def destination_filename(self, program: DocumentedProgram, extension: str) -> str:
        return filename_for(program.qualname, extension)

    def custom_bindings(
        self, program: DocumentedProgram, type_doc: TypeDoc
    ) -> Mapping[str, object]:
        """Return extra top-level bindings for the page of ``program``."""
        del program, type_doc
        return {}


def build_header(
    program: DocumentedProgram,
    comments: DocCommentIndex,
    *,
    filename: str,
) -> WorkUnitHeader:
    """Return the identity record of ``program``.

    Raises
    ------
    BindingError
        If the program type has no documentation.
    """
    type_doc = comments.type_doc(program.qualname)
    if type_doc is None:
        message = f"{program.qualname} is documented but has no type documentation"
        raise BindingError(message, program=program.name)
    return WorkUnitHeader(
        category=program.category,
        name=program.name,
        qualname=program.qualname,
        filename=filename,
        summary=type_doc.summary,
        category_summary=program.category_summary,
    )


class ProgramDirectory(Mapping[str, WorkUnitHeader]):
    """Read-only lookup of the programs documented in one run.

    Iteration yields qualified names in (category, name) order.
    """

    def __init__(self, headers: Iterable[WorkUnitHeader]) -> None:
        ordered = sorted(headers)
        self._headers: dict[str, WorkUnitHeader] = {}
        for header in ordered:
            if header.qualname in self._headers:
                message = f"Program {header.qualname} was registered twice"
                raise HelpDocError(message)
            self._headers[header.qualname] = header

    def __getitem__(self, qualname: str) -> WorkUnitHeader:
        return self._headers[qualname]

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    @property
    def headers(self) -> tuple[WorkUnitHeader, ...]:
        return tuple(self._headers.values())

    def resolve(self, program: str, target: str) -> WorkUnitHeader:
        """Return the header of ``target`` referenced from ``program``.

        Raises
        ------
        CrossReferenceError
            If ``target`` is not documented in this run.
        """
        header = self._headers.get(target)
        if header is None:
            message = (
                f'An "extradocs" value ({target}) was specified for ({program}), but the '
                "target was not included in this run, or the target has no documentation."
            )
            raise CrossReferenceError(message, program=program, target=target)
        return header


@dataclass(frozen=True, slots=True)
class ProgramWorkUnit:
    """Resolved documentation of one program."""

    header: WorkUnitHeader
    description: str
    arguments: Mapping[str, tuple[DocumentationRecord, ...]]
    extra_docs: tuple[WorkUnitHeader, ...] = ()
    plugin_defaults: Mapping[str, tuple[dict[str, str], ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    custom_bindings: Mapping[str, object] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def name(self) -> str:
        return self.header.name

    @property
    def filename(self) -> str:
        return self.header.filename

    @property
    def category(self) -> str:
        return self.header.category

    @property
    def summary(self) -> str:
        return self.header.summary

    def records(self, key: str = ALL_KEY) -> tuple[DocumentationRecord, ...]:
        return self.arguments[key]

    def to_bindings(self, shared: Mapping[str, object] | None = None) -> dict[str, object]:
        """Return the page data model handed to the renderer.

        Plugin defaults, handler bindings and the run-wide ``shared`` bindings
        are added to the page root in that order.

        Raises
        ------
        TemplateRenderError
            If any of them reuses a key that is already bound.
        """
        root: dict[str, object] = {
            "name": self.name,
            "summary": self.summary,
            "description": self.description,
            "group": self.category,
            "extradocs": [header.link() for header in self.extra_docs],
            "arguments": {
                key: [record.to_bindings() for record in records]
                for key, records in self.arguments.items()
            },
        }
        for display_name, defaults in self.plugin_defaults.items():
            self._bind(root, display_name, [dict(entry) for entry in defaults], "plugin defaults")
        for key, value in self.custom_bindings.items():
            self._bind(root, key, value, "handler binding")
        for key, value in (shared or {}).items():
            self._bind(root, key, value, "run binding")
        return root

    def _bind(self, root: dict[str, object], key: str, value: object, origin: str) -> None:
        if key in root:
            message = (
                f"The {origin} {key!r} of {self.name} collides with an existing page binding"
            )
            raise TemplateRenderError(message)
        root[key] = value


def argument_sort_key(name: str) -> str:
    """Return the comparison key of a displayed parameter name.

    Keys are lower-cased with the ``--``/``-`` prefix removed; the positional
    sentinel compares as ``"Positional"``.

    Raises
    ------
    HelpDocError
        If ``name`` is neither dash-prefixed nor the positional sentinel.
    """
    lowered = name.lower()
    if lowered.startswith("--"):
        return lowered[2:]
    if lowered.startswith("-"):
        return lowered[1:]
    if lowered == POSITIONAL_NAME.lower():
        return POSITIONAL_SORT_KEY
    message = f"Expected parameter names beginning with at least one -, but found {name}"
    raise HelpDocError(message)


def sort_records(records: Iterable[DocumentationRecord]) -> tuple[DocumentationRecord, ...]:
    return tuple(sorted(records, key=lambda record: argument_sort_key(record.name)))


def filtered_description(type_doc: TypeDoc, tag_filter_prefix: str) -> str:
    """Join the comment segments of ``type_doc`` except the filtered tags."""
    excluded_prefix = f"@{tag_filter_prefix}."
    return "".join(
        tag.text for tag in type_doc.inline_tags() if not tag.name.startswith(excluded_prefix)
    )


class WorkUnitBuilder:
    """Assemble :class:`ProgramWorkUnit` objects for one run.

    Parameters
    ----------
    source : ParameterSource
        Reports each program's declared parameters.
    comments : DocCommentIndex
        Documentation of every type reachable from the programs.
    directory : ProgramDirectory
        Programs known to this run; related-program references must resolve
        against it.
    show_hidden : bool, optional
        Document hidden parameters. Defaults to ``False``.
    output_extension : str, optional
        Extension of generated pages. Defaults to ``"html"``.
    handler : DocumentationHandler | None, optional
        Policy hooks; a default handler is used when omitted.
    """

    def __init__(
        self,
        source: ParameterSource,
        comments: DocCommentIndex,
        directory: ProgramDirectory,
        *,
        show_hidden: bool = False,
        output_extension: str = "html",
        handler: DocumentationHandler | None = None,
    ) -> None:
        self._source = source
        self._comments = comments
        self._directory = directory
        self._show_hidden = show_hidden
        self._output_extension = output_extension
        self._handler = handler or DocumentationHandler()
        self._binder = DocBinder(comments)
        self._resolver = Resolver(comments, output_extension=output_extension)

    def header_for(self, program: DocumentedProgram) -> WorkUnitHeader:
        header = self._directory.get(program.qualname)
        if header is not None:
            return header
        filename = self._handler.destination_filename(program, self._output_extension)
        return build_header(program, self._comments, filename=filename)

    def build(self, program: DocumentedProgram) -> ProgramWorkUnit:
        """Return the work unit documenting ``program``.

        Raises
        ------
        BindingError
            If a visible parameter's documentation cannot be located.
        CrossReferenceError
            If a related-program reference is not part of this run.
        UnsupportedTypeError
            If a parameter type cannot be rendered.
        """
        header = self.header_for(program)
        logger = with_fields(LOGGER, operation="build_work_unit", program=program.name)
        type_doc = self._comments.type_doc(program.qualname)
        if type_doc is None:
            message = f"{program.qualname} is documented but has no type documentation"
            raise BindingError(message, program=program.name)
        parameters = self._source.parameters_for(program)

        buckets: dict[str, list[DocumentationRecord]] = {key: [] for key in ARGUMENT_LIST_KEYS}
        if parameters.positional is not None:
            record = self._resolver.resolve_positional(
                parameters.positional, program=program.name
            )
            buckets[Kind.POSITIONAL.value].append(record)
            buckets[ALL_KEY].append(record)

        skipped = 0
        for declaration in parameters.named:
            if declaration.hidden and not self._show_hidden:
                skipped += 1
                continue
            bound_text = self._binder.bind(
                declaration.owner or program.qualname,
                declaration.field_name,
                program=program.name,
                via=declaration.collection_chain,
            )
            kind = classify(declaration)
            record = self._resolver.resolve(declaration, bound_text, kind, program=program.name)
            buckets[kind.value].append(record)
            buckets[ALL_KEY].append(record)

        arguments = MappingProxyType({key: sort_records(items) for key, items in buckets.items()})
        extra_docs = tuple(
            self._directory.resolve(program.name, target) for target in program.extra_docs
        )
        logger.debug(
            "Collected %d parameters (%d hidden skipped)",
            len(arguments[ALL_KEY]),
            skipped,
        )
        return ProgramWorkUnit(
            header=header,
            description=filtered_description(type_doc, self._handler.tag_filter_prefix),
            arguments=arguments,
            extra_docs=extra_docs,
            plugin_defaults=MappingProxyType(
                self._plugin_defaults(parameters.plugin_descriptors)
            ),
            custom_bindings=MappingProxyType(
                dict(self._handler.custom_bindings(program, type_doc))
            ),
        )

    def _plugin_defaults(
        self, descriptors: Iterable[PluginDescriptor]
    ) -> dict[str, tuple[dict[str, str], ...]]:
        return {
            descriptor.display_name: tuple(
                {
                    "name": plugin.qualname.rpartition(".")[2],
                    "filename": filename_for(plugin.qualname, self._output_extension),
                }
                for plugin in descriptor.default_instances()
            )
            for descriptor in descriptors
        }
