"""A small but complete program catalog used across the docgen tests.

``FilterReads`` exercises every parameter kind: a required numeric parameter,
a hidden flag, a common parameter promoted from an argument collection, an
advanced enumeration, a deprecated parameter inherited from a base type and a
plugin-controlled parameter. ``CountReads`` has only a positional parameter
and links to ``FilterReads``; ``IndexReference`` has no parameters at all.
"""

from __future__ import annotations

from argdoc.docgen.models import Modifier, ParameterNature
from argdoc.docgen.sources import (
    DocCommentIndex,
    DocTag,
    DocumentedProgram,
    FieldDoc,
    NumericBounds,
    ParameterDeclaration,
    PluginDescriptor,
    PluginImplementation,
    PositionalDeclaration,
    ProgramCatalog,
    ProgramParameters,
    StaticParameterSource,
    TypeDoc,
)
from argdoc.docgen.types import TypeDescriptor

FILTER_READS = "demo.tools.FilterReads"
COUNT_READS = "demo.tools.CountReads"
INDEX_REFERENCE = "demo.tools.IndexReference"
READ_TOOLS = "Read Tools"
REFERENCE_UTILITIES = "Reference Utilities"


def build_comments() -> DocCommentIndex:
    return DocCommentIndex(
        [
            TypeDoc(
                "demo.CommandLineProgram",
                comment="Base type of every program.",
                fields=(FieldDoc("verbosity", "Control verbosity of logging."),),
            ),
            TypeDoc(
                "demo.ReadInputArguments",
                comment="Arguments describing read inputs.",
                fields=(FieldDoc("input", "BAM/SAM/CRAM file containing reads."),),
            ),
            TypeDoc(
                FILTER_READS,
                comment=(
                    "Filters reads by quality. Reads below the threshold are dropped. "
                    "Internal notes follow."
                ),
                fields=(
                    FieldDoc("threshold", "Minimum base quality to keep a read."),
                    FieldDoc("debugFlag", "Emit debugging output."),
                    FieldDoc("inputArgs", collection="demo.ReadInputArguments"),
                    FieldDoc("mode", "How strictly reads are filtered."),
                    FieldDoc("readFilter", "Read filters applied before counting."),
                ),
                superclass="demo.CommandLineProgram",
                segments=(
                    DocTag("Text", "Filters reads by quality. "),
                    DocTag("@internal.owner", "team-reads "),
                    DocTag("Text", "Reads below the threshold are dropped."),
                ),
            ),
            TypeDoc(
                "demo.FilterMode",
                comment="Filtering strictness.",
                fields=(
                    FieldDoc("STRICT", "Drop any read failing a check.", enum_constant=True),
                    FieldDoc("LENIENT", "Keep borderline reads.", enum_constant=True),
                ),
            ),
            TypeDoc(
                "demo.filters.MappedFilter",
                comment="Keeps only mapped reads.",
            ),
            TypeDoc(
                COUNT_READS,
                comment="Counts reads in the given files. Unmapped reads are included.",
                superclass="demo.CommandLineProgram",
            ),
            TypeDoc(
                INDEX_REFERENCE,
                comment="Builds an index for a reference sequence.",
            ),
        ]
    )


def build_descriptor() -> PluginDescriptor:
    return PluginDescriptor(
        display_name="ReadFilterPluginDescriptor",
        qualname="demo.ReadFilterPluginDescriptor",
        plugins={
            "MappedFilter": PluginImplementation("MappedFilter", "demo.filters.MappedFilter"),
            "DuplicateFilter": PluginImplementation(
                "DuplicateFilter", "demo.filters.DuplicateFilter"
            ),
        },
        defaults=("MappedFilter",),
        controlled={"read-filter": ("MappedFilter", "DuplicateFilter")},
    )


def filter_reads_parameters() -> ProgramParameters:
    descriptor = build_descriptor()
    return ProgramParameters(
        named=(
            ParameterDeclaration(
                field_name="threshold",
                type=TypeDescriptor.plain("int"),
                full_name="threshold",
                short_name="t",
                nature=ParameterNature.NAMED_REQUIRED,
                doc="Minimum base quality.",
                bounds=NumericBounds(min_value=0, max_value=100),
            ),
            ParameterDeclaration(
                field_name="debugFlag",
                type=TypeDescriptor.plain("bool"),
                full_name="debugFlag",
                modifiers=frozenset({Modifier.HIDDEN}),
                doc="Debug output.",
                value=False,
            ),
            ParameterDeclaration(
                field_name="input",
                type=TypeDescriptor.parametrized("List", TypeDescriptor.plain("String")),
                full_name="input",
                short_name="I",
                doc="Input reads.",
                value=["a.bam", "b.bam"],
                collection_chain=("demo.ReadInputArguments",),
                common=True,
            ),
            ParameterDeclaration(
                field_name="mode",
                type=TypeDescriptor.plain("FilterMode", enum_type="demo.FilterMode"),
                full_name="mode",
                modifiers=frozenset({Modifier.ADVANCED}),
                doc="Filtering mode.",
                default_literal="STRICT",
            ),
            ParameterDeclaration(
                field_name="verbosity",
                type=TypeDescriptor.plain("String"),
                full_name="verbosity",
                modifiers=frozenset({Modifier.DEPRECATED}),
                doc="Logging verbosity.",
                value="INFO",
            ),
            ParameterDeclaration(
                field_name="readFilter",
                type=TypeDescriptor.parametrized("List", TypeDescriptor.plain("String")),
                full_name="read-filter",
                short_name="RF",
                doc="Read filters to apply.",
                value=[],
                plugin=descriptor,
                mutually_exclusive=("disable-read-filter", "disable-all-filters"),
            ),
        ),
        plugin_descriptors=(descriptor,),
    )


def count_reads_parameters() -> ProgramParameters:
    return ProgramParameters(
        positional=PositionalDeclaration(
            field_name="inputFiles",
            type=TypeDescriptor.parametrized("List", TypeDescriptor.plain("File")),
            doc="Files to count.",
        )
    )


def build_programs() -> tuple[DocumentedProgram, ...]:
    return (
        DocumentedProgram(FILTER_READS, READ_TOOLS, "Tools that process reads."),
        DocumentedProgram(INDEX_REFERENCE, REFERENCE_UTILITIES, "Reference helpers."),
        DocumentedProgram(
            COUNT_READS,
            READ_TOOLS,
            "Tools that process reads.",
            extra_docs=(FILTER_READS,),
        ),
    )


def build_source() -> StaticParameterSource:
    return StaticParameterSource(
        {
            FILTER_READS: filter_reads_parameters(),
            COUNT_READS: count_reads_parameters(),
        }
    )


def build_catalog() -> ProgramCatalog:
    return ProgramCatalog(
        programs=build_programs(),
        source=build_source(),
        comments=build_comments(),
    )


CATALOG = build_catalog()
