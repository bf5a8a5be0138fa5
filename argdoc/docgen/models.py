"""Shared enumerations and the exception taxonomy for the documentation generator.

Every fatal condition raised while building documentation derives from
:class:`HelpDocError` and may carry an RFC 9457 Problem Details payload naming
the offending program and parameter. Only one condition is recoverable: a
plugin option whose implementation has no documentation falls back to
:data:`NO_PLUGIN_SUMMARY` and is logged as a warning.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum
from typing import Final

from argdoc._shared.problem_details import (
    PROBLEM_TYPE_ROOT,
    ProblemDetailsDict,
    ProblemDetailsParams,
    build_problem_details,
)

__all__ = [
    "ALL_KEY",
    "ARGUMENT_LIST_KEYS",
    "NA",
    "NO_PLUGIN_SUMMARY",
    "POSITIONAL_NAME",
    "BindingError",
    "CrossReferenceError",
    "DocGenerationError",
    "ExitStatus",
    "HelpDocError",
    "Kind",
    "Modifier",
    "OutputWriteError",
    "ParameterNature",
    "TemplateRenderError",
    "UnsupportedTypeError",
]

NA: Final = "NA"
"""Sentinel emitted for every record field without a meaningful value."""

POSITIONAL_NAME: Final = "[NA - Positional]"
"""Display name given to the positional parameter of a program."""

NO_PLUGIN_SUMMARY: Final = "No summary available"


class Kind(StrEnum):
    """Documentation bucket a parameter is listed under."""

    POSITIONAL = "positional"
    REQUIRED = "required"
    COMMON = "common"
    ADVANCED = "advanced"
    HIDDEN = "hidden"
    DEPRECATED = "deprecated"
    DEPENDENT = "dependent"
    OPTIONAL = "optional"


ALL_KEY: Final = "all"
ARGUMENT_LIST_KEYS: Final[tuple[str, ...]] = (
    ALL_KEY,
    Kind.COMMON.value,
    Kind.POSITIONAL.value,
    Kind.REQUIRED.value,
    Kind.OPTIONAL.value,
    Kind.ADVANCED.value,
    Kind.DEPENDENT.value,
    Kind.HIDDEN.value,
    Kind.DEPRECATED.value,
)


class ParameterNature(StrEnum):
    """How a parameter is supplied on the command line."""

    NAMED_OPTIONAL = "named-optional"
    NAMED_REQUIRED = "named-required"
    POSITIONAL = "positional"


class Modifier(StrEnum):
    """Flags attached to a declared parameter."""

    ADVANCED = "advanced"
    HIDDEN = "hidden"
    DEPRECATED = "deprecated"


class ExitStatus(IntEnum):
    """Process exit codes returned by the CLI."""

    SUCCESS = 0
    ERROR = 1
    CONFIG = 2


class HelpDocError(RuntimeError):
    """Base exception for documentation generation failures."""

    __slots__ = ("problem",)

    problem: ProblemDetailsDict | None

    def __init__(self, message: str, *, problem: ProblemDetailsDict | None = None) -> None:
        super().__init__(message)
        self.problem = problem


def _problem(
    slug: str, title: str, message: str, *, program: str, parameter: str | None
) -> ProblemDetailsDict:
    instance = f"urn:argdoc:program:{program}"
    if parameter:
        instance = f"{instance}:{parameter}"
    extensions: dict[str, str] = {"program": program}
    if parameter:
        extensions["parameter"] = parameter
    return build_problem_details(
        ProblemDetailsParams(
            type=f"{PROBLEM_TYPE_ROOT}/{slug}",
            title=title,
            status=422,
            detail=message,
            instance=instance,
            extensions=extensions,
        )
    )


class BindingError(HelpDocError):
    """Raised when a parameter's documentation cannot be located."""

    def __init__(self, message: str, *, program: str, parameter: str | None = None) -> None:
        super().__init__(
            message,
            problem=_problem(
                "binding-error",
                "Parameter documentation not found",
                message,
                program=program,
                parameter=parameter,
            ),
        )
        self.program = program
        self.parameter = parameter


class CrossReferenceError(HelpDocError):
    """Raised when a related-program reference names an undocumented program."""

    def __init__(self, message: str, *, program: str, target: str) -> None:
        super().__init__(
            message,
            problem=_problem(
                "cross-reference-error",
                "Unresolved related documentation",
                message,
                program=program,
                parameter=None,
            ),
        )
        self.program = program
        self.target = target


class UnsupportedTypeError(HelpDocError):
    """Raised when a declared type cannot be rendered into a display string.

    Type rendering raises it bare; the resolver re-raises it with the program
    and parameter so the payload names both.
    """

    def __init__(
        self, message: str, *, program: str | None = None, parameter: str | None = None
    ) -> None:
        problem = None
        if program is not None:
            problem = _problem(
                "unsupported-type",
                "Unsupported parameter type",
                message,
                program=program,
                parameter=parameter,
            )
        super().__init__(message, problem=problem)
        self.program = program
        self.parameter = parameter


class DocGenerationError(HelpDocError):
    """Raised when writing a rendered page or export fails."""


class TemplateRenderError(DocGenerationError):
    """Raised when the template engine rejects a template or its data model."""


class OutputWriteError(DocGenerationError):
    """Raised when a generated artifact cannot be written to disk."""
