"""RFC 9457 error payloads for failed documentation runs.

A failed run reports what went wrong twice: once as a log line and once as a
Problem Details object printed by the CLI. Errors raised by the generator build
the object up front; anything else is converted with
:func:`problem_from_exception` when it reaches the command line.

Examples
--------
>>> problem = build_problem_details(
...     ProblemDetailsParams(
...         type=f"{PROBLEM_TYPE_ROOT}/binding-error",
...         title="Parameter documentation not found",
...         status=422,
...         detail="No field found for expected field threshold of FilterReads",
...         instance="urn:argdoc:program:FilterReads:threshold",
...         extensions={"program": "FilterReads", "parameter": "threshold"},
...     )
... )
>>> problem["parameter"]
'threshold'
"""

# pylint: disable=redefined-builtin

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = [
    "PROBLEM_TYPE_ROOT",
    "ExceptionProblemDetailsParams",
    "JsonValue",
    "ProblemDetailsDict",
    "ProblemDetailsParams",
    "build_problem_details",
    "problem_from_exception",
    "render_problem",
]

PROBLEM_TYPE_ROOT = "https://argdoc.dev/problems"

type JsonValue = str | int | float | bool | None | list[JsonValue] | dict[str, JsonValue]
type ProblemDetailsDict = dict[str, JsonValue]

_CORE_MEMBERS = ("type", "title", "status", "detail", "instance")


@dataclass(frozen=True, slots=True)
class ProblemDetailsParams:
    """Standard members of a problem plus argdoc-specific extension members.

    ``type`` is a URI under :data:`PROBLEM_TYPE_ROOT` and ``instance`` a URN
    naming the program (and parameter) at fault.
    """

    type: str
    title: str
    status: int
    detail: str
    instance: str
    extensions: Mapping[str, JsonValue] | None = None


@dataclass(frozen=True, slots=True)
class ExceptionProblemDetailsParams:
    """A problem template to be completed from a caught exception."""

    base: ProblemDetailsParams
    exception: BaseException
    extensions: Mapping[str, JsonValue] | None = None


def build_problem_details(params: ProblemDetailsParams) -> ProblemDetailsDict:
    """Return the JSON-ready problem described by ``params``.

    Extension members sit beside the standard ones; an extension can never
    replace one of the five standard members.
    """
    problem: ProblemDetailsDict = {member: getattr(params, member) for member in _CORE_MEMBERS}
    for key, value in (params.extensions or {}).items():
        problem.setdefault(str(key), value)
    return problem


def problem_from_exception(params: ExceptionProblemDetailsParams) -> ProblemDetailsDict:
    """Fill ``params.base`` from an exception.

    The message becomes ``detail``; the class name is added as
    ``exception_type`` ahead of any caller extensions.
    """
    extensions: dict[str, JsonValue] = {"exception_type": type(params.exception).__name__}
    extensions.update(params.extensions or {})
    return build_problem_details(
        replace(params.base, detail=str(params.exception), extensions=extensions)
    )


def render_problem(problem: ProblemDetailsDict) -> str:
    return json.dumps(problem, default=str)
