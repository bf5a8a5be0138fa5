"""Load pydantic settings and report invalid configuration as a problem.

argdoc reads its run options from ``ARGDOC_*`` environment variables merged
with command-line overrides. :func:`load_settings` instantiates the settings
model and converts a pydantic :class:`~pydantic.ValidationError` into a
:class:`SettingsError`, whose ``problem`` the CLI prints before exiting with
the configuration status.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from pathlib import PurePath
from typing import Final

from pydantic import ValidationError
from pydantic_settings import BaseSettings

from argdoc._shared.problem_details import (
    PROBLEM_TYPE_ROOT,
    JsonValue,
    ProblemDetailsDict,
    ProblemDetailsParams,
    build_problem_details,
)

__all__: Final[list[str]] = [
    "SettingsError",
    "load_settings",
]


class SettingsError(RuntimeError):
    """Invalid configuration; ``errors`` holds one entry per rejected field."""

    def __init__(
        self,
        message: str,
        *,
        problem: ProblemDetailsDict,
        errors: Sequence[dict[str, JsonValue]],
    ) -> None:
        super().__init__(message)
        self.problem = problem
        self.errors: tuple[dict[str, JsonValue], ...] = tuple(errors)


def load_settings[SettingsT: BaseSettings](
    settings_factory: Callable[[], SettingsT] | type[SettingsT],
) -> SettingsT:
    """Build a settings object, failing with a :class:`SettingsError`.

    ``settings_factory`` is either the settings class or a closure that binds
    overrides into it. Its ``__name__`` is reported as ``settings_class``.
    """
    try:
        return settings_factory()
    except ValidationError as exc:
        name = getattr(settings_factory, "__name__", type(settings_factory).__name__)
        errors = [_jsonable_error(error) for error in exc.errors()]
        problem = build_problem_details(
            ProblemDetailsParams(
                type=f"{PROBLEM_TYPE_ROOT}/settings-invalid",
                title="Invalid argdoc settings",
                status=500,
                detail=f"{len(errors)} invalid setting(s) in {name}",
                instance=f"urn:argdoc-settings:{name}:invalid",
                extensions={"errors": list(errors), "settings_class": name},
            )
        )
        message = "Failed to load argdoc settings"
        raise SettingsError(message, problem=problem, errors=errors) from exc


def _jsonable_error(error: Mapping[str, object]) -> dict[str, JsonValue]:
    return {str(key): _jsonable(value) for key, value in error.items()}


def _jsonable(value: object) -> JsonValue:
    match value:
        case str() | int() | float() | bool() | None:
            return value
        case PurePath():
            return value.as_posix()
        case Mapping():
            return {str(key): _jsonable(item) for key, item in value.items()}
        case list() | tuple() | set() | frozenset():
            return [_jsonable(item) for item in value]
        case _:
            return repr(value)
