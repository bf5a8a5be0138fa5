"""Shared utilities for argdoc packages."""

from __future__ import annotations

from argdoc._shared.logging import LoggerAdapter, get_logger, with_fields
from argdoc._shared.problem_details import (
    ProblemDetailsDict,
    ProblemDetailsParams,
    build_problem_details,
    render_problem,
)
from argdoc._shared.settings import SettingsError, load_settings

__all__ = [
    "LoggerAdapter",
    "ProblemDetailsDict",
    "ProblemDetailsParams",
    "SettingsError",
    "build_problem_details",
    "get_logger",
    "load_settings",
    "render_problem",
    "with_fields",
]
