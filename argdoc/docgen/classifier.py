"""Assign each named parameter to exactly one documentation kind."""

from __future__ import annotations

from typing import TYPE_CHECKING

from argdoc.docgen.models import Kind

if TYPE_CHECKING:
    from argdoc.docgen.sources import ParameterDeclaration

__all__ = ["classify"]


def classify(declaration: ParameterDeclaration) -> Kind:
    """Return the documentation kind of ``declaration``.

    Rules are checked in order and the first match wins: plugin-controlled
    parameters are ``dependent`` whatever else they are, then required, common,
    advanced, hidden and deprecated parameters, and everything else is
    ``optional``. Positional parameters never reach this function.

    Parameters
    ----------
    declaration : ParameterDeclaration
        Named parameter to classify.

    Returns
    -------
    Kind
        Documentation kind of the parameter.
    """
    if declaration.controlled_by_plugin:
        return Kind.DEPENDENT
    if not declaration.optional:
        return Kind.REQUIRED
    if declaration.common:
        return Kind.COMMON
    if declaration.advanced:
        return Kind.ADVANCED
    if declaration.hidden:
        return Kind.HIDDEN
    if declaration.deprecated:
        return Kind.DEPRECATED
    return Kind.OPTIONAL
