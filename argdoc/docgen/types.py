"""Type descriptors and their display rendering.

A :class:`TypeDescriptor` describes the declared value type of a parameter as
a small tree: plain names, parametrized types with child descriptors, array
types with a component descriptor, and wildcards. Wildcards exist so sources
can describe what they found; rendering one is an error.

Examples
--------
>>> from argdoc.docgen.types import TypeDescriptor
>>> TypeDescriptor.parametrized("List", TypeDescriptor.plain("String")).render()
'List[String]'
>>> TypeDescriptor.array(TypeDescriptor.plain("int")).render()
'int[]'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Literal

from argdoc.docgen.models import UnsupportedTypeError

__all__ = ["NUMERIC_TYPE_NAMES", "TypeDescriptor", "TypeShape"]

type TypeShape = Literal["plain", "parametrized", "array", "wildcard"]

NUMERIC_TYPE_NAMES: Final[frozenset[str]] = frozenset(
    {
        "int",
        "float",
        "complex",
        "Decimal",
        "Fraction",
        "byte",
        "short",
        "long",
        "double",
        "Byte",
        "Short",
        "Integer",
        "Long",
        "Float",
        "Double",
        "Number",
        "BigInteger",
        "BigDecimal",
    }
)


@dataclass(frozen=True, slots=True)
class TypeDescriptor:
    """Declared type of a parameter.

    Attributes
    ----------
    shape : TypeShape
        Kind tag selecting how ``name`` and ``args`` are interpreted.
    name : str
        Simple name for plain and parametrized types (``"List"``); the bound
        text for wildcards; unused for arrays.
    args : tuple[TypeDescriptor, ...]
        Type arguments of a parametrized type, or the single component type
        of an array.
    enum_type : str | None
        Qualified name of the enumeration type documented in the comment
        index when the parameter takes one of a fixed set of constants.
    """

    shape: TypeShape
    name: str = ""
    args: tuple[TypeDescriptor, ...] = ()
    enum_type: str | None = None

    @classmethod
    def plain(cls, name: str, *, enum_type: str | None = None) -> TypeDescriptor:
        return cls("plain", name, (), enum_type)

    @classmethod
    def parametrized(cls, name: str, *args: TypeDescriptor) -> TypeDescriptor:
        return cls("parametrized", name, tuple(args))

    @classmethod
    def array(cls, component: TypeDescriptor) -> TypeDescriptor:
        return cls("array", "", (component,))

    @classmethod
    def wildcard(cls, bound: str = "?") -> TypeDescriptor:
        return cls("wildcard", bound)

    @property
    def is_numeric(self) -> bool:
        """Return ``True`` for plain numeric types."""
        return self.shape == "plain" and self.name in NUMERIC_TYPE_NAMES

    @property
    def is_enum(self) -> bool:
        return self.enum_type is not None

    def render(self) -> str:
        """Return the display string for this type.

        Raises
        ------
        UnsupportedTypeError
            When the descriptor, or any descriptor nested in it, is a wildcard.
        """
        if self.shape == "plain":
            return self.name
        if self.shape == "parametrized":
            rendered_args = ",".join(arg.render() for arg in self.args)
            return f"{self.name}[{rendered_args}]"
        if self.shape == "array":
            return f"{self.args[0].render()}[]"
        message = f"Wildcard types are not supported in parameter declarations: {self.name}"
        raise UnsupportedTypeError(message)
