"""Locate the documentation comment of a parameter field.

A parameter's field may be declared on the program itself, inside an argument
collection composed into the program (at any depth), or on a superclass of
either. :class:`DocBinder` walks that graph depth first:
own fields, then each argument collection in declaration order, then the
superclass chain. Types already visited are skipped so composition cycles
terminate.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from argdoc._shared.logging import get_logger
from argdoc.docgen.models import BindingError

if TYPE_CHECKING:
    from argdoc.docgen.sources import DocCommentIndex

__all__ = ["DocBinder"]

LOGGER = get_logger(__name__)


class DocBinder:
    """Pair parameter field names with their documentation comments."""

    def __init__(self, comments: DocCommentIndex) -> None:
        self._comments = comments

    def bind(
        self,
        start_type: str,
        field_name: str,
        *,
        program: str | None = None,
        via: tuple[str, ...] = (),
    ) -> str:
        """Return the comment of ``field_name`` reachable from ``start_type``.

        Parameters
        ----------
        start_type : str
            Qualified name of the type where the search starts.
        field_name : str
            Name of the declared field to locate.
        program : str | None, optional
            Program reported in errors; defaults to ``start_type``.
        via : tuple[str, ...], optional
            Argument collections the field was promoted through, named in the
            error when the field cannot be found.

        Returns
        -------
        str
            The field's comment text (possibly empty).

        Raises
        ------
        BindingError
            If ``start_type`` is not documented, if an argument collection type
            met on the way is not documented, or if no type in the graph
            declares ``field_name``.
        """
        owner = program or start_type
        if start_type not in self._comments:
            message = f"{start_type} was referenced by {owner}, but has no documentation"
            raise BindingError(message, program=owner, parameter=field_name)
        found = self._find(start_type, field_name, owner, set())
        if found is None:
            message = f"No field found for expected field {field_name} of {owner}"
            if via:
                message = f"{message} (declared through {' -> '.join(via)})"
            raise BindingError(message, program=owner, parameter=field_name)
        LOGGER.debug(
            "Bound %s to field docs",
            field_name,
            extra={"operation": "bind", "program": owner},
        )
        return found

    def _find(
        self, qualname: str, field_name: str, program: str, visited: set[str]
    ) -> str | None:
        current: str | None = qualname
        while current is not None and current not in visited:
            visited.add(current)
            type_doc = self._comments.type_doc(current)
            if type_doc is None:
                # Undocumented base types end the superclass walk.
                return None
            comment = self._comments.field_comment(current, field_name)
            if comment is not None:
                return comment
            for field_doc in type_doc.fields:
                if field_doc.collection is None:
                    continue
                if field_doc.collection not in self._comments:
                    message = (
                        "Tried to get docs for argument collection field "
                        f"{current}.{field_doc.name} "
                        f"but could not find {field_doc.collection}"
                    )
                    raise BindingError(message, program=program, parameter=field_name)
                nested = self._find(field_doc.collection, field_name, program, visited)
                if nested is not None:
                    return nested
            current = type_doc.superclass
        return None
