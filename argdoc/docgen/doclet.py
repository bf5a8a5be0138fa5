"""Drive a complete documentation run.

A run has two phases. The first selects the programs to document and records
each one in a :class:`ProgramDirectory`; the second builds, renders and
exports every program in (category, name) order and finishes with the index
page. Any failure aborts the run.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import uuid4

from argdoc._shared.logging import CorrelationContext, get_logger, with_fields
from argdoc.docgen.export import write_export
from argdoc.docgen.index import build_index
from argdoc.docgen.models import OutputWriteError
from argdoc.docgen.render import PageRenderer
from argdoc.docgen.workunit import (
    DocumentationHandler,
    ProgramDirectory,
    WorkUnitBuilder,
    build_header,
)

if TYPE_CHECKING:
    from pathlib import Path

    from argdoc.docgen.config import DocgenSettings
    from argdoc.docgen.index import DocIndex
    from argdoc.docgen.sources import DocumentedProgram, ProgramCatalog
    from argdoc.docgen.workunit import ProgramWorkUnit

__all__ = ["Doclet", "DocletResult"]

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class DocletResult:
    """Artifacts written by one run, in processing order."""

    pages: tuple[Path, ...]
    exports: tuple[Path, ...]
    index: Path
    work_units: tuple[ProgramWorkUnit, ...] = ()


class Doclet:
    """Generate pages, JSON exports and an index for a program catalog.

    Parameters
    ----------
    catalog : ProgramCatalog
        Programs to document with their parameter source and comments.
    settings : DocgenSettings
        Run options.
    handler : DocumentationHandler | None, optional
        Policy hooks; defaults to a handler using ``settings.tag_filter_prefix``.
    """

    def __init__(
        self,
        catalog: ProgramCatalog,
        settings: DocgenSettings,
        *,
        handler: DocumentationHandler | None = None,
    ) -> None:
        self._catalog = catalog
        self._settings = settings
        self._handler = handler or DocumentationHandler(
            tag_filter_prefix=settings.tag_filter_prefix
        )
        self._renderer = PageRenderer(settings.settings_dir)

    @property
    def settings(self) -> DocgenSettings:
        return self._settings

    def included_programs(self) -> tuple[DocumentedProgram, ...]:
        """Return the catalog programs that get a page in this run."""
        included: list[DocumentedProgram] = []
        for program in self._catalog.programs:
            if not program.enabled:
                LOGGER.info(
                    "Skipping disabled program %s",
                    program.qualname,
                    extra={"operation": "select_programs", "program": program.name},
                )
                continue
            if self._handler.include_in_docs(program, show_hidden=self._settings.show_hidden):
                included.append(program)
        return tuple(included)

    def compute_directory(
        self, programs: tuple[DocumentedProgram, ...] | None = None
    ) -> ProgramDirectory:
        """Return the directory of every program documented in this run."""
        selected = self.included_programs() if programs is None else programs
        extension = self._settings.output_file_extension
        return ProgramDirectory(
            build_header(
                program,
                self._catalog.comments,
                filename=self._handler.destination_filename(program, extension),
            )
            for program in selected
        )

    def run(self) -> DocletResult:
        """Generate every page, export and the index.

        Returns
        -------
        DocletResult
            Paths of the written artifacts.

        Raises
        ------
        HelpDocError
            On any binding, cross-reference, type, template or output failure.
        """
        with CorrelationContext(uuid4().hex):
            return self._run()

    def _run(self) -> DocletResult:
        started = time.monotonic()
        settings = self._settings
        destination = settings.destination_dir
        try:
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            message = f"Unable to create destination directory {destination}"
            raise OutputWriteError(message) from exc

        programs = self.included_programs()
        by_qualname = {program.qualname: program for program in programs}
        directory = self.compute_directory(programs)
        index = build_index(directory.headers)
        shared = self._shared_bindings(index)
        builder = WorkUnitBuilder(
            self._catalog.source,
            self._catalog.comments,
            directory,
            show_hidden=settings.show_hidden,
            output_extension=settings.output_file_extension,
            handler=self._handler,
        )

        pages: list[Path] = []
        exports: list[Path] = []
        work_units: list[ProgramWorkUnit] = []
        for header in directory.headers:
            logger = with_fields(LOGGER, operation="document", program=header.name)
            work_unit = builder.build(by_qualname[header.qualname])
            bindings = work_unit.to_bindings(shared)
            pages.append(
                self._renderer.write(
                    self._handler.template_name, bindings, destination / work_unit.filename
                )
            )
            exports.append(
                write_export(work_unit, destination, validate=settings.validate_exports)
            )
            work_units.append(work_unit)
            logger.info("Documented %s", header.qualname)

        index_path = self._renderer.write(
            self._handler.index_template_name,
            shared,
            destination / f"index.{settings.output_file_extension}",
        )
        LOGGER.log_success(
            "Documentation run complete",
            operation="run",
            duration_ms=(time.monotonic() - started) * 1000,
            programs=len(pages),
        )
        return DocletResult(
            pages=tuple(pages),
            exports=tuple(exports),
            index=index_path,
            work_units=tuple(work_units),
        )

    def _shared_bindings(self, index: DocIndex) -> dict[str, object]:
        return {
            "groups": index.group_bindings(),
            "data": index.data_bindings(),
            "timestamp": self._settings.build_timestamp,
            "version": self._settings.absolute_version,
            "extension": self._settings.output_file_extension,
        }
