"""Render documentation pages through jinja2 templates."""

from __future__ import annotations

from typing import TYPE_CHECKING

from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    StrictUndefined,
    TemplateError,
    select_autoescape,
)

from argdoc._shared.logging import get_logger
from argdoc.docgen.models import OutputWriteError, TemplateRenderError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

__all__ = ["PageRenderer", "build_environment"]

LOGGER = get_logger(__name__)


def build_environment(settings_dir: Path | None = None) -> Environment:
    """Return the template environment used for pages and the index.

    Parameters
    ----------
    settings_dir : Path | None, optional
        Directory searched for templates before the packaged defaults.

    Returns
    -------
    Environment
        Environment with strict undefined handling; a template referencing a
        key missing from its data model fails instead of rendering blank.
    """
    loaders: list[BaseLoader] = []
    if settings_dir is not None:
        loaders.append(FileSystemLoader(settings_dir))
    loaders.append(PackageLoader("argdoc.docgen", "templates"))
    return Environment(
        loader=ChoiceLoader(loaders),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        autoescape=select_autoescape(
            enabled_extensions=(), default=False, default_for_string=False
        ),
    )


class PageRenderer:
    """Render and write pages from bindings produced by the generator."""

    def __init__(self, settings_dir: Path | None = None) -> None:
        self._environment = build_environment(settings_dir)

    @property
    def environment(self) -> Environment:
        return self._environment

    def render(self, template_name: str, bindings: Mapping[str, object]) -> str:
        """Return ``template_name`` rendered against ``bindings``.

        Raises
        ------
        TemplateRenderError
            If the template cannot be loaded or references missing data.
        """
        try:
            template = self._environment.get_template(template_name)
            return template.render(**bindings)
        except TemplateError as exc:
            message = "TemplateException during documentation creation"
            raise TemplateRenderError(message) from exc

    def write(
        self, template_name: str, bindings: Mapping[str, object], destination: Path
    ) -> Path:
        """Render ``template_name`` into ``destination`` and return the path.

        Raises
        ------
        TemplateRenderError
            If rendering fails.
        OutputWriteError
            If ``destination`` cannot be written.
        """
        text = self.render(template_name, bindings)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(text, encoding="utf-8")
        except OSError as exc:
            message = f"IOException during documentation creation: {destination}"
            raise OutputWriteError(message) from exc
        LOGGER.debug(
            "Wrote %s",
            destination,
            extra={"operation": "render", "template": template_name},
        )
        return destination
