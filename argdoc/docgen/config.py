"""Configuration for documentation runs.

Settings come from ``ARGDOC_*`` environment variables, overridden by explicit
values (typically CLI flags) passed to :func:`load_docgen_settings`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Final

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from argdoc._shared.logging import get_logger
from argdoc._shared.settings import load_settings

__all__ = ["DEFAULT_DESTINATION_DIR", "DocgenSettings", "load_docgen_settings"]

LOGGER = get_logger(__name__)

DEFAULT_DESTINATION_DIR: Final = Path("argdocs")


class DocgenSettings(BaseSettings):
    """Options of one documentation run."""

    model_config = SettingsConfigDict(env_prefix="ARGDOC_", case_sensitive=False, extra="ignore")

    settings_dir: Path | None = Field(
        default=None,
        description="Directory holding page templates; the packaged templates are used when unset",
    )
    destination_dir: Path = Field(
        default=DEFAULT_DESTINATION_DIR,
        description="Directory receiving rendered pages, JSON exports and the index",
    )
    build_timestamp: str = Field(default="[no timestamp available]")
    absolute_version: str = Field(default="[no version available]")
    show_hidden: bool = Field(
        default=False,
        description="Document hidden programs and hidden parameters",
    )
    output_file_extension: str = Field(default="html")
    tag_filter_prefix: str = Field(
        default="",
        description="Comment tags named '@<prefix>.*' are left out of program descriptions",
    )
    validate_exports: bool = Field(
        default=True,
        description="Validate each JSON export against the export schema before writing",
    )

    @field_validator("output_file_extension")
    @classmethod
    def _normalise_extension(cls, value: str) -> str:
        extension = value.strip().lstrip(".")
        if not extension:
            message = "output_file_extension must not be empty"
            raise ValueError(message)
        return extension

    @field_validator("settings_dir")
    @classmethod
    def _check_settings_dir(cls, value: Path | None) -> Path | None:
        if value is None:
            return None
        if not value.exists():
            message = f"settings_dir {value} does not exist"
            raise ValueError(message)
        if not value.is_dir():
            message = f"settings_dir {value} is not a directory"
            raise ValueError(message)
        return value


def load_docgen_settings(**overrides: object) -> DocgenSettings:
    """Return validated settings; ``None`` overrides fall back to the environment.

    Raises
    ------
    SettingsError
        If any value fails validation.
    """
    explicit = {key: value for key, value in overrides.items() if value is not None}

    def _factory() -> DocgenSettings:
        return DocgenSettings(**explicit)  # type: ignore[arg-type]

    _factory.__name__ = DocgenSettings.__name__

    settings = load_settings(_factory)
    LOGGER.debug(
        "Loaded docgen settings",
        extra={"operation": "load_settings", "overrides": sorted(explicit)},
    )
    return settings
