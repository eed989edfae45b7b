"""Markdown formatting for changeset documents.

The free-text summary is normalised with mdformat using the nearest
``.mdformat.toml`` (the same file the mdformat CLI reads). Release headers
and category lines are structural and never pass through the formatter:
markdown reads ``---`` as a thematic break and mdformat escapes the
brackets of ``- [ Added ]``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import mdformat
from pydantic import BaseModel, ConfigDict

from .toml import load_toml

CONFIG_FILENAME = ".mdformat.toml"


class FormatOptions(BaseModel):
    """The subset of mdformat options that affects changeset text."""

    # exclude, extensions, ... are CLI-only keys
    model_config = ConfigDict(extra="ignore")

    wrap: int | Literal["keep", "no"] = "keep"
    number: bool = False
    end_of_line: Literal["lf", "crlf", "keep"] = "lf"


def find_format_config(start: Path) -> Path | None:
    """Return the nearest .mdformat.toml in ``start`` or its ancestors."""
    start = start.resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def resolve_format_config(start: Path) -> FormatOptions:
    """Load formatting options for documents written under ``start``.

    Falls back to defaults when no configuration file exists.

    Raises:
        tomlkit.exceptions.ParseError: If the file is not valid TOML.
        pydantic.ValidationError: If an option has an invalid value.
    """
    path = find_format_config(start)
    if path is None:
        return FormatOptions()
    return FormatOptions.model_validate(load_toml(path).unwrap())


def format_markdown(text: str, options: FormatOptions) -> str:
    """Format a markdown fragment. Empty fragments stay empty."""
    if not text.strip():
        return ""
    return mdformat.text(text, options=options.model_dump())
