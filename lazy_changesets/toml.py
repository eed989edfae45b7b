"""TOML reading utilities.

Uses tomlkit to read the workspace root and member pyproject.toml files as
well as the optional ``.mdformat.toml`` formatting configuration.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomlkit
from packaging.utils import canonicalize_name

from .models import ChangesetConfig

TOOL_TABLE = "lazy-changesets"


def load_toml(path: Path) -> tomlkit.TOMLDocument:
    """Load and parse a TOML file, e.g. a pyproject.toml."""
    return tomlkit.parse(path.read_text())


def get_project_name(doc: tomlkit.TOMLDocument, fallback: str) -> str:
    """Extract the canonical package name from [project].name.

    Names are normalized per PEP 503 (lowercase, hyphens instead of
    underscores) for consistent comparison.

    Args:
        doc: Parsed pyproject.toml document.
        fallback: Value to return if name is not specified.
    """
    return canonicalize_name(doc.get("project", {}).get("name", fallback))


def get_project_version(doc: tomlkit.TOMLDocument) -> str:
    """Extract version from [project].version, defaulting to '0.0.0'."""
    return doc.get("project", {}).get("version", "0.0.0")


def get_workspace_member_globs(doc: tomlkit.TOMLDocument) -> list[str]:
    """Extract workspace member glob patterns from [tool.uv.workspace].

    These patterns (e.g., "packages/*", "libs/*") define which directories
    contain workspace packages. Returns an empty list for a single-package
    project.
    """
    members = doc.get("tool", {}).get("uv", {}).get("workspace", {}).get("members")
    return list(members or [])


def get_changeset_config(doc: tomlkit.TOMLDocument) -> ChangesetConfig:
    """Read [tool.lazy-changesets] into a validated ChangesetConfig.

    Raises:
        pydantic.ValidationError: If the table holds unknown keys or
            values of the wrong type.
    """
    # unwrap() turns tomlkit items (e.g. Bool) into plain Python values
    data: dict[str, Any] = doc.unwrap()
    return ChangesetConfig.model_validate(data.get("tool", {}).get(TOOL_TABLE, {}))
