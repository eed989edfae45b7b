"""Data models for lazy-changesets.

These Pydantic models represent the records passed from the interactive
builder to the serializer, plus the workspace and configuration data they
are resolved against.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

BumpType = Literal["major", "minor", "patch"]


class PackageInfo(BaseModel):
    """Metadata for a single package in the workspace.

    Attributes:
        name: Canonical package name (PEP 503 normalized).
        version: Current version string from pyproject.toml.
        path: Relative path from workspace root to the package directory.
    """

    name: str
    version: str
    path: str = ""


class Release(BaseModel):
    """The minimum bump a single package needs for one changeset."""

    name: str = Field(min_length=1)
    type: BumpType


class CategoryOfChange(BaseModel):
    """A categorised description attached to a changeset.

    Attributes:
        category: Full catalog label, e.g. "Added (New functionality, ...)".
        description: Free text entered by the user.
        type: Bump group the description was written for. Used to filter
              descriptions when a document is split into per-bump blocks.
    """

    category: str
    description: str
    type: BumpType | None = None


class Changeset(BaseModel):
    """One fully resolved unit of release intent.

    ``confirmed`` records whether the user already approved the changeset
    during authoring; it is never written to disk.
    """

    summary: str = ""
    releases: list[Release] = Field(default_factory=list)
    category_of_change_list: list[CategoryOfChange] = Field(default_factory=list)
    confirmed: bool = False

    @field_validator("releases")
    @classmethod
    def _unique_release_names(cls, releases: list[Release]) -> list[Release]:
        names = [release.name for release in releases]
        if len(names) != len(set(names)):
            raise ValueError(f"duplicate package in releases: {names}")
        return releases


class ChangesetConfig(BaseModel):
    """Settings read from ``[tool.lazy-changesets]`` in the root pyproject.toml."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    changeset_dir: str = Field(default=".changeset", alias="changeset-dir")
    base_branch: str = Field(default="main", alias="base-branch")
    split_by_bump_type: bool = Field(default=False, alias="split-by-bump-type")
