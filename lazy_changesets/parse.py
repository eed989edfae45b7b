"""Reading changeset files back.

Inverse of ``write``: recovers releases, categories of change and summary
from a changeset document.
"""

from __future__ import annotations

import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .builder import CATEGORIES_OF_CHANGE, get_kind_title
from .models import CategoryOfChange, Changeset, Release
from .write import CATEGORY_RE

HEADER_RE = re.compile(r"\A\s*---[ \t]*\n(.*?)^---[ \t]*(?:\n|\Z)", re.S | re.M)

_CATEGORIES_BY_TITLE = {get_kind_title(c): c for c in CATEGORIES_OF_CHANGE}


class ChangesetParseError(ValueError):
    """Raised when a changeset document is malformed."""


def _parse_header(header: str) -> list[Release]:
    try:
        data = yaml.safe_load(header)
    except yaml.YAMLError as exc:
        raise ChangesetParseError(f"invalid release header: {exc}") from exc
    if data is None:
        return []
    if not isinstance(data, dict):
        raise ChangesetParseError("release header must map package names to bump types")
    try:
        return [Release(name=str(name), type=bump) for name, bump in data.items()]
    except ValidationError as exc:
        raise ChangesetParseError(f"invalid release: {exc}") from exc


def _take_categories(lines: list[str]) -> tuple[list[tuple[str, str]], list[str]]:
    """Split leading category lines (and blank lines around them) off ``lines``."""
    found: list[tuple[str, str]] = []
    i = 0
    while i < len(lines) and not lines[i].strip():
        i += 1
    while i < len(lines):
        m = CATEGORY_RE.match(lines[i])
        if m is None:
            break
        found.append((m.group(1), m.group(2) or ""))
        i += 1
    if not found:
        return [], lines
    while i < len(lines) and not lines[i].strip():
        i += 1
    return found, lines[i:]


def _unescape_summary(summary: str) -> str:
    """Undo ``write.escape_category_lookalike``."""
    if summary.startswith("- \\[") and CATEGORY_RE.match(
        "- [" + summary[4:].split("\n", 1)[0]
    ):
        return "- [" + summary[4:]
    return summary


def parse_changeset(text: str) -> Changeset:
    """Parse the text of a changeset file.

    Category descriptions read from a multi-block document are tagged with
    the bump type of their block; in a single-block document they are not
    tied to a bump type.

    Raises:
        ChangesetParseError: If the document has no release header or the
            header is not a mapping of package names to bump types.
    """
    match = HEADER_RE.match(text)
    if match is None:
        raise ChangesetParseError("changeset has no release header")

    blocks: list[tuple[list[Release], list[tuple[str, str]]]] = []
    rest = text
    while match is not None:
        block_releases = _parse_header(match.group(1))
        categories, remaining = _take_categories(rest[match.end() :].split("\n"))
        blocks.append((block_releases, categories))
        rest = "\n".join(remaining)
        match = HEADER_RE.match(rest)

    releases: list[Release] = []
    category_of_change_list: list[CategoryOfChange] = []
    for block_releases, categories in blocks:
        releases.extend(block_releases)
        bump = block_releases[0].type if len(blocks) > 1 and block_releases else None
        category_of_change_list.extend(
            CategoryOfChange(
                category=_CATEGORIES_BY_TITLE.get(title, title),
                description=description,
                type=bump,
            )
            for title, description in categories
        )

    try:
        return Changeset(
            summary=_unescape_summary(rest.strip()),
            releases=releases,
            category_of_change_list=category_of_change_list,
        )
    except ValidationError as exc:
        raise ChangesetParseError(str(exc)) from exc


def read_changesets(changeset_dir: Path) -> dict[str, Changeset]:
    """Parse every changeset in ``changeset_dir``, keyed by id, sorted by id."""
    return {
        path.stem: parse_changeset(path.read_text())
        for path in sorted(changeset_dir.glob("*.md"))
        if path.name != "README.md"
    }
