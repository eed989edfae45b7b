"""Changeset serialization.

Renders a Changeset into the markdown document read by release tooling
and writes it to ``<changeset dir>/<id>.md``. A document is one or more
blocks of a ``---`` delimited release header plus optional category lines,
followed by the summary:

    ---
    "pkg-a": minor
    "@scope/pkg-b": patch
    ---

    Summary text.

Package names are always quoted; names may contain characters (``@``,
``:``) that would otherwise change how the YAML header is parsed.
"""

from __future__ import annotations

import json
import re
from pathlib import Path

from .builder import get_kind_title
from .formatting import FormatOptions, format_markdown, resolve_format_config
from .human_id import human_id
from .models import CategoryOfChange, Changeset, Release

# "none" is kept as a slot for a future no-op bump; nothing is routed to it
BUMP_ORDER = ("major", "minor", "patch", "none")
CATEGORY_RE = re.compile(r"^- \[ (\S+) \](?: (.*))?$")


def group_by_bump_type(releases: list[Release]) -> dict[str, list[Release]]:
    """Bucket releases by bump type in BUMP_ORDER.

    Types other than minor and patch are bucketed as major.
    """
    groups: dict[str, list[Release]] = {bump: [] for bump in BUMP_ORDER}
    for release in releases:
        if release.type in ("minor", "patch"):
            groups[release.type].append(release)
        else:
            groups["major"].append(release)
    return groups


def get_releases_section(releases: list[Release]) -> str:
    # json.dumps gives a valid YAML double-quoted scalar for any name
    lines = "\n".join(
        f"{json.dumps(release.name, ensure_ascii=False)}: {release.type}"
        for release in releases
    )
    return f"---\n{lines}\n---\n"


def get_change_types_section(
    category_of_change_list: list[CategoryOfChange], bump_type: str | None = None
) -> str:
    """Render ``- [ Kind ] description`` lines, optionally for one bump type."""
    if bump_type:
        filtered = [c for c in category_of_change_list if c.type == bump_type]
    else:
        filtered = category_of_change_list
    return "".join(
        f"- [ {get_kind_title(c.category)} ] {c.description}".rstrip() + "\n"
        for c in filtered
    )


def get_releases_and_change_types(
    releases: list[Release],
    category_of_change_list: list[CategoryOfChange],
    split_by_bump_type: bool = False,
) -> str:
    """Render the structural part of a document (everything but the summary).

    With ``split_by_bump_type`` and a non-empty category list, emits one
    header+categories block per bump type that has releases, in BUMP_ORDER.
    Otherwise a single header, followed by all category lines if any.
    """
    if split_by_bump_type and category_of_change_list:
        return "\n".join(
            f"{get_releases_section(group)}\n"
            f"{get_change_types_section(category_of_change_list, bump_type)}"
            for bump_type, group in group_by_bump_type(releases).items()
            if group
        )

    if category_of_change_list:
        return (
            f"{get_releases_section(releases)}\n"
            f"{get_change_types_section(category_of_change_list)}"
        )

    return get_releases_section(releases)


def escape_category_lookalike(summary: str) -> str:
    """Escape a leading summary line that would parse as a category line.

    ``\\[`` renders the same in markdown but no longer matches CATEGORY_RE.
    """
    if CATEGORY_RE.match(summary.split("\n", 1)[0]):
        return "- \\[" + summary[3:]
    return summary


def render_changeset(
    changeset: Changeset,
    *,
    split_by_bump_type: bool = False,
    format_options: FormatOptions | None = None,
) -> str:
    """Render a changeset to the text of its markdown file.

    The summary is formatted with ``format_options`` when given, otherwise
    only stripped.
    """
    body = get_releases_and_change_types(
        changeset.releases, changeset.category_of_change_list, split_by_bump_type
    )
    if format_options is not None:
        summary = format_markdown(changeset.summary, format_options)
    else:
        summary = changeset.summary.strip()
        summary = f"{summary}\n" if summary else ""
    summary = escape_category_lookalike(summary)
    return f"{body}\n{summary}" if summary else body


def write_changeset(
    changeset: Changeset,
    changeset_dir: Path,
    *,
    split_by_bump_type: bool = False,
) -> str:
    """Write ``changeset`` to a new file in ``changeset_dir``.

    Formatting configuration is resolved and applied before anything is
    written, so a bad configuration leaves no partial file behind.

    Args:
        changeset: The changeset to persist.
        changeset_dir: Target directory, created if missing.
        split_by_bump_type: Emit one block per bump type when the
            changeset has categories of change.

    Returns:
        The generated changeset id (the file name without ``.md``).
    """
    changeset_id = human_id()
    format_options = resolve_format_config(changeset_dir)
    contents = render_changeset(
        changeset,
        split_by_bump_type=split_by_bump_type,
        format_options=format_options,
    )

    changeset_dir.mkdir(parents=True, exist_ok=True)
    (changeset_dir / f"{changeset_id}.md").write_text(contents)
    return changeset_id
