"""Workspace discovery and changed-package detection.

A workspace is either a uv workspace (root pyproject.toml with
[tool.uv.workspace].members) or a single project whose root pyproject.toml
is the only package.
"""

from __future__ import annotations

import glob
from pathlib import Path

from .models import PackageInfo
from .shell import fatal, git
from .toml import (
    get_project_name,
    get_project_version,
    get_workspace_member_globs,
    load_toml,
)


def discover_packages(root: Path | None = None) -> list[PackageInfo]:
    """Scan the workspace and return its packages in a stable order.

    Member directories are expanded from the workspace globs in the order
    the globs are declared, each glob sorted alphabetically. Directories
    without a pyproject.toml are skipped.

    Args:
        root: Workspace root, defaults to the current directory.

    Returns:
        List of PackageInfo, one per package.
    """
    root = root or Path.cwd()
    root_pyproject = root / "pyproject.toml"
    if not root_pyproject.exists():
        fatal(f"No pyproject.toml found in {root}")

    root_doc = load_toml(root_pyproject)
    member_globs = get_workspace_member_globs(root_doc)

    if not member_globs:
        return [
            PackageInfo(
                name=get_project_name(root_doc, root.name),
                version=get_project_version(root_doc),
                path="",
            )
        ]

    member_dirs: list[Path] = []
    for pattern in member_globs:
        for match in sorted(glob.glob(str(root / pattern))):
            p = Path(match)
            if (p / "pyproject.toml").exists() and p not in member_dirs:
                member_dirs.append(p)

    if not member_dirs:
        fatal("No packages found matching workspace members")

    packages: list[PackageInfo] = []
    for d in member_dirs:
        doc = load_toml(d / "pyproject.toml")
        packages.append(
            PackageInfo(
                name=get_project_name(doc, d.name),
                version=get_project_version(doc),
                path=d.relative_to(root).as_posix(),
            )
        )
    return packages


def changed_packages(packages: list[PackageInfo], base_branch: str) -> list[str]:
    """Return names of packages with files changed since ``base_branch``.

    Compares the working tree against the merge-base of ``base_branch`` and
    HEAD, so uncommitted edits count as changes. Packages are returned in
    workspace order. If the ref cannot be resolved (no git, unknown branch)
    nothing is reported as changed.
    """
    merge_base = git("merge-base", base_branch, "HEAD", check=False)
    if not merge_base:
        return []

    changed_files = git("diff", "--name-only", merge_base, check=False).splitlines()

    changed: list[str] = []
    for pkg in packages:
        # A root-level package owns every file in the repo
        prefix = pkg.path.rstrip("/") + "/" if pkg.path else ""
        if any(f.startswith(prefix) for f in changed_files):
            changed.append(pkg.name)
    return changed
