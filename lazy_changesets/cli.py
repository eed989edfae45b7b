"""CLI entry point for lazy-changesets."""

from __future__ import annotations

from pathlib import Path

import click
from pydantic import ValidationError

from lazy_changesets.builder import create_changeset
from lazy_changesets.models import Changeset, ChangesetConfig
from lazy_changesets.parse import ChangesetParseError, read_changesets
from lazy_changesets.prompts import ClickPrompter
from lazy_changesets.shell import log, step, success, warn
from lazy_changesets.toml import get_changeset_config, load_toml
from lazy_changesets.workspace import changed_packages, discover_packages
from lazy_changesets.write import BUMP_ORDER, write_changeset

README = """\
# Changesets

This directory holds changesets: one markdown file per change, recording
which packages need a version bump and a summary for the changelog.

Create one with:

    lazy-changesets add
"""


def _load_config(root: Path) -> ChangesetConfig:
    pyproject = root / "pyproject.toml"
    if not pyproject.exists():
        raise click.ClickException("No pyproject.toml found in current directory.")
    try:
        return get_changeset_config(load_toml(pyproject))
    except ValidationError as exc:
        raise click.ClickException(
            f"Invalid [tool.lazy-changesets] configuration:\n{exc}"
        ) from exc


def print_confirmation_message(
    changeset: Changeset, repo_has_multiple_packages: bool
) -> None:
    """Show what a changeset will release before it is written."""
    log("=== Summary of changesets ===")
    for bump in BUMP_ORDER:
        names = [r.name for r in changeset.releases if r.type == bump]
        if names:
            log(f"{click.style(bump, bold=True)}:  {', '.join(names)}")

    if repo_has_multiple_packages:
        log(
            "Note: All dependents of these packages that will be incompatible with "
            "the new version will be patch bumped when this changeset is applied."
        )


@click.group()
@click.version_option(package_name="lazy-changesets")
def cli() -> None:
    """Record intended version bumps for the packages of a workspace."""


@cli.command()
def init() -> None:
    """Create the changeset directory."""
    root = Path.cwd()
    config = _load_config(root)
    changeset_dir = root / config.changeset_dir

    if changeset_dir.exists():
        warn(f"{config.changeset_dir} already exists, nothing to do.")
        return

    changeset_dir.mkdir(parents=True)
    (changeset_dir / "README.md").write_text(README)
    success(f"✓ Created {config.changeset_dir}")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Commit the new directory")
    click.echo("  2. Record a change:")
    click.echo("       lazy-changesets add")


@cli.command()
@click.option(
    "--empty",
    is_flag=True,
    help="Write a changeset that releases nothing, without prompting.",
)
@click.option(
    "--since",
    default=None,
    help="Ref to detect changed packages against. (default: base-branch setting)",
)
def add(empty: bool, since: str | None) -> None:
    """Interactively create one or more changesets."""
    root = Path.cwd()
    config = _load_config(root)
    changeset_dir = root / config.changeset_dir

    if empty:
        changeset_id = write_changeset(Changeset(confirmed=True), changeset_dir)
        success("Empty changeset added! - you can now commit it")
        log(f"info {Path(config.changeset_dir) / f'{changeset_id}.md'}")
        return

    step("Discovering workspace packages")
    packages = discover_packages(root)
    changed = changed_packages(packages, since or config.base_branch)
    for pkg in packages:
        marker = " (changed)" if pkg.name in changed else ""
        log(f"  {pkg.name} {pkg.version}{marker}")

    prompter = ClickPrompter()
    changesets = create_changeset(changed, packages, prompter)

    for changeset in changesets:
        print_confirmation_message(changeset, len(packages) > 1)
        if not changeset.confirmed:
            changeset.confirmed = prompter.ask_confirm("Is this your desired changeset?")
        if not changeset.confirmed:
            warn("Changeset discarded.")
            continue

        changeset_id = write_changeset(
            changeset, changeset_dir, split_by_bump_type=config.split_by_bump_type
        )
        success("Changeset added! - you can now commit it")
        log(f"info {Path(config.changeset_dir) / f'{changeset_id}.md'}")


@cli.command()
def status() -> None:
    """List pending changesets and the releases they request."""
    root = Path.cwd()
    config = _load_config(root)
    changeset_dir = root / config.changeset_dir

    if not changeset_dir.is_dir():
        raise click.ClickException(
            f"{config.changeset_dir} does not exist. Run `lazy-changesets init` first."
        )

    try:
        changesets = read_changesets(changeset_dir)
    except ChangesetParseError as exc:
        raise click.ClickException(str(exc)) from exc

    if not changesets:
        log("No changesets found.")
        return

    for changeset_id, changeset in changesets.items():
        log(click.style(changeset_id, bold=True))
        if not changeset.releases:
            log("  (no releases)")
        for release in changeset.releases:
            log(f"  {release.name}: {release.type}")
