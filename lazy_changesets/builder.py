"""Interactive changeset builder.

Resolves which packages a change affects and how far each must be bumped,
then turns the answers into one or more Changeset records:

1. Pick the packages to release (changed ones listed first)
2. Optionally pick the categories of change (Added, Changed, ...)
3. Eliminate by severity: major, then minor, everything left is patch
4. Collect either per-category descriptions or a single summary

Every question goes through a Prompter, so the procedure is deterministic
for a given sequence of answers.
"""

from __future__ import annotations

from collections.abc import Callable

import click

from .models import BumpType, CategoryOfChange, Changeset, PackageInfo, Release
from .prompts import Choice, ChoiceGroup, EditorUnavailableError, Prompter
from .shell import error, fatal, log, warn
from .versions import is_pre_first_major

CATEGORIES_OF_CHANGE = [
    "Added (New functionality, arg options, more UI elements)",
    "Changed (Visual changes, internal changes, API changes)",
    "Removed (Dead code, feature flags, consumer API's)",
    "Types (Strictly related to the type system and should not have impact on runtime code)",
    "Documentation (README, general docs, pyproject.toml metadata)",
    "Infra (Tooling, performance, things that are under the hood but should have no impact if a consumer upgraded)",
    "Misc (Anything else not noted above)",
]

CHANGED_GROUP = "changed packages"
UNCHANGED_GROUP = "unchanged packages"
ALL_GROUP = "all packages"

BUMP_COLORS: dict[str, str] = {"major": "red", "minor": "green", "patch": "blue"}

EDITOR_SEED = (
    "\n\n# Please enter a summary for your changes."
    "\n# An empty message aborts the editor."
)


def get_kind_title(category: str) -> str:
    """Return the one-word title of a category label ("Added (...)" → "Added")."""
    return category.split(" ")[0]


def _bold(text: str) -> str:
    return click.style(text, bold=True)


def _bump(bump: str) -> str:
    return click.style(bump, fg=BUMP_COLORS.get(bump, "red"))


def _cyan_list(names: list[str]) -> str:
    return ", ".join(click.style(n, fg="cyan") for n in names)


def format_pkg_name_and_version(pkg: PackageInfo) -> str:
    return f"{_bold(pkg.name)}@{_bold(pkg.version)}"


def confirm_major_release(pkg: PackageInfo, prompter: Prompter) -> bool:
    """Ask for confirmation when a major bump would leave the 0.x series.

    Packages already at 1.0.0 or later need no confirmation.
    """
    if not is_pre_first_major(pkg.version):
        return True

    first_major = click.style("first major release", fg="red")
    warn(
        f"WARNING: Releasing a major version for {click.style(pkg.name, fg='green')} "
        f"will be its {first_major}."
    )
    warn(
        "If you are unsure if this is correct, contact the package's maintainers "
        f"{click.style('before committing this changeset', fg='red')}."
    )
    return prompter.ask_confirm(
        _bold(
            f"Are you sure you want to release the "
            f"{click.style('first major version', fg='red')} of {pkg.name}?"
        )
    )


def set_summary(changeset: Changeset, prompter: Prompter) -> None:
    """Collect a non-empty summary for ``changeset``.

    An empty answer opens the external editor. Text written there is taken
    as already reviewed, so the changeset is marked confirmed. If the editor
    fails or returns nothing, keep asking until something is typed.
    """
    log("Please enter a summary for this change (this will be in the changelogs).")
    log(click.style("  (submit empty line to open external editor)", fg="bright_black"))

    summary = prompter.ask_question("Summary")
    if not summary:
        try:
            summary = prompter.ask_question_with_editor(EDITOR_SEED)
            if summary:
                changeset.summary = summary
                changeset.confirmed = True
                return
        except EditorUnavailableError:
            log("An error happened using external editor. Please type your summary here:")

        summary = prompter.ask_question("")
        while not summary:
            summary = prompter.ask_question(
                "\n\n# A summary is required for the changelog! 😪"
            )

    changeset.summary = summary
    changeset.confirmed = False


def choose_at_least_one(
    ask: Callable[[], list[str]], error_message: str
) -> list[str]:
    """Call ``ask`` until it returns a non-empty selection."""
    selected = ask()
    while not selected:
        error(error_message)
        error("(You most likely hit enter without selecting anything!)")
        selected = ask()
    return selected


def _format_package_selection(selected: list[str]) -> str:
    return _cyan_list(
        [s for s in selected if s not in (CHANGED_GROUP, UNCHANGED_GROUP, ALL_GROUP)]
    )


def get_packages_to_release(
    changed_packages: list[str],
    all_packages: list[PackageInfo],
    prompter: Prompter,
) -> list[str]:
    """Ask which packages the changeset should include.

    Returns package names in workspace order. Group labels and names that
    are not workspace members are dropped.
    """
    if len(all_packages) == 1:
        return [all_packages[0].name]

    workspace_names = [pkg.name for pkg in all_packages]
    changed = [name for name in workspace_names if name in changed_packages]
    unchanged = [name for name in workspace_names if name not in changed_packages]

    groups = [
        ChoiceGroup(name=label, choices=[Choice(name=n) for n in names])
        for label, names in ((CHANGED_GROUP, changed), (UNCHANGED_GROUP, unchanged))
        if names
    ]

    def ask() -> list[str]:
        selected = prompter.ask_checkbox_plus(
            "Which packages would you like to include?",
            groups,
            _format_package_selection,
        )
        return [name for name in selected if name in workspace_names]

    selected = choose_at_least_one(
        ask, "You must select at least one package to release"
    )
    return [name for name in workspace_names if name in selected]


def _ask_packages_for_bump(
    bump: BumpType,
    candidates: list[str],
    pkgs_by_name: dict[str, PackageInfo],
    prompter: Prompter,
) -> list[str]:
    """Ask which of ``candidates`` need ``bump``; returns a subset in order."""
    group = ChoiceGroup(
        name=ALL_GROUP,
        choices=[
            Choice(name=name, message=format_pkg_name_and_version(pkgs_by_name[name]))
            for name in candidates
        ],
    )
    selected = prompter.ask_checkbox_plus(
        _bold(f"Which packages should have a {_bump(bump)} bump?"),
        [group],
        _format_package_selection,
    )
    return [name for name in candidates if name in selected]


def _ask_categories(prompter: Prompter) -> list[str]:
    selected = prompter.ask_checkbox_plus(
        _bold("What kind of change are you making? (check all that apply)"),
        [Choice(name=category) for category in CATEGORIES_OF_CHANGE],
        lambda chosen: _cyan_list([get_kind_title(c) for c in chosen]),
    )
    return [category for category in CATEGORIES_OF_CHANGE if category in selected]


def _ask_descriptions(
    categories: list[str], bump: BumpType, prompter: Prompter
) -> list[CategoryOfChange]:
    return [
        CategoryOfChange(
            category=category,
            description=prompter.ask_question(f"[ {get_kind_title(category)} ]"),
            type=bump,
        )
        for category in categories
    ]


def resolve_releases(
    packages_to_release: list[str],
    pkgs_by_name: dict[str, PackageInfo],
    prompter: Prompter,
) -> list[Release]:
    """Assign each package exactly one bump by successive elimination.

    ``remaining`` is an ordered set of unassigned packages; each round takes
    its picks out of it. Majors needing a declined first-major confirmation
    stay in the set and can still be picked as minor. Whatever survives
    both rounds is patch.
    """
    remaining = dict.fromkeys(packages_to_release)
    releases: list[Release] = []

    for name in _ask_packages_for_bump("major", list(remaining), pkgs_by_name, prompter):
        if confirm_major_release(pkgs_by_name[name], prompter):
            del remaining[name]
            releases.append(Release(name=name, type="major"))

    if remaining:
        for name in _ask_packages_for_bump(
            "minor", list(remaining), pkgs_by_name, prompter
        ):
            del remaining[name]
            releases.append(Release(name=name, type="minor"))

    if remaining:
        log(f"The following packages will be {_bump('patch')} bumped:")
        for name in remaining:
            log(format_pkg_name_and_version(pkgs_by_name[name]))
        releases.extend(Release(name=name, type="patch") for name in remaining)

    return releases


def create_changeset(
    changed_packages: list[str],
    all_packages: list[PackageInfo],
    prompter: Prompter,
) -> list[Changeset]:
    """Run the interactive session and return the resulting changesets.

    Args:
        changed_packages: Names of packages with changes on this branch.
        all_packages: Every workspace package, in workspace order.
        prompter: Source of user answers.

    Returns:
        Changesets in the order they should be written.

    Raises:
        SystemExit: If the user declines the first major release of the
            only package in a single-package workspace.
    """
    if not all_packages:
        raise ValueError("no packages to create a changeset for")

    if len(all_packages) == 1:
        pkg = all_packages[0]
        bump = prompter.ask_list(
            f"What kind of change is this for {click.style(pkg.name, fg='green')}? "
            f"(current version is {pkg.version})",
            ["patch", "minor", "major"],
        )
        if bump == "major" and not confirm_major_release(pkg, prompter):
            fatal(f"Aborted first major release of {pkg.name}")
        changeset = Changeset(releases=[Release(name=pkg.name, type=bump)])
        set_summary(changeset, prompter)
        return [changeset]

    pkgs_by_name = {pkg.name: pkg for pkg in all_packages}
    packages_to_release = get_packages_to_release(
        changed_packages, all_packages, prompter
    )
    categories = _ask_categories(prompter)
    releases = resolve_releases(packages_to_release, pkgs_by_name, prompter)

    if not categories:
        changeset = Changeset(releases=releases)
        set_summary(changeset, prompter)
        return [changeset]

    reuse = prompter.ask_confirm(
        "Would you like to reuse the same message for all packages of this bump type?"
    )
    if reuse:
        category_of_change_list: list[CategoryOfChange] = []
        for bump in dict.fromkeys(release.type for release in releases):
            names = [release.name for release in releases if release.type == bump]
            log(_bump(f"{bump} :"), _cyan_list(names))
            category_of_change_list.extend(_ask_descriptions(categories, bump, prompter))
        return [
            Changeset(
                releases=releases,
                category_of_change_list=category_of_change_list,
                confirmed=True,
            )
        ]

    changesets: list[Changeset] = []
    for release in releases:
        log(_bump(f"{release.type} :"), _cyan_list([release.name]))
        changesets.append(
            Changeset(
                releases=[release],
                category_of_change_list=_ask_descriptions(
                    categories, release.type, prompter
                ),
                confirmed=True,
            )
        )
    return changesets
