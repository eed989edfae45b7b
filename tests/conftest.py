"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest
import tomlkit

from lazy_changesets.models import PackageInfo
from lazy_changesets.prompts import Choice, ChoiceGroup


class ScriptedPrompter:
    """Prompter that replays canned answers and records every question.

    Each prompt kind has its own answer queue. An exception instance in the
    editor queue is raised instead of returned.
    """

    def __init__(
        self,
        *,
        questions: Sequence[str] = (),
        editor: Sequence[str | Exception] = (),
        confirms: Sequence[bool] = (),
        lists: Sequence[str] = (),
        checkboxes: Sequence[Sequence[str]] = (),
    ) -> None:
        self.questions = list(questions)
        self.editor = list(editor)
        self.confirms = list(confirms)
        self.lists = list(lists)
        self.checkboxes = [list(c) for c in checkboxes]
        self.calls: list[tuple[str, str]] = []
        self.checkbox_choices: list[Sequence[Choice | ChoiceGroup]] = []

    def ask_question(self, message: str) -> str:
        self.calls.append(("question", message))
        return self.questions.pop(0)

    def ask_question_with_editor(self, seed: str) -> str:
        self.calls.append(("editor", seed))
        answer = self.editor.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer

    def ask_confirm(self, message: str) -> bool:
        self.calls.append(("confirm", message))
        return self.confirms.pop(0)

    def ask_list(self, message: str, options: Sequence[str]) -> str:
        self.calls.append(("list", message))
        return self.lists.pop(0)

    def ask_checkbox_plus(self, message, choices, format_selection=None) -> list[str]:
        self.calls.append(("checkbox", message))
        self.checkbox_choices.append(choices)
        return self.checkboxes.pop(0)

    def count(self, kind: str) -> int:
        return sum(1 for k, _ in self.calls if k == kind)

    def exhausted(self) -> bool:
        return not (
            self.questions or self.editor or self.confirms or self.lists or self.checkboxes
        )


def offered_names(choices: Sequence[Choice | ChoiceGroup]) -> list[str]:
    """Flatten the package names offered by a checkbox prompt."""
    names: list[str] = []
    for item in choices:
        if isinstance(item, ChoiceGroup):
            names.extend(c.name for c in item.choices)
        else:
            names.append(item.name)
    return names


@pytest.fixture
def three_packages() -> list[PackageInfo]:
    """A workspace of three packages; only ``a`` is below 1.0.0."""
    return [
        PackageInfo(name="a", version="0.1.0", path="packages/a"),
        PackageInfo(name="b", version="1.0.0", path="packages/b"),
        PackageInfo(name="c", version="2.3.4", path="packages/c"),
    ]


def write_workspace(root: Path, members: dict[str, str], tool_table: str = "") -> None:
    """Create a uv workspace with one package per ``name → version``."""
    (root / "pyproject.toml").write_text(
        '[tool.uv.workspace]\nmembers = ["packages/*"]\n' + tool_table
    )
    for name, version in members.items():
        package_dir = root / "packages" / name
        package_dir.mkdir(parents=True)
        (package_dir / "pyproject.toml").write_text(
            f'[project]\nname = "{name}"\nversion = "{version}"\n'
        )


@pytest.fixture
def sample_toml_doc() -> tomlkit.TOMLDocument:
    """Create a sample root pyproject document."""
    content = """\
[project]
name = "My_Workspace"
version = "2.0.0"

[tool.uv.workspace]
members = ["packages/*", "libs/*"]

[tool.lazy-changesets]
changeset-dir = "changes"
base-branch = "develop"
split-by-bump-type = true
"""
    return tomlkit.parse(content)
