"""Interactive prompts.

The builder only talks to the user through the ``Prompter`` protocol so the
whole decision procedure can be driven by a scripted fake in tests. The
``ClickPrompter`` implementation renders everything with click.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol

import click
from pydantic import BaseModel, Field


class EditorUnavailableError(RuntimeError):
    """Raised when the external editor cannot be launched."""


class Choice(BaseModel):
    """A selectable option. ``message`` is shown instead of ``name`` if set."""

    name: str
    message: str | None = None

    @property
    def label(self) -> str:
        return self.message or self.name


class ChoiceGroup(BaseModel):
    """A named group of options. Selecting the group selects all of them."""

    name: str
    choices: list[Choice] = Field(default_factory=list)


FormatSelection = Callable[[list[str]], "str | None"]


class Prompter(Protocol):
    def ask_question(self, message: str) -> str: ...

    def ask_question_with_editor(self, seed: str) -> str: ...

    def ask_confirm(self, message: str) -> bool: ...

    def ask_list(self, message: str, options: Sequence[str]) -> str: ...

    def ask_checkbox_plus(
        self,
        message: str,
        choices: Sequence[Choice | ChoiceGroup],
        format_selection: FormatSelection | None = None,
    ) -> list[str]: ...


def strip_comment_lines(text: str) -> str:
    """Drop ``#`` comment lines an editor session was seeded with."""
    lines = [line for line in text.splitlines() if not line.startswith("#")]
    return "\n".join(lines).strip()


class ClickPrompter:
    """Line-based prompts on top of click."""

    def ask_question(self, message: str) -> str:
        return click.prompt(message, default="", show_default=False).strip()

    def ask_question_with_editor(self, seed: str) -> str:
        try:
            edited = click.edit(seed, extension=".md")
        except click.ClickException as exc:
            raise EditorUnavailableError(exc.format_message()) from exc
        # click.edit returns None when the file was saved unchanged
        if edited is None:
            return ""
        return strip_comment_lines(edited)

    def ask_confirm(self, message: str) -> bool:
        return click.confirm(message, default=False)

    def ask_list(self, message: str, options: Sequence[str]) -> str:
        return click.prompt(
            message, type=click.Choice(list(options)), default=options[0]
        )

    def ask_checkbox_plus(
        self,
        message: str,
        choices: Sequence[Choice | ChoiceGroup],
        format_selection: FormatSelection | None = None,
    ) -> list[str]:
        """Show a numbered menu and read a comma-separated selection.

        Entries may be picked by number or by name. Picking a group returns
        the group name followed by every member name. An empty answer
        returns an empty list.
        """
        entries: list[tuple[str, list[str]]] = []
        click.echo(message)
        for item in choices:
            if isinstance(item, ChoiceGroup):
                entries.append((item.name, [c.name for c in item.choices]))
                click.echo(f"  {len(entries):>2}) {click.style(item.name, bold=True)}")
                for choice in item.choices:
                    entries.append((choice.name, []))
                    click.echo(f"  {len(entries):>2})   {choice.label}")
            else:
                entries.append((item.name, []))
                click.echo(f"  {len(entries):>2}) {item.label}")

        by_name = {name: (name, members) for name, members in entries}
        while True:
            answer = click.prompt(
                "Select (comma-separated)", default="", show_default=False
            )
            tokens = [t.strip() for t in answer.split(",") if t.strip()]
            selected: list[str] = []
            unknown: list[str] = []
            for token in tokens:
                if token.isdigit() and 1 <= int(token) <= len(entries):
                    name, members = entries[int(token) - 1]
                elif token in by_name:
                    name, members = by_name[token]
                else:
                    unknown.append(token)
                    continue
                for key in (name, *members):
                    if key not in selected:
                        selected.append(key)
            if not unknown:
                break
            click.echo(click.style(f"Unknown selection: {', '.join(unknown)}", fg="red"))

        if format_selection is not None:
            shown = format_selection(selected)
            if shown:
                click.echo(f"  → {shown}")
        return selected
