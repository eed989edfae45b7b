"""Shell, git and console output utilities.

Provides a thin wrapper around git for read-only queries plus the output
helpers every command uses to talk to the user.
"""

from __future__ import annotations

import subprocess

import click


def git(*args: str, check: bool = True) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "diff", "--name-only").
        check: If True (default), raise on non-zero exit. Set to False
               for commands that may legitimately fail (e.g., a missing ref).

    Returns:
        Stripped stdout from the git command.
    """
    result = subprocess.run(["git", *args], capture_output=True, text=True, check=check)
    return result.stdout.strip()


def log(*parts: str) -> None:
    """Print an informational line; parts are joined by a space."""
    click.echo(" ".join(parts))


def warn(msg: str) -> None:
    click.echo(click.style(msg, fg="yellow"))


def error(msg: str) -> None:
    """Print a red message to stderr without stopping."""
    click.echo(click.style(msg, fg="red"), err=True)


def success(msg: str) -> None:
    click.echo(click.style(msg, fg="green"))


def step(msg: str) -> None:
    """Print a visually distinct step header."""
    click.echo(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def fatal(msg: str) -> None:
    """Print an error message and exit with code 1.

    Use for unrecoverable conditions, such as the user refusing a
    confirmation the rest of the session depends on.
    """
    click.echo(f"ERROR: {msg}", err=True)
    raise SystemExit(1)
