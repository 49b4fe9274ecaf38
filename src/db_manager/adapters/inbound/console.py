"""Styled terminal output for the CLI, built on click.

Command results go to stdout; errors and warnings go to stderr so piped
output (``dbm read ... > rows.json``) stays parseable. click.style handles
NO_COLOR and non-TTY output.
"""

from __future__ import annotations

import json
import shutil
from collections.abc import Sequence
from typing import Any

import click

_BULLET = "•"
_CHECK = "✓"
_CROSS = "✗"
_RULE = "─"


def _width() -> int:
    return max(40, min(shutil.get_terminal_size((80, 24)).columns, 100))


def success(message: str) -> None:
    """Print success message in green."""
    click.echo(click.style(f"{_CHECK} {message}", fg="green"))


def error(message: str) -> None:
    """Print error message in red on stderr."""
    click.echo(click.style(f"{_CROSS} {message}", fg="red"), err=True)


def warning(message: str) -> None:
    """Print warning message in yellow on stderr."""
    click.echo(click.style(message, fg="yellow"), err=True)


def info(message: str) -> None:
    """Print info message in cyan."""
    click.echo(click.style(message, fg="cyan"))


def section(title: str) -> None:
    """Print a titled divider."""
    line = _RULE * max(0, _width() - len(title) - 4)
    click.echo(click.style(f"{_RULE} {title} {line}", fg="cyan", bold=True))


def bullet(text: str) -> None:
    click.echo(f"  {_BULLET} {text}")


def kv(key: str, value: Any, key_width: int = 12) -> None:
    """Print an aligned key/value pair."""
    click.echo(f"  {click.style(key.ljust(key_width), dim=True)} {value}")


def to_json(value: Any) -> str:
    """Render records for display; driver types fall back to str()."""
    return json.dumps(value, indent=2, default=str, ensure_ascii=False)


def records(items: Sequence[Any]) -> None:
    """Print records as a JSON array."""
    click.echo(to_json(list(items)))


def menu(options: Sequence[str]) -> None:
    """Print a numbered menu."""
    for number, label in enumerate(options, start=1):
        click.echo(f"  {click.style(str(number).rjust(2), fg='green')}. {label}")


def pause() -> None:
    """Wait for Enter before redrawing the menu."""
    click.prompt("Press Enter to continue", default="", show_default=False)
