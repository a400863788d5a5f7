"""
Styled output primitives built on Click.

All output degrades gracefully on non-colour terminals (click.style
handles NO_COLOR / TERM=dumb and non-tty streams).
"""

from __future__ import annotations

import click

_BULLET = "\u2022"     # •
_CHECK  = "\u2713"     # ✓
_CROSS  = "\u2717"     # ✗
_L_H    = "\u2500"     # ─


def success(message: str) -> None:
    """Print success message in green."""
    click.echo(click.style(message, fg="green"))


def error(message: str) -> None:
    """Print error message in red."""
    click.echo(click.style(message, fg="red"))


def info(message: str) -> None:
    """Print info message in cyan."""
    click.echo(click.style(message, fg="cyan"))


def section(title: str, *, width: int = 48, fg: str = "cyan") -> None:
    """
    Print a section header with a ruled line.

        ── api ───────────────────────────
    """
    dashes = max(4, width - len(title) - 4)
    click.echo(click.style(f"{_L_H}{_L_H} {title} {_L_H * dashes}", fg=fg, bold=True))


def kv(key: str, value: str, *, key_width: int = 12, indent: int = 2) -> None:
    """
    Print an aligned key-value pair.

        Roots:      3
    """
    padding = " " * max(1, key_width - len(key) - 1)
    click.echo(f"{' ' * indent}{key}:{padding}{click.style(str(value), fg='cyan')}")


def bullet(text: str, *, indent: int = 2, fg: str = "white") -> None:
    """Print a bulleted list item."""
    click.echo(f"{' ' * indent}{click.style(_BULLET, fg='cyan')} {click.style(text, fg=fg)}")
