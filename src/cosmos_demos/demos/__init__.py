"""Sequential console demos; each module exposes ``async def run(client)``."""

from __future__ import annotations

import click

TEMPORARY_DATABASE_ID = "MyTempDb"


def heading(title: str) -> None:
    """Print a demo step banner."""
    click.echo()
    click.echo(f">>> {title} <<<")
    click.echo()
