"""Command-line entry point: ``cosmos-demos <demo>``."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import click
from azure.cosmos.exceptions import CosmosHttpResponseError

from cosmos_demos import __version__
from cosmos_demos.config import load_settings
from cosmos_demos.database.client import CosmosClient
from cosmos_demos.demos import containers, databases, documents, families
from cosmos_demos.errors import CosmosDemoError
from cosmos_demos.logging import configure_logging

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from cosmos_demos.config import Settings

logger = logging.getLogger(__name__)

DEMOS: dict[str, Callable[[CosmosClient], Awaitable[None]]] = {
    "databases": databases.run,
    "containers": containers.run,
    "documents": documents.run,
    "families": families.run,
}

# families needs an existing Families database.
SELF_CONTAINED_DEMOS = ["databases", "containers", "documents"]


async def run_demos(settings: Settings, names: list[str]) -> None:
    """Open one client and run the named demos in order."""
    async with CosmosClient(settings.cosmos) as client:
        for name in names:
            logger.info("Running demo=%s", name)
            await DEMOS[name](client)


@click.group()
@click.version_option(version=__version__)
@click.option("--env-file", type=click.Path(dir_okay=False), default=None, help="Path to a .env file")
@click.option("--log-level", default=None, help="Override LOG_LEVEL (DEBUG, INFO, WARNING...)")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Also write logs to this file")
@click.pass_context
def cli(ctx: click.Context, env_file: str | None, log_level: str | None, log_file: str | None) -> None:
    """Azure Cosmos DB SDK console demos."""
    ctx.ensure_object(dict)
    ctx.obj.update(env_file=env_file, log_level=log_level, log_file=log_file)


def _invoke(ctx: click.Context, names: list[str]) -> None:
    try:
        settings = load_settings(ctx.obj["env_file"])
    except CosmosDemoError as exc:
        raise click.ClickException(str(exc)) from exc
    configure_logging(ctx.obj["log_level"] or settings.app.log_level, log_file=ctx.obj["log_file"])

    try:
        asyncio.run(run_demos(settings, names))
    except CosmosDemoError as exc:
        logger.error("Demo failed: %s", exc)  # noqa: TRY400
        ctx.exit(1)
    except CosmosHttpResponseError as exc:
        logger.error("Cosmos DB request failed: status=%s %s", exc.status_code, exc.message)  # noqa: TRY400
        ctx.exit(1)


def _demo_command(name: str, help_text: str) -> None:
    @cli.command(name=name, help=help_text)
    @click.pass_context
    def command(ctx: click.Context) -> None:
        _invoke(ctx, [name])


_demo_command("databases", "Create, list and delete a temporary database.")
_demo_command("containers", "Create, list and delete containers in a temporary database.")
_demo_command("documents", "Create, query, page, replace and delete documents.")
_demo_command("families", "Query an existing Families container for large families.")


@cli.command(name="all")
@click.pass_context
def run_all(ctx: click.Context) -> None:
    """Run the databases, containers and documents demos in sequence."""
    _invoke(ctx, SELF_CONTAINED_DEMOS)


def main() -> None:
    """Entry point for the ``cosmos-demos`` console script."""
    cli(obj={})


if __name__ == "__main__":
    main()
