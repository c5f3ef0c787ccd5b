"""Databases demo: list, create and delete a temporary database."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cosmos_demos.database import admin
from cosmos_demos.demos import TEMPORARY_DATABASE_ID, heading

if TYPE_CHECKING:
    from cosmos_demos.database.client import CosmosClient


async def view_databases(client: CosmosClient) -> int:
    heading("View Databases")
    databases = await admin.list_databases(client)
    for database in databases:
        click.echo(f"Database Id: {database.id}; Modified: {database.last_modified}")
    click.echo()
    click.echo(f"Total databases: {len(databases)}")
    return len(databases)


async def create_database(client: CosmosClient, database_id: str = TEMPORARY_DATABASE_ID) -> None:
    heading(f"Create Database {database_id}")
    database = await admin.create_database(client, database_id)
    click.echo(f"Database Id: {database.id}; Modified: {database.last_modified}")


async def delete_database(client: CosmosClient, database_id: str = TEMPORARY_DATABASE_ID) -> None:
    heading(f"Delete Database {database_id}")
    await admin.delete_database(client, database_id)


async def run(client: CosmosClient) -> None:
    await view_databases(client)

    await create_database(client)
    await view_databases(client)

    await delete_database(client)
    await view_databases(client)
