"""Containers demo: create two containers with different throughput and keys, then remove them."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cosmos_demos.database import admin
from cosmos_demos.demos import TEMPORARY_DATABASE_ID, heading

if TYPE_CHECKING:
    from cosmos_demos.database.admin import ContainerInfo
    from cosmos_demos.database.client import CosmosClient

CONTAINER_ID_1 = "MyContainer1"
CONTAINER_ID_2 = "MyContainer2"


def _print_container(container: ContainerInfo) -> None:
    click.echo(f"    Container Id: {container.id};")
    click.echo(f"        Modified: {container.last_modified}")
    click.echo(f"   Partition Key: {container.partition_key_path}")
    click.echo(f"      Throughput: {container.throughput}")


async def view_containers(client: CosmosClient, database_id: str = TEMPORARY_DATABASE_ID) -> int:
    heading(f"View Containers in {database_id}")
    containers = await admin.list_containers(client, database_id)
    for number, container in enumerate(containers, start=1):
        click.echo()
        click.echo(f"Container #{number}")
        _print_container(container)
    click.echo()
    click.echo(f"Total containers in {database_id} database: {len(containers)}")
    return len(containers)


async def create_container(
    client: CosmosClient,
    container_id: str,
    throughput: int = admin.DEFAULT_THROUGHPUT,
    partition_key: str = admin.DEFAULT_PARTITION_KEY,
    database_id: str = TEMPORARY_DATABASE_ID,
) -> None:
    heading(f"Create Container {container_id} in {database_id}")
    click.echo(f"        Throughput: {throughput} RU/sec")
    click.echo(f"     Partition key: {partition_key}")
    click.echo()
    await admin.create_container(client, database_id, container_id, throughput, partition_key)
    click.echo(f"Created new container {container_id}")


async def delete_container(
    client: CosmosClient,
    container_id: str,
    database_id: str = TEMPORARY_DATABASE_ID,
) -> None:
    heading(f"Delete Container {container_id} in {database_id}")
    await admin.delete_container(client, database_id, container_id)
    click.echo(f"Deleted Container {container_id} from {database_id}")


async def ensure_database(client: CosmosClient, database_id: str = TEMPORARY_DATABASE_ID) -> None:
    click.echo(f"Creating database {database_id} (if not exists)")
    database = await admin.create_database(client, database_id)
    click.echo(f"Database Id: {database.id}; Modified: {database.last_modified}")


async def delete_temporary_database(client: CosmosClient, database_id: str = TEMPORARY_DATABASE_ID) -> None:
    click.echo()
    click.echo(f"Deleting database {database_id}...")
    await admin.delete_database(client, database_id)
    click.echo(f"Database {database_id} has been deleted")


async def run(client: CosmosClient) -> None:
    await ensure_database(client)

    await view_containers(client)

    await create_container(client, CONTAINER_ID_1)
    await create_container(client, CONTAINER_ID_2, 1000, "/state")
    await view_containers(client)

    await delete_container(client, CONTAINER_ID_1)
    await delete_container(client, CONTAINER_ID_2)
    await view_containers(client)

    await delete_temporary_database(client)
