"""Database and container management: list, create if missing, delete."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from azure.cosmos import PartitionKey
from azure.cosmos.exceptions import CosmosResourceNotFoundError

if TYPE_CHECKING:
    from azure.cosmos.aio import ContainerProxy

    from cosmos_demos.database.client import CosmosClient

logger = logging.getLogger(__name__)

DEFAULT_THROUGHPUT = 400
DEFAULT_PARTITION_KEY = "/pk"


def _last_modified(properties: dict[str, Any]) -> datetime | None:
    ts = properties.get("_ts")
    if isinstance(ts, int | float):
        return datetime.fromtimestamp(ts, tz=UTC)
    return None


@dataclass(frozen=True)
class DatabaseInfo:
    id: str
    last_modified: datetime | None

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> DatabaseInfo:
        return cls(id=properties["id"], last_modified=_last_modified(properties))


@dataclass(frozen=True)
class ContainerInfo:
    id: str
    last_modified: datetime | None
    partition_key_path: str | None
    throughput: int | None = None

    @classmethod
    def from_properties(
        cls,
        properties: dict[str, Any],
        throughput: int | None = None,
    ) -> ContainerInfo:
        paths = properties.get("partitionKey", {}).get("paths") or [None]
        return cls(
            id=properties["id"],
            last_modified=_last_modified(properties),
            partition_key_path=paths[0],
            throughput=throughput,
        )


async def list_databases(client: CosmosClient) -> list[DatabaseInfo]:
    """Return every database in the account."""
    return [DatabaseInfo.from_properties(props) async for props in client.client.list_databases()]


async def create_database(client: CosmosClient, database_id: str) -> DatabaseInfo:
    """Create a database unless it already exists and return its properties."""
    database = await client.client.create_database_if_not_exists(id=database_id)
    info = DatabaseInfo.from_properties(await database.read())
    logger.info("Database ready — id=%s", info.id)
    return info


async def delete_database(client: CosmosClient, database_id: str) -> None:
    await client.client.delete_database(database_id)
    logger.info("Database deleted — id=%s", database_id)


async def read_throughput(container: ContainerProxy) -> int | None:
    """Return the container's provisioned RU/s, or None when it has no dedicated offer."""
    try:
        offer = await container.get_throughput()
    except CosmosResourceNotFoundError:
        return None
    return offer.offer_throughput


async def list_containers(client: CosmosClient, database_id: str) -> list[ContainerInfo]:
    """Return every container in a database with its throughput.

    Throughput is not part of the container properties, so each container
    costs one extra request.
    """
    database = client.get_database(database_id)
    containers: list[ContainerInfo] = []
    async for props in database.list_containers():
        throughput = await read_throughput(database.get_container_client(props["id"]))
        containers.append(ContainerInfo.from_properties(props, throughput))
    return containers


async def create_container(
    client: CosmosClient,
    database_id: str,
    container_id: str,
    throughput: int = DEFAULT_THROUGHPUT,
    partition_key: str = DEFAULT_PARTITION_KEY,
) -> ContainerInfo:
    """Create a container unless it already exists and return its properties."""
    database = client.get_database(database_id)
    container = await database.create_container_if_not_exists(
        id=container_id,
        partition_key=PartitionKey(path=partition_key),
        offer_throughput=throughput,
    )
    info = ContainerInfo.from_properties(await container.read(), await read_throughput(container))
    logger.info(
        "Container ready — database=%s id=%s partition_key=%s",
        database_id,
        info.id,
        info.partition_key_path,
    )
    return info


async def delete_container(client: CosmosClient, database_id: str, container_id: str) -> None:
    await client.get_database(database_id).delete_container(container_id)
    logger.info("Container deleted — database=%s id=%s", database_id, container_id)
