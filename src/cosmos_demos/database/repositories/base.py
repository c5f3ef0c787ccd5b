"""Generic typed repository over a single Cosmos DB container."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar, cast

from azure.cosmos.exceptions import CosmosResourceNotFoundError

from cosmos_demos.models.base import DocumentBase

if TYPE_CHECKING:
    from azure.cosmos.aio import DatabaseProxy

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=DocumentBase)


class BaseRepository(Generic[T]):
    """CRUD operations for one document type.

    Subclasses set ``container_name`` and ``model_class``.
    """

    container_name: ClassVar[str]
    model_class: type[T]

    def __init__(self, database: DatabaseProxy) -> None:
        self._container = database.get_container_client(self.container_name)

    def _to_model(self, data: dict[str, Any]) -> T:
        return self.model_class.model_validate(data)

    async def create(self, item: T) -> T:
        """Insert a new document."""
        data = await self._container.create_item(body=item.to_document())
        logger.debug("Created %s id=%s", self.container_name, item.id)
        return self._to_model(cast("dict[str, Any]", data))

    async def get(self, item_id: str, partition_key: str) -> T | None:
        """Read a document by id, or None when it does not exist."""
        try:
            data = await self._container.read_item(item=item_id, partition_key=partition_key)
        except CosmosResourceNotFoundError:
            return None
        return self._to_model(cast("dict[str, Any]", data))

    async def replace(self, item: T) -> T:
        """Overwrite an existing document with the model's current state."""
        data = await self._container.replace_item(item=item.id, body=item.to_document())
        logger.debug("Replaced %s id=%s", self.container_name, item.id)
        return self._to_model(cast("dict[str, Any]", data))

    async def delete(self, item_id: str, partition_key: str) -> bool:
        """Delete a document; return False when it was already gone."""
        try:
            await self._container.delete_item(item=item_id, partition_key=partition_key)
        except CosmosResourceNotFoundError:
            return False
        logger.debug("Deleted %s id=%s", self.container_name, item_id)
        return True

    async def query(self, sql: str, parameters: list[dict[str, Any]] | None = None) -> list[T]:
        """Run a cross-partition query and return every matching document."""
        return [
            self._to_model(item)
            async for item in self._container.query_items(query=sql, parameters=parameters)
        ]

    async def count(
        self,
        where: str | None = None,
        parameters: list[dict[str, Any]] | None = None,
    ) -> int:
        """Return the number of documents matching an optional WHERE clause."""
        sql = "SELECT VALUE COUNT(1) FROM c"
        if where:
            sql = f"{sql} WHERE {where}"
        total = 0
        async for item in self._container.query_items(query=sql, parameters=parameters):
            total = cast("int", item)
        return total
