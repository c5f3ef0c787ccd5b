"""Async Cosmos DB client lifecycle."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from azure.cosmos.aio import ContainerProxy, DatabaseProxy
from azure.cosmos.aio import CosmosClient as AzureCosmosClient

if TYPE_CHECKING:
    from types import TracebackType

    from cosmos_demos.config import CosmosConfig

logger = logging.getLogger(__name__)


class CosmosClient:
    """Owns the async SDK client for the duration of a demo run."""

    def __init__(self, config: CosmosConfig) -> None:
        self._config = config
        self._client: AzureCosmosClient | None = None

    async def initialize(self) -> None:
        """Create the SDK client."""
        if self._client is not None:
            return
        self._client = AzureCosmosClient(self._config.endpoint, credential=self._config.key)
        logger.info("Cosmos client created — endpoint=%s", self._config.endpoint)

    async def close(self) -> None:
        """Close the underlying client."""
        if self._client:
            await self._client.close()
            self._client = None
            logger.info("Cosmos client closed")

    async def __aenter__(self) -> CosmosClient:
        await self.initialize()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    def client(self) -> AzureCosmosClient:
        if self._client is None:
            raise RuntimeError("CosmosClient not initialized; call initialize() first")
        return self._client

    def get_database(self, database_id: str) -> DatabaseProxy:
        return self.client.get_database_client(database_id)

    def get_container(self, database_id: str, container_id: str) -> ContainerProxy:
        return self.get_database(database_id).get_container_client(container_id)
