"""Tests for the CosmosClient lifecycle wrapper."""

from unittest.mock import AsyncMock, patch

import pytest

from cosmos_demos.database.client import CosmosClient


@pytest.mark.unit
class TestCosmosClient:
    """Test initialization, proxies and shutdown."""

    async def test_initialize_creates_sdk_client(self, cosmos_config) -> None:
        with patch("cosmos_demos.database.client.AzureCosmosClient") as MockClient:
            client = CosmosClient(cosmos_config)
            await client.initialize()

            MockClient.assert_called_once_with(cosmos_config.endpoint, credential=cosmos_config.key)
            assert client.client is MockClient.return_value

    async def test_initialize_is_idempotent(self, cosmos_config) -> None:
        with patch("cosmos_demos.database.client.AzureCosmosClient") as MockClient:
            client = CosmosClient(cosmos_config)
            await client.initialize()
            await client.initialize()

            MockClient.assert_called_once()

    def test_client_before_initialize_raises(self, cosmos_config) -> None:
        with pytest.raises(RuntimeError, match="not initialized"):
            CosmosClient(cosmos_config).client

    async def test_context_manager_closes(self, cosmos_config) -> None:
        with patch("cosmos_demos.database.client.AzureCosmosClient") as MockClient:
            MockClient.return_value.close = AsyncMock()
            async with CosmosClient(cosmos_config) as client:
                assert client.client is MockClient.return_value

            MockClient.return_value.close.assert_awaited_once()
            with pytest.raises(RuntimeError):
                client.client

    async def test_get_container(self, cosmos_config) -> None:
        with patch("cosmos_demos.database.client.AzureCosmosClient") as MockClient:
            client = CosmosClient(cosmos_config)
            await client.initialize()

            container = client.get_container("MyTempDb", "Products")

            sdk = MockClient.return_value
            sdk.get_database_client.assert_called_once_with("MyTempDb")
            sdk.get_database_client.return_value.get_container_client.assert_called_once_with("Products")
            assert container is sdk.get_database_client.return_value.get_container_client.return_value
