"""Tests for BaseRepository CRUD through a concrete repository."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from azure.cosmos.exceptions import CosmosHttpResponseError, CosmosResourceNotFoundError

from cosmos_demos.database.repositories.customers import CustomerRepository
from cosmos_demos.models import Customer


async def _aiter(items):
    for item in items:
        yield item


@pytest.mark.unit
class TestBaseRepository:
    """Test the generic repository operations."""

    @pytest.fixture
    def repo(self) -> CustomerRepository:
        mock_db = MagicMock()
        mock_container = AsyncMock()
        mock_db.get_container_client.return_value = mock_container
        return CustomerRepository(mock_db)

    def test_binds_to_container(self) -> None:
        mock_db = MagicMock()
        CustomerRepository(mock_db)

        mock_db.get_container_client.assert_called_once_with("Customers")

    async def test_create_sends_aliased_body(self, repo: CustomerRepository) -> None:
        """Verify the document body uses JSON field names."""
        customer = Customer(id="c-1", partition_key="SN83PA", name="New customer 3")
        repo._container.create_item.return_value = {**customer.to_document(), "_etag": "e"}  # noqa: SLF001

        created = await repo.create(customer)

        body = repo._container.create_item.call_args.kwargs["body"]  # noqa: SLF001
        assert body == {"id": "c-1", "pk": "SN83PA", "name": "New customer 3"}
        assert created == customer

    async def test_get_returns_model(self, repo: CustomerRepository) -> None:
        repo._container.read_item.return_value = {"id": "c-1", "pk": "OX117GA", "name": "A"}  # noqa: SLF001

        customer = await repo.get("c-1", "OX117GA")

        assert customer is not None
        assert customer.partition_key == "OX117GA"
        repo._container.read_item.assert_awaited_once_with(item="c-1", partition_key="OX117GA")  # noqa: SLF001

    async def test_get_missing_returns_none(self, repo: CustomerRepository) -> None:
        repo._container.read_item.side_effect = CosmosResourceNotFoundError(  # noqa: SLF001
            status_code=404,
            message="Not found",
        )

        assert await repo.get("missing", "pk") is None

    async def test_get_propagates_other_errors(self, repo: CustomerRepository) -> None:
        repo._container.read_item.side_effect = CosmosHttpResponseError(  # noqa: SLF001
            status_code=429,
            message="Too many requests",
        )

        with pytest.raises(CosmosHttpResponseError):
            await repo.get("c-1", "pk")

    async def test_replace_uses_item_id(self, repo: CustomerRepository) -> None:
        customer = Customer(id="c-1", partition_key="SN83PA", name="Renamed")
        repo._container.replace_item.return_value = customer.to_document()  # noqa: SLF001

        await repo.replace(customer)

        kwargs = repo._container.replace_item.call_args.kwargs  # noqa: SLF001
        assert kwargs["item"] == "c-1"
        assert kwargs["body"]["name"] == "Renamed"

    async def test_delete(self, repo: CustomerRepository) -> None:
        assert await repo.delete("c-1", "SN83PA") is True
        repo._container.delete_item.assert_awaited_once_with(item="c-1", partition_key="SN83PA")  # noqa: SLF001

    async def test_delete_missing_returns_false(self, repo: CustomerRepository) -> None:
        repo._container.delete_item.side_effect = CosmosResourceNotFoundError(  # noqa: SLF001
            status_code=404,
            message="Not found",
        )

        assert await repo.delete("c-1", "SN83PA") is False

    async def test_query_validates_each_item(self, repo: CustomerRepository) -> None:
        repo._container.query_items = MagicMock(  # noqa: SLF001
            return_value=_aiter([{"id": "1", "pk": "a", "name": "X"}, {"id": "2", "pk": "b", "name": "Y"}])
        )

        customers = await repo.query("SELECT * FROM c")

        assert [c.name for c in customers] == ["X", "Y"]

    async def test_count_with_where(self, repo: CustomerRepository) -> None:
        repo._container.query_items = MagicMock(return_value=_aiter([42]))  # noqa: SLF001

        total = await repo.count("c.name = @name", [{"name": "@name", "value": "X"}])

        assert total == 42
        kwargs = repo._container.query_items.call_args.kwargs  # noqa: SLF001
        assert kwargs["query"] == "SELECT VALUE COUNT(1) FROM c WHERE c.name = @name"

