"""Repository for the Products container (partitioned by /pk)."""

from __future__ import annotations

from cosmos_demos.database.repositories.base import BaseRepository
from cosmos_demos.models.product import Product


class ProductRepository(BaseRepository[Product]):
    container_name = "Products"
    model_class = Product

    async def list_by_version(self, version: int) -> list[Product]:
        """Fetch products still at a given document version."""
        return await self.query(
            "SELECT * FROM c WHERE c.documentVersion = @version",
            [{"name": "@version", "value": version}],
        )

    async def count_by_version(self, version: int) -> int:
        return await self.count(
            "c.documentVersion = @version",
            [{"name": "@version", "value": version}],
        )

