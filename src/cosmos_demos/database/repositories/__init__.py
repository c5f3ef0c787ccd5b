"""Repository modules for each Cosmos DB container."""

from cosmos_demos.database.repositories.base import BaseRepository
from cosmos_demos.database.repositories.customers import CustomerRepository
from cosmos_demos.database.repositories.products import ProductRepository

__all__ = [
    "BaseRepository",
    "CustomerRepository",
    "ProductRepository",
]
