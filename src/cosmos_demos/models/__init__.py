"""Data models for Cosmos DB document types."""

from cosmos_demos.models.base import CamelModel, DocumentBase
from cosmos_demos.models.customer import Address, Customer, Location
from cosmos_demos.models.product import Product

__all__ = [
    "Address",
    "CamelModel",
    "Customer",
    "DocumentBase",
    "Location",
    "Product",
]
