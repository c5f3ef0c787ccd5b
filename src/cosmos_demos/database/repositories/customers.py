"""Repository for the Customers container (partitioned by /pk)."""

from __future__ import annotations

from cosmos_demos.database.repositories.base import BaseRepository
from cosmos_demos.models.customer import Customer


class CustomerRepository(BaseRepository[Customer]):
    container_name = "Customers"
    model_class = Customer

