"""Customer document model with a nested postal address."""

from __future__ import annotations

from cosmos_demos.models.base import CamelModel, DocumentBase


class Location(CamelModel):
    city: str | None = None
    county: str | None = None


class Address(CamelModel):
    address_type: str | None = None
    address_line1: str | None = None
    location: Location | None = None
    postcode: str | None = None
    country: str | None = None


class Customer(DocumentBase):
    """A customer keyed by postcode."""

    name: str
    address: Address | None = None

    @property
    def city(self) -> str | None:
        """Return the address city, if every level of the address is present."""
        if self.address is None or self.address.location is None:
            return None
        return self.address.location.city
