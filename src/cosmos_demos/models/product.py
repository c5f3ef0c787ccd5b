"""Product document model."""

from __future__ import annotations

from cosmos_demos.models.base import DocumentBase


class Product(DocumentBase):
    """A stocked product; ``document_version`` tracks schema migrations."""

    name: str
    stock_level: int = 0
    document_version: int = 1
