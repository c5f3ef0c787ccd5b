"""Cosmos DB access: client lifecycle, administration, paging and repositories."""

from cosmos_demos.database.client import CosmosClient
from cosmos_demos.database.filters import ItemQuery
from cosmos_demos.database.paging import Page, PagedQueryClient, PageIterator, Query, StreamedPage

__all__ = [
    "CosmosClient",
    "ItemQuery",
    "Page",
    "PageIterator",
    "PagedQueryClient",
    "Query",
    "StreamedPage",
]
