"""Families demo: a single-page query against an existing Families container."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cosmos_demos.database.paging import PagedQueryClient, Query

if TYPE_CHECKING:
    from cosmos_demos.database.client import CosmosClient

FAMILIES_DATABASE_ID = "Families"
FAMILIES_CONTAINER_ID = "Families"
PAGE_SIZE = 100

LARGE_FAMILIES = Query(
    "SELECT * FROM c WHERE ARRAY_LENGTH(c.children) > 1",
    FAMILIES_DATABASE_ID,
    FAMILIES_CONTAINER_ID,
)


async def run(client: CosmosClient) -> None:
    page = await PagedQueryClient(client).fetch_page(LARGE_FAMILIES, PAGE_SIZE)
    for family in page:
        click.echo(f"Family {family['id']} has {len(family.get('children', []))} children")
