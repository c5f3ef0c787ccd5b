"""Documents demo: create, query, page, filter, replace and delete documents.

Customers are inserted three ways (plain dict, raw JSON string, typed model)
to show that the service stores the same JSON regardless of how the client
built it. Products are seeded in bulk to give the paging steps a result set
spanning several pages.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import click

from cosmos_demos.database import admin
from cosmos_demos.database.filters import ItemQuery
from cosmos_demos.database.paging import PagedQueryClient, Query
from cosmos_demos.database.repositories import CustomerRepository, ProductRepository
from cosmos_demos.demos import TEMPORARY_DATABASE_ID, heading
from cosmos_demos.models import Address, Customer, Location, Product

if TYPE_CHECKING:
    from cosmos_demos.database.client import CosmosClient

logger = logging.getLogger(__name__)

CUSTOMER_CONTAINER_ID = "Customers"
PRODUCT_CONTAINER_ID = "Products"

PRODUCT_COUNT = 150
PAGE_SIZE = 50
DEFAULT_PAGE_SIZE = 100
MIN_STOCK_LEVEL = 70
LOW_STOCK_THRESHOLD = 75

ALL_PRODUCTS = Query("SELECT * FROM c", TEMPORARY_DATABASE_ID, PRODUCT_CONTAINER_ID)
NEW_CUSTOMERS = Query(
    "SELECT * FROM c WHERE STARTSWITH(c.name, @prefix) = true",
    TEMPORARY_DATABASE_ID,
    CUSTOMER_CONTAINER_ID,
    parameters=({"name": "@prefix", "value": "New customer"},),
)


async def ensure_containers(client: CosmosClient) -> None:
    click.echo()
    click.echo(f"Creating database {TEMPORARY_DATABASE_ID} (if not exists)")
    database = await admin.create_database(client, TEMPORARY_DATABASE_ID)
    click.echo(f"Database Id: {database.id}; Modified: {database.last_modified}")

    for container_id in (CUSTOMER_CONTAINER_ID, PRODUCT_CONTAINER_ID):
        click.echo()
        click.echo(f"Creating container {container_id} (if not exists)")
        container = await admin.create_container(client, TEMPORARY_DATABASE_ID, container_id)
        click.echo(f"Container Id: {container.id}; Modified: {container.last_modified}")


async def populate_products(client: CosmosClient, total: int = PRODUCT_COUNT) -> None:
    repo = ProductRepository(client.get_database(TEMPORARY_DATABASE_ID))
    for index in range(1, total + 1):
        await repo.create(
            Product(
                partition_key=f"product/{index}",
                name=f"Product {index}",
                stock_level=200 - index,
                document_version=1,
            )
        )
    click.echo(f"Added {total} product documents")


async def create_documents(client: CosmosClient) -> list[str]:
    """Insert one customer per representation and return their ids."""
    heading("Create Documents")
    container = client.get_container(TEMPORARY_DATABASE_ID, CUSTOMER_CONTAINER_ID)
    created: list[str] = []

    # Untyped: any JSON-compatible dict works, as long as it carries the /pk field.
    dynamic_document: dict[str, Any] = {
        "id": str(uuid4()),
        "pk": "OX117GA",
        "name": "New customer 1",
        "address": {
            "addressType": "Main Office",
            "addressLine1": "123 Main Street",
            "location": {"city": "Oxford", "county": "Oxfordshire"},
            "postcode": "OX117GA",
            "country": "United Kingdom",
        },
    }
    await container.create_item(body=dynamic_document)
    created.append(dynamic_document["id"])
    click.echo(f"Created new document {dynamic_document['id']} from dict")

    raw_json = f"""
        {{
            "id": "{uuid4()}",
            "pk": "RG179XA",
            "name": "New customer 2"
        }}"""
    json_document = json.loads(raw_json)
    await container.create_item(body=json_document)
    created.append(json_document["id"])
    click.echo(f"Created new document {json_document['id']} from JSON string")

    customer = Customer(
        partition_key="SN83PA",
        name="New customer 3",
        address=Address(
            address_type="Residential",
            address_line1="99 Some other road",
            location=Location(city="Swindon", county="Wiltshire"),
            postcode="SN83PA",
            country="United Kingdom",
        ),
    )
    await CustomerRepository(client.get_database(TEMPORARY_DATABASE_ID)).create(customer)
    created.append(customer.id)
    click.echo(f"Created new document {customer.id} from typed model")

    return created


async def query_documents(client: CosmosClient) -> None:
    heading("Query Documents (SQL)")
    paging = PagedQueryClient(client)
    click.echo("Querying for new customer documents (SQL)")
    click.echo()

    page = await paging.fetch_page(NEW_CUSTOMERS, DEFAULT_PAGE_SIZE)
    for number, document in enumerate(page, start=1):
        click.echo(f"  #{number} Id: {document['id']}; Name: {document['name']};")
        # A dict converts to the typed model on demand.
        customer = Customer.model_validate(document)
        click.echo(f"    City: {customer.city or '{ Unknown }'}")
    click.echo()
    click.echo(f"Retrieved {len(page)} new documents as dict")
    click.echo()

    page = await paging.fetch_page(NEW_CUSTOMERS, DEFAULT_PAGE_SIZE, model=Customer)
    for number, customer in enumerate(page, start=1):
        click.echo(f"  #{number} Id: {customer.id}; Name: {customer.name};")
        click.echo(f"    City: {customer.city or '{ Unknown }'}")
    click.echo()
    click.echo(f"Retrieved {len(page)} new documents as Customer (model)")
    click.echo()


async def query_with_stateful_paging(client: CosmosClient) -> int:
    heading("Query Documents (paged results, stateful)")
    paging = PagedQueryClient(client)

    click.echo("Querying for all product documents (first page)")
    first_page = await paging.open(ALL_PRODUCTS, PAGE_SIZE, model=Product).next_page()
    for number, product in enumerate(first_page, start=1):
        click.echo(f"#{number} Id: {product.id}; Name: {product.name};")
    click.echo(f"Retrieved {len(first_page)} documents in first page")
    click.echo()

    click.echo("Querying for all product documents (full result set, stateful)")
    iterator = paging.open(ALL_PRODUCTS, PAGE_SIZE, model=Product)
    item_count = 0
    while iterator.has_more():
        page = await iterator.next_page()
        click.echo(f"Page index incremented to {iterator.pages_read}")
        for product in page:
            item_count += 1
            click.echo(f"#{item_count} Id: {product.id}; Name: {product.name};")
    click.echo(f"Retrieved {item_count} documents across full result set")
    click.echo()
    return item_count


async def fetch_next_page(client: CosmosClient, continuation_token: str | None) -> str | None:
    """Serve one page the way a stateless API endpoint would; return the next token."""
    paging = PagedQueryClient(client)
    page = await paging.fetch_page(ALL_PRODUCTS, PAGE_SIZE, continuation_token, model=Product)
    if continuation_token is not None:
        click.echo(f"...resuming with continuation {continuation_token}")
    for number, product in enumerate(page, start=1):
        click.echo(f"#{number} Id: {product.id}; Name: {product.name};")
    if page.continuation_token is None:
        click.echo("...no more continuation, result set complete")
    return page.continuation_token


async def query_with_stateless_paging(client: CosmosClient) -> int:
    heading("Query all Documents (paged results, stateless)")
    requests = 0
    continuation_token: str | None = None
    while True:
        continuation_token = await fetch_next_page(client, continuation_token)
        requests += 1
        if continuation_token is None:
            break
    click.echo("Retrieved all documents")
    click.echo()
    return requests


async def query_with_stateful_paging_streamed(client: CosmosClient) -> int:
    heading("Query Documents with stateful paging, streamed")
    click.echo("Querying for all documents (full result set, stateful, with streaming iterator)")
    iterator = PagedQueryClient(client).open_stream(ALL_PRODUCTS, PAGE_SIZE)
    item_count = 0
    async for page in iterator:
        for product in page.iter_items(Product):
            item_count += 1
            click.echo(
                f"({iterator.pages_read}.{item_count}) Id: {product.id}; Name: {product.name};"
            )
    click.echo(
        f"Retrieved {item_count} documents (full result set, stateful, with streaming iterator)"
    )
    click.echo()
    return item_count


async def fetch_next_page_streamed(client: CosmosClient, continuation_token: str | None) -> str | None:
    paging = PagedQueryClient(client)
    page = await paging.fetch_page_stream(ALL_PRODUCTS, PAGE_SIZE, continuation_token)
    if continuation_token is not None:
        click.echo(f"...resuming with continuation {continuation_token}")
    for number, product in enumerate(page.iter_items(Product), start=1):
        click.echo(f"({number}) Id: {product.id}; Name: {product.name};")
    if page.continuation_token is None:
        click.echo("...no more continuation, result set complete")
    return page.continuation_token


async def query_with_stateless_paging_streamed(client: CosmosClient) -> int:
    heading("Query Documents with stateless paging, streamed")
    requests = 0
    continuation_token: str | None = None
    while True:
        continuation_token = await fetch_next_page_streamed(client, continuation_token)
        requests += 1
        if continuation_token is None:
            break
    click.echo("Retrieved all documents (full result set, stateless, with streaming iterator)")
    click.echo()
    return requests


async def query_with_builder(
    client: CosmosClient,
    min_stock_level: int = MIN_STOCK_LEVEL,
) -> list[dict[str, Any]]:
    heading("Query Documents (query builder)")
    click.echo(f"Querying for products having stock level >= {min_stock_level}")
    query = (
        ItemQuery()
        .where("stockLevel", ">=", min_stock_level)
        .select("id", "name", "stockLevel")
        .to_query(TEMPORARY_DATABASE_ID, PRODUCT_CONTAINER_ID)
    )
    documents: list[dict[str, Any]] = []
    async for page in PagedQueryClient(client).open(query, DEFAULT_PAGE_SIZE):
        documents.extend(page)

    click.echo(f"Found {len(documents)} products with stock level >= {min_stock_level}")
    for document in documents:
        click.echo(
            f"Id: {document['id']}; Name: {document['name']}; "
            f"Stock Level: {document['stockLevel']};"
        )
    click.echo()
    return documents


async def replace_documents(client: CosmosClient) -> int:
    heading("Replace Documents")
    repo = ProductRepository(client.get_database(TEMPORARY_DATABASE_ID))

    async def version_check() -> None:
        click.echo("Querying for documents that require an update...")
        click.echo(f"Documents at version 1: {await repo.count_by_version(1)}")
        click.echo()

    await version_check()

    click.echo("Querying for documents to update")
    products = await repo.list_by_version(1)
    click.echo(f"Found {len(products)} documents to be updated")
    for product in products:
        product.document_version = 2
        updated = await repo.replace(product)
        click.echo(f"Updated document Id: {updated.id}; Version: {updated.document_version};")
    click.echo()

    await version_check()
    return len(products)


async def delete_documents(client: CosmosClient, threshold: int = LOW_STOCK_THRESHOLD) -> int:
    heading("Delete Documents")
    repo = ProductRepository(client.get_database(TEMPORARY_DATABASE_ID))

    click.echo("Querying for documents to be deleted")
    query = (
        ItemQuery()
        .where("stockLevel", "<", threshold)
        .select("id", "pk", "stockLevel")
        .to_query(TEMPORARY_DATABASE_ID, PRODUCT_CONTAINER_ID)
    )
    documents: list[dict[str, Any]] = []
    async for page in PagedQueryClient(client).open(query, DEFAULT_PAGE_SIZE):
        documents.extend(page)
    click.echo(f"Found {len(documents)} documents to be deleted")

    deleted = 0
    for document in documents:
        click.echo(f"Deleting document Id: {document['id']}; Stock level: {document['stockLevel']};")
        if await repo.delete(document["id"], document["pk"]):
            deleted += 1
        else:
            logger.warning("Document %s was already deleted", document["id"])

    click.echo(f"Deleted {deleted} documents with low stock level")
    click.echo()
    return deleted


async def delete_temporary_database(client: CosmosClient) -> None:
    click.echo()
    click.echo(f"Deleting database {TEMPORARY_DATABASE_ID}...")
    await admin.delete_database(client, TEMPORARY_DATABASE_ID)
    click.echo(f"Database {TEMPORARY_DATABASE_ID} has been deleted")


async def run(client: CosmosClient) -> None:
    await ensure_containers(client)
    await populate_products(client)

    await create_documents(client)
    await query_documents(client)

    # Materialized pages are decoded into models as they arrive.
    await query_with_stateful_paging(client)
    await query_with_stateless_paging(client)

    # Streamed pages stay as raw JSON until the caller decodes them.
    await query_with_stateful_paging_streamed(client)
    await query_with_stateless_paging_streamed(client)

    await query_with_builder(client)

    await replace_documents(client)
    await delete_documents(client)

    await delete_temporary_database(client)
