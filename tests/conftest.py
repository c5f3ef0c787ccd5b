"""Shared fixtures: an in-memory stand-in for the SDK's paged query results."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest
from azure.core.pipeline import PipelineResponse
from azure.core.rest import HttpRequest

from cosmos_demos.config import CosmosConfig

CONTAINER_RID = "Wl9kAJ0ldQA="


class FakeHttpResponse:
    def __init__(self, body: bytes, headers: dict[str, str]) -> None:
        self._body = body
        self.headers = headers

    def body(self) -> bytes:
        return self._body


def query_response(
    documents: list[Any],
    continuation_token: str | None = None,
    *,
    query_plan: bool = False,
) -> PipelineResponse:
    """Build the pipeline response the service sends for one query request."""
    if query_plan:
        request_headers = {"x-ms-cosmos-is-query-plan-request": "True"}
        body = json.dumps({"queryInfo": {}, "queryRanges": []}).encode("utf-8")
        return PipelineResponse(
            HttpRequest("POST", "https://cosmos.example.com/docs", headers=request_headers),
            FakeHttpResponse(body, {}),
            None,
        )
    body = json.dumps(
        {"_rid": CONTAINER_RID, "Documents": documents, "_count": len(documents)}, indent=1
    ).encode("utf-8")
    headers = {"x-ms-item-count": str(len(documents))}
    if continuation_token is not None:
        headers["x-ms-continuation"] = continuation_token
    return PipelineResponse(
        HttpRequest("POST", "https://cosmos.example.com/docs", headers={"x-ms-documentdb-isquery": "true"}),
        FakeHttpResponse(body, headers),
        None,
    )


class FakePage:
    """One page of items, async-iterable like the SDK's page objects."""

    def __init__(self, items: list[Any]) -> None:
        self._items = iter(items)

    def __aiter__(self) -> FakePage:
        return self

    async def __anext__(self) -> Any:
        try:
            return next(self._items)
        except StopIteration:
            raise StopAsyncIteration from None


class FakePager:
    """Mimics ``AsyncItemPaged.by_page()``: offset-based string tokens.

    Each page is first delivered to ``raw_response_hook`` as a service
    response, the way the SDK pipeline does.
    """

    def __init__(
        self,
        documents: list[Any],
        page_size: int,
        continuation_token: str | None,
        hook: Callable[[PipelineResponse], None] | None = None,
        query_plan: bool = False,
        sent_bodies: list[bytes] | None = None,
    ) -> None:
        self._documents = documents
        self._page_size = page_size
        self._offset = int(continuation_token) if continuation_token else 0
        self._done = False
        self._hook = hook
        self._query_plan = query_plan
        self._sent_bodies = sent_bodies if sent_bodies is not None else []
        self.continuation_token = continuation_token

    def __aiter__(self) -> FakePager:
        return self

    async def __anext__(self) -> FakePage:
        if self._done:
            raise StopAsyncIteration
        chunk = self._documents[self._offset : self._offset + self._page_size]
        self._offset += len(chunk)
        if self._offset >= len(self._documents):
            self._done = True
            self.continuation_token = None
        else:
            self.continuation_token = str(self._offset)
        if self._hook is not None:
            if self._query_plan:
                self._hook(query_response([], query_plan=True))
                self._query_plan = False
            response = query_response(chunk, self.continuation_token)
            self._sent_bodies.append(response.http_response.body())
            self._hook(response)
        return FakePage(chunk)


class FakeItemPaged:
    def __init__(
        self,
        documents: list[Any],
        page_size: int,
        hook: Callable[[PipelineResponse], None] | None = None,
        query_plan: bool = False,
        sent_bodies: list[bytes] | None = None,
    ) -> None:
        self._documents = documents
        self._page_size = page_size
        self._hook = hook
        self._query_plan = query_plan
        self._sent_bodies = sent_bodies
        self.by_page_tokens: list[str | None] = []

    def by_page(self, continuation_token: str | None = None) -> FakePager:
        self.by_page_tokens.append(continuation_token)
        return FakePager(
            self._documents,
            self._page_size,
            continuation_token,
            self._hook,
            self._query_plan,
            self._sent_bodies,
        )

    def __aiter__(self) -> FakePage:
        return FakePage(list(self._documents))


class FakeContainer:
    """Container whose queries always return ``documents``; records query kwargs.

    ``server_page_size`` overrides the requested page size, as the service may.
    ``query_plan`` makes the first request of each query fetch a query plan.
    """

    def __init__(
        self,
        documents: list[Any],
        server_page_size: int | None = None,
        query_plan: bool = False,
    ) -> None:
        self.documents = documents
        self.server_page_size = server_page_size
        self.query_plan = query_plan
        self.query_calls: list[dict[str, Any]] = []
        self.results: list[FakeItemPaged] = []
        self.sent_bodies: list[bytes] = []

    def query_items(self, **kwargs: Any) -> FakeItemPaged:
        hook = kwargs.pop("raw_response_hook", None)
        self.query_calls.append(kwargs)
        page_size = self.server_page_size or kwargs.get("max_item_count") or 100
        result = FakeItemPaged(self.documents, page_size, hook, self.query_plan, self.sent_bodies)
        self.results.append(result)
        return result


def product_documents(count: int) -> list[dict[str, Any]]:
    return [
        {
            "id": f"product-{index}",
            "pk": f"product/{index}",
            "name": f"Product {index}",
            "stockLevel": 200 - index,
            "documentVersion": 1,
            "_rid": f"rid{index}",
            "_etag": f'"etag-{index}"',
            "_ts": 1_700_000_000,
        }
        for index in range(1, count + 1)
    ]


@pytest.fixture
def make_products():
    """Factory for product documents as the service returns them."""
    return product_documents


@pytest.fixture
def make_container():
    """Factory for fake containers over a fixed document list."""
    return FakeContainer


@pytest.fixture
def client_for():
    """Build a mock CosmosClient whose get_container() returns ``container``."""

    def _build(container: Any) -> MagicMock:
        client = MagicMock()
        client.get_container.return_value = container
        return client

    return _build


@pytest.fixture
def cosmos_config() -> CosmosConfig:
    return CosmosConfig(
        endpoint="https://cosmos.example.com:443/",
        key="c2VjcmV0",
    )


@pytest.fixture
def make_response():
    """Factory for the pipeline response of one query request."""
    return query_response
