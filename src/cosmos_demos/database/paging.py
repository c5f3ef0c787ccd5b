"""Paged query retrieval with continuation tokens.

Two ways to walk a result set:

* **stateful**: ``open()`` returns a :class:`PageIterator` that keeps the
  SDK cursor alive between ``next_page()`` calls;
* **stateless**: ``fetch_page()`` reads a single page and hands back the
  continuation token, which the caller passes to the next call.

Both have a streamed counterpart that returns each page as the JSON bodies
the service sent (:class:`StreamedPage`) instead of decoded items.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel

from cosmos_demos.database.streaming import ResponseBodyRecorder, iter_documents
from cosmos_demos.errors import PagingExhaustedError

if TYPE_CHECKING:
    from cosmos_demos.database.client import CosmosClient

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class Query:
    """A SQL query bound to one container, optionally scoped to a partition."""

    text: str
    database_id: str
    container_id: str
    partition_key: str | None = None
    parameters: tuple[dict[str, Any], ...] = ()

    def query_kwargs(self, page_size: int) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"query": self.text, "max_item_count": page_size}
        if self.parameters:
            kwargs["parameters"] = list(self.parameters)
        if self.partition_key is not None:
            kwargs["partition_key"] = self.partition_key
        return kwargs


@dataclass(frozen=True)
class Page:
    """One batch of decoded results.

    Items are model instances when a model class was given, otherwise the
    documents as returned by the service.
    """

    items: tuple[Any, ...]
    continuation_token: str | None

    @property
    def has_more(self) -> bool:
        return self.continuation_token is not None

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items)


@dataclass(frozen=True)
class StreamedPage:
    """One batch of results as the JSON response bodies the service sent.

    A page is normally a single response. A cross-partition query can need
    several to fill one page; each body is a complete ``Documents`` envelope.
    """

    bodies: tuple[bytes, ...]
    continuation_token: str | None
    item_count: int = 0

    @property
    def has_more(self) -> bool:
        return self.continuation_token is not None

    def __len__(self) -> int:
        return self.item_count

    def iter_documents(self) -> Iterator[Any]:
        """Decode documents from the bodies one at a time."""
        for body in self.bodies:
            yield from iter_documents(body)

    def iter_items(self, model: type[ModelT]) -> Iterator[ModelT]:
        for document in self.iter_documents():
            yield model.model_validate(document)


PageT = TypeVar("PageT", Page, StreamedPage)


def _validate_page_size(page_size: int) -> None:
    if page_size < 1:
        raise ValueError(f"page_size must be a positive integer, got {page_size}")


def _normalize_token(token: object) -> str | None:
    # The SDK reports an exhausted cursor as None or as an empty string.
    return token if isinstance(token, str) and token else None


async def _read_page(pager: Any, model: type[BaseModel] | None = None) -> Page:
    """Pull the next page from an SDK page iterator and decode its items."""
    try:
        page = await anext(pager)
    except StopAsyncIteration:
        return Page(items=(), continuation_token=None)
    documents = [document async for document in page]
    if model is not None:
        documents = [model.model_validate(document) for document in documents]
    return Page(items=tuple(documents), continuation_token=_normalize_token(getattr(pager, "continuation_token", None)))


async def _read_stream_page(pager: Any, recorder: ResponseBodyRecorder) -> StreamedPage:
    """Advance the SDK page iterator and keep the bodies it received.

    The SDK's own decoded copy of the page is dropped unread.
    """
    try:
        await anext(pager)
    except StopAsyncIteration:
        token = None
    else:
        token = _normalize_token(getattr(pager, "continuation_token", None))
    bodies, item_count = recorder.drain()
    return StreamedPage(bodies=bodies, continuation_token=token, item_count=item_count)


class PageIterator(Generic[PageT]):
    """Stateful cursor over the pages of one query.

    Single-owner: do not share an instance between concurrent tasks.
    """

    def __init__(self, query: Query, read: Callable[[], Awaitable[PageT]]) -> None:
        self._query = query
        self._read = read
        self._has_more = True
        self._position = 0
        self._pages_read = 0

    @property
    def position(self) -> int:
        """Number of items consumed so far."""
        return self._position

    @property
    def pages_read(self) -> int:
        return self._pages_read

    def has_more(self) -> bool:
        """Return True until the last page has been consumed."""
        return self._has_more

    async def next_page(self) -> PageT:
        """Fetch the next page; raise :class:`PagingExhaustedError` once exhausted."""
        if not self._has_more:
            raise PagingExhaustedError(self._query.database_id, self._query.container_id)

        page = await self._read()
        self._has_more = page.continuation_token is not None
        self._position += len(page)
        self._pages_read += 1
        logger.debug(
            "Read page %d of %s/%s — items=%d more=%s",
            self._pages_read,
            self._query.database_id,
            self._query.container_id,
            len(page),
            self._has_more,
        )
        return page

    def __aiter__(self) -> PageIterator[PageT]:
        return self

    async def __anext__(self) -> PageT:
        if not self._has_more:
            raise StopAsyncIteration
        return await self.next_page()


class PagedQueryClient:
    """Issue queries and read their results page by page."""

    def __init__(self, client: CosmosClient) -> None:
        self._client = client

    def _pager(self, query: Query, page_size: int, continuation_token: str | None, **options: Any) -> Any:
        _validate_page_size(page_size)
        container = self._client.get_container(query.database_id, query.container_id)
        items = container.query_items(**query.query_kwargs(page_size), **options)
        return items.by_page(continuation_token)

    def _stream_pager(
        self, query: Query, page_size: int, continuation_token: str | None
    ) -> tuple[Any, ResponseBodyRecorder]:
        recorder = ResponseBodyRecorder()
        return self._pager(query, page_size, continuation_token, raw_response_hook=recorder), recorder

    def open(
        self,
        query: Query,
        page_size: int,
        model: type[BaseModel] | None = None,
    ) -> PageIterator[Page]:
        """Start a stateful walk over the query's pages."""
        pager = self._pager(query, page_size, None)
        return PageIterator(query, partial(_read_page, pager, model))

    def open_stream(self, query: Query, page_size: int) -> PageIterator[StreamedPage]:
        """Start a stateful walk returning the raw JSON response bodies."""
        pager, recorder = self._stream_pager(query, page_size, None)
        return PageIterator(query, partial(_read_stream_page, pager, recorder))

    async def fetch_page(
        self,
        query: Query,
        page_size: int,
        continuation_token: str | None = None,
        model: type[BaseModel] | None = None,
    ) -> Page:
        """Read one page, resuming from ``continuation_token`` when given."""
        return await _read_page(self._pager(query, page_size, continuation_token), model)

    async def fetch_page_stream(
        self,
        query: Query,
        page_size: int,
        continuation_token: str | None = None,
    ) -> StreamedPage:
        """Read one page as raw JSON bodies, resuming from ``continuation_token``."""
        pager, recorder = self._stream_pager(query, page_size, continuation_token)
        return await _read_stream_page(pager, recorder)
