"""Raw query response bodies and incremental decoding of their ``Documents`` array.

The service answers each query request with an envelope::

    {"_rid": "...", "Documents": [{...}, {...}], "_count": 2}

:class:`ResponseBodyRecorder` is passed to the SDK as ``raw_response_hook``
and keeps those bodies byte for byte. Documents are then decoded one at a
time with ``json.JSONDecoder.raw_decode`` so the caller never holds a parsed
copy of the whole page.
"""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Generator, Iterator

    from azure.core.pipeline import PipelineResponse

DOCUMENTS_KEY = "Documents"
IS_QUERY_HEADER = "x-ms-documentdb-isquery"
QUERY_PLAN_HEADER = "x-ms-cosmos-is-query-plan-request"
ITEM_COUNT_HEADER = "x-ms-item-count"

_WHITESPACE = re.compile(r"[ \t\n\r]*")
_DECODER = json.JSONDecoder()


class ResponseBodyRecorder:
    """Collect the body of every query result response the SDK receives.

    The SDK calls the hook once per HTTP response. Query-plan and other
    non-query requests made on the query's behalf are skipped.
    """

    def __init__(self) -> None:
        self._bodies: list[bytes] = []
        self._item_count = 0

    def __call__(self, response: PipelineResponse) -> None:
        headers = response.http_request.headers
        if not headers.get(IS_QUERY_HEADER) or headers.get(QUERY_PLAN_HEADER):
            return
        self._bodies.append(response.http_response.body())
        self._item_count += int(response.http_response.headers.get(ITEM_COUNT_HEADER, 0))

    def drain(self) -> tuple[tuple[bytes, ...], int]:
        """Return the bodies and item count recorded since the last drain."""
        bodies, item_count = tuple(self._bodies), self._item_count
        self._bodies, self._item_count = [], 0
        return bodies, item_count


def _skip(text: str, pos: int) -> int:
    match = _WHITESPACE.match(text, pos)
    return match.end() if match else pos


def _expect(text: str, pos: int, char: str) -> int:
    pos = _skip(text, pos)
    if text[pos : pos + 1] != char:
        raise json.JSONDecodeError(f"Expecting {char!r}", text, pos)
    return pos + 1


def _iter_array(text: str, pos: int) -> Generator[Any, None, int]:
    """Yield array elements starting at ``pos``; return the index after ``]``."""
    pos = _skip(text, _expect(text, pos, "["))
    if text[pos : pos + 1] == "]":
        return pos + 1
    while True:
        item, pos = _DECODER.raw_decode(text, pos)
        yield item
        pos = _skip(text, pos)
        if text[pos : pos + 1] == ",":
            pos = _skip(text, pos + 1)
        elif text[pos : pos + 1] == "]":
            return pos + 1
        else:
            raise json.JSONDecodeError("Expecting ',' or ']'", text, pos)


def iter_documents(body: bytes) -> Iterator[Any]:
    """Yield each element of the envelope's ``Documents`` array in order.

    Other top-level members are skipped. A body without a ``Documents``
    member yields nothing.
    """
    text = body.decode("utf-8")
    pos = _skip(text, _expect(text, 0, "{"))
    if text[pos : pos + 1] == "}":
        return
    while True:
        key, pos = _DECODER.raw_decode(text, _skip(text, pos))
        pos = _skip(text, _expect(text, pos, ":"))
        if key == DOCUMENTS_KEY:
            pos = yield from _iter_array(text, pos)
        else:
            _, pos = _DECODER.raw_decode(text, pos)
        pos = _skip(text, pos)
        if text[pos : pos + 1] == ",":
            pos += 1
        elif text[pos : pos + 1] == "}":
            return
        else:
            raise json.JSONDecodeError("Expecting ',' or '}'", text, pos)
