"""Local error types.

Data-layer failures are raised by ``azure.cosmos.exceptions`` and are not
wrapped here.
"""

from __future__ import annotations


class CosmosDemoError(RuntimeError):
    """Base error for failures that originate in this package."""


class ConfigurationError(CosmosDemoError):
    """Required configuration is missing or malformed."""


class PagingExhaustedError(CosmosDemoError):
    """A page was requested after the result set was fully consumed."""

    def __init__(self, database_id: str, container_id: str) -> None:
        super().__init__(
            f"No more pages for query on {database_id}/{container_id} — "
            "check has_more() before calling next_page()"
        )
        self.database_id = database_id
        self.container_id = container_id
