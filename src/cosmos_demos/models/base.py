"""Base document model shared by all Cosmos DB document types."""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model serialized with camelCase JSON names; accepts either naming on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class DocumentBase(CamelModel):
    """A top-level document stored in a container partitioned by ``/pk``."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    partition_key: str = Field(alias="pk")

    def to_document(self) -> dict[str, Any]:
        """Return the JSON body sent to Cosmos DB."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
