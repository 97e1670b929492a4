"""API Schemas: request/response bodies for the HTTP surface.

Invariants:
    - Corpus entries arrive as raw dicts: the engine validates them one by one
      so a single bad quote does not reject the whole snapshot
    - SaveSearchRequest.name: 1-200 chars, stripped, non-empty
    - BulkOperationRequest.type uses the wire values (addToCollection, ...)
"""

from pydantic import Field, field_validator

from quote_discovery.core.domain_types import BulkOperationType
from quote_discovery.schemas.quote import Quote, WireModel
from quote_discovery.schemas.search import (
    AdvancedFilters, IngestionReport, SearchFilters,
)


class CorpusUpdate(WireModel):
    quotes: list[dict] = Field(default_factory=list)
    collections: list[dict] = Field(default_factory=list)


class CorpusUpdateResponse(WireModel):
    report: IngestionReport
    total_quotes: int
    total_collections: int


class SearchRequest(WireModel):
    """Omitted fields keep the session's current query/filters."""
    query: str | None = Field(None, max_length=1000)
    filters: SearchFilters | None = None
    advanced_filters: AdvancedFilters | None = None


class SearchResponse(WireModel):
    query: str
    total: int
    recorded: bool
    results: list[Quote]


class SaveSearchRequest(WireModel):
    name: str = Field(min_length=1, max_length=200)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class SelectionUpdate(WireModel):
    quote_ids: list[str] = Field(default_factory=list)


class SelectionResponse(WireModel):
    quote_ids: list[str]
    count: int


class BulkOperationRequest(WireModel):
    type: BulkOperationType
    target_collection: str | None = None
