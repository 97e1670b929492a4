"""Search Schemas: filter configuration, history/saved/analytics records and derived views.

Invariants:
    - Every record round-trips through JSON with camelCase keys (persisted blobs, export document)
    - SavedSearch.use_count >= 0
    - SearchAnalytics.average_results is a float, never rounded
    - TrendPoint.date is an ISO calendar day (YYYY-MM-DD, UTC)

Design Decisions:
    - DateRange accepts "" for an open bound: filter panels send empty strings
    - Filters are plain data: activity checks live in core/query_matcher.py
"""

from datetime import date, datetime

from pydantic import Field, field_validator

from quote_discovery.core.domain_types import (
    BulkOperationType, RecommendationType, SortBy, SortOrder,
    DEFAULT_MAX_LENGTH, DEFAULT_MIN_LENGTH,
)
from quote_discovery.schemas.quote import Quote, WireModel


# ─── Filters ────────────────────────────────────────────────────

class SearchFilters(WireModel):
    """Structured equality filters. Empty string / None means unset."""
    author: str = ""
    category: str = ""
    collection: str = ""
    is_liked: bool | None = None


class DateRange(WireModel):
    start: date | None = None
    end: date | None = None

    @field_validator("start", "end", mode="before")
    @classmethod
    def empty_is_open(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class LengthRange(WireModel):
    min: int = DEFAULT_MIN_LENGTH
    max: int = DEFAULT_MAX_LENGTH


class BooleanSearch(WireModel):
    must_include: list[str] = Field(default_factory=list)
    must_exclude: list[str] = Field(default_factory=list)
    any_of: list[str] = Field(default_factory=list)


class AdvancedFilters(WireModel):
    """Date/length ranges, boolean terms and ordering for a search."""
    date_range: DateRange = Field(default_factory=DateRange)
    quote_length: LengthRange = Field(default_factory=LengthRange)
    boolean_search: BooleanSearch = Field(default_factory=BooleanSearch)
    sort_by: SortBy = SortBy.RELEVANCE
    sort_order: SortOrder = SortOrder.DESC


# ─── History & Saved Searches ───────────────────────────────────

class SearchHistoryItem(WireModel):
    query: str
    timestamp: datetime
    result_count: int = Field(ge=0)


class SavedSearch(WireModel):
    """Named snapshot of a query plus both filter objects."""
    id: str
    name: str
    query: str
    filters: SearchFilters = Field(default_factory=SearchFilters)
    advanced_filters: AdvancedFilters = Field(default_factory=AdvancedFilters)
    created_at: datetime
    use_count: int = Field(default=0, ge=0)


# ─── Analytics & Insights ───────────────────────────────────────

class QueryCount(WireModel):
    query: str
    count: int


class AuthorCount(WireModel):
    author: str
    count: int


class CategoryCount(WireModel):
    category: str
    count: int


class SearchAnalytics(WireModel):
    popular_searches: list[QueryCount] = Field(default_factory=list)
    popular_authors: list[AuthorCount] = Field(default_factory=list)
    popular_categories: list[CategoryCount] = Field(default_factory=list)
    total_searches: int = 0
    average_results: float = 0.0


class TrendPoint(WireModel):
    date: str
    count: int


class SearchInsights(WireModel):
    favorite_author: str = ""
    favorite_category: str = ""
    most_quoted_author: str = ""
    search_trends: list[TrendPoint] = Field(default_factory=list)
    unique_authors_count: int = 0
    unique_categories_count: int = 0


# ─── Recommendations & Related Content ──────────────────────────

class SmartRecommendation(WireModel):
    type: RecommendationType
    quote: Quote
    reason: str
    score: float


class RelatedContent(WireModel):
    same_author: list[Quote] = Field(default_factory=list)
    same_category: list[Quote] = Field(default_factory=list)
    same_collection: list[Quote] = Field(default_factory=list)
    similar_quotes: list[Quote] = Field(default_factory=list)


# ─── Export & Bulk Operations ───────────────────────────────────

class ExportedQuote(WireModel):
    text: str
    author: str
    category: str | None = None
    is_liked: bool
    created_at: datetime | None = None


class ExportDocument(WireModel):
    exported_at: datetime
    total_quotes: int
    search_query: str
    filters: AdvancedFilters
    quotes: list[ExportedQuote]


class BulkFailure(WireModel):
    quote_id: str
    error: str


class BulkOperationOutcome(WireModel):
    """Aggregate result of a bulk operation; per-item failures never abort the run."""
    operation: BulkOperationType
    succeeded: list[str] = Field(default_factory=list)
    failed: list[BulkFailure] = Field(default_factory=list)
    document: ExportDocument | None = None


class IngestionReport(WireModel):
    accepted_quotes: int = 0
    rejected_quotes: int = 0
    accepted_collections: int = 0
    rejected_collections: int = 0
