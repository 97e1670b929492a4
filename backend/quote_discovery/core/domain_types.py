"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - All valid states encoded as Enums, no raw string matching
    - Capacity and cap constants live here, nowhere else

Design Decisions:
    - str Enums: serialize to JSON without custom encoders, values match the wire format
"""

from enum import Enum


# ─── Enums ───────────────────────────────────────────────────────

class SearchField(str, Enum):
    """Quote fields the free-text matcher may look at."""
    TEXT = "text"
    AUTHOR = "author"
    CATEGORY = "category"
    COLLECTIONS = "collections"
    TAGS = "tags"
    SOURCE = "source"


class SortBy(str, Enum):
    """Result ordering keys. RELEVANCE keeps matcher order."""
    RELEVANCE = "relevance"
    DATE = "date"
    AUTHOR = "author"
    CATEGORY = "category"
    LENGTH = "length"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class RecommendationType(str, Enum):
    """Generator that produced a recommendation, in priority order."""
    SIMILAR = "similar"
    TRENDING = "trending"
    DISCOVERY = "discovery"


class BulkOperationType(str, Enum):
    """Actions applicable to every id in a selection set."""
    ADD_TO_COLLECTION = "addToCollection"
    REMOVE_FROM_COLLECTION = "removeFromCollection"
    EXPORT = "export"
    DELETE = "delete"


class EngineEventKind(str, Enum):
    """Notifications emitted to engine subscribers."""
    CORPUS_UPDATED = "corpus_updated"
    SEARCH_EXECUTED = "search_executed"
    HISTORY_CHANGED = "history_changed"
    SAVED_SEARCHES_CHANGED = "saved_searches_changed"
    ANALYTICS_CHANGED = "analytics_changed"
    SELECTION_CHANGED = "selection_changed"
    BULK_OPERATION_COMPLETED = "bulk_operation_completed"


DEFAULT_SEARCH_FIELDS: tuple[SearchField, ...] = (
    SearchField.TEXT,
    SearchField.AUTHOR,
    SearchField.CATEGORY,
    SearchField.COLLECTIONS,
)


# ─── Constants ───────────────────────────────────────────────────

HISTORY_CAPACITY = 10
SUGGESTION_LIMIT = 8
POPULAR_LIMIT = 5
RECOMMENDATION_LIMIT = 5
RELATED_LIMIT = 3
TREND_DAYS = 7

# Quote length slider bounds; a range equal to these is "not narrowed"
DEFAULT_MIN_LENGTH = 0
DEFAULT_MAX_LENGTH = 1000

FILTERED_SEARCH_LABEL = "Filtered Search"
