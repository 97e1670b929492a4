"""Filter Pipeline: structured filters, date/length ranges and sorting after matching.

Invariants:
    - Fixed stage order: match → structured → date range → length range → sort
    - Every stage is order-preserving; only sort may reorder
    - No search intent → empty result list (never "all quotes")
    - Date bounds are inclusive UTC calendar days; a missing bound is unbounded
    - Length range applies only when narrowed; min > max yields nothing
    - Relevance sort never reorders, whatever the sort order
    - Descending sorts keep ties in their original relative order

Design Decisions:
    - Quotes without created_at count as created "now" for range checks and as
      the epoch for date sorting (matches how the client always treated them)
    - Author/category sort compares case-folded values first so "apple" and
      "Apple" sit together
"""

from collections.abc import Iterable
from datetime import datetime, timezone

from quote_discovery.core.corpus_view import CorpusView
from quote_discovery.core.domain_types import SearchField, SortBy, SortOrder
from quote_discovery.core.query_matcher import (
    has_boolean_terms, has_search_intent, length_range_narrowed,
    matches_boolean, matches_query,
)
from quote_discovery.schemas.quote import Quote
from quote_discovery.schemas.search import (
    AdvancedFilters, DateRange, LengthRange, SearchFilters,
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# ─── Stages ─────────────────────────────────────────────────────

def apply_structured_filters(
    quotes: list[Quote], filters: SearchFilters, view: CorpusView,
) -> list[Quote]:
    """Equality filters on author, category, collection membership and liked state."""
    result = quotes
    if filters.author:
        result = [q for q in result if q.author == filters.author]
    if filters.category:
        result = [q for q in result if q.category == filters.category]
    if filters.collection:
        result = [
            q for q in result
            if any(
                filters.collection in (c.id, c.name)
                for c in view.collections_for(q.id)
            )
        ]
    if filters.is_liked is not None:
        result = [q for q in result if q.is_liked == filters.is_liked]
    return result


def apply_date_range(
    quotes: list[Quote], date_range: DateRange, now: datetime,
) -> list[Quote]:
    if date_range.start is None and date_range.end is None:
        return quotes

    def in_range(q: Quote) -> bool:
        day = (q.created_at or now).astimezone(timezone.utc).date()
        if date_range.start is not None and day < date_range.start:
            return False
        if date_range.end is not None and day > date_range.end:
            return False
        return True

    return [q for q in quotes if in_range(q)]


def apply_length_range(
    quotes: list[Quote], length: LengthRange,
) -> list[Quote]:
    return [q for q in quotes if length.min <= len(q.text) <= length.max]


def _sort_key(sort_by: SortBy):
    if sort_by is SortBy.DATE:
        return lambda q: q.created_at or _EPOCH
    if sort_by is SortBy.AUTHOR:
        return lambda q: (q.author.casefold(), q.author)
    if sort_by is SortBy.CATEGORY:
        return lambda q: ((q.category or "").casefold(), q.category or "")
    if sort_by is SortBy.LENGTH:
        return lambda q: len(q.text)
    return None


def sort_quotes(
    quotes: list[Quote], sort_by: SortBy, sort_order: SortOrder,
) -> list[Quote]:
    key = _sort_key(sort_by)
    if key is None:
        return list(quotes)
    return sorted(quotes, key=key, reverse=sort_order is SortOrder.DESC)


# ─── Whole pipeline ─────────────────────────────────────────────

def run_search(
    view: CorpusView,
    query: str,
    filters: SearchFilters,
    advanced: AdvancedFilters,
    fields: Iterable[SearchField],
    now: datetime,
) -> list[Quote]:
    """Match, filter and sort the corpus. Pure, no IO."""
    if not has_search_intent(query, filters, advanced):
        return []

    results = list(view.quotes)
    if query.strip():
        fields = tuple(fields)
        results = [q for q in results if matches_query(q, query, view, fields)]
    if has_boolean_terms(advanced.boolean_search):
        results = [
            q for q in results if matches_boolean(q, advanced.boolean_search)
        ]

    results = apply_structured_filters(results, filters, view)
    results = apply_date_range(results, advanced.date_range, now)
    if length_range_narrowed(advanced):
        results = apply_length_range(results, advanced.quote_length)
    return sort_quotes(results, advanced.sort_by, advanced.sort_order)
