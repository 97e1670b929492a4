"""Search Analytics: running counters and means over executed searches.

Invariants:
    - Pure: record_search returns a new SearchAnalytics, input untouched
    - total_searches increments by exactly 1 per recorded search
    - average_results is the exact running mean: avg_n = (avg_{n-1}·(n-1) + r_n) / n
    - popular_searches accumulates per exact query string
    - popular_authors / popular_categories are REPLACED from the current result
      set on every search (top N, count descending, ties first-seen)

Design Decisions:
    - No rounding of the mean: the recurrence stays exact across reloads
    - Author/category tables reflect the latest search only, not all history.
      Kept literally until product intent says otherwise (see DESIGN.md)
"""

from collections import Counter

from quote_discovery.core.domain_types import POPULAR_LIMIT
from quote_discovery.schemas.quote import Quote
from quote_discovery.schemas.search import (
    AuthorCount, CategoryCount, QueryCount, SearchAnalytics,
)


def _top(counter: Counter, limit: int) -> list[tuple[str, int]]:
    # Counter.most_common is stable for equal counts (insertion order)
    return counter.most_common(limit)


def running_mean(previous: float, n: int, sample: float) -> float:
    """Mean after the n-th sample, given the mean of the first n-1."""
    return (previous * (n - 1) + sample) / n


def record_search(
    analytics: SearchAnalytics,
    query: str,
    result_count: int,
    results: list[Quote],
    limit: int = POPULAR_LIMIT,
) -> SearchAnalytics:
    """Fold one executed search into the analytics snapshot."""
    total = analytics.total_searches + 1

    popular = [s.model_copy() for s in analytics.popular_searches]
    for entry in popular:
        if entry.query == query:
            entry.count += 1
            break
    else:
        popular.append(QueryCount(query=query, count=1))

    authors = Counter(q.author for q in results if q.author)
    categories = Counter(q.category for q in results if q.category)

    return SearchAnalytics(
        popular_searches=popular,
        popular_authors=[
            AuthorCount(author=a, count=c) for a, c in _top(authors, limit)
        ],
        popular_categories=[
            CategoryCount(category=k, count=c) for k, c in _top(categories, limit)
        ],
        total_searches=total,
        average_results=running_mean(analytics.average_results, total, result_count),
    )


def top_searches(
    analytics: SearchAnalytics, limit: int = POPULAR_LIMIT,
) -> list[QueryCount]:
    """Most frequent queries, count descending, ties in first-recorded order."""
    return sorted(
        analytics.popular_searches, key=lambda s: s.count, reverse=True,
    )[:limit]
