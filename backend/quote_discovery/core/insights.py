"""Search Insights: favorites, trends and corpus diversity derived on demand.

Invariants:
    - Pure: recomputed from analytics + corpus + history, nothing persisted
    - favorite_* come from the analytics tables (first = highest count), "" when empty
    - most_quoted_author and unique counts look at the whole corpus, not searches
    - search_trends has exactly TREND_DAYS points, oldest first, ending today (UTC)
"""

from collections import Counter
from collections.abc import Iterable
from datetime import date, timedelta, timezone

from quote_discovery.core.corpus_view import CorpusView
from quote_discovery.core.domain_types import TREND_DAYS
from quote_discovery.schemas.search import (
    SearchAnalytics, SearchHistoryItem, SearchInsights, TrendPoint,
)


def search_trends(
    history: Iterable[SearchHistoryItem], today: date, days: int = TREND_DAYS,
) -> list[TrendPoint]:
    per_day = Counter(
        item.timestamp.astimezone(timezone.utc).date() for item in history
    )
    window = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
    return [TrendPoint(date=d.isoformat(), count=per_day.get(d, 0)) for d in window]


def generate_insights(
    analytics: SearchAnalytics,
    view: CorpusView,
    history: Iterable[SearchHistoryItem],
    today: date,
) -> SearchInsights:
    authors = Counter(q.author for q in view.quotes if q.author)
    categories = {q.category for q in view.quotes if q.category}
    most_quoted = authors.most_common(1)

    return SearchInsights(
        favorite_author=(
            analytics.popular_authors[0].author if analytics.popular_authors else ""
        ),
        favorite_category=(
            analytics.popular_categories[0].category
            if analytics.popular_categories else ""
        ),
        most_quoted_author=most_quoted[0][0] if most_quoted else "",
        search_trends=search_trends(history, today),
        unique_authors_count=len(authors),
        unique_categories_count=len(categories),
    )
