"""Smart Recommendations: capped similar → trending → discovery candidates.

Invariants:
    - At most RECOMMENDATION_LIMIT items
    - Generator order is fixed: all similar items, then trending, then discovery
    - Score is informational; the list is never re-sorted by it
    - similar skipped for an empty query; discovery skipped without a favorite author

Design Decisions:
    - Per-generator caps (3 / 2 / 1) keep one source from crowding out the others
    - A quote may appear under more than one generator: each one answers a
      different question
"""

from quote_discovery.core.corpus_view import CorpusView
from quote_discovery.core.domain_types import RECOMMENDATION_LIMIT, RecommendationType
from quote_discovery.schemas.search import SmartRecommendation

_SIMILAR_CAP = 3
_TRENDING_CAP = 2
_DISCOVERY_CAP = 1

_SIMILAR_SCORE = 0.8
_TRENDING_SCORE = 0.9
_DISCOVERY_SCORE = 0.7


def _similar(view: CorpusView, query: str) -> list[SmartRecommendation]:
    needle = query.strip().lower()
    if not needle:
        return []
    matches = [
        q for q in view.quotes
        if needle in q.text.lower() or needle in q.author.lower()
    ]
    return [
        SmartRecommendation(
            type=RecommendationType.SIMILAR, quote=q,
            reason=f"Similar to '{query.strip()}'", score=_SIMILAR_SCORE,
        )
        for q in matches[:_SIMILAR_CAP]
    ]


def _trending(view: CorpusView) -> list[SmartRecommendation]:
    liked = [q for q in view.quotes if q.is_liked]
    return [
        SmartRecommendation(
            type=RecommendationType.TRENDING, quote=q,
            reason="Popular in your collection", score=_TRENDING_SCORE,
        )
        for q in liked[:_TRENDING_CAP]
    ]


def _discovery(view: CorpusView, favorite_author: str) -> list[SmartRecommendation]:
    if not favorite_author:
        return []
    unseen = [
        q for q in view.quotes
        if q.author == favorite_author and not q.is_liked
    ]
    return [
        SmartRecommendation(
            type=RecommendationType.DISCOVERY, quote=q,
            reason=f"From your favorite author: {favorite_author}",
            score=_DISCOVERY_SCORE,
        )
        for q in unseen[:_DISCOVERY_CAP]
    ]


def generate_recommendations(
    view: CorpusView,
    query: str,
    favorite_author: str,
    limit: int = RECOMMENDATION_LIMIT,
) -> list[SmartRecommendation]:
    recommendations = [
        *_similar(view, query),
        *_trending(view),
        *_discovery(view, favorite_author),
    ]
    return recommendations[:limit]
