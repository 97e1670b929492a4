"""Related Content: same-author, same-category, same-collection and similar quotes.

Invariants:
    - Four independent lists, each capped at RELATED_LIMIT, corpus order
    - The focal quote never appears in any list
    - same_category is empty when the focal quote has no category
    - Lists are not de-duplicated against each other
"""

from quote_discovery.core.corpus_view import CorpusView
from quote_discovery.core.domain_types import RELATED_LIMIT
from quote_discovery.schemas.quote import Quote
from quote_discovery.schemas.search import RelatedContent


def _first_token(text: str) -> str:
    parts = text.split()
    return parts[0].lower() if parts else ""


def resolve_related(
    view: CorpusView, focal: Quote, limit: int = RELATED_LIMIT,
) -> RelatedContent:
    others = [q for q in view.quotes if q.id != focal.id]

    same_author = [q for q in others if q.author == focal.author]

    same_category = (
        [q for q in others if q.category == focal.category]
        if focal.category else []
    )

    co_members: set[str] = set()
    for collection in view.collections_for(focal.id):
        co_members.update(collection.quote_ids)
    same_collection = [q for q in others if q.id in co_members]

    # Empty first token would match every quote; fall back to author only
    token = _first_token(focal.text)
    similar = [
        q for q in others
        if (token and token in q.text.lower()) or q.author == focal.author
    ]

    return RelatedContent(
        same_author=same_author[:limit],
        same_category=same_category[:limit],
        same_collection=same_collection[:limit],
        similar_quotes=similar[:limit],
    )
