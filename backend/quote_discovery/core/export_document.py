"""Export Document: serializable snapshot of selected (or all result) quotes.

Invariants:
    - total_quotes == len(quotes)
    - Selected ids resolve in selection order; ids missing from the corpus are skipped
    - Empty selection exports the current result list in result order
    - Only text, author, category, isLiked, createdAt are exported per quote
"""

from datetime import datetime

from quote_discovery.core.corpus_view import CorpusView
from quote_discovery.schemas.quote import Quote
from quote_discovery.schemas.search import (
    AdvancedFilters, ExportDocument, ExportedQuote,
)


def quotes_to_export(
    view: CorpusView, selected_ids: list[str], results: list[Quote],
) -> list[Quote]:
    if not selected_ids:
        return list(results)
    return [q for q in (view.get(i) for i in selected_ids) if q is not None]


def build_export_document(
    quotes: list[Quote],
    search_query: str,
    filters: AdvancedFilters,
    exported_at: datetime,
) -> ExportDocument:
    return ExportDocument(
        exported_at=exported_at,
        total_quotes=len(quotes),
        search_query=search_query,
        filters=filters.model_copy(deep=True),
        quotes=[
            ExportedQuote(
                text=q.text,
                author=q.author,
                category=q.category,
                is_liked=q.is_liked,
                created_at=q.created_at,
            )
            for q in quotes
        ],
    )


def export_filename(exported_at: datetime) -> str:
    return f"quote-search-results-{exported_at.date().isoformat()}.json"
