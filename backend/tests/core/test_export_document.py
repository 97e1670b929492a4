"""Export document tests: source selection, shape and filename."""

from datetime import datetime, timezone

from quote_discovery.core.corpus_view import CorpusView
from quote_discovery.core.export_document import (
    build_export_document, export_filename, quotes_to_export,
)
from quote_discovery.schemas.quote import Quote
from quote_discovery.schemas.search import AdvancedFilters

NOW = datetime(2024, 5, 15, 8, 0, tzinfo=timezone.utc)


def _view() -> CorpusView:
    return CorpusView.build(
        [
            Quote(id="1", text="one", author="A", is_liked=True),
            Quote(id="2", text="two", author="B", category="wisdom"),
            Quote(id="3", text="three", author="C"),
        ],
        [],
    )


def test_selection_order_and_unknown_ids_skipped():
    view = _view()
    quotes = quotes_to_export(view, ["3", "missing", "1"], [])
    assert [q.id for q in quotes] == ["3", "1"]


def test_empty_selection_exports_results():
    view = _view()
    results = [view.get("2"), view.get("1")]
    assert quotes_to_export(view, [], results) == results


def test_document_counts_and_fields():
    view = _view()
    doc = build_export_document(list(view.quotes), "bold", AdvancedFilters(), NOW)
    assert doc.total_quotes == len(doc.quotes) == 3
    dumped = doc.model_dump(mode="json", by_alias=True)
    assert set(dumped) == {
        "exportedAt", "totalQuotes", "searchQuery", "filters", "quotes",
    }
    assert set(dumped["quotes"][0]) == {
        "text", "author", "category", "isLiked", "createdAt",
    }
    assert dumped["quotes"][0]["isLiked"] is True


def test_filename_uses_export_day():
    assert export_filename(NOW) == "quote-search-results-2024-05-15.json"
