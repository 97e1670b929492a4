"""Filter pipeline tests: full search runs over small corpora.

Tests cover:
    - Free-text and boolean-only searches
    - Structured equality filters (author, category, collection, liked)
    - Inclusive date range, missing created_at treated as "now"
    - Length range only applied when narrowed; min > max yields nothing
    - Sorting: relevance keeps order, ties stable, descending reverses
    - No intent → empty results
"""

from datetime import datetime, timezone

from quote_discovery.core.corpus_view import CorpusView
from quote_discovery.core.domain_types import (
    DEFAULT_SEARCH_FIELDS, SortBy, SortOrder,
)
from quote_discovery.core.filter_pipeline import run_search, sort_quotes
from quote_discovery.schemas.quote import Collection, Quote
from quote_discovery.schemas.search import (
    AdvancedFilters, BooleanSearch, DateRange, LengthRange, SearchFilters,
)

NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)


def _corpus() -> CorpusView:
    return CorpusView.build(
        [
            Quote(id="1", text="Be bold", author="A", category="courage"),
            Quote(id="2", text="Stay humble", author="B", category="wisdom"),
        ],
        [],
    )


def _search(view, query="", filters=None, advanced=None) -> list[str]:
    results = run_search(
        view, query, filters or SearchFilters(), advanced or AdvancedFilters(),
        DEFAULT_SEARCH_FIELDS, NOW,
    )
    return [q.id for q in results]


def _dated(qid: str, day: int | None, text: str = "quote") -> Quote:
    created = datetime(2024, 5, day, 9, 30, tzinfo=timezone.utc) if day else None
    return Quote(id=qid, text=text, author="A", created_at=created)


# --- Matching -----------------------------------------------------------------

def test_query_returns_matching_quote():
    assert _search(_corpus(), query="bold") == ["1"]


def test_must_exclude_alone_filters_corpus():
    advanced = AdvancedFilters(boolean_search=BooleanSearch(must_exclude=["humble"]))
    assert _search(_corpus(), advanced=advanced) == ["1"]


def test_no_intent_returns_nothing():
    assert _search(_corpus()) == []


def test_query_and_boolean_compose():
    view = CorpusView.build(
        [
            Quote(id="1", text="Be bold and kind", author="A"),
            Quote(id="2", text="Be bold and loud", author="A"),
        ],
        [],
    )
    advanced = AdvancedFilters(boolean_search=BooleanSearch(must_exclude=["loud"]))
    assert _search(view, query="bold", advanced=advanced) == ["1"]


# --- Structured filters -------------------------------------------------------

def test_author_filter_is_exact_subset():
    view = CorpusView.build(
        [
            Quote(id="1", text="x", author="Ann"),
            Quote(id="2", text="x", author="Anne"),
            Quote(id="3", text="x", author="Ann"),
        ],
        [],
    )
    assert _search(view, filters=SearchFilters(author="Ann")) == ["1", "3"]


def test_category_filter():
    assert _search(_corpus(), filters=SearchFilters(category="wisdom")) == ["2"]


def test_collection_filter_by_id_or_name():
    view = CorpusView.build(
        [Quote(id="1", text="x"), Quote(id="2", text="y")],
        [Collection(id="c1", name="Favorites", quote_ids=["2"])],
    )
    assert _search(view, filters=SearchFilters(collection="c1")) == ["2"]
    assert _search(view, filters=SearchFilters(collection="Favorites")) == ["2"]


def test_liked_filter_false_is_active():
    view = CorpusView.build(
        [Quote(id="1", text="x", is_liked=True), Quote(id="2", text="y")],
        [],
    )
    assert _search(view, filters=SearchFilters(is_liked=False)) == ["2"]
    assert _search(view, filters=SearchFilters(is_liked=True)) == ["1"]


# --- Date range ---------------------------------------------------------------

def test_date_range_bounds_are_inclusive_days():
    view = CorpusView.build(
        [_dated("1", 1), _dated("2", 10), _dated("3", 20)], [],
    )
    advanced = AdvancedFilters(
        date_range=DateRange(start="2024-05-01", end="2024-05-10"),
    )
    assert _search(view, advanced=advanced) == ["1", "2"]


def test_open_end_is_unbounded():
    view = CorpusView.build([_dated("1", 1), _dated("2", 10)], [])
    advanced = AdvancedFilters(date_range=DateRange(start="2024-05-05", end=""))
    assert _search(view, advanced=advanced) == ["2"]


def test_missing_created_at_counts_as_now():
    view = CorpusView.build([_dated("1", 1), _dated("2", None)], [])
    advanced = AdvancedFilters(date_range=DateRange(start="2024-05-15"))
    assert _search(view, advanced=advanced) == ["2"]


# --- Length range -------------------------------------------------------------

def test_length_range_filters_by_text_length():
    view = CorpusView.build(
        [
            Quote(id="1", text="short"),
            Quote(id="2", text="a much longer quote text"),
        ],
        [],
    )
    advanced = AdvancedFilters(quote_length=LengthRange(min=0, max=10))
    assert _search(view, advanced=advanced) == ["1"]


def test_inverted_length_range_yields_nothing():
    advanced = AdvancedFilters(quote_length=LengthRange(min=50, max=10))
    assert _search(_corpus(), query="b", advanced=advanced) == []


def test_default_length_range_keeps_long_quotes():
    long_text = "bold " * 300
    view = CorpusView.build([Quote(id="1", text=long_text)], [])
    assert _search(view, query="bold") == ["1"]


# --- Sorting ------------------------------------------------------------------

def _sortable() -> list[Quote]:
    return [
        Quote(id="1", text="bbb", author="beta"),
        Quote(id="2", text="a", author="Alpha"),
        Quote(id="3", text="cc", author="alpha"),
    ]


def test_relevance_keeps_original_order_in_both_directions():
    quotes = _sortable()
    for order in SortOrder:
        result = sort_quotes(quotes, SortBy.RELEVANCE, order)
        assert [q.id for q in result] == ["1", "2", "3"]


def test_length_sort_ascending_and_descending():
    quotes = _sortable()
    asc = sort_quotes(quotes, SortBy.LENGTH, SortOrder.ASC)
    desc = sort_quotes(quotes, SortBy.LENGTH, SortOrder.DESC)
    assert [q.id for q in asc] == ["2", "3", "1"]
    assert [q.id for q in desc] == ["1", "3", "2"]


def test_author_sort_groups_case_variants():
    result = sort_quotes(_sortable(), SortBy.AUTHOR, SortOrder.ASC)
    assert [q.author for q in result] == ["Alpha", "alpha", "beta"]


def test_equal_keys_keep_relative_order_when_descending():
    quotes = [
        Quote(id="1", text="same"),
        Quote(id="2", text="same"),
        Quote(id="3", text="longer"),
    ]
    result = sort_quotes(quotes, SortBy.LENGTH, SortOrder.DESC)
    assert [q.id for q in result] == ["3", "1", "2"]


def test_category_sort_treats_missing_as_empty():
    quotes = [
        Quote(id="1", text="x", category="zen"),
        Quote(id="2", text="x"),
    ]
    result = sort_quotes(quotes, SortBy.CATEGORY, SortOrder.ASC)
    assert [q.id for q in result] == ["2", "1"]


def test_date_sort_descending_newest_first():
    quotes = [_dated("1", 3), _dated("2", 9), _dated("3", None)]
    result = sort_quotes(quotes, SortBy.DATE, SortOrder.DESC)
    assert [q.id for q in result] == ["2", "1", "3"]
