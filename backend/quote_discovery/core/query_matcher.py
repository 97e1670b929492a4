"""Query Matcher: free-text and boolean (AND/NOT/OR) predicates over quotes.

Invariants:
    - Pure functions: no IO, no state
    - All matching is case-insensitive substring containment (no fuzzy matching)
    - Free-text query is trimmed; an empty query matches nothing on its own
    - Boolean terms look at text and author only; blank terms are ignored
    - mustInclude AND, mustExclude NOT, anyOf OR (vacuous when empty), combined by AND

Design Decisions:
    - Field set is a parameter, not hard-coded: callers choose what "anywhere" means
    - has_search_intent owns the "did the user ask for anything" rule so the
      pipeline and the history recorder agree on it
"""

from collections.abc import Iterable

from quote_discovery.core.corpus_view import CorpusView
from quote_discovery.core.domain_types import (
    SearchField, DEFAULT_MAX_LENGTH, DEFAULT_MIN_LENGTH,
)
from quote_discovery.schemas.quote import Quote
from quote_discovery.schemas.search import (
    AdvancedFilters, BooleanSearch, SearchFilters,
)


def field_values(
    quote: Quote, search_field: SearchField, view: CorpusView,
) -> list[str]:
    """Searchable string values of one quote field."""
    if search_field is SearchField.TEXT:
        return [quote.text]
    if search_field is SearchField.AUTHOR:
        return [quote.author]
    if search_field is SearchField.CATEGORY:
        return [quote.category] if quote.category else []
    if search_field is SearchField.COLLECTIONS:
        return view.collection_names_for(quote.id)
    if search_field is SearchField.TAGS:
        return list(quote.tags)
    if search_field is SearchField.SOURCE:
        return [quote.source] if quote.source else []
    return []


def matches_query(
    quote: Quote,
    query: str,
    view: CorpusView,
    fields: Iterable[SearchField],
) -> bool:
    """True if the trimmed query is a substring of any configured field."""
    needle = query.strip().lower()
    if not needle:
        return False
    return any(
        needle in value.lower()
        for f in fields
        for value in field_values(quote, f, view)
    )


def _contains(quote: Quote, term: str) -> bool:
    t = term.lower()
    return t in quote.text.lower() or t in quote.author.lower()


def _terms(terms: list[str]) -> list[str]:
    return [t.strip() for t in terms if t.strip()]


def matches_boolean(quote: Quote, boolean_search: BooleanSearch) -> bool:
    """Evaluate mustInclude / mustExclude / anyOf clauses against text or author."""
    must_include = _terms(boolean_search.must_include)
    if not all(_contains(quote, t) for t in must_include):
        return False
    must_exclude = _terms(boolean_search.must_exclude)
    if any(_contains(quote, t) for t in must_exclude):
        return False
    any_of = _terms(boolean_search.any_of)
    if any_of and not any(_contains(quote, t) for t in any_of):
        return False
    return True


def has_boolean_terms(boolean_search: BooleanSearch) -> bool:
    return bool(
        _terms(boolean_search.must_include)
        or _terms(boolean_search.must_exclude)
        or _terms(boolean_search.any_of)
    )


def structured_filters_active(filters: SearchFilters) -> bool:
    return bool(
        filters.author
        or filters.category
        or filters.collection
        or filters.is_liked is not None
    )


def length_range_narrowed(advanced: AdvancedFilters) -> bool:
    """Length range differs from the 0..1000 default."""
    return (
        advanced.quote_length.min > DEFAULT_MIN_LENGTH
        or advanced.quote_length.max < DEFAULT_MAX_LENGTH
    )


def advanced_filters_active(advanced: AdvancedFilters) -> bool:
    return bool(
        has_boolean_terms(advanced.boolean_search)
        or advanced.date_range.start
        or advanced.date_range.end
        or length_range_narrowed(advanced)
    )


def has_search_intent(
    query: str, filters: SearchFilters, advanced: AdvancedFilters,
) -> bool:
    """Whether the caller expressed anything to search for.

    Sort settings alone are not intent.
    """
    return bool(
        query.strip()
        or structured_filters_active(filters)
        or advanced_filters_active(advanced)
    )
