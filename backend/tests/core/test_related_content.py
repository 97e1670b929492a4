"""Related content tests: four capped lists, focal quote excluded."""

from quote_discovery.core.corpus_view import CorpusView
from quote_discovery.core.related_content import resolve_related
from quote_discovery.schemas.quote import Collection, Quote


def _view() -> CorpusView:
    return CorpusView.build(
        [
            Quote(id="1", text="Courage is grace", author="Ann", category="virtue"),
            Quote(id="2", text="Patience wins", author="Ann"),
            Quote(id="3", text="courage again", author="Bob", category="virtue"),
            Quote(id="4", text="Unrelated", author="Cal"),
            Quote(id="5", text="More words", author="Ann", category="virtue"),
            Quote(id="6", text="Even more", author="Ann", category="virtue"),
            Quote(id="7", text="Still more", author="Ann", category="virtue"),
        ],
        [Collection(id="c1", name="Faves", quote_ids=["1", "4"])],
    )


def _ids(quotes) -> list[str]:
    return [q.id for q in quotes]


def test_focal_quote_never_listed():
    view = _view()
    related = resolve_related(view, view.get("1"))
    for group in (
        related.same_author, related.same_category,
        related.same_collection, related.similar_quotes,
    ):
        assert "1" not in _ids(group)
        assert len(group) <= 3


def test_lists_follow_corpus_order():
    view = _view()
    related = resolve_related(view, view.get("1"))
    assert _ids(related.same_author) == ["2", "5", "6"]
    assert _ids(related.same_category) == ["3", "5", "6"]
    assert _ids(related.same_collection) == ["4"]
    assert _ids(related.similar_quotes) == ["2", "3", "5"]


def test_uncategorized_focal_has_no_same_category():
    view = _view()
    assert resolve_related(view, view.get("2")).same_category == []


def test_empty_text_matches_by_author_only():
    view = CorpusView.build(
        [
            Quote(id="1", text="   ", author="Ann"),
            Quote(id="2", text="anything", author="Bob"),
            Quote(id="3", text="other", author="Ann"),
        ],
        [],
    )
    assert _ids(resolve_related(view, view.get("1")).similar_quotes) == ["3"]
