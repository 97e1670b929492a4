"""Suggestion Engine: substring completions from a pre-built candidate index.

Invariants:
    - Index is built once per corpus snapshot, in corpus order
    - Candidates: each quote's text, author, category, then collection names
    - Index entries are distinct (exact string), blanks skipped
    - suggest() returns at most `limit` entries, first-encountered order
    - Empty or whitespace partial query → []
"""

from quote_discovery.core.corpus_view import CorpusView
from quote_discovery.core.domain_types import SUGGESTION_LIMIT


def build_suggestion_index(view: CorpusView) -> tuple[str, ...]:
    candidates: dict[str, None] = {}
    for q in view.quotes:
        for value in (q.text, q.author, q.category):
            if value and value.strip():
                candidates.setdefault(value, None)
    for c in view.collections:
        if c.name.strip():
            candidates.setdefault(c.name, None)
    return tuple(candidates)


def suggest(
    index: tuple[str, ...], partial: str, limit: int = SUGGESTION_LIMIT,
) -> list[str]:
    needle = partial.strip().lower()
    if not needle or limit <= 0:
        return []
    out: list[str] = []
    for candidate in index:
        if needle in candidate.lower():
            out.append(candidate)
            if len(out) >= limit:
                break
    return out
