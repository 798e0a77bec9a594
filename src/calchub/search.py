"""Fuzzy catalog search: edit-distance similarity and a weighted field index."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rapidfuzz import fuzz

from calchub.catalog import Catalog
from calchub.models import SEARCH_RESULT_LIMIT, Calculator, MatchRange, SearchResult

logger = logging.getLogger(__name__)

# ============================================================================
# Search Constants
# ============================================================================

# Field matches whose normalized edit distance exceeds this are discarded
SEARCH_THRESHOLD = 0.4

# Relative importance per field; a perfect match in a field scores 1 - weight
SEARCH_FIELD_WEIGHTS: dict[str, float] = {
    "title": 1.0,
    "keywords": 0.85,
    "description": 0.7,
    "category_title": 0.55,
}

KEYWORD_SEPARATOR = ", "


# ============================================================================
# Similarity
# ============================================================================


def normalize_text(text: str) -> str:
    """Lowercase text and blank out punctuation, keeping character offsets.

    >>> normalize_text("Break-Even Point")
    'break even point'
    """
    out: list[str] = []
    for ch in text:
        lowered = ch.lower()
        out.append(lowered if ch.isalnum() and len(lowered) == 1 else " ")
    return "".join(out)


def normalize_query(query: str) -> str:
    """Normalize a user query and collapse runs of whitespace."""
    return " ".join(normalize_text(query).split())


def _align(query: str, candidate: str) -> tuple[float, int, int]:
    """Return ``(distance, start, length)`` of the best alignment of query in candidate.

    Both strings must already be normalized. The distance is the InDel edit
    distance normalized by the combined length of the compared strings.
    """
    if len(candidate) < len(query):
        score = fuzz.ratio(query, candidate)
        return 1.0 - score / 100.0, 0, len(candidate)
    alignment = fuzz.partial_ratio_alignment(query, candidate)
    if alignment is None:
        return 1.0, 0, 0
    return (
        1.0 - alignment.score / 100.0,
        alignment.dest_start,
        alignment.dest_end - alignment.dest_start,
    )


def similarity(query: str, candidate: str) -> float:
    """Score how well ``query`` matches somewhere in ``candidate``.

    Returns a distance in ``[0, 1]``: 0.0 is an exact (sub)match, 1.0 means
    nothing in common. Tolerates typos and transpositions, e.g.
    ``similarity("brek evn", "Break-Even Point")`` is about 0.13.
    """
    q = normalize_query(query)
    c = normalize_text(candidate)
    if not q or not c.strip():
        return 1.0
    distance, _, _ = _align(q, c)
    return max(0.0, min(1.0, distance))


# ============================================================================
# Index
# ============================================================================


@dataclass(frozen=True, slots=True)
class SearchIndexEntry:
    """Pre-normalized searchable fields of one calculator."""

    calculator: Calculator
    order: int
    title: str
    description: str
    category_title: str
    keywords: tuple[tuple[int, str], ...]  # (offset in joined keywords, normalized keyword)


def _build_entry(calculator: Calculator, order: int) -> SearchIndexEntry:
    keywords: list[tuple[int, str]] = []
    offset = 0
    for keyword in calculator.keywords:
        keywords.append((offset, normalize_text(keyword)))
        offset += len(keyword) + len(KEYWORD_SEPARATOR)
    return SearchIndexEntry(
        calculator=calculator,
        order=order,
        title=normalize_text(calculator.title),
        description=normalize_text(calculator.description),
        category_title=normalize_text(calculator.category_title),
        keywords=tuple(keywords),
    )


def _match_field(query: str, text: str) -> tuple[float, int, int] | None:
    """Align query against one normalized field, applying the threshold."""
    if not text.strip():
        return None
    distance, start, length = _align(query, text)
    if distance > SEARCH_THRESHOLD:
        return None
    return distance, start, length


class SearchIndex:
    """Ranked fuzzy search over a catalog snapshot."""

    __slots__ = ("_entries",)

    def __init__(self, entries: tuple[SearchIndexEntry, ...] = ()) -> None:
        self._entries = entries

    @staticmethod
    def build(catalog: Catalog) -> SearchIndex:
        """Build an index over every calculator in catalog order."""
        entries = tuple(
            _build_entry(calc, order) for order, calc in enumerate(catalog.list_all_calculators())
        )
        logger.debug("Built search index with %d entries", len(entries))
        return SearchIndex(entries)

    def _score_entry(self, query: str, entry: SearchIndexEntry) -> SearchResult | None:
        best: float | None = None
        ranges: list[MatchRange] = []

        def consider(field: str, match: tuple[float, int, int] | None, offset: int = 0) -> None:
            nonlocal best
            if match is None:
                return
            distance, start, length = match
            weighted = 1.0 - (1.0 - distance) * SEARCH_FIELD_WEIGHTS[field]
            if best is None or weighted < best:
                best = weighted
            ranges.append(MatchRange(field=field, start=offset + start, length=length))

        consider("title", _match_field(query, entry.title))
        consider("description", _match_field(query, entry.description))

        # Only the best keyword counts for the keywords field
        best_keyword: tuple[float, int, int] | None = None
        best_offset = 0
        for offset, keyword in entry.keywords:
            match = _match_field(query, keyword)
            if match is not None and (best_keyword is None or match[0] < best_keyword[0]):
                best_keyword = match
                best_offset = offset
        consider("keywords", best_keyword, best_offset)

        consider("category_title", _match_field(query, entry.category_title))

        if best is None:
            return None
        return SearchResult(
            calculator=entry.calculator,
            score=max(0.0, min(1.0, best)),
            matched_ranges=tuple(ranges),
        )

    def search(self, query: str, limit: int = SEARCH_RESULT_LIMIT) -> list[SearchResult]:
        """Return up to ``limit`` results, best first, ties in catalog order.

        Empty and whitespace-only queries return no results.
        """
        q = normalize_query(query)
        if not q or limit <= 0:
            return []
        scored: list[tuple[float, int, SearchResult]] = []
        for entry in self._entries:
            result = self._score_entry(q, entry)
            if result is not None:
                scored.append((result.score, entry.order, result))
        scored.sort(key=lambda item: (item[0], item[1]))
        return [result for _, _, result in scored[:limit]]

    def __len__(self) -> int:
        return len(self._entries)


__all__ = [
    "KEYWORD_SEPARATOR",
    "SEARCH_FIELD_WEIGHTS",
    "SEARCH_THRESHOLD",
    "SearchIndex",
    "SearchIndexEntry",
    "normalize_query",
    "normalize_text",
    "similarity",
]
