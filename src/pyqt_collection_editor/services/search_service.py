"""
Shared search service for collection views.

Framework-agnostic search over item sequences so the sidebar, the grid and
the search panel all match items the same way.
"""

import html
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence, Tuple
import logging

from pyqt_collection_editor.model.items import Item
from pyqt_collection_editor.protocols import get_editor_config

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")
_SPACE_RE = re.compile(r"\s+")


def strip_markup(text: str) -> str:
    """Remove tags, unescape entities and collapse whitespace."""
    return _SPACE_RE.sub(" ", html.unescape(_TAG_RE.sub(" ", text or ""))).strip()


def count_words(text: Any) -> int:
    """Word count of a text body; non-text bodies count as zero."""
    if not isinstance(text, str):
        return 0
    plain = strip_markup(text)
    return len(plain.split()) if plain else 0


@dataclass(frozen=True)
class SearchHit:
    """Matches of one search term inside one item."""
    item_id: str
    title: str
    match_count: int
    snippets: Tuple[str, ...] = field(default_factory=tuple)


class ItemSearchService:
    """
    Case-insensitive search with minimum character trigger.

    Key features:
    - Minimum character threshold (default: 2, from EditorConfig)
    - Context snippets with ``...`` elision around each match
    - Searches title, text bodies, ``metadata['synopsis']`` and ``metadata['tags']``
    """

    # Class constants
    MIN_SEARCH_CHARS = 2
    SNIPPET_RADIUS = 50
    MAX_SNIPPETS = 5

    def __init__(self,
                 min_chars: Optional[int] = None,
                 snippet_radius: int = SNIPPET_RADIUS,
                 max_snippets: int = MAX_SNIPPETS):
        """
        Initialize search service.

        Args:
            min_chars: Minimum characters required to trigger search
            snippet_radius: Characters of context kept on each side of a match
            max_snippets: Maximum snippets collected per item
        """
        if min_chars is None:
            min_chars = get_editor_config().search_min_chars
        self.min_chars = min_chars
        self.snippet_radius = snippet_radius
        self.max_snippets = max_snippets

    def _is_searchable(self, term: str) -> bool:
        return bool(term) and len(term) >= self.min_chars

    def search(self, items: Iterable[Item], search_term: str) -> List[SearchHit]:
        """
        Find items whose title, body, synopsis or tags contain ``search_term``.

        Args:
            items: Items in collection order
            search_term: Raw user input (stripped before matching)

        Returns:
            One SearchHit per matching item, in collection order
        """
        term = (search_term or "").strip()
        if not self._is_searchable(term):
            return []

        needle = term.lower()
        hits = []
        for item in items:
            total = _match_count(item, needle)
            if total:
                snippets = self._snippets(_plain_body(item), needle)
                hits.append(SearchHit(item.id, item.title, total, tuple(snippets)))

        logger.debug(f"Search {term!r}: {len(hits)} item(s)")
        return hits

    def filter(self, items: Iterable[Item], search_term: str = "",
               bookmarked_only: bool = False, tag: Optional[str] = None) -> List[Item]:
        """
        Narrow a collection view.

        Terms below the minimum length do not filter (everything passes).
        """
        term = (search_term or "").strip().lower()
        use_term = self._is_searchable(term)
        result = []
        for item in items:
            if bookmarked_only and not item.metadata.get("bookmarked"):
                continue
            if tag and tag not in _tags(item):
                continue
            if use_term and not _match_count(item, term):
                continue
            result.append(item)
        return result

    def _snippets(self, text: str, needle: str) -> List[str]:
        lower = text.lower()
        snippets = []
        start = 0
        while len(snippets) < self.max_snippets:
            index = lower.find(needle, start)
            if index == -1:
                break
            begin = max(0, index - self.snippet_radius)
            end = min(len(text), index + len(needle) + self.snippet_radius)
            snippet = text[begin:end]
            if begin > 0:
                snippet = "..." + snippet
            if end < len(text):
                snippet = snippet + "..."
            snippets.append(snippet)
            start = index + len(needle)
        return snippets


def _tags(item: Item) -> Sequence[str]:
    tags = item.metadata.get("tags") or ()
    return [tag for tag in tags if isinstance(tag, str)] if isinstance(tags, (list, tuple)) else ()


def _plain_body(item: Item) -> str:
    return strip_markup(item.body) if isinstance(item.body, str) else ""


def _match_count(item: Item, needle: str) -> int:
    """Occurrences of a lowercased needle in every searchable field of ``item``."""
    synopsis = item.metadata.get("synopsis")
    count = item.title.lower().count(needle) + _plain_body(item).lower().count(needle)
    if isinstance(synopsis, str):
        count += synopsis.lower().count(needle)
    return count + sum(1 for tag in _tags(item) if needle in tag.lower())
