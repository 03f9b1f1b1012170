# ABOUTME: Search strategies layered over a BookSearchProvider.
# ABOUTME: Subtitle stripping for retry queries, and accumulating progressive search.

import logging
import re
from collections.abc import Sequence

from bookmatch.metadata.provider import BookSearchProvider
from bookmatch.metadata.types import CatalogCandidate

logger = logging.getLogger(__name__)

# Characters that separate a main title from its subtitle.
_SUBTITLE_DIVIDERS = (":", "|", "-")
_SUBTITLE_RE = re.compile(r"\s*[:|\-].*$")

# Progressive search stops once a query narrows results down to this many.
PROGRESSIVE_STOP_COUNT = 3


def strip_subtitle(title: str) -> str | None:
    """Remove a subtitle from a title string (text after ':', '|' or '-').

    Returns the main title, or None if no divider was found or stripping
    would produce an identical or empty string.
    """
    if not any(divider in title for divider in _SUBTITLE_DIVIDERS):
        return None
    stripped = _SUBTITLE_RE.sub("", title).strip()
    if stripped and stripped != title.strip():
        return stripped
    return None


class BookSearchService:
    """Query strategies shared by the validator and the progressive matcher.

    All methods propagate SearchFailed from the provider.
    """

    def __init__(self, provider: BookSearchProvider, *, limit: int = 10) -> None:
        self._provider = provider
        self._limit = limit

    @property
    def provider(self) -> BookSearchProvider:
        return self._provider

    async def search(self, query: str, limit: int | None = None) -> list[CatalogCandidate]:
        """Plain free-text search."""
        return await self._provider.search(query, limit or self._limit)

    async def search_progressively(
        self, lines: Sequence[str], limit: int | None = None
    ) -> list[CatalogCandidate]:
        """Narrow a search by accumulating OCR lines into one query.

        Searches line 1, then "line 1 line 2", and so on. Stops as soon as a
        query yields PROGRESSIVE_STOP_COUNT or fewer results and returns the
        most recent non-empty result set; otherwise returns the results of
        the full query (or the last non-empty set if that came back empty).
        """
        limit = limit or self._limit
        words = [line.strip() for line in lines if line.strip()]
        if not words:
            return []

        previous: list[CatalogCandidate] = []
        query = ""
        for index, word in enumerate(words):
            query = f"{query} {word}".strip()
            results = await self._provider.search(query, limit)
            if results:
                previous = results
            if len(results) <= PROGRESSIVE_STOP_COUNT or index == len(words) - 1:
                break
        logger.debug("Progressive search settled on query=%r with %d result(s)", query, len(previous))
        return previous
