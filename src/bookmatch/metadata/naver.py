# ABOUTME: Naver Book Search provider implementation.
# ABOUTME: Queries openapi.naver.com and returns catalog candidates in relevance order.

import logging

from bookmatch.errors import FetchError, SearchFailed
from bookmatch.metadata.http import HttpClient
from bookmatch.metadata.naver_parser import parse_search_response
from bookmatch.metadata.types import CatalogCandidate

logger = logging.getLogger(__name__)

_NAVER_SEARCH_URL = "https://openapi.naver.com/v1/search/book.json"
# Naver caps "display" at 100 results per page.
_MAX_DISPLAY = 100


class NaverBookProvider:
    """Book search provider backed by the Naver Book Search API.

    Uses a dependency-injected HttpClient for testability. Transport and
    payload failures are raised as SearchFailed, never swallowed.
    """

    def __init__(self, http_client: HttpClient, client_id: str, client_secret: str) -> None:
        self._http = http_client
        self._headers = {
            "X-Naver-Client-Id": client_id,
            "X-Naver-Client-Secret": client_secret,
        }

    @property
    def name(self) -> str:
        return "naver"

    async def search(self, query: str, limit: int = 10) -> list[CatalogCandidate]:
        """Search the catalog by free text (title and/or author).

        Returns at most `limit` candidates; a blank query returns [] without
        touching the network.

        Raises:
            SearchFailed: On transport failure or a malformed response.
        """
        query = query.strip()
        if not query or limit < 1:
            return []

        params = {
            "query": query,
            "display": str(min(limit, _MAX_DISPLAY)),
            "start": "1",
        }
        try:
            data = await self._http.get(_NAVER_SEARCH_URL, params=params, headers=self._headers)
        except FetchError as exc:
            logger.warning("Search failed for query=%s: %s", query, exc)
            raise SearchFailed(f"Naver search failed for {query!r}: {exc}") from exc

        results = parse_search_response(data)[:limit]
        logger.debug("Naver returned %d result(s) for query=%s", len(results), query)
        return results
