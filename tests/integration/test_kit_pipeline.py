# ABOUTME: Integration tests for BookMatchKit over the real Naver and OpenAI clients.
# ABOUTME: Both APIs are served by an httpx.MockTransport so the full HTTP path is exercised.

import json
from typing import Any

import httpx
import pytest

from bookmatch.config import ApiCredentials, MatchConfig
from bookmatch.core.kit import BookMatchKit
from bookmatch.errors import SearchFailed
from bookmatch.llm.openai_recommender import create_openai_client
from bookmatch.metadata.http import BookmatchHttpClient
from bookmatch.metadata.types import MatchState, OwnedBook, RawBook
from tests.fixtures.naver_responses import (
    REFACTORING_RESPONSE,
    SEARCH_RESPONSE,
    SEARCH_RESPONSE_EMPTY,
)
from tests.fixtures.openai_responses import (
    ADDITIONAL_BOOK_CONTENT,
    DESCRIPTION_CONTENT,
    QUESTION_CONTENT,
    RECOMMENDATIONS_CONTENT,
    chat_response,
)

pytestmark = pytest.mark.asyncio


class FakeApis:
    """Serves Naver search by query and OpenAI chat replies in order."""

    def __init__(
        self,
        searches: dict[str, dict[str, Any] | int] | None = None,
        chats: list[str] | None = None,
    ) -> None:
        self._searches = searches or {}
        self._chats = list(chats or [])
        self.search_queries: list[str] = []
        self.chat_payloads: list[dict[str, Any]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "openapi.naver.com":
            query = request.url.params["query"]
            self.search_queries.append(query)
            outcome = self._searches.get(query, SEARCH_RESPONSE_EMPTY)
            if isinstance(outcome, int):
                return httpx.Response(outcome)
            return httpx.Response(200, json=outcome)
        if request.url.host == "api.openai.com":
            self.chat_payloads.append(json.loads(request.content))
            return httpx.Response(200, json=chat_response(self._chats.pop(0)))
        return httpx.Response(404)

    def kit(self, config: MatchConfig | None = None, *, openai: bool = True) -> BookMatchKit:
        http = BookmatchHttpClient(
            min_request_interval=0.0,
            retry_delay=0.0,
            max_retries=1,
            transport=httpx.MockTransport(self.handler),
        )
        openai_client = None
        if openai:
            openai_client = create_openai_client(
                "sk-test",
                max_retries=0,
                http_client=httpx.AsyncClient(transport=httpx.MockTransport(self.handler)),
            )
        credentials = ApiCredentials(
            naver_client_id="id",
            naver_client_secret="secret",
            openai_api_key="sk-test" if openai else None,
        )
        return BookMatchKit.from_credentials(
            credentials, config, http_client=http, openai_client=openai_client
        )


OWNED = [OwnedBook(isbn="9788966260959", title="클린 코드", author="로버트 C. 마틴")]


class TestSearchAndValidate:
    """Search and validation through the Naver client."""

    async def test_search_cleans_markup(self) -> None:
        apis = FakeApis({"클린": SEARCH_RESPONSE})
        async with apis.kit(openai=False) as kit:
            results = await kit.search("클린")
        assert [r.title for r in results] == ["클린 코드(Clean Code)", "클린 아키텍처"]

    async def test_validate_first_attempt(self) -> None:
        """An exact title and author match on the first search."""
        apis = FakeApis({"클린 코드 로버트 C. 마틴": SEARCH_RESPONSE})
        async with apis.kit(openai=False) as kit:
            result = await kit.validate_book(RawBook("클린 코드", "로버트 C. 마틴"))
        assert result.state is MatchState.MATCHED
        assert result.book.isbn == "9788966260959"
        assert apis.search_queries == ["클린 코드 로버트 C. 마틴"]

    async def test_validate_with_correction(self) -> None:
        """A failed match is corrected through the chat API and re-searched."""
        apis = FakeApis(
            {"리팩터링 2판 마틴 파울러": REFACTORING_RESPONSE},
            chats=[ADDITIONAL_BOOK_CONTENT],
        )
        async with apis.kit() as kit:
            result = await kit.validate_book(RawBook("리팩토링", "파울러"))
        assert result.state is MatchState.MATCHED
        assert result.book.isbn == "9791162243770"
        assert apis.search_queries == ["리팩토링 파울러", "리팩터링 2판 마틴 파울러"]

    async def test_server_outage_raises_after_budget(self) -> None:
        """Persistent 5xx responses surface once as SearchFailed after the retry budget."""
        apis = FakeApis({"Dune": 503})
        async with apis.kit(MatchConfig(max_retries=2), openai=False) as kit:
            with pytest.raises(SearchFailed, match="503"):
                await kit.validate_book(RawBook("Dune"))
        # Two HTTP attempts per search, three searches.
        assert apis.search_queries == ["Dune"] * 6

    async def test_search_failure_surfaces(self) -> None:
        apis = FakeApis({"Dune": 500})
        async with apis.kit(openai=False) as kit:
            with pytest.raises(SearchFailed):
                await kit.search("Dune")


class TestMatchFromLines:
    """Progressive matching through the Naver client."""

    async def test_longest_line_wins(self) -> None:
        apis = FakeApis({"클린 코드 완벽판": SEARCH_RESPONSE, "클린": SEARCH_RESPONSE})
        async with apis.kit(openai=False) as kit:
            book = await kit.match_from_lines(["클린", "클린 코드 완벽판"])
        assert book is not None
        assert book.isbn == "9788966260959"
        assert apis.search_queries == ["클린 코드 완벽판"]


class TestRecommendations:
    """Recommendation pipelines through both clients."""

    async def test_recommend_from_owned(self) -> None:
        """Owned books are dropped; only validated suggestions are returned."""
        apis = FakeApis(
            {
                "리팩터링 2판 마틴 파울러": REFACTORING_RESPONSE,
                "클린 아키텍처 로버트 C. 마틴": SEARCH_RESPONSE,
            },
            chats=[RECOMMENDATIONS_CONTENT],
        )
        async with apis.kit() as kit:
            books = await kit.recommend_from_owned(OWNED)
        assert [b.isbn for b in books] == ["9791162243770", "9788966262472"]

    async def test_recommend_for_question(self) -> None:
        apis = FakeApis(
            {"리팩터링 2판 마틴 파울러": REFACTORING_RESPONSE},
            chats=[QUESTION_CONTENT, DESCRIPTION_CONTENT],
        )
        async with apis.kit() as kit:
            output = await kit.recommend_for_question("코드를 깔끔하게 쓰고 싶어요", OWNED)

        assert output.owned_isbns == {"9788966260959"}
        assert [b.isbn for b in output.new_books] == ["9791162243770"]
        assert output.description == DESCRIPTION_CONTENT
        assert apis.chat_payloads[-1]["model"] == "gpt-4o-mini"
