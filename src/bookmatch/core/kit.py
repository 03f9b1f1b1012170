# ABOUTME: BookMatchKit, the single entry point for search, validation, matching, and recommendation.
# ABOUTME: Wires the search service, validator, orchestrator, and recommender from explicit config.

import logging
from collections.abc import Iterable, Sequence
from types import TracebackType

import openai

from bookmatch.config import ApiCredentials, MatchConfig
from bookmatch.core.orchestrator import BookMatchOrchestrator
from bookmatch.core.recommender import BookRecommendationEngine
from bookmatch.core.search import BookSearchService
from bookmatch.core.validator import BookValidator
from bookmatch.errors import ConfigurationError
from bookmatch.llm.openai_recommender import OpenAIRecommender, create_openai_client
from bookmatch.llm.provider import BookRecommender
from bookmatch.metadata.http import BookmatchHttpClient
from bookmatch.metadata.naver import NaverBookProvider
from bookmatch.metadata.provider import BookSearchProvider
from bookmatch.metadata.types import (
    CatalogCandidate,
    OwnedBook,
    RawBook,
    RecommendationOutput,
    ValidationResult,
)

logger = logging.getLogger(__name__)


class BookMatchKit:
    """Search, validate, match, and recommend books against one catalog.

    Collaborators are passed in explicitly; use from_credentials() to build
    the default Naver + OpenAI stack. Operations that need the language
    model raise ConfigurationError when none was supplied.
    """

    def __init__(
        self,
        search: BookSearchProvider,
        llm: BookRecommender | None = None,
        config: MatchConfig | None = None,
        *,
        http_client: BookmatchHttpClient | None = None,
        openai_client: openai.AsyncOpenAI | None = None,
    ) -> None:
        self._config = config or MatchConfig()
        self._http_client = http_client
        self._openai_client = openai_client
        self._search = BookSearchService(search, limit=self._config.search_limit)
        self._llm = llm
        self._validator = BookValidator(self._search, self._config, llm)
        self._orchestrator = BookMatchOrchestrator(
            self._validator, concurrency=self._config.concurrency
        )
        self._recommender = (
            BookRecommendationEngine(self._validator, llm, concurrency=self._config.concurrency)
            if llm is not None
            else None
        )

    @classmethod
    def from_credentials(
        cls,
        credentials: ApiCredentials,
        config: MatchConfig | None = None,
        *,
        http_client: BookmatchHttpClient | None = None,
        openai_client: openai.AsyncOpenAI | None = None,
    ) -> "BookMatchKit":
        """Build a kit backed by Naver Book Search and, if keyed, OpenAI.

        The kit owns and closes both clients, including ones passed in.
        """
        http = http_client or BookmatchHttpClient()
        provider = NaverBookProvider(
            http,
            client_id=credentials.naver_client_id,
            client_secret=credentials.naver_client_secret,
        )
        llm = None
        if credentials.has_llm:
            openai_client = openai_client or create_openai_client(credentials.openai_api_key)
            llm = OpenAIRecommender(openai_client)
        else:
            logger.info("No OpenAI key configured; recommendations are disabled")
        return cls(provider, llm, config, http_client=http, openai_client=openai_client)

    async def __aenter__(self) -> "BookMatchKit":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
        if self._openai_client is not None:
            await self._openai_client.close()

    @property
    def config(self) -> MatchConfig:
        return self._config

    @property
    def has_llm(self) -> bool:
        return self._llm is not None

    async def search(self, query: str, limit: int | None = None) -> list[CatalogCandidate]:
        """Free-text catalog search. Raises SearchFailed on failure."""
        return await self._search.search(query, limit)

    async def search_progressively(self, lines: Sequence[str]) -> list[CatalogCandidate]:
        """Accumulate OCR lines into one narrowing query. Raises SearchFailed on failure."""
        return await self._search.search_progressively(lines)

    async def validate_book(self, raw: RawBook) -> ValidationResult:
        """Resolve a raw book, correcting it through the LLM when one is configured.

        Raises SearchFailed only when no search reached the catalog.
        """
        return await self._validator.validate(raw)

    async def match_from_lines(self, lines: Sequence[str]) -> CatalogCandidate | None:
        """Resolve OCR lines to the catalog record of the longest matching line."""
        return await self._orchestrator.match_from_lines(lines)

    async def recommend_from_owned(self, owned: Iterable[OwnedBook]) -> list[CatalogCandidate]:
        """Recommend validated new books from the owned shelf alone."""
        return await self._require_recommender().recommend_from_owned(owned)

    async def recommend_for_question(
        self, question: str, owned: Iterable[OwnedBook]
    ) -> RecommendationOutput:
        """Answer a question with owned ISBNs, validated new books, and an explanation."""
        return await self._require_recommender().recommend_for_question(question, owned)

    def _require_recommender(self) -> BookRecommendationEngine:
        if self._recommender is None:
            raise ConfigurationError("An LLM is required for recommendations")
        return self._recommender
