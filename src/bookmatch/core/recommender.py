# ABOUTME: Recommendation pipelines: from the owned shelf alone, or for a user question.
# ABOUTME: Every LLM suggestion is validated against the catalog before it reaches the user.

import asyncio
import logging
from collections.abc import Iterable, Sequence

from bookmatch.core.validator import BookValidator
from bookmatch.llm.provider import BookRecommender
from bookmatch.metadata.types import (
    CatalogCandidate,
    OwnedBook,
    RawBook,
    RecommendationOutput,
    ValidationResult,
)

logger = logging.getLogger(__name__)


def _owned_keys(owned: Iterable[OwnedBook]) -> frozenset[str]:
    keys: set[str] = set()
    for book in owned:
        keys |= book.isbn_keys
    return frozenset(keys)


def _find_on_shelf(
    item: CatalogCandidate | OwnedBook, shelf: Sequence[OwnedBook]
) -> OwnedBook | None:
    """Return the shelf entry sharing an ISBN with item, if any."""
    for book in shelf:
        if book.isbn_keys & item.isbn_keys:
            return book
    return None


class _Dedup:
    """Collects catalog candidates, skipping repeats and owned ISBNs."""

    def __init__(self, excluded: frozenset[str]) -> None:
        self._seen: set[str] = set(excluded)
        self.books: list[CatalogCandidate] = []

    def add(self, candidate: CatalogCandidate) -> bool:
        keys = candidate.isbn_keys
        if not keys:
            logger.debug("Skipping %r: catalog record has no ISBN", candidate.title)
            return False
        if keys & self._seen:
            logger.debug("Skipping owned or duplicate %r", candidate.title)
            return False
        self._seen |= keys
        self.books.append(candidate)
        return True


class BookRecommendationEngine:
    """Turns LLM suggestions into validated catalog recommendations.

    Suggestions that cannot be resolved to a real catalog record are dropped
    silently; an unvalidated guess is never returned. Caller-owned
    collections are read into tuples and never mutated.
    """

    def __init__(
        self,
        validator: BookValidator,
        llm: BookRecommender,
        *,
        concurrency: int = 1,
    ) -> None:
        self._validator = validator
        self._llm = llm
        self._concurrency = concurrency

    async def recommend_from_owned(self, owned: Iterable[OwnedBook]) -> list[CatalogCandidate]:
        """Recommend new books based only on the owned shelf.

        Raises:
            LLMFailed: If the initial suggestion request fails.
            SearchFailed: If the catalog was unreachable for every search of
                a suggestion.
        """
        shelf = tuple(owned)
        logger.info("Recommending from %d owned book(s)", len(shelf))

        suggestions = await self._llm.recommend_from_owned(shelf)
        results = await self._validate_all(suggestions)

        collected = _Dedup(_owned_keys(shelf))
        for suggestion, result in zip(suggestions, results):
            if not result.is_matching:
                logger.info("Dropping unresolved suggestion %r", suggestion.display())
                continue
            collected.add(result.book)

        logger.info("Recommended %d new book(s)", len(collected.books))
        return collected.books

    async def recommend_for_question(
        self, question: str, owned: Iterable[OwnedBook]
    ) -> RecommendationOutput:
        """Answer a question with owned books and validated new books.

        Raises:
            ValueError: If the question is blank.
            LLMFailed: If the suggestion or description request fails.
            SearchFailed: If the catalog was unreachable for every search of
                a suggestion.
        """
        question = question.strip()
        if not question:
            raise ValueError("question must not be blank")

        shelf = tuple(owned)
        logger.info("Recommending for question %r with %d owned book(s)", question, len(shelf))

        recommendation = await self._llm.recommend_for_question(question, shelf)
        shelf_keys = _owned_keys(shelf)

        owned_picks: list[OwnedBook] = []

        def keep_owned(book: OwnedBook) -> None:
            if book not in owned_picks:
                owned_picks.append(book)

        for pick in recommendation.owned_books:
            shelf_book = _find_on_shelf(pick, shelf)
            if shelf_book is not None:
                keep_owned(shelf_book)

        # Sequential so each correction sees every earlier suggestion.
        history: list[RawBook] = list(recommendation.new_books)
        collected = _Dedup(shelf_keys)
        for suggestion in recommendation.new_books:
            matched = await self._validator.find_matching_book_with_retry(
                suggestion, question, history
            )
            if matched is None:
                logger.info("Dropping unresolved suggestion %r", suggestion.display())
                continue
            shelf_book = _find_on_shelf(matched, shelf)
            if shelf_book is not None:
                logger.info("Suggestion %r is already owned", matched.title)
                keep_owned(shelf_book)
                continue
            if collected.add(matched):
                history.append(matched.to_raw_book())

        owned_isbns = {book.isbn for book in owned_picks}

        description = await self._llm.get_description(
            question,
            [book.to_raw_book() for book in owned_picks]
            + [book.to_raw_book() for book in collected.books],
        )

        logger.info(
            "Recommendation complete: %d owned, %d new",
            len(owned_isbns),
            len(collected.books),
        )
        return RecommendationOutput(
            owned_isbns=owned_isbns,
            new_books=collected.books,
            description=description,
        )

    async def _validate_all(self, suggestions: Sequence[RawBook]) -> list[ValidationResult]:
        """Validate suggestions with bounded concurrency, preserving order."""
        if self._concurrency <= 1:
            return [
                await self._validator.validate(book, None, suggestions) for book in suggestions
            ]

        semaphore = asyncio.Semaphore(self._concurrency)

        async def run(book: RawBook) -> ValidationResult:
            async with semaphore:
                return await self._validator.validate(book, None, suggestions)

        return list(await asyncio.gather(*(run(book) for book in suggestions)))
