# ABOUTME: Book validation: resolves a RawBook to a catalog record with bounded retries.
# ABOUTME: Failed matches ask the LLM for a corrected book, passing the full rejection history.

import dataclasses
import logging
from collections.abc import Sequence

from bookmatch.config import MatchConfig
from bookmatch.core.search import BookSearchService, strip_subtitle
from bookmatch.errors import LLMFailed, LLMResponseError, SearchFailed
from bookmatch.llm.provider import BookRecommender
from bookmatch.metadata.scoring import ScoreBreakdown, select_best
from bookmatch.metadata.types import CatalogCandidate, MatchState, RawBook, ValidationResult

logger = logging.getLogger(__name__)


class BookValidator:
    """Validate-with-retry state machine.

    Each attempt issues exactly one catalog search (SEARCHING), scores
    every candidate (SCORING), and either returns MATCHED or moves to
    RETRYING. The next attempt searches, in order of preference: the main
    title when the last search came back empty for a subtitled title, an
    LLM correction, or the same book again after a transport failure.
    After max_retries retries the result is EXHAUSTED, a valid outcome.
    Only a catalog that could not be reached on any attempt raises.
    """

    def __init__(
        self,
        search: BookSearchService,
        config: MatchConfig,
        llm: BookRecommender | None = None,
    ) -> None:
        self._search = search
        self._config = config
        self._llm = llm

    @property
    def config(self) -> MatchConfig:
        return self._config

    async def validate_once(self, raw: RawBook, *, attempt: int = 1) -> ValidationResult:
        """Run a single search-and-score pass for raw.

        A pass never ends the state machine: a non-match is RETRYING.

        Raises:
            SearchFailed: If the catalog could not be queried.
        """
        result, _ = await self._search_and_score(raw, attempt)
        return result

    async def _search_and_score(
        self, raw: RawBook, attempt: int
    ) -> tuple[ValidationResult, ScoreBreakdown | None]:
        candidates = await self._search.search(raw.query, self._config.search_limit)
        best = select_best(raw, candidates, self._config)
        if best is None:
            logger.debug("No candidates for %r", raw.query)
            result = ValidationResult(
                is_matching=False,
                book=None,
                similarity=0.0,
                state=MatchState.RETRYING,
                attempts=attempt,
            )
            return result, None

        candidate, score = best
        matched = score.passes(self._config)
        logger.debug(
            "Best candidate for %r: %r title=%.2f author=%s combined=%.2f matched=%s",
            raw.title,
            candidate.title,
            score.title,
            "n/a" if score.author is None else f"{score.author:.2f}",
            score.combined,
            matched,
        )
        result = ValidationResult(
            is_matching=matched,
            book=candidate,
            similarity=score.combined,
            state=MatchState.MATCHED if matched else MatchState.RETRYING,
            attempts=attempt,
        )
        return result, score

    async def validate(
        self,
        raw: RawBook,
        question: str | None = None,
        previous_books: Sequence[RawBook] = (),
        *,
        correct: bool = True,
    ) -> ValidationResult:
        """Resolve raw to a catalog record, retrying up to max_retries times.

        Never issues more than max_retries + 1 catalog searches.

        Args:
            raw: The unverified book to resolve.
            question: The user's question, given to the LLM when correcting.
            previous_books: Books already suggested or rejected; the LLM is
                told about all of them on every correction.
            correct: Whether a scored non-match may be replaced by an LLM
                correction. When False (or without an LLM) only subtitle
                fallbacks and transport failures are retried.

        Returns:
            A MATCHED result, or an EXHAUSTED result. An EXHAUSTED result
            carries the best near miss (a candidate whose title score reached
            title_similarity_threshold) or None when every candidate was
            unrelated.

        Raises:
            SearchFailed: If every search attempt failed in transport.
        """
        logger.info("Validating %r by %s", raw.title, raw.author or "unknown author")

        can_correct = correct and self._llm is not None
        rejected: list[RawBook] = list(previous_books)
        current = raw
        main_title: RawBook | None = None
        best_book: CatalogCandidate | None = None
        best_score = 0.0
        needs_correction = False
        searches = 0
        succeeded = 0
        last_error: SearchFailed | None = None

        for attempt in range(self._config.max_retries + 1):
            if attempt > 0:
                logger.info("Retrying validation (%d/%d)", attempt, self._config.max_retries)

            if main_title is not None:
                current, main_title = main_title, None
                logger.info("Searching main title %r", current.title)
            elif needs_correction:
                try:
                    current = await self._llm.get_additional_book(question, rejected)
                except LLMResponseError as exc:
                    logger.warning("Unusable correction from model, giving up: %s", exc)
                    break
                except LLMFailed as exc:
                    logger.warning("Correction request failed: %s", exc)
                    continue
                needs_correction = False
                logger.info("Model suggested %r instead", current.display())

            searches += 1
            try:
                result, score = await self._search_and_score(current, searches)
            except SearchFailed as exc:
                last_error = exc
                logger.warning("Search failed for %r: %s", current.query, exc)
                continue
            succeeded += 1

            if result.is_matching:
                logger.info("Matched %r to %r (%.2f)", raw.title, result.book.title, result.similarity)
                return result

            if (
                score is not None
                and score.title >= self._config.title_similarity_threshold
                and (best_book is None or result.similarity > best_score)
            ):
                best_book, best_score = result.book, result.similarity

            if current not in rejected:
                rejected.append(current)

            if result.book is None:
                stripped = strip_subtitle(current.title)
                if stripped:
                    main_title = dataclasses.replace(current, title=stripped)
                    continue

            if not can_correct:
                break
            needs_correction = True

        if succeeded == 0 and last_error is not None:
            logger.error("Catalog unreachable for %r after %d search(es)", raw.title, searches)
            raise last_error

        logger.info("No match for %r after %d search(es)", raw.title, searches)
        return ValidationResult(
            is_matching=False,
            book=best_book,
            similarity=best_score,
            state=MatchState.EXHAUSTED,
            attempts=searches,
        )

    async def find_matching_book_with_retry(
        self,
        book: RawBook,
        question: str | None,
        previous_books: Sequence[RawBook] = (),
    ) -> CatalogCandidate | None:
        """Return the matched catalog record, or None when validation is exhausted."""
        result = await self.validate(book, question, previous_books)
        return result.book if result.is_matching else None
