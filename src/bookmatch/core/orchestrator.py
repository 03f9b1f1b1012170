# ABOUTME: Progressive matching over several OCR text lines from one photograph.
# ABOUTME: Tries lines longest-first and returns the first line that validates.

import asyncio
import logging
from collections.abc import Sequence

from bookmatch.core.validator import BookValidator
from bookmatch.metadata.normalizer import normalize_ocr_lines
from bookmatch.metadata.types import CatalogCandidate, RawBook, ValidationResult

logger = logging.getLogger(__name__)


def order_lines(lines: Sequence[str]) -> list[str]:
    """Normalize OCR lines and order them longest first.

    Longer lines are assumed to be less truncated. Ties keep input order.
    """
    return sorted(normalize_ocr_lines(lines), key=len, reverse=True)


class BookMatchOrchestrator:
    """Resolve a set of OCR lines to a single catalog record.

    Lines are validated independently without LLM correction. The longest
    line that matches wins; when none match the result is None, never a
    guess among unmatched candidates.
    """

    def __init__(self, validator: BookValidator, *, concurrency: int = 1) -> None:
        self._validator = validator
        self._concurrency = concurrency

    async def match_from_lines(
        self, lines: Sequence[str], *, concurrency: int | None = None
    ) -> CatalogCandidate | None:
        """Return the catalog record for the longest matching line, or None.

        With concurrency 1 lines are validated strictly in order and shorter
        lines are never searched once a longer one matches. With higher
        concurrency up to that many lines are validated at once; the result
        is still the longest matching line, and pending work for shorter
        lines is cancelled as soon as it is known.

        Raises:
            SearchFailed: If the catalog was unreachable for every search of
                a line that had to be checked.
        """
        ordered = order_lines(lines)
        if not ordered:
            return None

        limit = concurrency or self._concurrency
        if limit <= 1:
            match = await self._match_sequential(ordered)
        else:
            match = await self._match_concurrent(ordered, limit)

        if match is None:
            logger.info("No line out of %d matched a catalog record", len(ordered))
        return match

    async def _validate_line(self, line: str) -> ValidationResult:
        return await self._validator.validate(RawBook(title=line), correct=False)

    async def _match_sequential(self, ordered: list[str]) -> CatalogCandidate | None:
        for line in ordered:
            result = await self._validate_line(line)
            if result.is_matching:
                logger.info("Line %r matched %r", line, result.book.title)
                return result.book
        return None

    async def _match_concurrent(self, ordered: list[str], limit: int) -> CatalogCandidate | None:
        semaphore = asyncio.Semaphore(limit)

        async def run(line: str) -> ValidationResult:
            async with semaphore:
                return await self._validate_line(line)

        tasks = [asyncio.create_task(run(line)) for line in ordered]
        try:
            # Await in length order so the longest matching line wins,
            # whichever task happens to finish first.
            for line, task in zip(ordered, tasks):
                result = await task
                if result.is_matching:
                    logger.info("Line %r matched %r", line, result.book.title)
                    return result.book
            return None
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
