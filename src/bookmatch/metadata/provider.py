# ABOUTME: BookSearchProvider protocol defining the contract for catalog sources.
# ABOUTME: Any book search API (Naver, or a fake in tests) implements this.

from typing import Protocol, runtime_checkable

from bookmatch.metadata.types import CatalogCandidate


@runtime_checkable
class BookSearchProvider(Protocol):
    """Protocol for book catalog search services.

    search() returns at most `limit` candidates in provider relevance order.
    A blank query returns [] without a network call. Failures raise
    SearchFailed and are never reported as an empty list.
    """

    @property
    def name(self) -> str: ...

    async def search(self, query: str, limit: int = 10) -> list[CatalogCandidate]: ...
