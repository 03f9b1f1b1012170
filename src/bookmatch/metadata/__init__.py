# ABOUTME: Metadata package for catalog search, book records, and similarity scoring.
# ABOUTME: Exports the core data types and the BookSearchProvider protocol.

from bookmatch.metadata.provider import BookSearchProvider
from bookmatch.metadata.types import (
    CatalogCandidate,
    OwnedBook,
    RawBook,
    RecommendationOutput,
    ValidationResult,
)

__all__ = [
    "BookSearchProvider",
    "CatalogCandidate",
    "OwnedBook",
    "RawBook",
    "RecommendationOutput",
    "ValidationResult",
]
