# ABOUTME: Bookmatch matches noisy book text against a catalog and recommends books.
# ABOUTME: Re-exports the consumer-facing kit, configuration, and data types.

from bookmatch.config import ApiCredentials, MatchConfig
from bookmatch.core.kit import BookMatchKit
from bookmatch.errors import (
    BookMatchError,
    ConfigurationError,
    LLMFailed,
    LLMResponseError,
    SearchFailed,
)
from bookmatch.metadata.types import (
    CatalogCandidate,
    MatchState,
    OwnedBook,
    RawBook,
    RecommendationOutput,
    ValidationResult,
)

__all__ = [
    "ApiCredentials",
    "BookMatchError",
    "BookMatchKit",
    "CatalogCandidate",
    "ConfigurationError",
    "LLMFailed",
    "LLMResponseError",
    "MatchConfig",
    "MatchState",
    "OwnedBook",
    "RawBook",
    "RecommendationOutput",
    "SearchFailed",
    "ValidationResult",
]
