# ABOUTME: Immutable configuration objects passed explicitly into each component.
# ABOUTME: MatchConfig governs validator decisions; ApiCredentials holds service keys.

import math
import os
from dataclasses import dataclass

from bookmatch.errors import ConfigurationError

_WEIGHT_TOLERANCE = 1e-6

NAVER_CLIENT_ID_ENV = "NAVER_CLIENT_ID"
NAVER_CLIENT_SECRET_ENV = "NAVER_CLIENT_SECRET"
OPENAI_API_KEY_ENV = "OPENAI_API_KEY"


def _check_unit_interval(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ConfigurationError(f"{name} must be between 0.0 and 1.0, got {value}")


@dataclass(frozen=True)
class MatchConfig:
    """Thresholds, weights, and retry budget for every validation decision.

    A candidate matches when its title score reaches title_similarity_threshold
    and its author score reaches author_similarity_threshold. The combined
    score used for ranking is title_weight * title + author_weight * author,
    so the two weights must sum to 1.0.
    """

    title_similarity_threshold: float = 0.4
    author_similarity_threshold: float = 0.8
    title_weight: float = 0.8
    author_weight: float = 0.2
    max_retries: int = 3
    search_limit: int = 10
    concurrency: int = 1

    def __post_init__(self) -> None:
        _check_unit_interval("title_similarity_threshold", self.title_similarity_threshold)
        _check_unit_interval("author_similarity_threshold", self.author_similarity_threshold)
        _check_unit_interval("title_weight", self.title_weight)
        _check_unit_interval("author_weight", self.author_weight)
        total = self.title_weight + self.author_weight
        if not math.isclose(total, 1.0, abs_tol=_WEIGHT_TOLERANCE):
            raise ConfigurationError(
                f"title_weight + author_weight must equal 1.0, got {total}"
            )
        if self.max_retries < 0:
            raise ConfigurationError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.search_limit < 1:
            raise ConfigurationError(f"search_limit must be >= 1, got {self.search_limit}")
        if self.concurrency < 1:
            raise ConfigurationError(f"concurrency must be >= 1, got {self.concurrency}")


@dataclass(frozen=True)
class ApiCredentials:
    """Credentials for the Naver Book Search and OpenAI APIs.

    The OpenAI key is optional: without it the kit can search, validate,
    and match OCR lines, but cannot recommend or correct titles.
    """

    naver_client_id: str
    naver_client_secret: str
    openai_api_key: str | None = None

    def __post_init__(self) -> None:
        if not self.naver_client_id or not self.naver_client_secret:
            raise ConfigurationError("Naver client id and secret are required")

    @classmethod
    def from_env(cls) -> "ApiCredentials":
        """Build credentials from NAVER_CLIENT_ID, NAVER_CLIENT_SECRET, OPENAI_API_KEY."""
        return cls(
            naver_client_id=os.environ.get(NAVER_CLIENT_ID_ENV, ""),
            naver_client_secret=os.environ.get(NAVER_CLIENT_SECRET_ENV, ""),
            openai_api_key=os.environ.get(OPENAI_API_KEY_ENV) or None,
        )

    @property
    def has_llm(self) -> bool:
        return bool(self.openai_api_key)
