# ABOUTME: Shared pytest fixtures for Bookmatch tests.
# ABOUTME: Provides sample catalog records, an owned shelf, and default match configuration.

import pytest

from bookmatch.config import MatchConfig
from bookmatch.metadata.types import CatalogCandidate, OwnedBook, RawBook
from tests.fixtures.fakes import CLEAN_CODE_ISBN


@pytest.fixture
def config() -> MatchConfig:
    """Default thresholds and weights: {0.4, 0.8, 0.8, 0.2, 3}."""
    return MatchConfig()


@pytest.fixture
def clean_code() -> CatalogCandidate:
    """Catalog record for Clean Code with a parenthesised original title."""
    return CatalogCandidate(
        isbn=CLEAN_CODE_ISBN,
        title="클린 코드(Clean Code)",
        author="로버트 C. 마틴",
        publisher="인사이트",
    )


@pytest.fixture
def refactoring() -> CatalogCandidate:
    return CatalogCandidate(
        isbn="9791162243770",
        title="리팩터링 2판",
        author="마틴 파울러",
        publisher="한빛미디어",
    )


@pytest.fixture
def clean_code_raw() -> RawBook:
    return RawBook(title="클린 코드", author="로버트 C. 마틴")


@pytest.fixture
def owned_shelf() -> list[OwnedBook]:
    """An owned shelf holding Clean Code."""
    return [OwnedBook(isbn=CLEAN_CODE_ISBN, title="클린 코드", author="로버트 C. 마틴")]
