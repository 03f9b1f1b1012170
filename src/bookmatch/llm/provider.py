# ABOUTME: BookRecommender protocol defining the contract for language-model collaborators.
# ABOUTME: Covers suggestions, title correction on failed matches, and explanations.

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from bookmatch.metadata.types import OwnedBook, RawBook


@dataclass
class QuestionRecommendation:
    """LLM answer to a question: picks from the owned shelf plus new suggestions.

    owned_books only ever holds entries of the caller's owned list.
    """

    owned_books: list[OwnedBook] = field(default_factory=list)
    new_books: list[RawBook] = field(default_factory=list)


@runtime_checkable
class BookRecommender(Protocol):
    """Protocol for the language model used by the validator and recommender.

    Every method raises LLMFailed when the model cannot be reached and
    LLMResponseError when its reply cannot be parsed.
    """

    async def recommend_from_owned(self, owned: Sequence[OwnedBook]) -> list[RawBook]: ...

    async def recommend_for_question(
        self, question: str, owned: Sequence[OwnedBook]
    ) -> QuestionRecommendation: ...

    async def get_additional_book(
        self, question: str | None, previous_books: Sequence[RawBook]
    ) -> RawBook: ...

    async def get_description(self, question: str, books: Sequence[RawBook]) -> str: ...
