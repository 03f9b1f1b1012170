# ABOUTME: OpenAI chat-completions implementation of the BookRecommender protocol.
# ABOUTME: Calls the API through the openai SDK's AsyncOpenAI and parses replies into RawBooks.

import logging
from collections.abc import Sequence

import httpx
import openai

from bookmatch.errors import LLMFailed, LLMResponseError
from bookmatch.llm import parsing, prompts
from bookmatch.llm.provider import QuestionRecommendation
from bookmatch.metadata.types import OwnedBook, RawBook

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o"
DEFAULT_DESCRIPTION_MODEL = "gpt-4o-mini"


def create_openai_client(
    api_key: str,
    *,
    timeout: float = 30.0,
    max_retries: int = 2,
    http_client: httpx.AsyncClient | None = None,
) -> openai.AsyncOpenAI:
    """Build the AsyncOpenAI client used by OpenAIRecommender.

    Pass http_client to route requests through a custom httpx transport.
    """
    return openai.AsyncOpenAI(
        api_key=api_key,
        timeout=timeout,
        max_retries=max_retries,
        http_client=http_client,
    )


class OpenAIRecommender:
    """Book recommender backed by the OpenAI chat completions API.

    Suggestion and correction calls run at near-zero temperature so the
    reply format stays stable; descriptions use the default temperature.
    """

    def __init__(
        self,
        client: openai.AsyncOpenAI,
        *,
        model: str = DEFAULT_MODEL,
        description_model: str = DEFAULT_DESCRIPTION_MODEL,
    ) -> None:
        self._client = client
        self._model = model
        self._description_model = description_model

    async def aclose(self) -> None:
        await self._client.close()

    async def recommend_from_owned(self, owned: Sequence[OwnedBook]) -> list[RawBook]:
        """Suggest new books based only on the owned shelf."""
        content = await self._chat(
            prompts.RECOMMENDATION_FROM_OWNED,
            prompts.owned_books_message(owned),
            temperature=0.01,
            max_tokens=500,
        )
        books = parsing.parse_recommendations(content)
        logger.info("Model suggested %d book(s) from %d owned", len(books), len(owned))
        return books

    async def recommend_for_question(
        self, question: str, owned: Sequence[OwnedBook]
    ) -> QuestionRecommendation:
        """Pick owned books and suggest new ones that answer a question."""
        content = await self._chat(
            prompts.RECOMMENDATION_FOR_QUESTION,
            prompts.question_message(question, owned),
            temperature=0.01,
            max_tokens=500,
        )
        result = parsing.parse_question_recommendation(content, owned)
        logger.info(
            "Model answered question with %d owned and %d new suggestion(s)",
            len(result.owned_books),
            len(result.new_books),
        )
        return result

    async def get_additional_book(
        self, question: str | None, previous_books: Sequence[RawBook]
    ) -> RawBook:
        """Ask for one replacement book that is not among previous_books."""
        system = prompts.ADDITIONAL_BOOK if question else prompts.ADDITIONAL_BOOK_NO_QUESTION
        content = await self._chat(
            system,
            prompts.additional_book_message(question, previous_books),
            temperature=0.01,
            max_tokens=100,
        )
        return parsing.parse_additional_book(content)

    async def get_description(self, question: str, books: Sequence[RawBook]) -> str:
        """Explain why the selected books answer the question."""
        return await self._chat(
            prompts.DESCRIPTION,
            prompts.description_message(question, books),
            model=self._description_model,
            temperature=1.0,
            max_tokens=500,
        )

    async def _chat(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        model: str | None = None,
        temperature: float,
        max_tokens: int,
    ) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=model or self._model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.APIError as exc:
            logger.warning("Chat completion failed: %s", exc)
            raise LLMFailed(f"OpenAI request failed: {exc}") from exc

        if not response.choices:
            raise LLMResponseError("Chat completion returned no choices")
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise LLMResponseError("Chat completion returned empty content")
        return content.strip()
