# ABOUTME: Language-model package for book suggestions, title correction, and descriptions.
# ABOUTME: Exports the BookRecommender protocol and the OpenAI implementation.

from bookmatch.llm.openai_recommender import OpenAIRecommender
from bookmatch.llm.provider import BookRecommender, QuestionRecommendation

__all__ = [
    "BookRecommender",
    "OpenAIRecommender",
    "QuestionRecommendation",
]
