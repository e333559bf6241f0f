"""
Search-query formulation from the newest user turn.
"""

from __future__ import annotations

import logging
from typing import Sequence

from src.core.errors import InvalidConversationError
from src.core.models import ChatTurn, FormulatedQuery, RequestOverrides, RetrievalQuery, VectorOnlyQuery
from src.generation.parsing import completion_text, expect_single_completion
from src.generation.prompts import QUERY_SYSTEM_PROMPT
from src.llm.client import CompletionProvider

logger = logging.getLogger(__name__)

STAGE = "query"


def latest_question(history: Sequence[ChatTurn]) -> str:
    """
    The user text of the last turn.

    Every turn must carry user text, since the whole history is replayed to
    the model; raises InvalidConversationError otherwise.
    """
    if not history:
        raise InvalidConversationError("conversation history is empty")
    for position, turn in enumerate(history[:-1]):
        if not turn.user:
            raise InvalidConversationError(f"user text is missing from turn {position}")
    question = history[-1].user
    if not question:
        raise InvalidConversationError("user question is missing from the last turn")
    return question


class QueryFormulator:
    """Turn the latest question into a compact search query with the LLM."""

    def __init__(self, client: CompletionProvider):
        self.client = client

    async def formulate(self, question: str) -> str:
        conversation = self.client.create_conversation(QUERY_SYSTEM_PROMPT)
        conversation.add_user_message(question)
        completions = await self.client.get_completions(conversation)
        completion = expect_single_completion(completions, STAGE)
        return completion_text(completion, STAGE).strip()

    async def resolve(self, question: str, overrides: RequestOverrides) -> RetrievalQuery:
        """Formulate a text query, or skip formulation for vector-only retrieval."""
        if overrides.vector_only:
            logger.debug("Retrieval mode is Vector; skipping query formulation")
            return VectorOnlyQuery()
        query = await self.formulate(question)
        logger.info("Formulated search query: %r", query)
        return FormulatedQuery(text=query)
