"""
Follow-up question suggestions appended to a finished answer.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from src.llm.client import CompletionProvider

from .parsing import completion_text, expect_single_completion, parse_follow_up_questions
from .prompts import FOLLOW_UP_PROMPT, FOLLOW_UP_SYSTEM_PROMPT

logger = logging.getLogger(__name__)

STAGE = "follow_up"


def append_follow_up_questions(answer: str, questions: Sequence[str]) -> str:
    """Append each question as an inline " <<question>> " marker, in order."""
    return answer + "".join(f" <<{q}>> " for q in questions)


class FollowUpGenerator:
    """Ask the model for follow-up questions about an answer."""

    def __init__(self, client: CompletionProvider):
        self.client = client

    async def generate(self, answer: str) -> List[str]:
        conversation = self.client.create_conversation(FOLLOW_UP_SYSTEM_PROMPT)
        conversation.add_user_message(FOLLOW_UP_PROMPT.format(answer=answer))
        completions = await self.client.get_completions(conversation)
        completion = expect_single_completion(completions, STAGE)
        questions = parse_follow_up_questions(completion_text(completion, STAGE), STAGE)
        if len(questions) != 3:
            logger.info("Model returned %d follow-up questions (asked for three)", len(questions))
        return questions
