"""
Answer synthesis: replays the chat history, appends the retrieved sources and
asks the model for a JSON (answer, thoughts) pair.
"""

from __future__ import annotations

import logging
from typing import Sequence

from src.core.models import ChatTurn
from src.llm.client import ChatConversation, CompletionProvider

from .parsing import (
    SynthesizedAnswer,
    completion_text,
    expect_single_completion,
    parse_answer_payload,
)
from .prompts import ANSWER_FORMAT_PROMPT, ANSWER_SYSTEM_PROMPT

logger = logging.getLogger(__name__)

STAGE = "answer"


def build_answer_conversation(
    client: CompletionProvider,
    history: Sequence[ChatTurn],
    document_contents: str,
) -> ChatConversation:
    """
    Assemble the synthesis conversation.

    Order: system persona, then every turn as a user message followed by the
    assistant reply when the turn has one, then the sources block with the
    output-format directive as the final user message.
    """
    conversation = client.create_conversation(ANSWER_SYSTEM_PROMPT)
    for turn in history:
        conversation.add_user_message(turn.user)
        if turn.bot is not None:
            conversation.add_assistant_message(turn.bot)
    conversation.add_user_message(ANSWER_FORMAT_PROMPT.format(sources=document_contents))
    return conversation


class AnswerSynthesizer:
    """Generate a grounded, structured answer from history and sources."""

    def __init__(self, client: CompletionProvider):
        self.client = client

    async def synthesize(
        self,
        history: Sequence[ChatTurn],
        document_contents: str,
    ) -> SynthesizedAnswer:
        conversation = build_answer_conversation(self.client, history, document_contents)
        completions = await self.client.get_completions(conversation)
        completion = expect_single_completion(completions, STAGE)
        result = parse_answer_payload(completion_text(completion, STAGE), STAGE)
        logger.debug("Synthesized answer (%d chars)", len(result.answer))
        return result
