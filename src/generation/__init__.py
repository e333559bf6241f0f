"""
Answer generation for the handbook bot.

- Source block building from retrieved records
- Structured (answer, thoughts) synthesis over the chat history
- Follow-up question suggestions
- Strict parsing of model output
"""

from .context_builder import NO_SOURCE_AVAILABLE, build_document_contents
from .follow_up import FollowUpGenerator, append_follow_up_questions
from .parsing import (
    SynthesizedAnswer,
    expect_single_completion,
    parse_answer_payload,
    parse_follow_up_questions,
)
from .prompts import PROMPT_VERSION
from .synthesizer import AnswerSynthesizer, build_answer_conversation

__all__ = [
    "NO_SOURCE_AVAILABLE",
    "build_document_contents",
    "FollowUpGenerator",
    "append_follow_up_questions",
    "SynthesizedAnswer",
    "expect_single_completion",
    "parse_answer_payload",
    "parse_follow_up_questions",
    "PROMPT_VERSION",
    "AnswerSynthesizer",
    "build_answer_conversation",
]
