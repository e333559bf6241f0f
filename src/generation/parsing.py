"""
Strict parsing of completion-provider output.

Every stage funnels its provider round trip through these helpers so that a
wrong candidate count or a payload that does not match the requested JSON
shape fails with a named error instead of being guessed at or repaired.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, List, Sequence

from pydantic import BaseModel, StrictStr, TypeAdapter, ValidationError

from src.core.errors import MalformedOutputError, UnexpectedCompletionCountError
from src.llm.client import Completion


@dataclass
class SynthesizedAnswer:
    """Parsed (answer, thoughts) pair from the synthesis stage."""

    answer: str
    thoughts: str


class AnswerPayload(BaseModel):
    """Schema of the synthesis JSON object; unknown keys are ignored."""

    answer: StrictStr
    thoughts: StrictStr


_FOLLOW_UP_ADAPTER = TypeAdapter(List[StrictStr])


def expect_single_completion(completions: Sequence[Completion], stage: str) -> Completion:
    """Return the only completion, or fail when the provider returned 0 or >1."""
    if len(completions) != 1:
        raise UnexpectedCompletionCountError(stage, len(completions))
    return completions[0]


def completion_text(completion: Completion, stage: str) -> str:
    if completion.content is None:
        raise MalformedOutputError(stage, "content", "null")
    return completion.content


def _load_json(raw: str, stage: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedOutputError(stage, "content", "invalid_json", str(e)) from e


def _field_error(stage: str, error: dict) -> MalformedOutputError:
    loc = error.get("loc") or ("content",)
    head = loc[0]
    field = f"[{head}]" if isinstance(head, int) else str(head)
    if error.get("type") == "missing":
        kind = "missing"
    elif error.get("input") is None:
        kind = "null"
    else:
        kind = "wrong_type"
    return MalformedOutputError(stage, field, kind, error.get("msg"))


def parse_answer_payload(raw: str, stage: str = "answer") -> SynthesizedAnswer:
    """
    Parse synthesis output into a SynthesizedAnswer.

    The content must be a JSON object whose "answer" and "thoughts" are
    non-null strings. Code fences or surrounding prose are not stripped.
    """
    data = _load_json(raw, stage)
    if not isinstance(data, dict):
        raise MalformedOutputError(stage, "content", "not_object")
    try:
        payload = AnswerPayload.model_validate(data)
    except ValidationError as e:
        raise _field_error(stage, e.errors()[0]) from e
    return SynthesizedAnswer(answer=payload.answer, thoughts=payload.thoughts)


def parse_follow_up_questions(raw: str, stage: str = "follow_up") -> List[str]:
    """Parse a JSON array of question strings; the element count is not checked."""
    data = _load_json(raw, stage)
    if not isinstance(data, list):
        raise MalformedOutputError(stage, "content", "not_array")
    try:
        return _FOLLOW_UP_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise _field_error(stage, e.errors()[0]) from e
