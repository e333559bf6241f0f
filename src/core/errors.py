"""
Error types raised by the answer pipeline.

Precondition and provider-protocol errors are fatal for a request. Retrieval
failures never surface here; the orchestrator degrades them to an empty
document set.
"""

from __future__ import annotations

from typing import Optional


class AnswerBotError(Exception):
    """Base class for every error the answer pipeline raises on purpose."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidConversationError(AnswerBotError):
    """Raised when the history has no question to answer."""


class ProtocolViolationError(AnswerBotError):
    """The completion provider returned something the stage cannot use."""

    def __init__(self, stage: str, message: str) -> None:
        self.stage = stage
        super().__init__(f"[{stage}] {message}")


class UnexpectedCompletionCountError(ProtocolViolationError):
    """A stage expected exactly one completion candidate."""

    def __init__(self, stage: str, count: int) -> None:
        self.count = count
        super().__init__(stage, f"expected exactly one completion, got {count}")


class MalformedOutputError(ProtocolViolationError):
    """
    Completion content did not match the structured output a stage asked for.

    `kind` is one of: invalid_json, not_object, not_array, missing, null,
    wrong_type. `field` names the offending field, or "content" when the
    payload as a whole is unusable.
    """

    def __init__(
        self,
        stage: str,
        field: str,
        kind: str,
        detail: Optional[str] = None,
    ) -> None:
        self.field = field
        self.kind = kind
        message = f"malformed output: field {field!r} is {kind}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(stage, message)
