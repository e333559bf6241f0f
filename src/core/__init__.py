"""
Shared configuration, error types and data model.
"""

from .config import AppConfig
from .errors import (
    AnswerBotError,
    InvalidConversationError,
    MalformedOutputError,
    ProtocolViolationError,
    UnexpectedCompletionCountError,
)
from .models import (
    BotResponse,
    ChatTurn,
    FormulatedQuery,
    RequestOverrides,
    RetrievalMode,
    RetrievalQuery,
    SupportingContentRecord,
    VectorOnlyQuery,
)

__all__ = [
    "AppConfig",
    "AnswerBotError",
    "InvalidConversationError",
    "MalformedOutputError",
    "ProtocolViolationError",
    "UnexpectedCompletionCountError",
    "BotResponse",
    "ChatTurn",
    "FormulatedQuery",
    "RequestOverrides",
    "RetrievalMode",
    "RetrievalQuery",
    "SupportingContentRecord",
    "VectorOnlyQuery",
]
