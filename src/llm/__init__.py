"""
LLM client module for OpenAI-compatible chat completions.
"""

from .client import (
    ChatConversation,
    Completion,
    CompletionProvider,
    OpenAIChatClient,
    create_client,
)

__all__ = [
    "ChatConversation",
    "Completion",
    "CompletionProvider",
    "OpenAIChatClient",
    "create_client",
]
