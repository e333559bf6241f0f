"""
Chat completion client for OpenAI-compatible APIs (OpenAI, Azure-hosted
deployments behind a compatible gateway, GLM, DeepSeek, etc.).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol

from openai import AsyncOpenAI

from src.core.config import AppConfig

logger = logging.getLogger(__name__)


@dataclass
class Completion:
    """One candidate returned by the completion provider."""

    content: Optional[str]


@dataclass
class ChatConversation:
    """System prompt plus the ordered user/assistant messages of one request."""

    system_prompt: str
    messages: List[Dict[str, str]] = field(default_factory=list)

    def add_user_message(self, text: str) -> None:
        self.messages.append({"role": "user", "content": text})

    def add_assistant_message(self, text: str) -> None:
        self.messages.append({"role": "assistant", "content": text})

    def to_messages(self) -> List[Dict[str, str]]:
        """Messages in chat-completions wire order, system prompt first."""
        return [{"role": "system", "content": self.system_prompt}, *self.messages]


class CompletionProvider(Protocol):
    """Protocol for completion providers used by the pipeline."""

    def create_conversation(self, system_prompt: str) -> ChatConversation:
        ...

    async def get_completions(self, conversation: ChatConversation) -> List[Completion]:
        """
        Request completions for the conversation.

        Returns every candidate the provider produced; callers check the count.
        Cancellation of the awaiting task aborts the request.
        """
        ...


class OpenAIChatClient:
    """Async chat-completions client; each call is attempted once."""

    def __init__(
        self,
        model_name: str,
        api_key: str,
        base_url: Optional[str] = None,
        temperature: float = 0.3,
        max_tokens: int = 1024,
        timeout: float = 60.0,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model_name = model_name
        self.temperature = temperature
        self.max_tokens = max_tokens
        # Retries stay at zero: the pipeline attempts each stage exactly once.
        self.client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )

    def create_conversation(self, system_prompt: str) -> ChatConversation:
        return ChatConversation(system_prompt=system_prompt)

    async def get_completions(self, conversation: ChatConversation) -> List[Completion]:
        messages = conversation.to_messages()
        logger.debug(
            "Requesting completion model=%s messages=%d",
            self.model_name,
            len(messages),
        )
        response = await self.client.chat.completions.create(
            model=self.model_name,
            messages=messages,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        choices = response.choices or []
        if not choices:
            logger.warning("Empty choices in completion response (model=%s)", self.model_name)
        completions = [Completion(content=choice.message.content) for choice in choices]
        for i, choice in enumerate(choices):
            if not (choice.message.content or "").strip():
                logger.warning(
                    "Empty content in choice %s (finish_reason=%s)",
                    i,
                    getattr(choice, "finish_reason", "?"),
                )
        return completions


def create_client(config: Optional[AppConfig] = None) -> OpenAIChatClient:
    """Create an OpenAI-compatible client from configuration (env by default)."""
    config = config or AppConfig.from_env()
    if not config.llm_api_key:
        raise ValueError("API key required. Set LLM_API_KEY or OPENAI_API_KEY.")
    return OpenAIChatClient(
        model_name=config.llm_model,
        api_key=config.llm_api_key,
        base_url=config.llm_base_url,
        temperature=config.llm_temperature,
        max_tokens=config.llm_max_tokens,
        timeout=config.llm_timeout,
    )
