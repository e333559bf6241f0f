"""
Request and response models for the answer API.

Field names on the wire are camelCase; Python attributes are snake_case.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.core.models import BotResponse, ChatTurn, RequestOverrides


class ChatTurnIn(BaseModel):
    """One turn of the conversation; the newest turn has no bot reply."""

    user: Optional[str] = Field(None, description="User utterance")
    bot: Optional[str] = Field(None, description="Assistant reply to this turn")

    def to_turn(self) -> ChatTurn:
        return ChatTurn(user=self.user, bot=self.bot)


class OverridesIn(BaseModel):
    """Per-request options."""

    model_config = ConfigDict(populate_by_name=True)

    top: int = Field(3, ge=0, le=50)
    semantic_captions: bool = Field(False, alias="semanticCaptions")
    semantic_ranker: bool = Field(False, alias="semanticRanker")
    exclude_category: Optional[str] = Field(None, alias="excludeCategory")
    retrieval_mode: Optional[str] = Field(None, alias="retrievalMode")
    suggest_follow_up_questions: bool = Field(False, alias="suggestFollowUpQuestions")

    def to_overrides(self) -> RequestOverrides:
        return RequestOverrides(
            top=self.top,
            semantic_captions=self.semantic_captions,
            semantic_ranker=self.semantic_ranker,
            exclude_category=self.exclude_category,
            retrieval_mode=self.retrieval_mode,
            suggest_follow_up_questions=self.suggest_follow_up_questions,
        )


class ChatRequest(BaseModel):
    """Request body for POST /api/chat."""

    history: List[ChatTurnIn] = Field(..., min_length=1)
    overrides: Optional[OverridesIn] = None


class DataPointOut(BaseModel):
    """Supporting content used for the answer."""

    title: str
    content: str


class ChatResponse(BaseModel):
    """Response for POST /api/chat."""

    model_config = ConfigDict(populate_by_name=True)

    data_points: List[DataPointOut] = Field(default_factory=list, alias="dataPoints")
    answer: str
    thoughts: str
    citation_base_url: str = Field("", alias="citationBaseUrl")

    @classmethod
    def from_bot_response(cls, response: BotResponse) -> "ChatResponse":
        return cls(
            data_points=[DataPointOut(title=r.title, content=r.content) for r in response.data_points],
            answer=response.answer,
            thoughts=response.thoughts,
            citation_base_url=response.citation_base_url,
        )


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = "ok"
    orchestrator_ready: bool = Field(False, alias="orchestratorReady")
    documents_loaded: int = Field(0, alias="documentsLoaded")
