"""
API routes: chat, health.
"""

from __future__ import annotations

import logging
from typing import Any

import openai
from fastapi import APIRouter, HTTPException, Request

from src.core.errors import InvalidConversationError, ProtocolViolationError

from .models import ChatRequest, ChatResponse, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])


def _get_state(request: Request) -> tuple[Any, int]:
    orchestrator = getattr(request.app.state, "orchestrator", None)
    documents_loaded = getattr(request.app.state, "documents_loaded", 0)
    return orchestrator, documents_loaded


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Health check."""
    orchestrator, documents_loaded = _get_state(request)
    return HealthResponse(
        status="ok",
        orchestrator_ready=orchestrator is not None,
        documents_loaded=documents_loaded,
    )


@router.post("/chat", response_model=ChatResponse)
async def chat(request: Request, body: ChatRequest) -> ChatResponse:
    """Answer the newest turn of the conversation from the document corpus."""
    orchestrator, _ = _get_state(request)
    if orchestrator is None:
        raise HTTPException(
            status_code=503,
            detail="Service unavailable: documents not loaded or LLM not configured.",
        )
    history = [turn.to_turn() for turn in body.history]
    overrides = body.overrides.to_overrides() if body.overrides is not None else None
    try:
        resp = await orchestrator.reply(history, overrides)
    except InvalidConversationError as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    except ProtocolViolationError as e:
        logger.error("Completion provider protocol violation: %s", e)
        raise HTTPException(status_code=502, detail=e.message) from e
    except openai.APIError as e:
        logger.error("Completion provider request failed: %s", e)
        raise HTTPException(status_code=502, detail="Completion provider request failed.") from e
    return ChatResponse.from_bot_response(resp)
