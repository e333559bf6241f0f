"""
FastAPI application for the handbook answer bot.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.core.config import AppConfig

from .deps import build_orchestrator
from .routes import router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the orchestrator on startup; drop it on shutdown."""
    config = AppConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    orchestrator, documents_loaded = build_orchestrator(config)
    app.state.orchestrator = orchestrator
    app.state.documents_loaded = documents_loaded
    yield
    app.state.orchestrator = None


app = FastAPI(
    title="Handbook Answer Bot API",
    description="Grounded answers about the healthcare plan and employee handbook",
    version="0.1.0",
    lifespan=lifespan,
)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
app.include_router(router)
