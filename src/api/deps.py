"""
Build the answer orchestrator for the API (used in lifespan).
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from src.core.config import AppConfig
from src.llm import create_client
from src.orchestrator import AnswerOrchestrator
from src.search import BM25Index, LocalSearchRetriever, load_documents

logger = logging.getLogger(__name__)


def build_orchestrator(
    config: Optional[AppConfig] = None,
) -> Tuple[Optional[AnswerOrchestrator], int]:
    """
    Load documents, build the local retriever, LLM client and orchestrator.
    Returns (orchestrator, documents_loaded); orchestrator is None when the
    corpus or the LLM credentials are unavailable.
    """
    config = config or AppConfig.from_env()
    try:
        documents = load_documents(config.documents_path)
    except FileNotFoundError as e:
        logger.warning("Orchestrator disabled: %s", e)
        return None, 0
    if not documents:
        logger.warning("Orchestrator disabled: no documents in %s", config.documents_path)
        return None, 0

    try:
        client = create_client(config)
    except ValueError as e:
        logger.warning("Orchestrator disabled: %s", e)
        return None, len(documents)

    retriever = LocalSearchRetriever(index=BM25Index.from_documents(documents))
    orchestrator = AnswerOrchestrator(
        client=client,
        retriever=retriever,
        citation_base_url=config.citation_base_url(),
    )
    logger.info("Orchestrator ready with %d documents", len(documents))
    return orchestrator, len(documents)
