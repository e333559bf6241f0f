"""
Answer orchestrator: query formulation, retrieval, grounded synthesis and
optional follow-up questions, run in sequence for each request.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from src.core.models import (
    BotResponse,
    ChatTurn,
    FormulatedQuery,
    RequestOverrides,
    RetrievalQuery,
    SupportingContentRecord,
    freeze_history,
)
from src.generation import (
    AnswerSynthesizer,
    FollowUpGenerator,
    append_follow_up_questions,
    build_document_contents,
)
from src.llm.client import CompletionProvider
from src.search.retriever import DocumentRetriever

from .query_formulator import QueryFormulator, latest_question

logger = logging.getLogger(__name__)


class AnswerOrchestrator:
    """
    Answer a conversation from retrieved documents.

    Holds only collaborator handles and the citation base URL, so one instance
    can serve concurrent requests. Retrieval errors degrade to an empty source
    set; every other failure (including cancellation) propagates and no
    partial response is returned.
    """

    def __init__(
        self,
        client: CompletionProvider,
        retriever: DocumentRetriever,
        citation_base_url: str = "",
    ):
        self.client = client
        self.retriever = retriever
        self.citation_base_url = citation_base_url
        self.query_formulator = QueryFormulator(client)
        self.synthesizer = AnswerSynthesizer(client)
        self.follow_up_generator = FollowUpGenerator(client)

    async def reply(
        self,
        history: Sequence[ChatTurn],
        overrides: Optional[RequestOverrides] = None,
        embedding: Optional[Sequence[float]] = None,
    ) -> BotResponse:
        """Run the pipeline for one request and return the response."""
        history = freeze_history(history)
        overrides = overrides or RequestOverrides()
        question = latest_question(history)

        query = await self.query_formulator.resolve(question, overrides)
        records = await self._retrieve(query, embedding, overrides)
        document_contents = build_document_contents(records)

        result = await self.synthesizer.synthesize(history, document_contents)
        answer = result.answer

        if overrides.suggest_follow_up_questions:
            questions = await self.follow_up_generator.generate(answer)
            answer = append_follow_up_questions(answer, questions)

        return BotResponse(
            data_points=records,
            answer=answer,
            thoughts=result.thoughts,
            citation_base_url=self.citation_base_url,
        )

    async def _retrieve(
        self,
        query: RetrievalQuery,
        embedding: Optional[Sequence[float]],
        overrides: RequestOverrides,
    ) -> List[SupportingContentRecord]:
        text = query.text if isinstance(query, FormulatedQuery) else None
        try:
            records = await self.retriever.query_documents(text, embedding, overrides)
        except Exception:
            logger.exception("Document retrieval failed; answering without sources")
            return []
        return list(records or [])
