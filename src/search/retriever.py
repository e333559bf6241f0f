"""
Retriever interface consumed by the answer pipeline, and a local BM25
implementation of it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from src.core.models import RequestOverrides, SupportingContentRecord

from .bm25 import BM25Index

logger = logging.getLogger(__name__)


class DocumentRetriever(Protocol):
    """Protocol for document-search backends."""

    async def query_documents(
        self,
        query: Optional[str],
        embedding: Optional[Sequence[float]],
        overrides: RequestOverrides,
    ) -> List[SupportingContentRecord]:
        """
        Search for supporting content.

        Args:
            query: Text query, or None for embedding-only search
            embedding: Query embedding, or None
            overrides: Request options (top, category exclusion, ranking flags)

        Returns:
            Ordered list of SupportingContentRecord, best match first
        """
        ...


def build_search_filter(overrides: RequestOverrides) -> Optional[str]:
    """OData filter equivalent of the overrides, for hosted search services."""
    if overrides.exclude_category is None:
        return None
    escaped = overrides.exclude_category.replace("'", "''")
    return f"category ne '{escaped}'"


@dataclass
class LocalSearchRetriever:
    """In-process lexical search over a loaded document corpus."""

    index: BM25Index

    @property
    def document_count(self) -> int:
        return len(self.index.documents)

    async def query_documents(
        self,
        query: Optional[str],
        embedding: Optional[Sequence[float]],
        overrides: RequestOverrides,
    ) -> List[SupportingContentRecord]:
        if query is None:
            logger.warning("Vector-only retrieval is not supported by the local index; returning no documents")
            return []
        if overrides.semantic_ranker or overrides.semantic_captions:
            logger.debug("Semantic ranker/captions requested; ignored by the local index")

        records: List[SupportingContentRecord] = []
        for doc, _score in self.index.search(query):
            if len(records) >= overrides.top:
                break
            if overrides.exclude_category is not None and doc.category == overrides.exclude_category:
                continue
            records.append(SupportingContentRecord(title=doc.title, content=doc.content))
        logger.info(
            "Local search returned %d documents (filter=%s)",
            len(records),
            build_search_filter(overrides),
        )
        return records
