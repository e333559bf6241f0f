"""
Per-request data model: conversation turns, overrides, retrieved records and
the response handed back to callers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union


class RetrievalMode:
    """Known values for RequestOverrides.retrieval_mode."""

    TEXT = "Text"
    VECTOR = "Vector"
    HYBRID = "Hybrid"


@dataclass(frozen=True)
class ChatTurn:
    """One user utterance and, for answered turns, the assistant reply."""

    user: Optional[str]
    bot: Optional[str] = None


@dataclass(frozen=True)
class RequestOverrides:
    """Caller options for a single request."""

    top: int = 3
    semantic_captions: bool = False
    semantic_ranker: bool = False
    exclude_category: Optional[str] = None
    retrieval_mode: Optional[str] = None
    suggest_follow_up_questions: bool = False

    @property
    def vector_only(self) -> bool:
        return self.retrieval_mode == RetrievalMode.VECTOR


@dataclass(frozen=True)
class SupportingContentRecord:
    """A retrieved document fragment used to ground the answer."""

    title: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "content": self.content}


@dataclass(frozen=True)
class FormulatedQuery:
    """Text query produced by the query formulator."""

    text: str


@dataclass(frozen=True)
class VectorOnlyQuery:
    """No text query: the retriever searches by embedding similarity only."""


RetrievalQuery = Union[FormulatedQuery, VectorOnlyQuery]


@dataclass
class BotResponse:
    """Final pipeline output."""

    data_points: List[SupportingContentRecord]
    answer: str
    thoughts: str
    citation_base_url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serialisable boundary object with camelCase keys."""
        return {
            "dataPoints": [r.to_dict() for r in self.data_points],
            "answer": self.answer,
            "thoughts": self.thoughts,
            "citationBaseUrl": self.citation_base_url,
        }


def freeze_history(history) -> Tuple[ChatTurn, ...]:
    """Copy a history sequence into an immutable tuple."""
    return tuple(history or ())
