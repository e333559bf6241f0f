"""
Orchestrator: query formulation, retrieval, answer synthesis and follow-ups.
"""

from .agent import AnswerOrchestrator
from .query_formulator import QueryFormulator, latest_question

__all__ = [
    "AnswerOrchestrator",
    "QueryFormulator",
    "latest_question",
]
