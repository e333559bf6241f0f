"""
BM25 lexical index over handbook documents.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Tuple

from rank_bm25 import BM25Okapi

from .index import DocumentRecord

TOKEN_RE = re.compile(r"[A-Za-z0-9_$%]+")

STOPWORDS = {
    "the", "a", "an", "and", "or", "of", "in", "on", "for", "to",
    "is", "are", "be", "as", "that", "this", "with", "by", "at",
    "from", "it", "its", "what", "how", "my", "do", "does",
}


def iter_tokens(text: str) -> Iterable[str]:
    """Lowercased tokens with stopwords removed; single characters dropped."""
    for match in TOKEN_RE.finditer(text.lower()):
        tok = match.group(0)
        if len(tok) < 2 or tok in STOPWORDS:
            continue
        yield tok


@dataclass
class BM25Index:
    """BM25 index; titles are indexed together with content."""

    bm25: BM25Okapi
    documents: List[DocumentRecord]
    token_sets: List[FrozenSet[str]]

    @classmethod
    def from_documents(cls, documents: List[DocumentRecord]) -> "BM25Index":
        if not documents:
            raise ValueError("cannot build a BM25 index without documents")
        tokenized = [list(iter_tokens(f"{d.title} {d.content}")) for d in documents]
        return cls(
            bm25=BM25Okapi(tokenized),
            documents=documents,
            token_sets=[frozenset(tokens) for tokens in tokenized],
        )

    def search(self, query: str) -> List[Tuple[DocumentRecord, float]]:
        """
        All documents sharing at least one query token, best first.

        Matching is decided on token overlap, not on score: BM25Okapi gives a
        term found in exactly half the corpus an IDF of zero.
        """
        query_tokens = set(iter_tokens(query))
        if not query_tokens:
            return []
        scores = self.bm25.get_scores(list(query_tokens))
        matching = [
            (idx, score)
            for idx, score in enumerate(scores)
            if not query_tokens.isdisjoint(self.token_sets[idx])
        ]
        matching.sort(key=lambda x: x[1], reverse=True)
        return [(self.documents[idx], float(score)) for idx, score in matching]
