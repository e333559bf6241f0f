"""
Document search: the retriever contract used by the answer pipeline and a
local BM25 backend over a JSONL corpus.
"""

from .bm25 import BM25Index
from .index import DocumentRecord, load_documents
from .retriever import DocumentRetriever, LocalSearchRetriever, build_search_filter

__all__ = [
    "BM25Index",
    "DocumentRecord",
    "load_documents",
    "DocumentRetriever",
    "LocalSearchRetriever",
    "build_search_filter",
]
