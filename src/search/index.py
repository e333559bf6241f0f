"""
Document corpus loading for the local search backend.
"""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import List


@dataclasses.dataclass
class DocumentRecord:
    """A searchable page or section of a source document (e.g. a handbook PDF)."""

    id: str
    title: str
    content: str
    category: str = ""


def load_documents(path: Path) -> List[DocumentRecord]:
    """
    Load documents from a JSONL file.

    Each line is an object with "title" and "content"; "id" defaults to the
    line number and "category" to an empty string.
    """
    if not path.exists():
        raise FileNotFoundError(f"documents file not found at {path}")

    documents: List[DocumentRecord] = []
    with path.open("r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            obj = json.loads(line)
            documents.append(
                DocumentRecord(
                    id=str(obj.get("id", line_no)),
                    title=obj["title"],
                    content=obj["content"],
                    category=obj.get("category") or "",
                )
            )
    return documents
