"""
Source block builder for answer synthesis.

Flattens retrieved records into the text placed between the ## Source ## and
## End ## markers of the synthesis prompt.
"""

from __future__ import annotations

from typing import Sequence

from src.core.models import SupportingContentRecord

NO_SOURCE_AVAILABLE = "no source available."
RECORD_SEPARATOR = "\r"


def build_document_contents(records: Sequence[SupportingContentRecord]) -> str:
    """
    Join records as "title:content", separated by carriage returns.

    Returns the NO_SOURCE_AVAILABLE marker when there are no records, so the
    model is told explicitly that nothing was found.
    """
    if not records:
        return NO_SOURCE_AVAILABLE
    return RECORD_SEPARATOR.join(f"{r.title}:{r.content}" for r in records)
