from __future__ import annotations

from typing import Protocol

from ..models import EnrichedDocument


class DocumentWriter(Protocol):
    """Insert-only document persistence held open for a single run."""

    def write(self, document: EnrichedDocument) -> str:
        """Insert the document and return its generated identifier."""

    def close(self) -> None:
        ...
