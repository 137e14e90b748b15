"""Exception hierarchy for the ingestion job.

Fatal errors (configuration, source, store connection) abort the run.
Per-record errors (embedding, write) are caught by the pipeline, logged and
the record is skipped.
"""

from __future__ import annotations

from typing import Any


class IngestError(Exception):
    """Base class for all ingestion failures."""


class ConfigurationError(IngestError):
    """Required settings are missing or inconsistent."""


class SourceUnavailable(IngestError):
    """The test-case input could not be read or parsed."""


class StoreConnectionError(IngestError):
    """The document store could not be reached or released."""


class WriteError(IngestError):
    """A single document insert failed."""


class EmbeddingError(IngestError):
    """Base class for per-record embedding failures."""


class EmbeddingTransportError(EmbeddingError):
    """No response was received from the embedding API."""

    def __init__(self, endpoint: str, reason: str) -> None:
        super().__init__(f"No response from {endpoint}: {reason}")
        self.endpoint = endpoint
        self.reason = reason


class EmbeddingHttpError(EmbeddingError):
    """The embedding API answered with a non-2xx HTTP status."""

    def __init__(self, endpoint: str, status_code: int, body: str) -> None:
        super().__init__(f"HTTP {status_code} from {endpoint}")
        self.endpoint = endpoint
        self.status_code = status_code
        self.body = body


class EmbeddingRejected(EmbeddingError):
    """The transport succeeded but the response body reports a failure."""

    def __init__(
        self,
        message: str,
        *,
        status: Any = None,
        payload: Any = None,
    ) -> None:
        super().__init__(f"Embedding API error: {message}")
        self.message = message
        self.status = status
        self.payload = payload
