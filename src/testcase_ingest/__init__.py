"""Batch embedding of test cases into a document store."""

from .embeddings import EmbeddingClient, build_prompt
from .models import EmbeddingResult, EnrichedDocument, RecordOutcome, RunTotals, TestCase
from .pipeline import IngestionPipeline
from .source import JsonRecordSource
from .stores import MongoWriter, SQLiteWriter, open_writer

__all__ = [
    "EmbeddingClient",
    "EmbeddingResult",
    "EnrichedDocument",
    "IngestionPipeline",
    "JsonRecordSource",
    "MongoWriter",
    "RecordOutcome",
    "RunTotals",
    "SQLiteWriter",
    "TestCase",
    "build_prompt",
    "open_writer",
]
