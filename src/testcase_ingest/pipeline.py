"""Sequential embed-and-store workflow over a batch of test cases."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Callable, Protocol, Sequence

from rich.console import Console
from rich.table import Table

from .core.logging import get_logger, record_context
from .embeddings.prompt import build_prompt
from .errors import (
    EmbeddingError,
    EmbeddingHttpError,
    EmbeddingRejected,
    EmbeddingTransportError,
    WriteError,
)
from .models import EmbeddingResult, EnrichedDocument, RecordOutcome, RunTotals, TestCase
from .stores.base import DocumentWriter

logger = get_logger(__name__)

_DESCRIPTION_PREVIEW_CHARS = 50


class RecordSource(Protocol):
    def load(self) -> Sequence[TestCase]:
        ...


class Embedder(Protocol):
    def embed(self, text: str) -> EmbeddingResult:
        ...


def _preview(text: str, limit: int = _DESCRIPTION_PREVIEW_CHARS) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."


def _log_embedding_failure(exc: EmbeddingError) -> None:
    if isinstance(exc, EmbeddingTransportError):
        logger.warning(
            "pipeline.record_failed",
            stage="embedding",
            error_type="transport",
            endpoint=exc.endpoint,
            reason=exc.reason,
        )
    elif isinstance(exc, EmbeddingHttpError):
        logger.warning(
            "pipeline.record_failed",
            stage="embedding",
            error_type="http",
            endpoint=exc.endpoint,
            status_code=exc.status_code,
            body=exc.body,
        )
    elif isinstance(exc, EmbeddingRejected):
        logger.warning(
            "pipeline.record_failed",
            stage="embedding",
            error_type="rejected",
            status=exc.status,
            message=exc.message,
        )
    else:
        logger.warning("pipeline.record_failed", stage="embedding", error=str(exc))


@dataclass(slots=True)
class IngestionPipeline:
    source: RecordSource
    client: Embedder
    writer: DocumentWriter
    api_source: str = "testleaf"
    delay_seconds: float = 0.1
    sleep: Callable[[float], None] = time.sleep
    console: Console = field(default_factory=Console)
    last_outcomes: list[RecordOutcome] = field(default_factory=list)

    def run(self) -> RunTotals:
        testcases = self.source.load()
        self.console.rule(f"[bold cyan]Embedding {len(testcases)} test cases[/]")

        outcomes: list[RecordOutcome] = []
        for index, testcase in enumerate(testcases):
            if index > 0 and self.delay_seconds > 0:
                self.sleep(self.delay_seconds)
            with record_context(testcase.id, index + 1, len(testcases)):
                outcomes.append(self._process(testcase))

        self.last_outcomes = outcomes
        totals = RunTotals.from_outcomes(outcomes)
        self._print_summary(totals)
        return totals

    def _process(self, testcase: TestCase) -> RecordOutcome:
        self.console.print(f"[bold]{testcase.id}[/] - {_preview(testcase.description)}")

        try:
            result = self.client.embed(build_prompt(testcase))
        except EmbeddingError as exc:
            _log_embedding_failure(exc)
            self.console.print(f"  [red]Embedding failed:[/] {exc}. Skipping.")
            return RecordOutcome.failed(testcase.id, "embedding", exc)

        self.console.print(
            f"  status={result.status} model={result.model} cost=${result.cost:.6f} "
            f"tokens={result.tokens} dims={result.dimensions}"
        )

        document = EnrichedDocument.build(testcase, result, api_source=self.api_source)
        try:
            stored_id = self.writer.write(document)
        except WriteError as exc:
            logger.warning(
                "pipeline.record_failed",
                stage="write",
                error=str(exc),
                cause=repr(exc.__cause__),
            )
            self.console.print(f"  [red]Write failed:[/] {exc}. Skipping.")
            return RecordOutcome.failed(testcase.id, "write", exc)

        size = len(json.dumps(document.to_document(), default=str))
        self.console.print(f"  [green]Stored[/] id={stored_id} size={size} bytes")
        logger.info("pipeline.record_stored", stored_id=stored_id, tokens=result.tokens)
        return RecordOutcome.stored(testcase.id, stored_id, result)

    def _print_summary(self, totals: RunTotals) -> None:
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Attempted")
        table.add_column("Stored")
        table.add_column("Failed")
        table.add_column("Total cost")
        table.add_column("Total tokens")
        table.add_column("Avg cost / test case")
        table.add_row(
            str(totals.records_attempted),
            str(totals.records_stored),
            str(totals.records_failed),
            f"${totals.total_cost:.6f}",
            str(totals.total_tokens),
            f"${totals.average_cost:.6f}",
        )
        self.console.print(table)
        if totals.failed_ids:
            self.console.print(f"[yellow]Skipped: {', '.join(totals.failed_ids)}[/]")
