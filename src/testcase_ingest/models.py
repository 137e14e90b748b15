"""Records flowing through the ingestion pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Literal

from pydantic import BaseModel, ConfigDict, Field

from .errors import IngestError

REQUIRED_FIELDS = ("id", "module", "title", "description", "steps", "expectedResults")


class TestCase(BaseModel):
    """One input record. Unknown keys are preserved as extras."""

    __test__ = False  # not a pytest class

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    id: str
    module: str
    title: str
    description: str
    steps: str | list[Any]
    expected_results: str = Field(alias="expectedResults")

    def to_record(self) -> dict[str, Any]:
        """Return the record with its original JSON keys."""

        return self.model_dump(by_alias=True)


@dataclass(slots=True)
class EmbeddingResult:
    vector: list[float]
    model: str
    cost: float = 0.0
    tokens: int = 0
    status: Any = None
    message: str | None = None

    @property
    def dimensions(self) -> int:
        return len(self.vector)


class EmbeddingMetadata(BaseModel):
    model: str
    cost: float = Field(ge=0)
    tokens: int = Field(ge=0)
    api_source: str


class EnrichedDocument(BaseModel):
    testcase: TestCase
    embedding: list[float]
    created_at: datetime
    metadata: EmbeddingMetadata

    @classmethod
    def build(
        cls,
        testcase: TestCase,
        result: EmbeddingResult,
        *,
        api_source: str,
        created_at: datetime | None = None,
    ) -> "EnrichedDocument":
        return cls(
            testcase=testcase,
            embedding=list(result.vector),
            created_at=created_at or datetime.now(timezone.utc),
            metadata=EmbeddingMetadata(
                model=result.model,
                cost=result.cost,
                tokens=result.tokens,
                api_source=api_source,
            ),
        )

    def to_document(self) -> dict[str, Any]:
        """Mapping persisted to the store: test-case fields plus embedding data."""

        return {
            **self.testcase.to_record(),
            "embedding": list(self.embedding),
            "createdAt": self.created_at,
            "embeddingMetadata": {
                "model": self.metadata.model,
                "cost": self.metadata.cost,
                "tokens": self.metadata.tokens,
                "apiSource": self.metadata.api_source,
            },
        }


Stage = Literal["embedding", "write"]


@dataclass(slots=True)
class RecordOutcome:
    """Result of processing one test case: stored, or failed at a stage."""

    testcase_id: str
    stored_id: str | None = None
    result: EmbeddingResult | None = None
    stage: Stage | None = None
    error: IngestError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.stored_id is not None

    @classmethod
    def stored(cls, testcase_id: str, stored_id: str, result: EmbeddingResult) -> "RecordOutcome":
        return cls(testcase_id=testcase_id, stored_id=stored_id, result=result)

    @classmethod
    def failed(cls, testcase_id: str, stage: Stage, error: IngestError) -> "RecordOutcome":
        return cls(testcase_id=testcase_id, stage=stage, error=error)


@dataclass(slots=True)
class RunTotals:
    total_cost: float = 0.0
    total_tokens: int = 0
    records_attempted: int = 0
    records_stored: int = 0
    records_failed: int = 0
    failed_ids: list[str] = field(default_factory=list)

    @property
    def average_cost(self) -> float:
        if self.records_attempted == 0:
            return 0.0
        return self.total_cost / self.records_attempted

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[RecordOutcome]) -> "RunTotals":
        totals = cls()
        for outcome in outcomes:
            totals.records_attempted += 1
            if outcome.ok and outcome.result is not None:
                totals.records_stored += 1
                totals.total_cost += outcome.result.cost
                totals.total_tokens += outcome.result.tokens
            else:
                totals.records_failed += 1
                totals.failed_ids.append(outcome.testcase_id)
        return totals
