"""Hand-written stand-ins for the pipeline collaborators."""

from __future__ import annotations

import json
from typing import Any

from testcase_ingest.errors import WriteError
from testcase_ingest.models import EmbeddingResult, EnrichedDocument, TestCase


def make_record(testcase_id: str, **overrides) -> dict:
    record = {
        "id": testcase_id,
        "module": "Login",
        "title": f"Scenario {testcase_id}",
        "description": f"Description for {testcase_id}",
        "steps": "1. Open the page\n2. Submit the form",
        "expectedResults": "The form is accepted.",
    }
    record.update(overrides)
    return record


class StubSource:
    def __init__(self, records: list[dict]) -> None:
        self._records = records

    def load(self) -> list[TestCase]:
        return [TestCase.model_validate(record) for record in self._records]


class StubEmbedder:
    """Returns a fixed result, or raises the error registered for a test-case id."""

    def __init__(
        self,
        result: EmbeddingResult | None = None,
        failures: dict[str, Exception] | None = None,
    ) -> None:
        self._result = result or EmbeddingResult(vector=[0.1, 0.2, 0.3], model="stub-model", cost=0.001, tokens=10, status=200)
        self._failures = failures or {}
        self.prompts: list[str] = []

    def embed(self, text: str) -> EmbeddingResult:
        self.prompts.append(text)
        for testcase_id, error in self._failures.items():
            if f"ID: {testcase_id}\n" in text:
                raise error
        return self._result


class StubWriter:
    def __init__(self, fail_ids: set[str] | None = None) -> None:
        self.documents: list[dict] = []
        self.closed = False
        self._fail_ids = fail_ids or set()

    def write(self, document: EnrichedDocument) -> str:
        if document.testcase.id in self._fail_ids:
            raise WriteError(f"Insert failed for {document.testcase.id}")
        self.documents.append(document.to_document())
        return f"doc-{len(self.documents)}"

    def close(self) -> None:
        self.closed = True


class StubResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str | None = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class StubSession:
    """Records requests and replays queued responses or exceptions."""

    def __init__(self, *responses: StubResponse | Exception) -> None:
        self._responses = list(responses)
        self.calls: list[dict] = []
        self.closed = False

    def post(self, url: str, **kwargs: Any) -> StubResponse:
        self.calls.append({"url": url, **kwargs})
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


def success_payload(**overrides: Any) -> dict:
    payload = {
        "status": 200,
        "message": "ok",
        "model": "text-embedding-3-small",
        "data": [{"embedding": [0.5] * 1536}],
        "cost": 0.0001,
        "usage": {"total_tokens": 42},
    }
    payload.update(overrides)
    return payload
