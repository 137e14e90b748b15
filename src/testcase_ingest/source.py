"""Loading test-case records from a JSON file."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from .errors import SourceUnavailable
from .models import REQUIRED_FIELDS, TestCase


@dataclass(slots=True)
class JsonRecordSource:
    path: Path

    def load(self) -> list[TestCase]:
        """Read the whole batch. Either every record loads or none do."""

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise SourceUnavailable(f"Cannot read {self.path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise SourceUnavailable(f"Invalid JSON in {self.path}: {exc}") from exc

        if not isinstance(raw, list):
            raise SourceUnavailable(f"Expected a JSON array in {self.path}, got {type(raw).__name__}")

        testcases: list[TestCase] = []
        for index, record in enumerate(raw):
            if not isinstance(record, dict):
                raise SourceUnavailable(f"Record {index} in {self.path} is not an object")

            missing = [name for name in REQUIRED_FIELDS if name not in record]
            if missing:
                label = record.get("id", f"#{index}")
                raise SourceUnavailable(f"Record {label} is missing fields: {', '.join(missing)}")

            try:
                testcases.append(TestCase.model_validate(record))
            except ValidationError as exc:
                raise SourceUnavailable(f"Record {record.get('id')} is malformed: {exc}") from exc

        return testcases
