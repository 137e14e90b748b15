from __future__ import annotations

import io
import json
from pathlib import Path

import pytest
from rich.console import Console

from stubs import make_record


@pytest.fixture
def quiet_console() -> Console:
    return Console(file=io.StringIO(), width=120)


@pytest.fixture
def testcases_file(tmp_path: Path) -> Path:
    path = tmp_path / "testcases.json"
    path.write_text(json.dumps([make_record("TC-1"), make_record("TC-2")]), encoding="utf-8")
    return path
