from __future__ import annotations

import json
import sqlite3
from pathlib import Path

import pytest
from typer.testing import CliRunner

from testcase_ingest import cli
from testcase_ingest.errors import EmbeddingHttpError

from stubs import StubEmbedder, make_record

runner = CliRunner()


class StubClientFactory:
    """Stands in for EmbeddingClient inside the CLI."""

    def __init__(self, embedder: StubEmbedder) -> None:
        self.embedder = embedder
        self.kwargs: dict | None = None

    def __call__(self, **kwargs) -> "StubClientFactory":
        self.kwargs = kwargs
        return self

    @property
    def authenticated(self) -> bool:
        return bool(self.kwargs and self.kwargs.get("auth_token"))

    def embed(self, text: str):
        return self.embedder.embed(text)

    def __enter__(self) -> "StubClientFactory":
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    for name in ("MONGODB_URI", "DB_NAME", "COLLECTION_NAME", "USER_EMAIL", "AUTH_TOKEN", "INPUT_PATH"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("REQUEST_DELAY_SECONDS", "0")
    return tmp_path


def test_run_stores_documents_in_sqlite(workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    input_path = workdir / "cases.json"
    input_path.write_text(json.dumps([make_record("TC-1"), make_record("TC-2")]), encoding="utf-8")
    db_path = workdir / "store.db"
    monkeypatch.setenv("MONGODB_URI", f"sqlite:///{db_path}")
    monkeypatch.setenv("DB_NAME", "local")
    monkeypatch.setenv("USER_EMAIL", "qa@example.com")
    factory = StubClientFactory(StubEmbedder(failures={"TC-2": EmbeddingHttpError("http://x", 500, "boom")}))
    monkeypatch.setattr(cli, "EmbeddingClient", factory)

    result = runner.invoke(cli.app, ["run", str(input_path), "--collection", "cases"])

    assert result.exit_code == 0, result.output
    assert "Stored 1 of 2 test cases" in result.output
    assert factory.kwargs["user"] == "qa@example.com"
    with sqlite3.connect(db_path) as conn:
        rows = conn.execute("SELECT testcase_id FROM cases").fetchall()
    assert rows == [("TC-1",)]


def test_run_without_store_settings_exits_non_zero(workdir: Path) -> None:
    result = runner.invoke(cli.app, ["run", str(workdir / "cases.json")])

    assert result.exit_code == 1


def test_run_with_missing_input_exits_non_zero(workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MONGODB_URI", f"sqlite:///{workdir / 'store.db'}")
    monkeypatch.setenv("DB_NAME", "local")
    monkeypatch.setenv("USER_EMAIL", "qa@example.com")
    monkeypatch.setattr(cli, "EmbeddingClient", StubClientFactory(StubEmbedder()))

    result = runner.invoke(cli.app, ["run", str(workdir / "missing.json")])

    assert result.exit_code == 1


def test_run_with_invalid_collection_name_exits_non_zero(workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    input_path = workdir / "cases.json"
    input_path.write_text(json.dumps([make_record("TC-1")]), encoding="utf-8")
    monkeypatch.setenv("MONGODB_URI", f"sqlite:///{workdir / 'store.db'}")
    monkeypatch.setenv("DB_NAME", "local")
    monkeypatch.setenv("USER_EMAIL", "qa@example.com")
    monkeypatch.setenv("COLLECTION_NAME", "test-cases")
    monkeypatch.setattr(cli, "EmbeddingClient", StubClientFactory(StubEmbedder()))

    result = runner.invoke(cli.app, ["run", str(input_path)])

    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
