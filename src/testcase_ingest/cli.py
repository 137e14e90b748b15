"""Typer-based CLI for the test-case embedding job."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from .core.config import IngestSettings
from .core.logging import get_logger, setup_logging
from .embeddings.client import EmbeddingClient
from .errors import ConfigurationError, SourceUnavailable, StoreConnectionError
from .pipeline import IngestionPipeline
from .source import JsonRecordSource
from .stores.factory import open_writer

app = typer.Typer(help="Embed test cases and store them in a document collection.")

logger = get_logger(__name__)


def _apply_overrides(settings: IngestSettings, **overrides: object) -> IngestSettings:
    update = {key: value for key, value in overrides.items() if value is not None}
    return settings.model_copy(update=update) if update else settings


def _echo_configuration(settings: IngestSettings, client: EmbeddingClient) -> None:
    typer.secho("Configuration:", fg=typer.colors.CYAN)
    typer.echo(f"  API base:   {settings.testleaf_api_base}")
    typer.echo(f"  User:       {settings.user_email}")
    typer.echo(f"  Auth token: {'provided' if client.authenticated else 'missing'}")
    typer.echo(f"  Model:      {settings.embedding_model}")
    typer.echo(f"  Database:   {settings.db_name}")
    typer.echo(f"  Collection: {settings.collection_name}")
    typer.echo(f"  Input:      {settings.input_path}")


@app.callback()
def main() -> None:
    """Test-case embedding utilities."""


@app.command()
def run(
    input_path: Optional[Path] = typer.Argument(None, help="JSON array of test cases (falls back to INPUT_PATH)."),
    collection_name: Optional[str] = typer.Option(None, "--collection", "-c", help="Override COLLECTION_NAME."),
    delay: Optional[float] = typer.Option(None, "--delay", min=0, help="Seconds to pause between records."),
    embedding_model: Optional[str] = typer.Option(None, "--model", help="Embedding model name."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (DEBUG, INFO, ...)."),
    log_format: Optional[str] = typer.Option(None, "--log-format", help="Log rendering: json or console."),
) -> None:
    """Embed every test case in the input file and insert it into the store."""

    if log_format is not None and log_format not in ("json", "console"):
        raise typer.BadParameter("--log-format must be json or console")

    settings = _apply_overrides(
        IngestSettings(),
        input_path=input_path,
        collection_name=collection_name,
        request_delay_seconds=delay,
        embedding_model=embedding_model,
        log_level=log_level,
        log_format=log_format,
    )
    setup_logging(settings.log_level, log_format=settings.log_format)

    try:
        settings.validate_required()
        with EmbeddingClient(
            base_url=settings.testleaf_api_base,
            user=settings.user_email or "",
            model=settings.embedding_model,
            auth_token=settings.auth_token,
            timeout=settings.http_timeout,
        ) as client:
            _echo_configuration(settings, client)
            with open_writer(settings) as writer:
                pipeline = IngestionPipeline(
                    source=JsonRecordSource(settings.input_path),
                    client=client,
                    writer=writer,
                    api_source=settings.api_source,
                    delay_seconds=settings.request_delay_seconds,
                )
                totals = pipeline.run()
    except (ConfigurationError, SourceUnavailable, StoreConnectionError) as exc:
        logger.error("run.aborted", error_type=type(exc).__name__, error=str(exc))
        typer.secho(f"Run aborted: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    typer.secho("Processing complete", fg=typer.colors.GREEN)
    typer.echo(f"Total cost: ${totals.total_cost:.6f}")
    typer.echo(f"Total tokens: {totals.total_tokens}")
    typer.echo(f"Average cost per test case: ${totals.average_cost:.6f}")
    typer.echo(f"Stored {totals.records_stored} of {totals.records_attempted} test cases")


if __name__ == "__main__":  # pragma: no cover
    app()
