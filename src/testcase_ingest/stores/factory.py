from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from ..core.config import IngestSettings
from ..core.logging import get_logger
from ..errors import ConfigurationError, StoreConnectionError
from .base import DocumentWriter
from .mongo_writer import MongoWriter
from .sqlite_writer import SQLiteWriter

logger = get_logger(__name__)

_SQLITE_PREFIX = "sqlite:///"


def create_writer(settings: IngestSettings) -> DocumentWriter:
    """Pick a writer from the connection string scheme."""

    uri = settings.mongodb_uri or ""
    if uri.startswith(("mongodb://", "mongodb+srv://")):
        return MongoWriter(
            uri=uri,
            db_name=settings.db_name or "",
            collection_name=settings.collection_name,
            timeout_ms=settings.store_timeout_ms,
            tls_allow_invalid=settings.mongo_tls_allow_invalid,
        )
    if uri.startswith(_SQLITE_PREFIX):
        return SQLiteWriter(db_path=uri[len(_SQLITE_PREFIX):], table_name=settings.collection_name)
    raise ConfigurationError(f"Unsupported store connection string: {uri!r}")


@contextmanager
def open_writer(settings: IngestSettings) -> Iterator[DocumentWriter]:
    """Hold one store connection for the run and always release it.

    A close failure is raised on a clean exit. When the run is already
    failing, the close failure is logged and the original error propagates.
    """

    writer = create_writer(settings)
    try:
        yield writer
    except BaseException:
        try:
            writer.close()
        except StoreConnectionError as exc:
            logger.error("store.close_failed", error=str(exc))
        raise
    writer.close()
