from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from ..core.logging import get_logger
from ..errors import StoreConnectionError, WriteError
from ..models import EnrichedDocument

logger = get_logger(__name__)


@dataclass(slots=True)
class MongoWriter:
    uri: str
    db_name: str
    collection_name: str
    timeout_ms: int = 30000
    tls_allow_invalid: bool = False
    client: Any = None
    _collection: Any = field(init=False, default=None)

    def __post_init__(self) -> None:
        client_kwargs: dict[str, Any] = {
            "serverSelectionTimeoutMS": self.timeout_ms,
            "connectTimeoutMS": self.timeout_ms,
            "socketTimeoutMS": self.timeout_ms,
            "tz_aware": True,
        }
        if self.tls_allow_invalid:
            client_kwargs["tlsAllowInvalidCertificates"] = True
            client_kwargs["tlsAllowInvalidHostnames"] = True

        try:
            if self.client is None:
                self.client = MongoClient(self.uri, **client_kwargs)
            # MongoClient connects lazily; ping so a bad URI fails before the loop.
            self.client.admin.command("ping")
        except PyMongoError as exc:
            raise StoreConnectionError(f"Cannot connect to MongoDB: {exc}") from exc

        self._collection = self.client[self.db_name][self.collection_name]
        logger.info("store.opened", backend="mongodb", database=self.db_name, collection=self.collection_name)

    def write(self, document: EnrichedDocument) -> str:
        try:
            result = self._collection.insert_one(document.to_document())
        except PyMongoError as exc:
            raise WriteError(f"Insert failed for {document.testcase.id}: {exc}") from exc
        return str(result.inserted_id)

    def close(self) -> None:
        try:
            self.client.close()
        except PyMongoError as exc:
            raise StoreConnectionError(f"Failed to close MongoDB client: {exc}") from exc
        logger.info("store.closed", backend="mongodb")
