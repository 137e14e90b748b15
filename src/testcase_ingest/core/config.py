"""Job configuration powered by Pydantic Settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..errors import ConfigurationError


class IngestSettings(BaseSettings):
    """Strongly typed settings, read from the environment and `.env`."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    mongodb_uri: str | None = None
    db_name: str | None = None
    collection_name: str = Field(default="testcases", min_length=1)

    testleaf_api_base: str = Field(default="https://api.testleaf.ai")
    user_email: str | None = None
    auth_token: str | None = None
    embedding_model: str = Field(default="text-embedding-3-small")
    api_source: str = Field(default="testleaf")

    input_path: Path = Field(default=Path("./data/testcases.json"))
    request_delay_seconds: float = Field(default=0.1, ge=0)

    http_connect_timeout: float = Field(default=30.0, gt=0)
    http_read_timeout: float = Field(default=30.0, gt=0)
    store_timeout_ms: int = Field(default=30000, gt=0)
    mongo_tls_allow_invalid: bool = False

    log_level: str = Field(default="INFO")
    log_format: Literal["json", "console"] = "json"

    @property
    def http_timeout(self) -> tuple[float, float]:
        return (self.http_connect_timeout, self.http_read_timeout)

    def validate_required(self) -> None:
        """Raise ConfigurationError listing every missing required option."""

        missing = [
            env_name
            for env_name, value in (
                ("MONGODB_URI", self.mongodb_uri),
                ("DB_NAME", self.db_name),
                ("USER_EMAIL", self.user_email),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")
