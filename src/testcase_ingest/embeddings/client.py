"""HTTP client for the text embedding endpoint."""

from __future__ import annotations

import math
from typing import Any
from urllib.parse import quote

import requests

from ..core.logging import get_logger
from ..errors import EmbeddingHttpError, EmbeddingRejected, EmbeddingTransportError
from ..models import EmbeddingResult

logger = get_logger(__name__)

_BODY_PREVIEW_CHARS = 500


class EmbeddingClient:
    """Requests one embedding per call from `POST {base}/embedding/text/{user}`."""

    def __init__(
        self,
        *,
        base_url: str,
        user: str,
        model: str = "text-embedding-3-small",
        auth_token: str | None = None,
        timeout: tuple[float, float] = (30.0, 30.0),
        session: requests.Session | None = None,
    ) -> None:
        if not user:
            raise ValueError("user must be provided to build the embedding endpoint")

        self.endpoint = f"{base_url.rstrip('/')}/embedding/text/{quote(user, safe='@')}"
        self.model = model
        self.timeout = timeout
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._headers = {"Content-Type": "application/json"}
        if auth_token:
            self._headers["Authorization"] = f"Bearer {auth_token}"

    @property
    def authenticated(self) -> bool:
        return "Authorization" in self._headers

    def embed(self, text: str) -> EmbeddingResult:
        if not text or not text.strip():
            raise ValueError("text to embed must not be empty")

        logger.debug("embedding.request", endpoint=self.endpoint, model=self.model, chars=len(text))

        try:
            response = self._session.post(
                self.endpoint,
                json={"input": text, "model": self.model},
                headers=self._headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise EmbeddingTransportError(self.endpoint, str(exc)) from exc

        if not 200 <= response.status_code < 300:
            raise EmbeddingHttpError(self.endpoint, response.status_code, response.text[:_BODY_PREVIEW_CHARS])

        try:
            payload = response.json()
        except ValueError as exc:
            raise EmbeddingRejected(
                f"non-JSON response body: {response.text[:200]}",
                status=response.status_code,
            ) from exc

        return self._parse_payload(payload)

    def _parse_payload(self, payload: Any) -> EmbeddingResult:
        if not isinstance(payload, dict):
            raise EmbeddingRejected("response body is not an object", payload=payload)

        status = payload.get("status")
        message = payload.get("message")
        if status != 200:
            raise EmbeddingRejected(str(message or "no message"), status=status, payload=payload)

        data = payload.get("data")
        vector = None
        if isinstance(data, list) and data and isinstance(data[0], dict):
            vector = data[0].get("embedding")
        if not isinstance(vector, list) or not vector:
            raise EmbeddingRejected("response contains no embedding", status=status, payload=payload)

        model = payload.get("model") or self.model
        if not isinstance(model, str):
            raise EmbeddingRejected(f"invalid model in response: {model!r}", status=status, payload=payload)

        usage = payload.get("usage") or {}
        try:
            values = [float(value) for value in vector]
            cost = float(payload.get("cost") or 0)
            tokens = int(usage.get("total_tokens") or 0) if isinstance(usage, dict) else 0
        except (TypeError, ValueError, OverflowError) as exc:
            raise EmbeddingRejected(f"malformed response field: {exc}", status=status, payload=payload) from exc

        if not all(math.isfinite(value) for value in values):
            raise EmbeddingRejected("embedding contains non-finite values", status=status, payload=payload)
        if not math.isfinite(cost) or cost < 0 or tokens < 0:
            raise EmbeddingRejected(
                f"invalid accounting in response: cost={cost!r} tokens={tokens!r}",
                status=status,
                payload=payload,
            )

        return EmbeddingResult(
            vector=values,
            model=model,
            cost=cost,
            tokens=tokens,
            status=status,
            message=message,
        )

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "EmbeddingClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
