"""Remote embedding API access."""

from .client import EmbeddingClient
from .prompt import build_prompt

__all__ = ["EmbeddingClient", "build_prompt"]
