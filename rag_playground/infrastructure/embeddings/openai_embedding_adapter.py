from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from importlib import import_module
from typing import Any

from rag_playground.application.ports.embedding_port import EmbeddingPort
from rag_playground.domain.errors import EmbeddingServiceError

logger = logging.getLogger(__name__)


def _as_vector(raw: Any, position: int) -> list[float]:
    try:
        vector = [float(x) for x in raw]
    except (TypeError, ValueError) as ex:
        raise EmbeddingServiceError(f"malformed embedding at position {position}: {ex}") from ex
    if not vector:
        raise EmbeddingServiceError(f"empty embedding at position {position}")
    if not all(math.isfinite(x) for x in vector):
        raise EmbeddingServiceError(f"non-finite value in embedding at position {position}")
    return vector


@dataclass
class OpenAIEmbeddingAdapter(EmbeddingPort):
    """OpenAI (or OpenAI-compatible) embeddings endpoint, batched."""

    model: str = "text-embedding-ada-002"
    api_key: str | None = None
    base_url: str | None = None
    batch_size: int = 256
    timeout_s: float = 60.0

    def __post_init__(self) -> None:
        # Defer import of OpenAI to first use to avoid hard dependency in tests
        self._client: Any | None = None

    def _get_client(self) -> Any:
        if self._client is None:
            module = import_module("openai")
            self._client = module.OpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout_s,
                max_retries=0,  # retries belong to the resilience wrapper
            )
        return self._client

    def _embed_batch(self, texts: list[str]) -> list[list[float]]:
        try:
            resp: Any = self._get_client().embeddings.create(model=self.model, input=texts)
            data = sorted(resp.data, key=lambda item: item.index)
            raw = [item.embedding for item in data]
        except Exception as ex:  # noqa: BLE001
            # Translate external errors to domain-specific errors
            raise EmbeddingServiceError(f"embedding request failed: {ex}") from ex
        if len(raw) != len(texts):
            raise EmbeddingServiceError(
                f"malformed embedding response: {len(raw)} vectors for {len(texts)} texts"
            )
        return [_as_vector(v, i) for i, v in enumerate(raw)]

    def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        items = list(texts)
        vectors: list[list[float]] = []
        for start in range(0, len(items), self.batch_size):
            batch = items[start : start + self.batch_size]
            vectors.extend(self._embed_batch(batch))
            logger.debug("embedded %d/%d texts", len(vectors), len(items))
        return vectors

    def embed_query(self, text: str) -> list[float]:
        return self._embed_batch([text])[0]
