from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from importlib import import_module
from typing import Any

from rag_playground.application.ports.embedding_port import EmbeddingPort
from rag_playground.domain.errors import EmbeddingServiceError


@dataclass
class SentenceTransformersEmbeddingAdapter(EmbeddingPort):
    """Local sentence-transformers model; no network after the first download."""

    model_name: str = "sentence-transformers/all-MiniLM-L6-v2"
    device: str = "cpu"  # "cuda" / "mps" when available
    batch_size: int = 64
    local_files_only: bool = False  # support offline deployments

    def __post_init__(self) -> None:
        self._model: Any | None = None

    def _ensure_model(self) -> Any:
        if self._model is not None:
            return self._model
        try:
            st_module = import_module("sentence_transformers")
            self._model = st_module.SentenceTransformer(
                self.model_name,
                device=self.device,
                local_files_only=self.local_files_only,
            )
        except Exception as ex:  # noqa: BLE001
            raise EmbeddingServiceError(
                f"Failed to load embedding model '{self.model_name}': {ex}"
            ) from ex
        return self._model

    def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        model = self._ensure_model()
        try:
            raw_vectors = model.encode(
                list(texts),
                batch_size=self.batch_size,
                normalize_embeddings=True,
                convert_to_numpy=True,
                show_progress_bar=False,
            )
        except Exception as ex:  # noqa: BLE001
            raise EmbeddingServiceError(f"Embedding texts failed: {ex}") from ex
        return [[float(x) for x in vec] for vec in raw_vectors]

    def embed_query(self, text: str) -> list[float]:
        model = self._ensure_model()
        try:
            raw_vector = model.encode(
                text,
                normalize_embeddings=True,
                convert_to_numpy=True,
                show_progress_bar=False,
            )
        except Exception as ex:  # noqa: BLE001
            raise EmbeddingServiceError(f"Embedding query failed: {ex}") from ex
        return [float(x) for x in raw_vector]
