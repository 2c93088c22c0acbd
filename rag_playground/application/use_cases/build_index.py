# rag_playground/application/use_cases/build_index.py
from __future__ import annotations

import logging

from rag_playground.application.dto.index_dto import BuildIndexRequest
from rag_playground.application.ports.embedding_port import EmbeddingPort
from rag_playground.application.ports.tokenizer_port import TokenizerPort
from rag_playground.domain.errors import DomainError, EmbeddingServiceError
from rag_playground.domain.models import NodeIndex
from rag_playground.domain.services.chunking import chunk_text
from rag_playground.domain.services.indexing import build_index, document_fingerprint
from rag_playground.domain.types import Result
from rag_playground.domain.value_objects import ChunkConfig

logger = logging.getLogger(__name__)


class BuildIndex:
    """
    Build phase: chunk → embed → index.
    Uses only ports; every failure comes back as Result.failure and nothing
    partial is ever returned.
    """

    def __init__(self, tokenizer: TokenizerPort, embedding: EmbeddingPort) -> None:
        self.tokenizer = tokenizer
        self.embedding = embedding

    def execute(self, req: BuildIndexRequest) -> Result[NodeIndex, DomainError]:
        # 1) Validate
        try:
            config = ChunkConfig(chunk_size=req.chunk_size, chunk_overlap=req.chunk_overlap)
        except DomainError as ex:
            return Result.failure(ex)

        # 2) Chunk (pure domain)
        fingerprint = document_fingerprint(req.document)
        try:
            chunks = chunk_text(req.document, config, self.tokenizer)
        except DomainError as ex:
            return Result.failure(ex)
        except Exception as ex:  # noqa: BLE001
            return Result.failure(DomainError(f"tokenization failed: {ex}"))
        if not chunks:
            logger.info("document %s is empty; built an empty index", fingerprint)
            return Result.success(
                build_index([], [], config=config, fingerprint=fingerprint)
            )

        # 3) Embed
        texts = [c.text for c in chunks]
        try:
            vectors = self.embedding.embed_texts(texts)
        except DomainError as ex:
            return Result.failure(ex)
        except Exception as ex:  # noqa: BLE001
            return Result.failure(EmbeddingServiceError(f"embedding failed: {ex}"))

        if len(vectors) != len(chunks):
            return Result.failure(
                EmbeddingServiceError(
                    f"malformed embedding response: {len(vectors)} vectors for {len(chunks)} texts"
                )
            )

        # 4) Index
        try:
            index = build_index(chunks, vectors, config=config, fingerprint=fingerprint)
        except DomainError as ex:
            return Result.failure(ex)

        logger.info(
            "built index %s: %d nodes, dim=%d (chunk_size=%d overlap=%d)",
            fingerprint,
            index.size(),
            index.dimension,
            config.chunk_size,
            config.chunk_overlap,
        )
        return Result.success(index)
