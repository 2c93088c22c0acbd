# rag_playground/application/use_cases/run_query.py
from __future__ import annotations

import logging

from rag_playground.application.dto.query_dto import QueryAnswer, RunQueryRequest
from rag_playground.application.ports.embedding_port import EmbeddingPort
from rag_playground.application.ports.llm_port import CompletionPort
from rag_playground.domain.errors import (
    CompletionServiceError,
    DomainError,
    EmbeddingServiceError,
    InvalidConfig,
    RetrievalError,
)
from rag_playground.domain.services.answer_parsing import parse_answer
from rag_playground.domain.services.prompting import build_prompt
from rag_playground.domain.services.retrieval import retrieve
from rag_playground.domain.types import Result
from rag_playground.domain.value_objects import GenerationConfig

logger = logging.getLogger(__name__)


class RunQuery:
    """
    Query phase: embed query → retrieve → prompt → complete → parse.
    The index is passed in by the caller; nothing is looked up from shared state.
    """

    def __init__(self, embedding: EmbeddingPort, llm: CompletionPort) -> None:
        self.embedding = embedding
        self.llm = llm

    def execute(self, req: RunQueryRequest) -> Result[QueryAnswer, DomainError]:
        # 1) Validate
        if not req.query or not req.query.strip():
            return Result.failure(InvalidConfig("query must not be empty"))
        try:
            config = GenerationConfig(
                top_k=req.top_k,
                temperature=req.temperature,
                top_p=req.top_p,
                max_tokens=req.max_tokens,
            )
        except DomainError as ex:
            return Result.failure(ex)
        if req.index.size() == 0:
            return Result.failure(RetrievalError("index is empty; build an index before querying"))

        # 2) Embed query
        try:
            q_vec = self.embedding.embed_query(req.query)
        except DomainError as ex:
            return Result.failure(ex)
        except Exception as ex:  # noqa: BLE001
            return Result.failure(EmbeddingServiceError(f"query embedding failed: {ex}"))

        # 3) Retrieve
        try:
            retrieved = retrieve(req.index, q_vec, config.top_k)
        except DomainError as ex:
            return Result.failure(ex)
        logger.debug("retrieved %d nodes, scores=%s", len(retrieved), retrieved.scores)

        # 4) Prompt + completion
        prompt = build_prompt(req.query, retrieved)
        try:
            raw = self.llm.complete(prompt, config)
        except DomainError as ex:
            return Result.failure(ex)
        except Exception as ex:  # noqa: BLE001
            return Result.failure(CompletionServiceError(f"llm completion failed: {ex}"))

        # 5) Parse
        try:
            parsed = parse_answer(raw, strict=req.strict_parse)
        except DomainError as ex:
            return Result.failure(ex)
        if parsed.skipped:
            logger.warning(
                "answer had %d malformed block(s); returning %d record(s)",
                len(parsed.skipped),
                len(parsed.records),
            )

        return Result.success(
            QueryAnswer(
                answer_text=raw,
                records=parsed.records,
                skipped=parsed.skipped,
                retrieved=retrieved,
                prompt=prompt,
            )
        )
