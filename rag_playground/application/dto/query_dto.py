# rag_playground/application/dto/query_dto.py
from __future__ import annotations

from dataclasses import dataclass

from rag_playground.domain.errors import ParseError
from rag_playground.domain.models import (
    AnswerRecord,
    NodeIndex,
    PromptText,
    RetrievalResult,
)
from rag_playground.domain.value_objects import DEFAULT_TEMPERATURE, DEFAULT_TOP_K, DEFAULT_TOP_P


@dataclass(frozen=True)
class RunQueryRequest:
    """
    DTO for querying a previously built index.

    - query: user question (non-empty)
    - index: the index handle returned by BuildIndex
    - top_k: chunks to put into the prompt (clamped to the index size)
    - temperature / top_p: sampling parameters in [0, 1]
    - strict_parse: fail the query on the first malformed answer block
    """

    query: str
    index: NodeIndex
    top_k: int = DEFAULT_TOP_K
    temperature: float = DEFAULT_TEMPERATURE
    top_p: float = DEFAULT_TOP_P
    max_tokens: int | None = None
    strict_parse: bool = False


@dataclass(frozen=True)
class QueryAnswer:
    """Raw model answer plus the records parsed from it."""

    answer_text: str
    records: tuple[AnswerRecord, ...]
    skipped: tuple[ParseError, ...]
    retrieved: RetrievalResult
    prompt: PromptText
