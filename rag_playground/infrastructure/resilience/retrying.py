"""Retry wrappers around the embedding and completion ports.

The core never retries; wiring these in is a composition-root decision.
Only service errors are retried. Config and parse errors fail immediately.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from rag_playground.application.ports.embedding_port import EmbeddingPort
from rag_playground.application.ports.llm_port import CompletionPort
from rag_playground.domain.errors import CompletionServiceError, EmbeddingServiceError
from rag_playground.domain.models import PromptText
from rag_playground.domain.value_objects import GenerationConfig

logger = logging.getLogger(__name__)


def make_retrying(
    error_type: type[BaseException],
    attempts: int = 3,
    min_wait_s: float = 1.0,
    max_wait_s: float = 20.0,
) -> Retrying:
    return Retrying(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=min_wait_s, min=min_wait_s, max=max_wait_s),
        retry=retry_if_exception_type(error_type),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


class RetryingEmbedding(EmbeddingPort):
    def __init__(
        self,
        inner: EmbeddingPort,
        attempts: int = 3,
        min_wait_s: float = 1.0,
        max_wait_s: float = 20.0,
    ) -> None:
        self.inner = inner
        self.attempts = attempts
        self.min_wait_s = min_wait_s
        self.max_wait_s = max_wait_s

    def _retrying(self) -> Retrying:
        return make_retrying(EmbeddingServiceError, self.attempts, self.min_wait_s, self.max_wait_s)

    def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        return self._retrying()(self.inner.embed_texts, texts)

    def embed_query(self, text: str) -> list[float]:
        return self._retrying()(self.inner.embed_query, text)


class RetryingCompletion(CompletionPort):
    def __init__(
        self,
        inner: CompletionPort,
        attempts: int = 3,
        min_wait_s: float = 1.0,
        max_wait_s: float = 20.0,
    ) -> None:
        self.inner = inner
        self.attempts = attempts
        self.min_wait_s = min_wait_s
        self.max_wait_s = max_wait_s

    def complete(self, prompt: PromptText, config: GenerationConfig) -> str:
        retrying = make_retrying(
            CompletionServiceError, self.attempts, self.min_wait_s, self.max_wait_s
        )
        return retrying(self.inner.complete, prompt, config)
