"""Fan-out wrapper for embedding backends without (large) native batching.

Splits the input into batches, embeds them on a bounded thread pool and
reassembles the vectors in input order, whatever order the sub-requests finish
in. The first failure, or running past the overall deadline, cancels every
sub-request that has not started yet.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait

from rag_playground.application.ports.embedding_port import EmbeddingPort
from rag_playground.domain.errors import DomainError, EmbeddingServiceError

logger = logging.getLogger(__name__)


class ConcurrentEmbedding(EmbeddingPort):
    def __init__(
        self,
        inner: EmbeddingPort,
        batch_size: int = 64,
        max_workers: int = 4,
        timeout_s: float | None = 120.0,
    ) -> None:
        if batch_size < 1 or max_workers < 1:
            raise ValueError("batch_size and max_workers must be >= 1")
        self.inner = inner
        self.batch_size = batch_size
        self.max_workers = max_workers
        self.timeout_s = timeout_s

    def _batches(self, texts: Sequence[str]) -> list[list[str]]:
        items = list(texts)
        return [items[i : i + self.batch_size] for i in range(0, len(items), self.batch_size)]

    def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        batches = self._batches(texts)
        if not batches:
            return []
        if len(batches) == 1:
            return self.inner.embed_texts(batches[0])

        started = time.perf_counter()
        pool = ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(batches)),
            thread_name_prefix="embed",
        )
        futures: list[Future[list[list[float]]]] = [
            pool.submit(self.inner.embed_texts, batch) for batch in batches
        ]
        try:
            done, pending = wait(futures, timeout=self.timeout_s, return_when=FIRST_EXCEPTION)
            failed = next((f for f in futures if f in done and f.exception() is not None), None)
            if failed is not None:
                ex = failed.exception()
                if isinstance(ex, DomainError):
                    raise ex
                raise EmbeddingServiceError(f"embedding sub-request failed: {ex}") from ex
            if pending:
                raise EmbeddingServiceError(
                    f"embedding timed out after {self.timeout_s}s "
                    f"({len(pending)}/{len(futures)} batches unfinished)"
                )
        finally:
            # no-op on success; on failure drops queued batches
            pool.shutdown(wait=False, cancel_futures=True)

        vectors: list[list[float]] = []
        for batch, fut in zip(batches, futures, strict=True):
            part = fut.result()
            if len(part) != len(batch):
                raise EmbeddingServiceError(
                    f"malformed embedding response: {len(part)} vectors for {len(batch)} texts"
                )
            vectors.extend(part)
        logger.info(
            "embedded %d texts in %d batches (%.2fs)",
            len(vectors),
            len(batches),
            time.perf_counter() - started,
        )
        return vectors

    def embed_query(self, text: str) -> list[float]:
        return self.inner.embed_query(text)
