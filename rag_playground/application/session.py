"""Ownership of the "current" index for one interactive session.

Builds run outside the lock; only the handoff (swap of the current handle)
happens under it, so a reader sees either the previous complete index or the
new complete index. Queries take the handle from ``current`` and pass it into
RunQuery explicitly.
"""

from __future__ import annotations

import logging
import threading

from rag_playground.application.dto.index_dto import BuildIndexRequest
from rag_playground.application.use_cases.build_index import BuildIndex
from rag_playground.domain.errors import BuildInProgressError, DomainError
from rag_playground.domain.models import NodeIndex
from rag_playground.domain.services.indexing import document_fingerprint
from rag_playground.domain.types import Result

logger = logging.getLogger(__name__)

BuildKey = tuple[str, int, int]


def build_key(req: BuildIndexRequest) -> BuildKey:
    return (document_fingerprint(req.document), req.chunk_size, req.chunk_overlap)


class IndexSession:
    def __init__(self, builder: BuildIndex) -> None:
        self._builder = builder
        self._lock = threading.Lock()
        self._in_flight: set[BuildKey] = set()
        self._current: NodeIndex | None = None
        self._tickets = 0
        self._swapped_ticket = 0

    @property
    def current(self) -> NodeIndex | None:
        with self._lock:
            return self._current

    def needs_rebuild(self, req: BuildIndexRequest) -> bool:
        """True when the current index was not built from this document/config."""
        current = self.current
        if current is None:
            return True
        fingerprint, size, overlap = build_key(req)
        return (
            current.document_fingerprint != fingerprint
            or current.config.chunk_size != size
            or current.config.chunk_overlap != overlap
        )

    def rebuild(self, req: BuildIndexRequest) -> Result[NodeIndex, DomainError]:
        key = build_key(req)
        with self._lock:
            if key in self._in_flight:
                return Result.failure(
                    BuildInProgressError(
                        f"a build for document {key[0]} "
                        f"(chunk_size={key[1]}, overlap={key[2]}) is already running"
                    )
                )
            self._in_flight.add(key)
            self._tickets += 1
            ticket = self._tickets

        try:
            result = self._builder.execute(req)
        finally:
            with self._lock:
                self._in_flight.discard(key)

        if result.ok and result.value is not None:
            with self._lock:
                # a build started later may already have been swapped in
                if ticket > self._swapped_ticket:
                    self._current = result.value
                    self._swapped_ticket = ticket
                else:
                    logger.info("discarding stale index build %d", ticket)
        return result
