from __future__ import annotations

from dataclasses import dataclass

from rag_playground.domain.value_objects import DEFAULT_CHUNK_OVERLAP, DEFAULT_CHUNK_SIZE


@dataclass(frozen=True)
class BuildIndexRequest:
    document: str
    chunk_size: int = DEFAULT_CHUNK_SIZE
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP
