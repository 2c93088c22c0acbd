from __future__ import annotations

import hashlib
import math
from collections.abc import Sequence

from rag_playground.domain.errors import NodeIndexError
from rag_playground.domain.models import Chunk, Node, NodeIndex
from rag_playground.domain.value_objects import ChunkConfig


def document_fingerprint(text: str) -> str:
    """Short content hash; stable across runs for identical text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:16]


def node_id(fingerprint: str, chunk_index: int) -> str:
    return f"{fingerprint}:{chunk_index}"


def build_index(
    chunks: Sequence[Chunk],
    embeddings: Sequence[Sequence[float]],
    *,
    config: ChunkConfig,
    fingerprint: str,
) -> NodeIndex:
    """Pair every chunk with its embedding into an immutable NodeIndex.

    Raises:
        NodeIndexError: counts differ, vectors disagree on dimension, or a
            vector holds NaN or infinity
    """
    if len(chunks) != len(embeddings):
        raise NodeIndexError(
            f"chunk/embedding count mismatch: {len(chunks)} chunks, {len(embeddings)} embeddings"
        )

    dimension = len(embeddings[0]) if embeddings else 0
    nodes: list[Node] = []
    for chunk, emb in zip(chunks, embeddings, strict=True):
        if len(emb) != dimension:
            raise NodeIndexError(
                f"embedding for chunk {chunk.index} has dimension {len(emb)}, expected {dimension}"
            )
        vector = tuple(float(x) for x in emb)
        if not all(math.isfinite(x) for x in vector):
            raise NodeIndexError(f"embedding for chunk {chunk.index} has non-finite values")
        nodes.append(
            Node(
                id=node_id(fingerprint, chunk.index),
                chunk=chunk,
                vector=vector,
            )
        )

    return NodeIndex(
        nodes=tuple(nodes),
        dimension=dimension,
        config=config,
        document_fingerprint=fingerprint,
    )
