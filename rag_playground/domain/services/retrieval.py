# rag_playground/domain/services/retrieval.py
# Pure domain services: no I/O, deterministic, no external libraries.
from __future__ import annotations

import heapq
import math
from collections.abc import Sequence

from rag_playground.domain.errors import InvalidConfig, RetrievalError
from rag_playground.domain.models import NodeIndex, RetrievalResult, ScoredNode
from rag_playground.domain.similarity import cosine_with_norm, norm


def score_all(index: NodeIndex, query_vector: Sequence[float]) -> list[float]:
    """Cosine score of the query against every node, in index order."""
    q_norm = norm(query_vector)
    return [cosine_with_norm(query_vector, q_norm, node.vector) for node in index]


def retrieve(index: NodeIndex, query_vector: Sequence[float], k: int) -> RetrievalResult:
    """
    Return the ``min(k, index.size())`` nodes most similar to ``query_vector``.

    - Brute-force linear scan; node counts are document-scale.
    - Top-K selection with a bounded heap (O(N log K)) instead of a full sort.
    - Ties go to the node that was inserted first.
    """
    if k < 1:
        raise InvalidConfig(f"k must be >= 1, got {k}")
    if index.size() == 0:
        raise RetrievalError("index is empty; build an index before querying")
    if len(query_vector) != index.dimension:
        raise RetrievalError(
            f"query vector dimension {len(query_vector)} does not match "
            f"index dimension {index.dimension}"
        )
    if not all(math.isfinite(x) for x in query_vector):
        raise RetrievalError("query vector has non-finite values")

    scores = score_all(index, query_vector)
    k = min(k, index.size())
    top = heapq.nsmallest(k, range(len(scores)), key=lambda i: (-scores[i], i))
    return RetrievalResult(
        hits=tuple(ScoredNode(node=index.node_at(i), score=scores[i], position=i) for i in top)
    )
