"""Pure similarity functions used by the retriever."""

from collections.abc import Sequence
from math import sqrt

from .types import Score


def norm(v: Sequence[float]) -> float:
    """Euclidean (L2) norm of a vector."""
    return sqrt(sum(x * x for x in v))


def cosine(u: Sequence[float], v: Sequence[float]) -> Score:
    """Compute cosine similarity between two vectors of equal length.

    Args:
        u: First vector
        v: Second vector

    Returns:
        Cosine similarity in [-1, 1]; 0.0 if either vector has zero norm
    """
    return cosine_with_norm(u, norm(u), v)


def cosine_with_norm(u: Sequence[float], u_norm: float, v: Sequence[float]) -> Score:
    """Cosine similarity when the norm of ``u`` is already known (query reuse)."""
    nv = norm(v)
    if u_norm == 0.0 or nv == 0.0:
        return 0.0
    dot = sum(a * b for a, b in zip(u, v, strict=True))
    # rounding can push |sim| a hair past 1
    return max(-1.0, min(1.0, dot / (u_norm * nv)))
