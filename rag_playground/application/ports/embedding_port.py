from collections.abc import Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class EmbeddingPort(Protocol):
    """Turns text into vectors. One vector per input, same order as the input.

    Query and passage vectors must come from the same model, otherwise their
    cosine scores are meaningless.
    """

    def embed_texts(self, texts: Sequence[str]) -> list[list[float]]: ...
    def embed_query(self, text: str) -> list[float]: ...
