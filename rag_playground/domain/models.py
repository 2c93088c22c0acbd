# rag_playground/domain/models.py
# Domain models must be pure (no I/O, no external libs)
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from .errors import ParseError
from .types import Score, Vector
from .value_objects import ChunkConfig


@dataclass(frozen=True)
class TokenSpan:
    """Character offsets of one token in the source text (end exclusive)."""

    start: int
    end: int


@dataclass(frozen=True)
class Chunk:
    """
    Contiguous window of a document.

    - index:        position of the chunk in the document (0-based)
    - text:         document[start_char:end_char]
    - start_token:  first token offset
    - end_token:    token offset one past the last token
    """

    index: int
    text: str
    start_token: int
    end_token: int
    start_char: int
    end_char: int

    @property
    def token_count(self) -> int:
        return self.end_token - self.start_token


@dataclass(frozen=True)
class Node:
    """A chunk plus its embedding. Owned by exactly one NodeIndex."""

    id: str
    chunk: Chunk
    vector: Vector

    @property
    def text(self) -> str:
        return self.chunk.text


@dataclass(frozen=True)
class NodeIndex:
    """Flat, immutable collection of nodes built once per document/config pair."""

    nodes: tuple[Node, ...]
    dimension: int
    config: ChunkConfig
    document_fingerprint: str

    def size(self) -> int:
        return len(self.nodes)

    def node_at(self, i: int) -> Node:
        return self.nodes[i]

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)


@dataclass(frozen=True)
class ScoredNode:
    """A retrieved node with its cosine score and original index position."""

    node: Node
    score: Score
    position: int


@dataclass(frozen=True)
class RetrievalResult:
    """Ranked hits, highest score first; ties keep index order."""

    hits: tuple[ScoredNode, ...]

    def __len__(self) -> int:
        return len(self.hits)

    def __iter__(self) -> Iterator[ScoredNode]:
        return iter(self.hits)

    @property
    def scores(self) -> list[Score]:
        return [h.score for h in self.hits]


@dataclass(frozen=True)
class PromptText:
    text: str
    template_version: str


@dataclass(frozen=True)
class AnswerRecord:
    """One Name/Description/Personality entry from the model output."""

    name: str
    description: str
    personality: str


@dataclass(frozen=True)
class ParsedAnswer:
    records: tuple[AnswerRecord, ...]
    skipped: tuple[ParseError, ...] = field(default_factory=tuple)

    @property
    def complete(self) -> bool:
        return not self.skipped
