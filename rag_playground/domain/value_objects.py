from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidConfig

DEFAULT_CHUNK_SIZE = 1024
DEFAULT_CHUNK_OVERLAP = 20
DEFAULT_TOP_K = 2
DEFAULT_TEMPERATURE = 0.1
DEFAULT_TOP_P = 1.0


@dataclass(slots=True, frozen=True)
class ChunkConfig:
    """Token window size and overlap used to split a document."""

    chunk_size: int = DEFAULT_CHUNK_SIZE
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise InvalidConfig(f"chunk_size must be > 0, got {self.chunk_size}")
        if self.chunk_overlap < 0:
            raise InvalidConfig(f"chunk_overlap must be >= 0, got {self.chunk_overlap}")
        if self.chunk_overlap >= self.chunk_size:
            raise InvalidConfig(
                f"chunk_overlap ({self.chunk_overlap}) must be smaller than "
                f"chunk_size ({self.chunk_size})"
            )

    @property
    def step(self) -> int:
        return self.chunk_size - self.chunk_overlap


@dataclass(slots=True, frozen=True)
class GenerationConfig:
    """Sampling parameters for one query; K is clamped to the index size later."""

    top_k: int = DEFAULT_TOP_K
    temperature: float = DEFAULT_TEMPERATURE
    top_p: float = DEFAULT_TOP_P
    max_tokens: int | None = None

    def __post_init__(self) -> None:
        if self.top_k < 1:
            raise InvalidConfig(f"top_k must be >= 1, got {self.top_k}")
        if not (0.0 <= self.temperature <= 1.0):
            raise InvalidConfig(f"temperature must be in [0, 1], got {self.temperature}")
        if not (0.0 <= self.top_p <= 1.0):
            raise InvalidConfig(f"top_p must be in [0, 1], got {self.top_p}")
        if self.max_tokens is not None and self.max_tokens <= 0:
            raise InvalidConfig(f"max_tokens must be > 0, got {self.max_tokens}")
