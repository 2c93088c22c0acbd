from __future__ import annotations

import logging
from collections.abc import Sequence

from rag_playground.domain.models import Chunk, TokenSpan
from rag_playground.domain.services.tokenization import Tokenizer
from rag_playground.domain.value_objects import ChunkConfig

logger = logging.getLogger(__name__)


def window_bounds(n_tokens: int, config: ChunkConfig) -> list[tuple[int, int]]:
    """Token windows ``[start, end)`` covering ``n_tokens``.

    The start advances by ``chunk_size - chunk_overlap``; iteration stops after
    the first window that reaches the last token, so the final window may be
    shorter than ``chunk_size`` and no window is a pure suffix of its
    predecessor.
    """
    bounds: list[tuple[int, int]] = []
    start = 0
    while start < n_tokens:
        end = min(start + config.chunk_size, n_tokens)
        bounds.append((start, end))
        if end >= n_tokens:
            break
        start += config.step
    return bounds


def chunks_from_spans(text: str, spans: Sequence[TokenSpan], config: ChunkConfig) -> list[Chunk]:
    chunks: list[Chunk] = []
    for i, (start, end) in enumerate(window_bounds(len(spans), config)):
        start_char = spans[start].start
        end_char = spans[end - 1].end
        chunks.append(
            Chunk(
                index=i,
                text=text[start_char:end_char],
                start_token=start,
                end_token=end,
                start_char=start_char,
                end_char=end_char,
            )
        )
    return chunks


def chunk_text(text: str, config: ChunkConfig, tokenizer: Tokenizer) -> list[Chunk]:
    """Split ``text`` into overlapping token windows.

    Pure: no I/O, output depends only on the inputs.
    """
    if not text or not text.strip():
        return []
    spans = tokenizer.spans(text)
    chunks = chunks_from_spans(text, spans, config)
    logger.debug(
        "chunked %d tokens into %d chunks (size=%d overlap=%d)",
        len(spans),
        len(chunks),
        config.chunk_size,
        config.chunk_overlap,
    )
    return chunks
