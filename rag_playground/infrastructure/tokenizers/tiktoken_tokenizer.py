"""Subword tokenizer backed by tiktoken.

Counts tokens the way OpenAI embedding models do, so ``chunk_size`` means the
same thing to the chunker and to the embedding service.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

from rag_playground.domain.errors import InvalidConfig
from rag_playground.domain.models import TokenSpan

DEFAULT_ENCODING = "cl100k_base"


class TiktokenTokenizer:
    name = "tiktoken"

    def __init__(self, encoding_name: str = DEFAULT_ENCODING) -> None:
        self.encoding_name = encoding_name
        self._encoding: Any | None = None  # lazy, loading may download the BPE file

    def _get_encoding(self) -> Any:
        if self._encoding is None:
            try:
                tiktoken = import_module("tiktoken")
                self._encoding = tiktoken.get_encoding(self.encoding_name)
            except Exception as ex:  # noqa: BLE001
                raise InvalidConfig(
                    f"tiktoken encoding '{self.encoding_name}' unavailable: {ex}"
                ) from ex
        return self._encoding

    def spans(self, text: str) -> list[TokenSpan]:
        if not text:
            return []
        enc = self._get_encoding()
        tokens = enc.encode(text, disallowed_special=())
        decoded, offsets = enc.decode_with_offsets(tokens)
        ends = list(offsets[1:]) + [len(decoded)]
        return [TokenSpan(start, end) for start, end in zip(offsets, ends, strict=True)]
