from __future__ import annotations

import re
from typing import Protocol, runtime_checkable

from rag_playground.domain.models import TokenSpan

_WORD = re.compile(r"\S+")


@runtime_checkable
class Tokenizer(Protocol):
    def spans(self, text: str) -> list[TokenSpan]: ...


class WhitespaceTokenizer:
    """Every maximal run of non-whitespace characters is one token.

    Stdlib-only default; subword tokenizers live in infrastructure.
    """

    name = "whitespace"

    def spans(self, text: str) -> list[TokenSpan]:
        return [TokenSpan(m.start(), m.end()) for m in _WORD.finditer(text)]
