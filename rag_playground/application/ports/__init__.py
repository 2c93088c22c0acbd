"""Application ports package.

Re-exports the capability interfaces the use cases depend on.
"""

from rag_playground.application.ports.embedding_port import EmbeddingPort
from rag_playground.application.ports.llm_port import CompletionPort
from rag_playground.application.ports.tokenizer_port import TokenizerPort

__all__ = [
    "CompletionPort",
    "EmbeddingPort",
    "TokenizerPort",
]
