# Tokenizers are domain-pure by contract; the protocol lives next to the default one.
from rag_playground.domain.services.tokenization import Tokenizer as TokenizerPort

__all__ = ["TokenizerPort"]
