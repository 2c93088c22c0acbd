from typing import Protocol, runtime_checkable

from rag_playground.domain.models import PromptText
from rag_playground.domain.value_objects import GenerationConfig


@runtime_checkable
class CompletionPort(Protocol):
    def complete(self, prompt: PromptText, config: GenerationConfig) -> str:
        """Send the prompt to the language model and return its raw text.

        Raises:
            CompletionServiceError: transport or service failure
        """
        ...
