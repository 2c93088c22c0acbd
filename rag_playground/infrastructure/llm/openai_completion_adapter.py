from dataclasses import dataclass
from importlib import import_module
from typing import Any

from rag_playground.application.ports.llm_port import CompletionPort
from rag_playground.domain.errors import CompletionServiceError
from rag_playground.domain.models import PromptText
from rag_playground.domain.value_objects import GenerationConfig


@dataclass
class OpenAICompletionAdapter(CompletionPort):
    """Chat completions against OpenAI or any OpenAI-compatible server (vLLM)."""

    model: str = "gpt-3.5-turbo"
    api_key: str | None = None
    base_url: str | None = None  # e.g. "http://localhost:8000/v1" for vLLM
    timeout_s: float = 60.0

    def __post_init__(self) -> None:
        # Defer import of OpenAI to complete() to avoid hard dependency in tests
        self._client: Any | None = None

    def complete(self, prompt: PromptText, config: GenerationConfig) -> str:
        try:
            if self._client is None:
                module = import_module("openai")
                self._client = module.OpenAI(
                    api_key=self.api_key,
                    base_url=self.base_url,
                    timeout=self.timeout_s,
                    max_retries=0,
                )
            kwargs: dict[str, Any] = {
                "model": self.model,
                "messages": [{"role": "user", "content": prompt.text}],
                "temperature": config.temperature,
                "top_p": config.top_p,
            }
            if config.max_tokens is not None:
                kwargs["max_tokens"] = config.max_tokens
            resp: Any = self._client.chat.completions.create(**kwargs)
            return resp.choices[0].message.content or ""
        except Exception as ex:  # noqa: BLE001
            # Translate external errors to domain-specific errors
            raise CompletionServiceError(f"LLM communication failed: {ex}") from ex
