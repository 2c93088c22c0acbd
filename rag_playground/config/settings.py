"""Application settings with environment-driven configuration.

This is the ONLY place where environment variables are read.
All other layers receive settings via dependency injection.
"""

import os
from dataclasses import dataclass, field


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class AppSettings:
    """Application settings loaded from environment variables."""

    # ===== Embedding Configuration =====
    embedding_backend: str = field(
        default_factory=lambda: os.getenv("EMBEDDING_BACKEND", "openai").lower()
    )
    # Supported: "openai" | "sentence-transformers"

    embedding_model: str = field(
        default_factory=lambda: os.getenv("EMBEDDING_MODEL", "text-embedding-ada-002")
    )
    embedding_device: str = field(default_factory=lambda: os.getenv("EMBEDDING_DEVICE", "cpu"))
    # Supported: "cpu" | "cuda" | "mps" (sentence-transformers only)

    embedding_batch_size: int = field(
        default_factory=lambda: int(os.getenv("EMBEDDING_BATCH_SIZE", "64"))
    )
    embedding_max_workers: int = field(
        default_factory=lambda: int(os.getenv("EMBEDDING_MAX_WORKERS", "4"))
    )
    # Concurrent batch sub-requests during an index build

    # ===== OpenAI / LLM Configuration =====
    openai_api_key: str | None = field(default_factory=lambda: os.getenv("OPENAI_API_KEY"))
    openai_base_url: str | None = field(default_factory=lambda: os.getenv("OPENAI_BASE_URL"))
    # Point at a vLLM / OpenAI-compatible server, e.g. http://localhost:8000/v1

    llm_model: str = field(default_factory=lambda: os.getenv("LLM_MODEL", "gpt-3.5-turbo"))

    # ===== Resilience =====
    request_timeout_s: float = field(
        default_factory=lambda: float(os.getenv("REQUEST_TIMEOUT_S", "60"))
    )
    retry_attempts: int = field(default_factory=lambda: int(os.getenv("RETRY_ATTEMPTS", "3")))
    # 1 disables retries

    # ===== Chunking =====
    tokenizer: str = field(default_factory=lambda: os.getenv("TOKENIZER", "whitespace").lower())
    # Supported: "whitespace" | "tiktoken"

    tiktoken_encoding: str = field(
        default_factory=lambda: os.getenv("TIKTOKEN_ENCODING", "cl100k_base")
    )
    chunk_size: int = field(default_factory=lambda: int(os.getenv("CHUNK_SIZE", "1024")))
    chunk_overlap: int = field(default_factory=lambda: int(os.getenv("CHUNK_OVERLAP", "20")))

    # ===== Query Defaults =====
    top_k: int = field(default_factory=lambda: int(os.getenv("TOP_K", "2")))
    temperature: float = field(default_factory=lambda: float(os.getenv("TEMPERATURE", "0.1")))
    top_p: float = field(default_factory=lambda: float(os.getenv("TOP_P", "1.0")))
    strict_parse: bool = field(default_factory=lambda: _env_bool("STRICT_PARSE", "false"))

    # ===== Logging =====
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
