from rag_playground.application.ports.embedding_port import EmbeddingPort
from rag_playground.application.ports.llm_port import CompletionPort
from rag_playground.application.ports.tokenizer_port import TokenizerPort
from rag_playground.application.session import IndexSession
from rag_playground.application.use_cases.build_index import BuildIndex
from rag_playground.application.use_cases.run_query import RunQuery
from rag_playground.config.settings import AppSettings
from rag_playground.domain.errors import InvalidConfig
from rag_playground.domain.services.tokenization import WhitespaceTokenizer
from rag_playground.infrastructure.embeddings.concurrent_embedding import ConcurrentEmbedding
from rag_playground.infrastructure.embeddings.openai_embedding_adapter import (
    OpenAIEmbeddingAdapter,
)
from rag_playground.infrastructure.embeddings.sentence_transformers_adapter import (
    SentenceTransformersEmbeddingAdapter,
)
from rag_playground.infrastructure.llm.openai_completion_adapter import OpenAICompletionAdapter
from rag_playground.infrastructure.resilience.retrying import RetryingCompletion, RetryingEmbedding
from rag_playground.infrastructure.tokenizers.tiktoken_tokenizer import TiktokenTokenizer


def build_tokenizer(settings: AppSettings) -> TokenizerPort:
    if settings.tokenizer == "tiktoken":
        return TiktokenTokenizer(encoding_name=settings.tiktoken_encoding)
    if settings.tokenizer == "whitespace":
        return WhitespaceTokenizer()
    raise InvalidConfig(f"unknown tokenizer '{settings.tokenizer}'")


def build_embedding(settings: AppSettings) -> EmbeddingPort:
    """Backend adapter, wrapped in retries per sub-request, fanned out per batch.

    Note:
        Nothing is loaded or contacted here; clients are created on first use.
    """
    backend = settings.embedding_backend
    adapter: EmbeddingPort
    if backend == "openai":
        adapter = OpenAIEmbeddingAdapter(
            model=settings.embedding_model,
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            batch_size=settings.embedding_batch_size,
            timeout_s=settings.request_timeout_s,
        )
    elif backend == "sentence-transformers":
        adapter = SentenceTransformersEmbeddingAdapter(
            model_name=settings.embedding_model,
            device=settings.embedding_device,
            batch_size=settings.embedding_batch_size,
        )
    else:
        raise InvalidConfig(f"unknown embedding backend '{backend}'")

    if settings.retry_attempts > 1:
        adapter = RetryingEmbedding(adapter, attempts=settings.retry_attempts)

    return ConcurrentEmbedding(
        adapter,
        batch_size=settings.embedding_batch_size,
        max_workers=settings.embedding_max_workers,
        timeout_s=settings.request_timeout_s * settings.retry_attempts * 2,
    )


def build_llm(settings: AppSettings) -> CompletionPort:
    llm: CompletionPort = OpenAICompletionAdapter(
        model=settings.llm_model,
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        timeout_s=settings.request_timeout_s,
    )
    if settings.retry_attempts > 1:
        llm = RetryingCompletion(llm, attempts=settings.retry_attempts)
    return llm


def build_index_use_case(settings: AppSettings | None = None) -> BuildIndex:
    settings = settings or AppSettings()
    return BuildIndex(tokenizer=build_tokenizer(settings), embedding=build_embedding(settings))


def build_query_use_case(settings: AppSettings | None = None) -> RunQuery:
    settings = settings or AppSettings()
    return RunQuery(embedding=build_embedding(settings), llm=build_llm(settings))


def build_session(settings: AppSettings | None = None) -> IndexSession:
    return IndexSession(build_index_use_case(settings))


def build_use_cases(settings: AppSettings | None = None) -> tuple[BuildIndex, RunQuery]:
    """Both phases sharing one embedding client, so query and node vectors match."""
    settings = settings or AppSettings()
    embedding = build_embedding(settings)
    return (
        BuildIndex(tokenizer=build_tokenizer(settings), embedding=embedding),
        RunQuery(embedding=embedding, llm=build_llm(settings)),
    )
