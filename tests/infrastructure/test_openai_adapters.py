import sys
from types import SimpleNamespace

import pytest

from rag_playground.domain.errors import CompletionServiceError, EmbeddingServiceError
from rag_playground.domain.models import PromptText
from rag_playground.domain.value_objects import GenerationConfig
from rag_playground.infrastructure.embeddings.openai_embedding_adapter import (
    OpenAIEmbeddingAdapter,
)
from rag_playground.infrastructure.llm.openai_completion_adapter import OpenAICompletionAdapter


class _FakeEmbeddings:
    def __init__(self, owner: "_FakeOpenAI") -> None:
        self.owner = owner

    def create(self, model, input):  # noqa: A002 - mirrors the SDK signature
        self.owner.embedding_calls.append(list(input))
        if self.owner.fail:
            raise RuntimeError("rate limited")
        # reversed on purpose: the adapter must re-sort by index
        data = [
            SimpleNamespace(index=i, embedding=[float(len(t)), float(i)])
            for i, t in enumerate(input)
        ]
        return SimpleNamespace(data=list(reversed(data)))


class _FakeCompletions:
    def __init__(self, owner: "_FakeOpenAI") -> None:
        self.owner = owner

    def create(self, **kwargs):
        self.owner.chat_calls.append(kwargs)
        if self.owner.fail:
            raise RuntimeError("upstream 500")
        message = SimpleNamespace(content="Name: A\nDescription: B\nPersonality: C")
        return SimpleNamespace(choices=[SimpleNamespace(message=message, finish_reason="stop")])


class _FakeOpenAI:
    instances: list["_FakeOpenAI"] = []
    fail = False

    def __init__(self, **kwargs) -> None:
        self.kwargs = kwargs
        self.embedding_calls: list[list[str]] = []
        self.chat_calls: list[dict] = []
        self.embeddings = _FakeEmbeddings(self)
        self.chat = SimpleNamespace(completions=_FakeCompletions(self))
        _FakeOpenAI.instances.append(self)


@pytest.fixture
def fake_openai(monkeypatch):
    module = type(sys)("openai")
    module.OpenAI = _FakeOpenAI
    _FakeOpenAI.instances = []
    _FakeOpenAI.fail = False
    monkeypatch.setitem(sys.modules, "openai", module)
    yield _FakeOpenAI
    _FakeOpenAI.fail = False


def test_embedding_batches_and_keeps_order(fake_openai):
    adapter = OpenAIEmbeddingAdapter(model="m", api_key="k", batch_size=2, timeout_s=5)
    vectors = adapter.embed_texts(["a", "bb", "ccc"])

    assert vectors == [[1.0, 0.0], [2.0, 1.0], [3.0, 0.0]]
    client = fake_openai.instances[0]
    assert client.embedding_calls == [["a", "bb"], ["ccc"]]
    assert client.kwargs["timeout"] == 5
    assert client.kwargs["max_retries"] == 0


def test_embed_query_returns_single_vector(fake_openai):
    assert OpenAIEmbeddingAdapter().embed_query("abcd") == [4.0, 0.0]


def test_embedding_transport_error_is_translated(fake_openai):
    fake_openai.fail = True
    with pytest.raises(EmbeddingServiceError, match="rate limited"):
        OpenAIEmbeddingAdapter().embed_texts(["x"])


def test_client_is_not_created_until_first_call(fake_openai):
    OpenAIEmbeddingAdapter()
    OpenAICompletionAdapter()
    assert fake_openai.instances == []


def test_completion_passes_sampling_parameters(fake_openai):
    adapter = OpenAICompletionAdapter(model="gpt-test", base_url="http://localhost:8000/v1")
    text = adapter.complete(
        PromptText(text="hello", template_version="v1"),
        GenerationConfig(top_k=2, temperature=0.3, top_p=0.8, max_tokens=64),
    )

    assert text == "Name: A\nDescription: B\nPersonality: C"
    client = fake_openai.instances[0]
    call = client.chat_calls[0]
    assert call["model"] == "gpt-test"
    assert call["temperature"] == 0.3
    assert call["top_p"] == 0.8
    assert call["max_tokens"] == 64
    assert call["messages"] == [{"role": "user", "content": "hello"}]
    assert client.kwargs["base_url"] == "http://localhost:8000/v1"


def test_completion_omits_max_tokens_when_unset(fake_openai):
    OpenAICompletionAdapter().complete(PromptText("p", "v1"), GenerationConfig())
    assert "max_tokens" not in fake_openai.instances[0].chat_calls[0]


def test_completion_error_is_translated(fake_openai):
    fake_openai.fail = True
    with pytest.raises(CompletionServiceError, match="upstream 500"):
        OpenAICompletionAdapter().complete(PromptText("p", "v1"), GenerationConfig())


def test_non_finite_embedding_is_malformed_response(fake_openai, monkeypatch):
    def create(model, input):  # noqa: A002
        return SimpleNamespace(data=[SimpleNamespace(index=0, embedding=[float("nan"), 1.0])])

    adapter = OpenAIEmbeddingAdapter()
    monkeypatch.setattr(adapter._get_client().embeddings, "create", create)
    with pytest.raises(EmbeddingServiceError, match="non-finite"):
        adapter.embed_query("x")
