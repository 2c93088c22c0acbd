"""Tests for the RunQuery use case."""

from collections.abc import Sequence

from rag_playground.application.dto.index_dto import BuildIndexRequest
from rag_playground.application.dto.query_dto import RunQueryRequest
from rag_playground.application.use_cases.build_index import BuildIndex
from rag_playground.application.use_cases.run_query import RunQuery
from rag_playground.domain.errors import (
    CompletionServiceError,
    EmbeddingServiceError,
    InvalidConfig,
    ParseError,
    RetrievalError,
)
from rag_playground.domain.models import PromptText
from rag_playground.domain.services.tokenization import WhitespaceTokenizer
from rag_playground.domain.value_objects import GenerationConfig

ANSWER = "Name: Alice\nDescription: brave\nPersonality: bold\n\nName: Bob\nDescription: calm\nPersonality: wise\n"


class KeywordEmbedding:
    """Fake embedding: one dimension per keyword, counts occurrences."""

    KEYWORDS = ("alice", "bob", "castle", "sea")

    def _vec(self, text: str) -> list[float]:
        low = text.lower()
        return [float(low.count(k)) for k in self.KEYWORDS]

    def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        return [self._vec(t) for t in texts]

    def embed_query(self, text: str) -> list[float]:
        return self._vec(text)


class FakeLLM:
    def __init__(self, response: str = ANSWER) -> None:
        self.response = response
        self.prompts: list[PromptText] = []
        self.configs: list[GenerationConfig] = []

    def complete(self, prompt: PromptText, config: GenerationConfig) -> str:
        self.prompts.append(prompt)
        self.configs.append(config)
        return self.response


class FailingLLM:
    def complete(self, prompt: PromptText, config: GenerationConfig) -> str:
        raise CompletionServiceError("503 from upstream")


class FailingQueryEmbedding(KeywordEmbedding):
    def embed_query(self, text: str) -> list[float]:
        raise TimeoutError("timed out")


DOC = "Alice lives in the castle. Bob sails the sea. The castle is old. The sea is deep."


def build(embedding=None):
    uc = BuildIndex(tokenizer=WhitespaceTokenizer(), embedding=embedding or KeywordEmbedding())
    result = uc.execute(BuildIndexRequest(document=DOC, chunk_size=5, chunk_overlap=1))
    assert result.ok and result.value is not None
    return result.value


class TestRunQuery:
    def test_happy_path_returns_raw_text_and_records(self) -> None:
        llm = FakeLLM()
        uc = RunQuery(embedding=KeywordEmbedding(), llm=llm)
        result = uc.execute(RunQueryRequest(query="Who is Alice?", index=build(), top_k=2))

        assert result.ok
        answer = result.value
        assert answer is not None
        assert answer.answer_text == ANSWER
        assert [r.name for r in answer.records] == ["Alice", "Bob"]
        assert answer.skipped == ()
        assert len(answer.retrieved) == 2
        assert "Alice" in answer.retrieved.hits[0].node.text
        assert llm.prompts[0].text == answer.prompt.text
        assert "Query: Who is Alice?" in llm.prompts[0].text

    def test_generation_parameters_reach_the_llm(self) -> None:
        llm = FakeLLM()
        uc = RunQuery(embedding=KeywordEmbedding(), llm=llm)
        uc.execute(
            RunQueryRequest(query="sea", index=build(), top_k=1, temperature=0.7, top_p=0.9)
        )
        assert llm.configs[0] == GenerationConfig(top_k=1, temperature=0.7, top_p=0.9)

    def test_top_k_larger_than_index_is_clamped(self) -> None:
        index = build()
        uc = RunQuery(embedding=KeywordEmbedding(), llm=FakeLLM())
        result = uc.execute(RunQueryRequest(query="castle", index=index, top_k=50))

        assert result.ok and result.value is not None
        assert len(result.value.retrieved) == index.size()

    def test_empty_query_is_invalid(self) -> None:
        uc = RunQuery(embedding=KeywordEmbedding(), llm=FakeLLM())
        result = uc.execute(RunQueryRequest(query="  ", index=build()))
        assert isinstance(result.error, InvalidConfig)

    def test_out_of_range_temperature_is_invalid(self) -> None:
        llm = FakeLLM()
        uc = RunQuery(embedding=KeywordEmbedding(), llm=llm)
        result = uc.execute(RunQueryRequest(query="sea", index=build(), temperature=2.0))
        assert isinstance(result.error, InvalidConfig)
        assert llm.prompts == []

    def test_empty_index_is_retrieval_error(self) -> None:
        empty = BuildIndex(WhitespaceTokenizer(), KeywordEmbedding()).execute(
            BuildIndexRequest(document="", chunk_size=5, chunk_overlap=1)
        )
        assert empty.value is not None
        uc = RunQuery(embedding=KeywordEmbedding(), llm=FakeLLM())
        result = uc.execute(RunQueryRequest(query="sea", index=empty.value))
        assert isinstance(result.error, RetrievalError)

    def test_query_from_other_embedding_space_is_retrieval_error(self) -> None:
        class WideEmbedding(KeywordEmbedding):
            def embed_query(self, text: str) -> list[float]:
                return super().embed_query(text) + [0.0]

        uc = RunQuery(embedding=WideEmbedding(), llm=FakeLLM())
        result = uc.execute(RunQueryRequest(query="sea", index=build()))
        assert isinstance(result.error, RetrievalError)

    def test_query_embedding_failure_is_service_error(self) -> None:
        llm = FakeLLM()
        uc = RunQuery(embedding=FailingQueryEmbedding(), llm=llm)
        result = uc.execute(RunQueryRequest(query="sea", index=build()))

        assert isinstance(result.error, EmbeddingServiceError)
        assert result.error.kind == "service"
        assert llm.prompts == []

    def test_completion_failure_is_service_error(self) -> None:
        uc = RunQuery(embedding=KeywordEmbedding(), llm=FailingLLM())
        result = uc.execute(RunQueryRequest(query="sea", index=build()))
        assert isinstance(result.error, CompletionServiceError)
        assert "503" in str(result.error)

    def test_malformed_block_is_skipped_by_default(self) -> None:
        raw = "Sure! Here you go.\n\n" + ANSWER
        uc = RunQuery(embedding=KeywordEmbedding(), llm=FakeLLM(raw))
        result = uc.execute(RunQueryRequest(query="sea", index=build()))

        assert result.ok and result.value is not None
        assert len(result.value.records) == 2
        assert len(result.value.skipped) == 1
        assert result.value.answer_text == raw

    def test_strict_parse_fails_the_query(self) -> None:
        uc = RunQuery(embedding=KeywordEmbedding(), llm=FakeLLM("Name: Alice"))
        result = uc.execute(RunQueryRequest(query="sea", index=build(), strict_parse=True))
        assert isinstance(result.error, ParseError)
