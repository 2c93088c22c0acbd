import pytest

from rag_playground.domain.errors import ParseError
from rag_playground.domain.models import AnswerRecord
from rag_playground.domain.services.answer_parsing import parse_answer, split_paragraphs

EXAMPLE = (
    "Name: Alice\nDescription: brave\nPersonality: bold\n\n"
    "Name: Bob\nDescription: calm\nPersonality: wise\n"
)


def test_parses_example_into_two_records():
    parsed = parse_answer(EXAMPLE)
    assert parsed.records == (
        AnswerRecord("Alice", "brave", "bold"),
        AnswerRecord("Bob", "calm", "wise"),
    )
    assert parsed.complete


def test_tolerates_crlf_extra_blank_lines_and_padding():
    raw = (
        "\r\n  Name:  Alice \r\nDescription: brave\r\n Personality: bold\r\n"
        "\r\n   \r\n\r\nName: Bob\nDescription: calm\nPersonality: wise\n\n\n"
    )
    parsed = parse_answer(raw)
    assert [r.name for r in parsed.records] == ["Alice", "Bob"]
    assert parsed.records[0].personality == "bold"


def test_malformed_block_is_skipped_and_reported():
    raw = (
        "Here are the characters:\n\n"
        "Name: Alice\nDescription: brave\nPersonality: bold\n\n"
        "Name: Bob\nPersonality: wise\n\n"
        "Description: calm\nName: Carol\nPersonality: kind"
    )
    parsed = parse_answer(raw)

    assert [r.name for r in parsed.records] == ["Alice"]
    assert not parsed.complete
    assert [e.paragraph for e in parsed.skipped] == [0, 2, 3]
    assert "expected 3 lines" in parsed.skipped[1].reason
    assert "Name:" in parsed.skipped[2].reason


def test_strict_mode_raises_first_parse_error():
    raw = "Name: Alice\nDescription: brave\n\nName: Bob\nDescription: calm\nPersonality: wise"
    with pytest.raises(ParseError) as info:
        parse_answer(raw, strict=True)
    assert info.value.paragraph == 0
    assert info.value.kind == "parse"


def test_empty_response_has_no_records():
    parsed = parse_answer("  \n\n ")
    assert parsed.records == ()
    assert parsed.skipped == ()


def test_empty_field_values_are_kept():
    parsed = parse_answer("Name: X\nDescription:\nPersonality: quiet")
    assert parsed.records == (AnswerRecord("X", "", "quiet"),)


def test_split_paragraphs():
    assert split_paragraphs("a\nb\n\n\nc") == ["a\nb", "c"]
