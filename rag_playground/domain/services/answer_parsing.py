"""Parser for the model's Name/Description/Personality answer blocks.

Grammar: blocks separated by one or more blank lines; each block is exactly
three lines prefixed ``Name:``, ``Description:`` and ``Personality:`` in that
order. Whitespace around lines and values is ignored.

Policy for malformed blocks: skip the block, keep the well-formed ones, and
report every skipped block as a ParseError in ``ParsedAnswer.skipped``. With
``strict=True`` the first malformed block raises instead.
"""

from __future__ import annotations

import logging
import re

from rag_playground.domain.errors import ParseError
from rag_playground.domain.models import AnswerRecord, ParsedAnswer

logger = logging.getLogger(__name__)

FIELD_PREFIXES = ("Name:", "Description:", "Personality:")

_BLANK_LINES = re.compile(r"\n\s*\n")


def split_paragraphs(raw: str) -> list[str]:
    normalized = raw.replace("\r\n", "\n").replace("\r", "\n")
    return [p.strip() for p in _BLANK_LINES.split(normalized) if p.strip()]


def parse_paragraph(paragraph: str, number: int) -> AnswerRecord:
    lines = [ln.strip() for ln in paragraph.splitlines()]
    if len(lines) != len(FIELD_PREFIXES):
        raise ParseError(
            number, f"expected {len(FIELD_PREFIXES)} lines, got {len(lines)}", paragraph
        )
    values: list[str] = []
    for line, prefix in zip(lines, FIELD_PREFIXES, strict=True):
        if not line.startswith(prefix):
            raise ParseError(number, f"expected line starting with {prefix!r}", paragraph)
        values.append(line[len(prefix) :].strip())
    name, description, personality = values
    return AnswerRecord(name=name, description=description, personality=personality)


def parse_answer(raw: str, *, strict: bool = False) -> ParsedAnswer:
    records: list[AnswerRecord] = []
    skipped: list[ParseError] = []
    for number, paragraph in enumerate(split_paragraphs(raw or "")):
        try:
            records.append(parse_paragraph(paragraph, number))
        except ParseError as err:
            if strict:
                raise
            logger.warning("skipping malformed answer block: %s", err)
            skipped.append(err)
    return ParsedAnswer(records=tuple(records), skipped=tuple(skipped))
