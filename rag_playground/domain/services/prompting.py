"""Prompt assembly for the structured character answer.

The instruction block is versioned and not user-editable: the answer parser's
grammar depends on it. Changing the wording means bumping the version.
"""

from __future__ import annotations

from rag_playground.domain.errors import InvalidConfig
from rag_playground.domain.models import PromptText, RetrievalResult

PROMPT_TEMPLATE_VERSION = "v1"

ANSWER_FORMAT_INSTRUCTION = (
    "List the name, description, and personality of every character in the "
    "following format, one block per character, blocks separated by a blank line. "
    "Do not add any other text.\n\n"
    "Name: [name]\n"
    "Description: [description]\n"
    "Personality: [personality]"
)

PROMPT_TEMPLATE = (
    "Context information is below.\n"
    "---------------------\n"
    "{context}\n"
    "---------------------\n"
    "Given the context information and not prior knowledge, answer the query.\n"
    "Query: {query}\n\n"
    "{instruction}\n"
    "Answer:"
)


def build_prompt(query: str, retrieved: RetrievalResult) -> PromptText:
    if not query or not query.strip():
        raise InvalidConfig("query must not be empty")
    context = "\n\n".join(hit.node.text for hit in retrieved if hit.node.text.strip())
    text = PROMPT_TEMPLATE.format(
        context=context,
        query=query.strip(),
        instruction=ANSWER_FORMAT_INSTRUCTION,
    )
    return PromptText(text=text, template_version=PROMPT_TEMPLATE_VERSION)
