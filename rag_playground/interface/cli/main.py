"""CLI for the playground: build an index from a text file and query it once."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rag_playground.application.dto.index_dto import BuildIndexRequest
from rag_playground.application.dto.query_dto import QueryAnswer, RunQueryRequest
from rag_playground.config.composition import build_use_cases
from rag_playground.config.logging_setup import configure_logging
from rag_playground.config.settings import AppSettings
from rag_playground.domain.errors import DomainError, InvalidConfig

logger = logging.getLogger(__name__)

DEFAULT_QUERY = "Who are the characters in this story, and what are they like?"


def build_parser(settings: AppSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rag-playground",
        description="Chunk, embed and index a plain-text document, then query it.",
    )
    parser.add_argument("--document", required=True, help="Path to a UTF-8 .txt file")
    parser.add_argument("--query", default=DEFAULT_QUERY)
    parser.add_argument("--chunk-size", type=int, default=settings.chunk_size)
    parser.add_argument("--chunk-overlap", type=int, default=settings.chunk_overlap)
    parser.add_argument("--top-k", type=int, default=settings.top_k)
    parser.add_argument("--temperature", type=float, default=settings.temperature)
    parser.add_argument("--top-p", type=float, default=settings.top_p)
    parser.add_argument("--max-tokens", type=int, default=None)
    parser.add_argument(
        "--strict", action="store_true", default=settings.strict_parse,
        help="Fail if any answer block is malformed",
    )
    parser.add_argument("--raw", action="store_true", help="Print the raw model answer")
    return parser


def read_document(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as ex:
        raise InvalidConfig(f"cannot read document '{path}': {ex}") from ex


def format_error(err: BaseException) -> str:
    kind = getattr(err, "kind", "internal")
    return f"[ERROR] {type(err).__name__} ({kind}): {err}"


def print_answer(answer: QueryAnswer, raw: bool) -> None:
    if raw:
        print(answer.answer_text)
        return
    print("\n" + "=" * 80)
    print("CHARACTERS:")
    print("=" * 80)
    for i, rec in enumerate(answer.records, 1):
        print(f"[{i}] {rec.name}")
        print(f"    Description: {rec.description}")
        print(f"    Personality: {rec.personality}")
    if answer.skipped:
        print(f"\n({len(answer.skipped)} malformed block(s) skipped)")
    print("\n" + "=" * 80)
    print("SOURCES:")
    print("=" * 80)
    for hit in answer.retrieved:
        print(f"{hit.node.id} (score={hit.score:.3f}, tokens={hit.node.chunk.token_count})")


def main(argv: list[str] | None = None) -> int:
    try:
        settings = AppSettings()
    except ValueError as ex:
        print(format_error(InvalidConfig(f"bad environment setting: {ex}")), file=sys.stderr)
        return 2
    args = build_parser(settings).parse_args(argv)
    configure_logging(settings.log_level)

    try:
        document = read_document(args.document)
        builder, querier = build_use_cases(settings)
    except DomainError as err:
        print(format_error(err), file=sys.stderr)
        return 2

    built = builder.execute(
        BuildIndexRequest(
            document=document, chunk_size=args.chunk_size, chunk_overlap=args.chunk_overlap
        )
    )
    if not built.ok or built.value is None:
        print(format_error(built.error or DomainError("index build failed")), file=sys.stderr)
        return 1
    logger.info("index ready: %d nodes", built.value.size())

    result = querier.execute(
        RunQueryRequest(
            query=args.query,
            index=built.value,
            top_k=args.top_k,
            temperature=args.temperature,
            top_p=args.top_p,
            max_tokens=args.max_tokens,
            strict_parse=args.strict,
        )
    )
    if not result.ok or result.value is None:
        print(format_error(result.error or DomainError("query failed")), file=sys.stderr)
        return 1

    print_answer(result.value, args.raw)
    return 0


if __name__ == "__main__":
    sys.exit(main())
