#!/usr/bin/env python3
"""Extract typed clauses from contract text with the rule-based engine.

Reads plain contract text (already extracted from PDF/DOCX), optionally
compares blocks against a repository of labeled clauses, and prints a JSON
summary with every extracted clause.

Usage:
    python3 scripts/extract_clauses.py --input contract.txt
    python3 scripts/extract_clauses.py --input contract.txt \\
        --repository clauses.json --main-clause roman-upper --sub-clause-1 paren-alpha
    cat contract.txt | python3 scripts/extract_clauses.py --input - \\
        --output out/clauses.jsonl --save-db out/clauses.duckdb
    python3 scripts/extract_clauses.py --input contract.txt --camel-case \\
        --output out/clauses.json

Structured JSON output goes to stdout; human messages go to stderr.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import orjson

from clauselab.config import DEFAULT_CONFIG, ExtractionConfig, config_to_dict, load_config
from clauselab.extraction_types import ExtractedClause, clause_to_dict
from clauselab.extractor import extract_clauses
from clauselab.io_utils import load_json_object, read_text, save_json, save_jsonl
from clauselab.numbering import NO_SCHEME, SCHEME_IDS, NumberingSchema
from clauselab.repository import RepositoryClause
from clauselab.repository_store import load_repository_clauses, save_extracted_clauses
from clauselab.vocabulary import DEFAULT_VOCABULARY, ClauseVocabulary

logger = logging.getLogger("extract_clauses")

_SCHEME_CHOICES = sorted(SCHEME_IDS) + [NO_SCHEME]


def dump_json(obj: Any) -> None:
    sys.stdout.buffer.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2))
    sys.stdout.buffer.write(b"\n")


def log(msg: str) -> None:
    print(msg, file=sys.stderr, flush=True)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the clause extraction CLI."""
    parser = argparse.ArgumentParser(
        description="Rule-based clause extraction from contract text",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--input", required=True,
        help="Contract text file (- for stdin)",
    )
    parser.add_argument(
        "--repository", type=Path, default=None,
        help="Labeled clauses (.json, .jsonl or .duckdb) used as similarity evidence",
    )
    parser.add_argument(
        "--repository-table", default="clauses",
        help="Table name when --repository is a DuckDB file",
    )
    parser.add_argument(
        "--schema", type=Path, default=None,
        help="JSON file with a numbering schema record (mainClause, subClause1, ...)",
    )
    parser.add_argument("--main-clause", choices=_SCHEME_CHOICES, default=None)
    parser.add_argument("--sub-clause-1", choices=_SCHEME_CHOICES, default=None)
    parser.add_argument("--sub-clause-2", choices=_SCHEME_CHOICES, default=None)
    parser.add_argument("--sub-clause-3", choices=_SCHEME_CHOICES, default=None)
    parser.add_argument(
        "--config", type=Path, default=None,
        help="JSON file overriding extraction thresholds",
    )
    parser.add_argument(
        "--vocabulary", type=Path, default=None,
        help="JSON file with customClauseTypes / customClauseTypes_deleted entries",
    )
    parser.add_argument(
        "--output", type=Path, default=None,
        help="Also write extracted clauses (.json array, otherwise JSONL)",
    )
    parser.add_argument(
        "--camel-case", action="store_true",
        help="Use camelCase provenance keys (matchedFromRepository, similarityScore)",
    )
    parser.add_argument(
        "--save-db", type=Path, default=None,
        help="Append extracted clauses to a DuckDB table",
    )
    parser.add_argument(
        "--document-name", default=None,
        help="Document name stored alongside clauses in --save-db",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Verbose output to stderr",
    )
    return parser


def resolve_schema(args: argparse.Namespace) -> NumberingSchema | None:
    """Merge --schema with the per-level flags; flags win."""
    payload: dict[str, Any] = {}
    if args.schema is not None:
        payload.update(load_json_object(args.schema, what="Schema"))
    flags = {
        ("main_clause", "mainClause"): args.main_clause,
        ("sub_clause_1", "subClause1"): args.sub_clause_1,
        ("sub_clause_2", "subClause2"): args.sub_clause_2,
        ("sub_clause_3", "subClause3"): args.sub_clause_3,
    }
    for (snake, camel), value in flags.items():
        if value is not None:
            payload.pop(camel, None)
            payload[snake] = value
    if not payload:
        return None
    return NumberingSchema.from_dict(payload)


def summarize(
    clauses: list[ExtractedClause],
    *,
    config: ExtractionConfig = DEFAULT_CONFIG,
    camel_case: bool = False,
) -> dict[str, Any]:
    """JSON summary printed on stdout, with the thresholds the run used."""
    type_counts: dict[str, int] = {}
    for c in clauses:
        type_counts[c.clause_type] = type_counts.get(c.clause_type, 0) + 1
    return {
        "clause_count": len(clauses),
        "repository_matched": sum(1 for c in clauses if c.matched_from_repository),
        "type_distribution": dict(sorted(type_counts.items(), key=lambda kv: (-kv[1], kv[0]))),
        "config": config_to_dict(config),
        "clauses": [clause_to_dict(c, camel_case=camel_case) for c in clauses],
    }


def run(args: argparse.Namespace) -> dict[str, Any]:
    """Execute one extraction; raises ValueError/FileNotFoundError on bad inputs."""
    text = read_text(args.input)
    schema = resolve_schema(args)
    config: ExtractionConfig = load_config(args.config) if args.config else DEFAULT_CONFIG
    vocabulary = (
        ClauseVocabulary.from_store(load_json_object(args.vocabulary, what="Vocabulary"))
        if args.vocabulary
        else DEFAULT_VOCABULARY
    )
    repository: tuple[RepositoryClause, ...] = ()
    if args.repository is not None:
        repository = load_repository_clauses(args.repository, args.repository_table)

    logger.info("Extracting clauses from %s (%d chars)", args.input, len(text))
    clauses = extract_clauses(
        text, repository, schema, vocabulary=vocabulary, config=config,
    )

    if args.output is not None:
        records = [clause_to_dict(c, camel_case=args.camel_case) for c in clauses]
        if args.output.suffix == ".json":
            save_json(records, args.output)
        else:
            save_jsonl(records, args.output)
        logger.info("Wrote %d clauses to %s", len(clauses), args.output)
    if args.save_db is not None:
        save_extracted_clauses(
            clauses, args.save_db, document_name=args.document_name or str(args.input),
        )
    return summarize(clauses, config=config, camel_case=args.camel_case)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    try:
        output = run(args)
    except (FileNotFoundError, ValueError) as exc:
        log(f"Error: {exc}")
        return 1

    log(f"Extracted {output['clause_count']} clauses "
        f"({output['repository_matched']} matched from repository)")
    dump_json(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
