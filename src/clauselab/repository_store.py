"""Loading repository clauses and storing extraction results.

Repository sources, picked by file suffix:
  .json     array of clause records, or {"clauses": [...]}
  .jsonl    one clause record per line
  .duckdb   table with id, clause_type, clause_text, clause_no columns

Extracted clauses can be appended to a writable DuckDB table, the sink the
command-line tool uses in place of the caller's own clause store.
"""
from __future__ import annotations

import importlib
import logging
import re
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from clauselab.extraction_types import ExtractedClause
from clauselab.io_utils import load_json, load_jsonl
from clauselab.repository import RepositoryClause, coerce_repository

log = logging.getLogger(__name__)

_duckdb_mod = importlib.import_module("duckdb")

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_CLAUSES_DDL = """
CREATE TABLE IF NOT EXISTS {table} (
    document_name VARCHAR,
    position INTEGER NOT NULL,
    clause_type VARCHAR NOT NULL,
    clause_no VARCHAR NOT NULL DEFAULT '',
    clause_text VARCHAR NOT NULL,
    preferred_position VARCHAR NOT NULL DEFAULT '',
    party_role VARCHAR NOT NULL DEFAULT 'Neutral',
    complexity INTEGER NOT NULL DEFAULT 5,
    balance INTEGER NOT NULL DEFAULT 0,
    matched_from_repository BOOLEAN NOT NULL DEFAULT FALSE,
    similarity_score DOUBLE,
    extracted_at TIMESTAMP DEFAULT current_timestamp
);
"""

_INSERT_SQL = """
INSERT INTO {table} (
    document_name, position, clause_type, clause_no, clause_text,
    preferred_position, party_role, complexity, balance,
    matched_from_repository, similarity_score, extracted_at
) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
"""


def _check_identifier(table: str) -> str:
    if not _IDENTIFIER_RE.match(table):
        raise ValueError(f"Invalid table name: {table!r}")
    return table


def _load_duckdb(path: Path, table: str) -> list[dict[str, Any]]:
    conn = _duckdb_mod.connect(str(path), read_only=True)
    try:
        existing = {str(r[0]) for r in conn.execute("SHOW TABLES").fetchall()}
        if table not in existing:
            raise ValueError(f"Table {table!r} not found in {path}")
        columns = {
            str(r[0]) for r in conn.execute(f"DESCRIBE {table}").fetchall()
        }
        clause_no = "clause_no" if "clause_no" in columns else "''"
        rows = conn.execute(
            f"SELECT id, clause_type, clause_text, {clause_no} FROM {table}"
        ).fetchall()
    finally:
        conn.close()
    return [
        {
            "id": str(r[0]) if r[0] is not None else "",
            "clause_type": r[1],
            "clause_text": r[2] or "",
            "clause_no": r[3] or "",
        }
        for r in rows
    ]


def load_repository_clauses(path: Path, table: str = "clauses") -> tuple[RepositoryClause, ...]:
    """Load labeled clauses from a JSON, JSONL or DuckDB file.

    Records without a ``clause_type`` are skipped.

    Raises:
        FileNotFoundError: if ``path`` does not exist.
        ValueError: for an unsupported suffix, a malformed JSON payload or
            a missing DuckDB table.
    """
    if not path.exists():
        raise FileNotFoundError(f"Repository file not found: {path}")

    suffix = path.suffix.lower()
    records: Sequence[Any]
    if suffix == ".json":
        payload = load_json(path)
        if isinstance(payload, dict):
            payload = payload.get("clauses")
        if not isinstance(payload, list):
            raise ValueError(f"Repository JSON must be an array or {{'clauses': [...]}}: {path}")
        records = payload
    elif suffix == ".jsonl":
        records = load_jsonl(path)
    elif suffix in (".duckdb", ".db"):
        records = _load_duckdb(path, _check_identifier(table))
    else:
        raise ValueError(f"Unsupported repository format: {path.suffix or path.name}")

    clauses = coerce_repository(r for r in records if isinstance(r, dict))
    log.info("Loaded %d repository clauses from %s", len(clauses), path)
    return clauses


def save_extracted_clauses(
    clauses: Sequence[ExtractedClause],
    path: Path,
    table: str = "clauses",
    document_name: str | None = None,
) -> int:
    """Append extracted clauses to a DuckDB table; returns rows written."""
    table = _check_identifier(table)
    path.parent.mkdir(parents=True, exist_ok=True)
    now = datetime.now(UTC).replace(tzinfo=None)
    rows = [
        (
            document_name,
            i,
            c.clause_type,
            c.clause_no,
            c.clause_text,
            c.preferred_position,
            c.party_role,
            c.complexity,
            c.balance,
            c.matched_from_repository,
            c.similarity_score,
            now,
        )
        for i, c in enumerate(clauses)
    ]
    conn = _duckdb_mod.connect(str(path))
    try:
        conn.execute(_CLAUSES_DDL.format(table=table))
        if rows:
            conn.executemany(_INSERT_SQL.format(table=table), rows)
    finally:
        conn.close()
    log.info("Saved %d clauses to %s (%s)", len(rows), path, table)
    return len(rows)
