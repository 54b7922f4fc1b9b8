"""Tests for clauselab.repository_store module."""
from pathlib import Path

import duckdb
import orjson
import pytest

from clauselab.extraction_types import ExtractedClause
from clauselab.repository_store import load_repository_clauses, save_extracted_clauses

RECORDS = [
    {"id": "r1", "clause_type": "Confidentiality", "clause_text": "Keep it secret."},
    {"id": "r2", "clauseType": "Waiver", "clauseText": "No waiver."},
    {"id": "r3", "clause_text": "no type"},
]


def _extracted(clause_type: str, text: str, score: float = 0.0) -> ExtractedClause:
    return ExtractedClause(
        clause_type=clause_type,
        clause_no="1. TERM",
        clause_text=text,
        preferred_position=f"Standard legal position for {clause_type}",
        party_role="Neutral",
        complexity=5,
        balance=0,
        matched_from_repository=score > 0.0,
        similarity_score=score,
    )


class TestLoadRepositoryClauses:
    def test_json_array(self, tmp_path: Path) -> None:
        path = tmp_path / "repo.json"
        path.write_bytes(orjson.dumps(RECORDS))
        clauses = load_repository_clauses(path)
        assert [c.id for c in clauses] == ["r1", "r2"]
        assert clauses[1].clause_type == "Waiver"

    def test_json_wrapped(self, tmp_path: Path) -> None:
        path = tmp_path / "repo.json"
        path.write_bytes(orjson.dumps({"clauses": RECORDS}))
        assert len(load_repository_clauses(path)) == 2

    def test_json_bad_shape(self, tmp_path: Path) -> None:
        path = tmp_path / "repo.json"
        path.write_bytes(orjson.dumps({"items": RECORDS}))
        with pytest.raises(ValueError, match="Repository JSON"):
            load_repository_clauses(path)

    def test_jsonl(self, tmp_path: Path) -> None:
        path = tmp_path / "repo.jsonl"
        path.write_bytes(b"\n".join(orjson.dumps(r) for r in RECORDS))
        assert [c.clause_type for c in load_repository_clauses(path)] == [
            "Confidentiality", "Waiver",
        ]

    def test_duckdb(self, tmp_path: Path) -> None:
        path = tmp_path / "repo.duckdb"
        conn = duckdb.connect(str(path))
        conn.execute("CREATE TABLE labeled (id VARCHAR, clause_type VARCHAR, clause_text VARCHAR)")
        conn.execute("INSERT INTO labeled VALUES ('a', 'Insurance', 'Carry insurance.')")
        conn.execute("INSERT INTO labeled VALUES ('b', NULL, 'untyped')")
        conn.close()
        clauses = load_repository_clauses(path, table="labeled")
        assert len(clauses) == 1
        assert clauses[0].id == "a"
        assert clauses[0].clause_no == ""

    def test_duckdb_missing_table(self, tmp_path: Path) -> None:
        path = tmp_path / "repo.duckdb"
        duckdb.connect(str(path)).close()
        with pytest.raises(ValueError, match="not found"):
            load_repository_clauses(path)

    def test_invalid_table_name(self, tmp_path: Path) -> None:
        path = tmp_path / "repo.duckdb"
        duckdb.connect(str(path)).close()
        with pytest.raises(ValueError, match="Invalid table name"):
            load_repository_clauses(path, table="clauses; DROP TABLE x")

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_repository_clauses(tmp_path / "absent.json")

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        path = tmp_path / "repo.csv"
        path.write_text("id,clause_type\n")
        with pytest.raises(ValueError, match="Unsupported repository format"):
            load_repository_clauses(path)


class TestSaveExtractedClauses:
    def test_appends_rows(self, tmp_path: Path) -> None:
        path = tmp_path / "out" / "clauses.duckdb"
        first = [_extracted("Termination", "One year."), _extracted("Waiver", "No waiver.", 0.42)]
        assert save_extracted_clauses(first, path, document_name="msa.txt") == 2
        assert save_extracted_clauses([_extracted("Insurance", "Insure.")], path) == 1

        conn = duckdb.connect(str(path), read_only=True)
        try:
            rows = conn.execute(
                "SELECT document_name, position, clause_type, matched_from_repository, "
                "similarity_score FROM clauses ORDER BY document_name NULLS LAST, position"
            ).fetchall()
        finally:
            conn.close()
        assert rows == [
            ("msa.txt", 0, "Termination", False, 0.0),
            ("msa.txt", 1, "Waiver", True, 0.42),
            (None, 0, "Insurance", False, 0.0),
        ]

    def test_empty_creates_table(self, tmp_path: Path) -> None:
        path = tmp_path / "clauses.duckdb"
        assert save_extracted_clauses([], path, table="results") == 0
        conn = duckdb.connect(str(path), read_only=True)
        try:
            tables = {r[0] for r in conn.execute("SHOW TABLES").fetchall()}
        finally:
            conn.close()
        assert "results" in tables

    def test_invalid_table_name(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Invalid table name"):
            save_extracted_clauses([], tmp_path / "x.duckdb", table="bad-name")
