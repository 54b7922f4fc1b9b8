"""Tests for the extract_clauses.py command-line tool."""
from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import duckdb

from clauselab.config import DEFAULT_CONFIG, ExtractionConfig, config_to_dict
from clauselab.extractor import extract_clauses
from scripts.extract_clauses import build_parser, resolve_schema, summarize

CONTRACT = (
    "1. INDEMNITY. Each party shall indemnify the other.\n"
    "2. TERM. This agreement lasts one year.\n"
    "3. MISCELLANEOUS. (a) This Agreement shall be governed by the laws of Delaware. "
    "(b) Notices shall be given in writing.\n"
)


def _run(root: Path, args: list[str]) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    env["PYTHONPATH"] = str(root / "src")
    return subprocess.run(
        [sys.executable, str(root / "scripts" / "extract_clauses.py"), *args],
        cwd=str(root),
        env=env,
        capture_output=True,
        text=True,
        check=False,
    )


class TestResolveSchema:
    def test_no_schema(self) -> None:
        args = build_parser().parse_args(["--input", "x.txt"])
        assert resolve_schema(args) is None

    def test_flags_override_file(self, tmp_path: Path) -> None:
        schema_path = tmp_path / "schema.json"
        schema_path.write_text(json.dumps({"mainClause": "roman-upper", "subClause1": "paren-alpha"}))
        args = build_parser().parse_args(
            ["--input", "x.txt", "--schema", str(schema_path), "--main-clause", "numeric"]
        )
        schema = resolve_schema(args)
        assert schema is not None
        assert schema.main_clause == "numeric"
        assert schema.sub_clause_1 == "paren-alpha"


class TestSummarize:
    def test_counts(self) -> None:
        clauses = extract_clauses(CONTRACT, schema={"mainClause": "numeric"})
        summary = summarize(clauses)
        assert summary["clause_count"] == len(clauses) == 4
        assert summary["repository_matched"] == 0
        assert sum(summary["type_distribution"].values()) == 4
        assert summary["clauses"][0]["similarity_score"] == 0.0
        assert summary["config"] == config_to_dict(DEFAULT_CONFIG)

    def test_camel_case_keys(self) -> None:
        clauses = extract_clauses(CONTRACT, schema={"mainClause": "numeric"})
        first = summarize(clauses, camel_case=True)["clauses"][0]
        assert first["matchedFromRepository"] is False
        assert first["similarityScore"] == 0.0
        assert "matched_from_repository" not in first

    def test_config_reported(self) -> None:
        config = ExtractionConfig(default_party_role="Supplier")
        summary = summarize([], config=config)
        assert summary["config"]["default_party_role"] == "Supplier"
        assert summary["clauses"] == []


class TestCli:
    def test_extracts_to_stdout_and_sinks(self, tmp_path: Path) -> None:
        root = Path(__file__).resolve().parents[1]
        contract = tmp_path / "msa.txt"
        contract.write_text(CONTRACT, encoding="utf-8")
        out_jsonl = tmp_path / "out" / "clauses.jsonl"
        db_path = tmp_path / "out" / "clauses.duckdb"

        proc = _run(
            root,
            [
                "--input", str(contract),
                "--main-clause", "numeric",
                "--output", str(out_jsonl),
                "--save-db", str(db_path),
                "--document-name", "msa",
            ],
        )
        assert proc.returncode == 0, proc.stderr
        payload = json.loads(proc.stdout)
        assert payload["clause_count"] == 4
        assert [c["clause_type"] for c in payload["clauses"]] == [
            "Indemnification", "Termination", "Governing Law", "Notice Period",
        ]
        assert len(out_jsonl.read_text().splitlines()) == 4

        conn = duckdb.connect(str(db_path), read_only=True)
        try:
            count = conn.execute(
                "SELECT count(*) FROM clauses WHERE document_name = 'msa'"
            ).fetchone()
        finally:
            conn.close()
        assert count == (4,)

    def test_camel_case_json_output(self, tmp_path: Path) -> None:
        root = Path(__file__).resolve().parents[1]
        contract = tmp_path / "msa.txt"
        contract.write_text(CONTRACT, encoding="utf-8")
        out_json = tmp_path / "clauses.json"

        proc = _run(
            root,
            [
                "--input", str(contract),
                "--main-clause", "numeric",
                "--camel-case",
                "--output", str(out_json),
            ],
        )
        assert proc.returncode == 0, proc.stderr
        payload = json.loads(proc.stdout)
        assert payload["clauses"][0]["similarityScore"] == 0.0
        assert payload["config"]["repository_strategy"] == "grouped"

        records = json.loads(out_json.read_text())
        assert isinstance(records, list)
        assert len(records) == 4
        assert all("matchedFromRepository" in r for r in records)

    def test_repository_match_reported(self, tmp_path: Path) -> None:
        root = Path(__file__).resolve().parents[1]
        text = (
            "The Receiving Party shall keep all Confidential Information strictly "
            "confidential and shall not disclose it to any third party."
        )
        contract = tmp_path / "nda.txt"
        contract.write_text(text, encoding="utf-8")
        repo = tmp_path / "repo.json"
        repo.write_text(json.dumps([{"id": "r1", "clauseType": "Non-Disparagement", "clauseText": text}]))

        proc = _run(root, ["--input", str(contract), "--repository", str(repo)])
        assert proc.returncode == 0, proc.stderr
        payload = json.loads(proc.stdout)
        assert payload["repository_matched"] == 1
        assert payload["clauses"][0]["matched_from_repository"] is True
        assert payload["clauses"][0]["similarity_score"] > 0.12

    def test_missing_input_fails(self, tmp_path: Path) -> None:
        root = Path(__file__).resolve().parents[1]
        proc = _run(root, ["--input", str(tmp_path / "absent.txt")])
        assert proc.returncode == 1
        assert "Error" in proc.stderr
        assert proc.stdout == ""

    def test_bad_schema_file_fails(self, tmp_path: Path) -> None:
        root = Path(__file__).resolve().parents[1]
        contract = tmp_path / "msa.txt"
        contract.write_text(CONTRACT, encoding="utf-8")
        schema = tmp_path / "schema.json"
        schema.write_text(json.dumps({"mainClause": "hexadecimal"}))
        proc = _run(root, ["--input", str(contract), "--schema", str(schema)])
        assert proc.returncode == 1
        assert "Unknown numbering scheme" in proc.stderr
