"""Tests for the analyze_clause.py command-line tool."""
from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from scripts.analyze_clause import run


def _run(root: Path, args: list[str], stdin: str | None = None) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    env["PYTHONPATH"] = str(root / "src")
    return subprocess.run(
        [sys.executable, str(root / "scripts" / "analyze_clause.py"), *args],
        cwd=str(root),
        env=env,
        input=stdin,
        capture_output=True,
        text=True,
        check=False,
    )


class TestRun:
    def test_all_checks(self) -> None:
        payload = run("Supplier shall indemnify Customer.", None)
        assert set(payload) == {
            "risks", "improvements", "alternatives", "balance_assessment", "compliance",
        }
        assert payload["balance_assessment"]["score"] == 0

    def test_single_action(self) -> None:
        assert run("Supplier acts in its sole discretion.", "balance")["balance"]["score"] == 3

    def test_unknown_action(self) -> None:
        with pytest.raises(ValueError):
            run("text", "rewrite")


class TestCli:
    def test_stdin_action(self) -> None:
        root = Path(__file__).resolve().parents[1]
        proc = _run(
            root,
            ["--input", "-", "--action", "analyze"],
            stdin="Supplier may terminate at its sole discretion.",
        )
        assert proc.returncode == 0, proc.stderr
        payload = json.loads(proc.stdout)
        assert payload == {"risks": ["One-sided discretionary power found."]}

    def test_file_input(self, tmp_path: Path) -> None:
        root = Path(__file__).resolve().parents[1]
        clause = tmp_path / "clause.txt"
        clause.write_text("The obligations are mutual.", encoding="utf-8")
        proc = _run(root, ["--input", str(clause)])
        assert proc.returncode == 0, proc.stderr
        payload = json.loads(proc.stdout)
        assert payload["compliance"]["status"] == "warning"
        assert payload["improvements"]

    def test_unknown_action_fails(self, tmp_path: Path) -> None:
        root = Path(__file__).resolve().parents[1]
        clause = tmp_path / "clause.txt"
        clause.write_text("Any clause.", encoding="utf-8")
        proc = _run(root, ["--input", str(clause), "--action", "rewrite"])
        assert proc.returncode == 1
        assert "Unknown analysis action" in proc.stderr
