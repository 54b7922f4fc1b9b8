"""I/O utilities for JSON, JSONL, and text file operations (orjson-backed)."""
from __future__ import annotations

import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import orjson


def load_json(path: Path) -> Any:
    """Load JSON from a file."""
    return orjson.loads(path.read_bytes())


def load_json_object(path: Path, *, what: str = "JSON") -> dict[str, Any]:
    """Load a JSON file that must hold an object.

    Raises:
        ValueError: if the payload is not a JSON object.
    """
    payload = load_json(path)
    if not isinstance(payload, dict):
        raise ValueError(f"{what} payload must be a JSON object: {path}")
    return payload


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    """Save an object as JSON with sorted keys."""
    path.parent.mkdir(parents=True, exist_ok=True)
    opts = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS if pretty else orjson.OPT_SORT_KEYS
    path.write_bytes(orjson.dumps(obj, option=opts))


def load_jsonl(path: Path) -> list[dict[str, Any]]:
    """Load a JSON Lines file (one JSON object per line). Blank lines skipped."""
    records: list[dict[str, Any]] = []
    for line in path.read_bytes().split(b"\n"):
        line = line.strip()
        if line:
            records.append(orjson.loads(line))
    return records


def save_jsonl(records: Iterable[dict[str, Any]], path: Path) -> None:
    """Save dicts as a JSON Lines file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [orjson.dumps(r) for r in records]
    path.write_bytes(b"\n".join(lines) + b"\n" if lines else b"")


def read_text(path: str | Path) -> str:
    """Read UTF-8 text from ``path``; ``-`` reads stdin."""
    if str(path) == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")
