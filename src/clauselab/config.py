"""Extraction tunables.

Every threshold the pipeline consults lives on ``ExtractionConfig`` so it can
be tuned from a JSON file without touching code. The defaults reproduce the
established heuristics.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

from clauselab.io_utils import load_json_object
from clauselab.repository import REPOSITORY_STRATEGIES, RepositoryStrategyName


@dataclass(frozen=True, slots=True)
class ExtractionConfig:
    """Thresholds and defaults for one extraction run."""

    # Repository matching
    repository_strategy: RepositoryStrategyName = "grouped"
    repository_threshold: float | None = None     # None -> strategy default
    repository_override_score: float = 0.2        # repo beats a keyword guess above this
    boilerplate_repository_score: float = 0.15    # catch-all pieces need more than this

    # Noise filters
    min_block_chars: int = 30
    min_cleaned_chars: int = 20

    # Classifier windows
    early_window: int = 50
    keyword_window: int = 200
    vocabulary_max_chars: int = 1500
    generic_min_chars: int = 100

    # Descriptive defaults on emitted clauses
    default_complexity: int = 5
    default_party_role: str = "Neutral"

    def __post_init__(self) -> None:
        if self.repository_strategy not in REPOSITORY_STRATEGIES:
            raise ValueError(f"Unknown repository strategy: {self.repository_strategy!r}")


DEFAULT_CONFIG = ExtractionConfig()


def config_from_dict(d: dict[str, Any]) -> ExtractionConfig:
    """Create an ExtractionConfig from a dict; unknown keys are ignored."""
    valid_fields = {f.name for f in fields(ExtractionConfig)}
    converted = {k: v for k, v in d.items() if k in valid_fields}
    return ExtractionConfig(**converted)


def config_to_dict(config: ExtractionConfig) -> dict[str, Any]:
    """Convert an ExtractionConfig to a JSON-serializable dict."""
    return asdict(config)


def load_config(path: Path) -> ExtractionConfig:
    """Load an ExtractionConfig from a JSON object file."""
    return config_from_dict(load_json_object(path, what="Config"))
