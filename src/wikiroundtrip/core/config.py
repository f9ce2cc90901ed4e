# src/wikiroundtrip/core/config.py
"""
Replay configuration schema and loading.

Uses Pydantic for validation. Settings are frozen (immutable) after
construction. Values come from CLI flags, optionally layered over a YAML
settings file (CLI flags win).
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from wikiroundtrip.contracts.enums import Dialect

DEFAULT_TIMING_ITERATIONS = 10000


class ReplaySettings(BaseModel):
    """Configuration for one replay run.

    Example YAML:
        transformer: QuoteTransformer
        dialect: manual
        timing_mode: true
        iteration_count: 500
        transformer_options:
          inTemplate: false
    """

    model_config = {"frozen": True}

    input_file: Path = Field(description="Transcript to replay")
    transformer: str = Field(description="Catalogue name of the transformer under test")
    dialect: Dialect = Field(default=Dialect.GENERATED)
    timing_mode: bool = Field(default=False, description="Repeat the replay and report timings")
    iteration_count: int | None = Field(
        default=None,
        gt=0,
        description="Replay repetitions in timing mode (default 10000)",
    )
    verbose: bool = Field(default=False, description="Report passing comparisons too")
    log: bool = Field(default=False, description="Enable debug logging")
    break_line: int | None = Field(
        default=None,
        ge=1,
        description="1-based transcript line that triggers a debug hook",
    )
    workers: int = Field(default=1, ge=1, description="Threads used to drain pipelines")
    reset_between_tests: bool = Field(default=False)
    transformer_options: dict[str, Any] = Field(default_factory=dict)
    site_config: Path | None = Field(default=None)

    @property
    def iterations(self) -> int:
        """Number of full replays to run."""
        if not self.timing_mode:
            return 1
        return self.iteration_count if self.iteration_count is not None else DEFAULT_TIMING_ITERATIONS

    @property
    def wikitext_file(self) -> Path:
        """Sibling file holding the page source (extension replaced by .wt)."""
        return self.input_file.with_suffix(".wt")


def load_settings_file(path: Path) -> dict[str, Any]:
    """Read a YAML settings file into a plain dict.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the document is not a mapping
    """
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Settings file must contain a mapping, got {type(raw).__name__}")
    return raw


def build_settings(file_values: dict[str, Any], cli_values: dict[str, Any]) -> ReplaySettings:
    """Merge YAML values with CLI values (non-None CLI values win).

    Raises:
        pydantic.ValidationError: If the merged values are invalid
    """
    merged = dict(file_values)
    merged.update({k: v for k, v in cli_values.items() if v is not None})
    return ReplaySettings(**merged)
