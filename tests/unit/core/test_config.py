"""Tests for replay settings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from wikiroundtrip.contracts import Dialect
from wikiroundtrip.core.config import DEFAULT_TIMING_ITERATIONS, ReplaySettings, build_settings, load_settings_file


class TestReplaySettings:
    def test_defaults(self) -> None:
        settings = ReplaySettings(input_file=Path("t.txt"), transformer="QuoteTransformer")

        assert settings.dialect == Dialect.GENERATED
        assert settings.iterations == 1
        assert settings.workers == 1

    def test_timing_mode_defaults_to_ten_thousand_iterations(self) -> None:
        settings = ReplaySettings(input_file=Path("t.txt"), transformer="X", timing_mode=True)

        assert settings.iterations == DEFAULT_TIMING_ITERATIONS == 10000

    def test_iteration_count_in_timing_mode(self) -> None:
        settings = ReplaySettings(input_file=Path("t.txt"), transformer="X", timing_mode=True, iteration_count=5)

        assert settings.iterations == 5

    def test_iteration_count_ignored_outside_timing_mode(self) -> None:
        settings = ReplaySettings(input_file=Path("t.txt"), transformer="X", iteration_count=5)

        assert settings.iteration_count == 5
        assert settings.iterations == 1

    @pytest.mark.parametrize("field", ["break_line", "workers"])
    def test_non_positive_rejected(self, field: str) -> None:
        with pytest.raises(ValidationError):
            ReplaySettings(input_file=Path("t.txt"), transformer="X", **{field: 0})

    def test_frozen(self) -> None:
        settings = ReplaySettings(input_file=Path("t.txt"), transformer="X")

        with pytest.raises(ValidationError):
            settings.verbose = True  # type: ignore[misc]

    def test_wikitext_file_is_sibling_with_wt_extension(self) -> None:
        settings = ReplaySettings(input_file=Path("dir/page.txt"), transformer="X")

        assert settings.wikitext_file == Path("dir/page.wt")


class TestBuildSettings:
    def test_cli_values_win_over_file(self) -> None:
        settings = build_settings(
            {"input_file": "a.txt", "transformer": "ListHandler", "verbose": False},
            {"transformer": "PreHandler", "verbose": True, "workers": None},
        )

        assert settings.transformer == "PreHandler"
        assert settings.verbose is True
        assert settings.input_file == Path("a.txt")

    def test_load_settings_file(self, tmp_path: Path) -> None:
        path = tmp_path / "replay.yaml"
        path.write_text("transformer: QuoteTransformer\ndialect: manual\n", encoding="utf-8")

        assert load_settings_file(path) == {"transformer": "QuoteTransformer", "dialect": "manual"}

    def test_load_settings_file_rejects_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "replay.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping"):
            load_settings_file(path)
