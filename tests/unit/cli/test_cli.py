"""Tests for the wikiroundtrip CLI."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from wikiroundtrip.cli import NO_TRANSFORMER_MESSAGE, app, main
from wikiroundtrip.cli_formatters import USAGE

# Stderr output is combined with stdout by default when using CliRunner.invoke()
runner = CliRunner()


@pytest.fixture
def manual_transcript(fixtures_dir: Path) -> Path:
    return fixtures_dir / "quote_manual.txt"


@pytest.fixture
def generated_transcript(fixtures_dir: Path) -> Path:
    return fixtures_dir / "patcher_generated.txt"


class TestArgumentHandling:
    def test_missing_input_file_prints_usage(self) -> None:
        result = runner.invoke(app, ["--QuoteTransformer"])

        assert result.exit_code == 1
        assert USAGE in result.output

    def test_no_transformer_selected(self, manual_transcript: Path) -> None:
        result = runner.invoke(app, ["--manual", "--inputFile", str(manual_transcript)])

        assert result.exit_code == 1
        assert NO_TRANSFORMER_MESSAGE in result.output

    def test_two_transformers_selected(self, manual_transcript: Path) -> None:
        result = runner.invoke(app, ["--QuoteTransformer", "--ListHandler", "--inputFile", str(manual_transcript)])

        assert result.exit_code == 1
        assert NO_TRANSFORMER_MESSAGE in result.output

    def test_unknown_transformer_name(self, manual_transcript: Path) -> None:
        result = runner.invoke(app, ["--transformer", "Bogus", "--inputFile", str(manual_transcript)])

        assert result.exit_code == 1
        assert NO_TRANSFORMER_MESSAGE in result.output

    def test_unknown_flag_prints_usage(self, manual_transcript: Path) -> None:
        result = runner.invoke(app, ["--Bogus", "--inputFile", str(manual_transcript)])

        assert result.exit_code == 1
        assert "Unknown arg --Bogus" in result.output
        assert USAGE in result.output

    def test_iteration_count_ignored_without_timing_mode(self, tmp_path: Path) -> None:
        transcript = tmp_path / "t.txt"
        transcript.write_text('0   IN  | "a"\n0   OUT | ["a"]\n')

        result = runner.invoke(app, ["--QuoteTransformer", "--iterationCount=5", "--inputFile", str(transcript)])

        assert result.exit_code == 0
        assert "Timing Mode enabled" not in result.output
        assert "Total passes   : 1" in result.output

    def test_unreadable_transcript(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["--QuoteTransformer", "--inputFile", str(tmp_path / "missing.txt")])

        assert result.exit_code == 1
        assert "Cannot read transcript" in result.output

    def test_missing_site_config(self, manual_transcript: Path, tmp_path: Path) -> None:
        result = runner.invoke(
            app,
            [
                "--QuoteTransformer",
                "--manual",
                "--inputFile",
                str(manual_transcript),
                "--site-config",
                str(tmp_path / "site.yaml"),
            ],
        )

        assert result.exit_code == 1
        assert "Site config not found" in result.output


class TestReplayRuns:
    def test_manual_transcript_passes(self, manual_transcript: Path) -> None:
        result = runner.invoke(app, ["--QuoteTransformer", "--manual", "--inputFile", str(manual_transcript)])

        assert result.exit_code == 0
        assert f"Starting stand alone unit test running file {manual_transcript}" in result.output
        assert f"Ending stand alone unit test running file {manual_transcript}" in result.output
        assert "Total passes   : 2" in result.output
        assert "Total failures : 0" in result.output
        assert "==> failed" not in result.output

    def test_transformer_option_selects_too(self, manual_transcript: Path) -> None:
        result = runner.invoke(
            app, ["--transformer", "QuoteTransformer", "--manual", "--inputFile", str(manual_transcript)]
        )

        assert result.exit_code == 0

    def test_verbose_reports_passes(self, manual_transcript: Path) -> None:
        result = runner.invoke(
            app, ["--QuoteTransformer", "--manual", "--verbose", "--inputFile", str(manual_transcript)]
        )

        assert "italic pair ==> passed" in result.output

    def test_generated_transcript_passes(self, generated_transcript: Path) -> None:
        result = runner.invoke(app, ["--TokenStreamPatcher", "--inputFile", str(generated_transcript)])

        assert result.exit_code == 0
        assert "Starting stand alone wikitext test running file" in result.output
        assert "Total passes   : 3" in result.output

    def test_failures_reported_and_exit_nonzero(self, fixtures_dir: Path) -> None:
        result = runner.invoke(
            app, ["--TokenStreamPatcher", "--inputFile", str(fixtures_dir / "patcher_failing.txt")]
        )

        assert result.exit_code == 1
        lines = result.output.splitlines()
        failed_at = lines.index("line 2 ==> failed")
        assert lines[failed_at + 1] == 'line to debug => ["b"]'
        assert lines[failed_at + 2] == 'result line ===> ["a"]'
        assert "Total failures: 1" in lines

    def test_timing_mode_is_quiet_until_summary(self, manual_transcript: Path) -> None:
        result = runner.invoke(
            app,
            [
                "--QuoteTransformer",
                "--manual",
                "--timingMode",
                "--iterationCount=3",
                "--verbose",
                "--inputFile",
                str(manual_transcript),
            ],
        )

        assert result.exit_code == 0
        assert "Timing Mode enabled, no console output expected till test completes" in result.output
        assert "Starting stand alone" not in result.output
        assert "==> passed" not in result.output
        assert "Total time processing tokens" in result.output

    def test_settings_file_supplies_values(self, manual_transcript: Path, tmp_path: Path) -> None:
        settings = tmp_path / "replay.yaml"
        settings.write_text(
            yaml.safe_dump({"input_file": str(manual_transcript), "transformer": "QuoteTransformer", "dialect": "manual"})
        )

        result = runner.invoke(app, ["--settings", str(settings)])

        assert result.exit_code == 0
        assert "Total passes   : 2" in result.output

    def test_parallel_workers(self, generated_transcript: Path) -> None:
        result = runner.invoke(app, ["--TokenStreamPatcher", "--workers", "2", "--inputFile", str(generated_transcript)])

        assert result.exit_code == 0
        assert "Total passes   : 3" in result.output


class TestMain:
    def test_returns_zero_on_success(self, manual_transcript: Path) -> None:
        assert main(["--QuoteTransformer", "--manual", "--inputFile", str(manual_transcript)]) == 0

    def test_returns_one_without_arguments(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([]) == 1
        assert USAGE in capsys.readouterr().out

    def test_bad_option_value_prints_usage(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--breakLine", "abc", "--QuoteTransformer"]) == 1
        assert USAGE in capsys.readouterr().out

    def test_option_missing_its_value_prints_usage(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--QuoteTransformer", "--inputFile"]) == 1

        out = capsys.readouterr().out
        assert "--inputFile" in out
        assert USAGE in out

    def test_non_integer_break_line_prints_usage(
        self, manual_transcript: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main(["--QuoteTransformer", "--breakLine", "abc", "--inputFile", str(manual_transcript)]) == 1

        out = capsys.readouterr().out
        assert "abc" in out
        assert USAGE in out
