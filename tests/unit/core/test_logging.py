"""Tests for logging configuration."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from wikiroundtrip.core.logging import configure_logging, get_logger


class TestConfigureLogging:
    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(json_output=True, level="DEBUG")

        get_logger("test").warning("something_happened", line=3)

        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record["event"] == "something_happened"
        assert record["line"] == 3
        assert record["level"] == "warning"

    def test_console_output_goes_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(level="WARNING")

        structlog.get_logger("test").warning("visible_event")

        captured = capsys.readouterr()
        assert "visible_event" in captured.err
        assert captured.out == ""

    def test_level_filters_stdlib_records(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(level="WARNING")

        logging.getLogger("test").info("hidden message")

        assert "hidden message" not in capsys.readouterr().err
