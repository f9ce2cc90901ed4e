# src/wikiroundtrip/cli_formatters.py
"""Console output for replay runs.

The report goes to stdout in the line format replay tooling has always
used, so existing scripts that grep for "==> failed" keep working.
"""

from __future__ import annotations

import typer

from wikiroundtrip.contracts import Comparison, Dialect, ReplayResult
from wikiroundtrip.engine.oracle import ComparisonListener

RULE = "----------------------"

USAGE = (
    "must specify [--manual] [--log] [--breakLine 123] [--timingMode] [--verbose]"
    " [--iterationCount=XXX] --TransformerName --inputFile /path/filename"
)


def echo_usage() -> None:
    typer.echo(USAGE)


def create_console_listener(*, verbose: bool, timing_mode: bool) -> ComparisonListener:
    """Listener printing failures always and passes when verbose.

    Passes are never printed in timing mode.
    """

    def _on_comparison(comparison: Comparison) -> None:
        if comparison.passed:
            if verbose and not timing_mode:
                typer.echo(f"{comparison.label} ==> passed")
            return
        typer.echo(f"{comparison.label} ==> failed")
        typer.echo(f"line to debug => {comparison.expected}")
        typer.echo(f"result line ===> {comparison.actual}")

    return _on_comparison


def _test_kind(dialect: Dialect) -> str:
    return "unit" if dialect == Dialect.MANUAL else "wikitext"


def echo_run_started(input_file: str, dialect: Dialect, *, timing_mode: bool) -> None:
    if timing_mode:
        typer.echo("Timing Mode enabled, no console output expected till test completes")
    else:
        typer.echo(f"Starting stand alone {_test_kind(dialect)} test running file {input_file}")


def echo_run_finished(input_file: str, dialect: Dialect, *, timing_mode: bool) -> None:
    if not timing_mode:
        typer.echo(f"Ending stand alone {_test_kind(dialect)} test running file {input_file}")


def echo_summary(result: ReplayResult, total_seconds: float) -> None:
    """Timings and pass/fail totals."""
    typer.echo(f"Total transformer execution time = {total_seconds * 1000:.3f} milliseconds")
    typer.echo(f"Total time processing tokens     = {round(result.transformer_seconds * 1000, 3)} milliseconds")
    typer.echo(RULE)
    typer.echo(f"Total passes   : {result.passes}")
    typer.echo(f"Total failures : {result.failures}")
    typer.echo(RULE)
    if result.failures > 0:
        typer.echo(f"Total failures: {result.failures}")
