# src/wikiroundtrip/cli.py
"""wikiroundtrip Command Line Interface.

Replays a recorded transcript against one transformer of the catalogue:

    wikiroundtrip --QuoteTransformer --manual --inputFile quotes.txt
    wikiroundtrip --transformer ListHandler --timingMode --iterationCount=500 --inputFile lists.txt

Exactly one transformer must be selected, either with a ``--<Name>`` flag
or with ``--transformer NAME``.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError

from wikiroundtrip.cli_formatters import (
    create_console_listener,
    echo_run_finished,
    echo_run_started,
    echo_summary,
    echo_usage,
)
from wikiroundtrip.contracts import Dialect, SiteConfigError, TranscriptError
from wikiroundtrip.core.config import ReplaySettings, build_settings, load_settings_file
from wikiroundtrip.core.environment import ReplayEnvironment
from wikiroundtrip.core.logging import configure_logging
from wikiroundtrip.core.site_config import SiteConfig, load_site_config
from wikiroundtrip.engine.clock import DEFAULT_CLOCK
from wikiroundtrip.engine.oracle import ReplayOracle
from wikiroundtrip.engine.reconciler import ProcessorFactory, TokenProcessor
from wikiroundtrip.engine.transcripts import TranscriptCache
from wikiroundtrip.plugins.manager import TransformerManager, get_transformer_manager

__all__ = ["app", "main", "run"]

NO_TRANSFORMER_MESSAGE = "No valid TransformerName was specified"

# Usage errors come from the click that typer builds commands with, which is
# either the click package or typer's own bundled copy of it.
_UsageError: Any = importlib.import_module(typer.BadParameter.__module__).UsageError

app = typer.Typer(
    name="wikiroundtrip",
    help="Replay token transformer transcripts and check them against the recording.",
    add_completion=False,
)


def _selected_transformers(extra_args: list[str], transformer: str | None, manager: TransformerManager) -> list[str]:
    """Transformer names chosen on the command line.

    Raises:
        typer.BadParameter: If an extra argument is not a catalogue flag
    """
    catalogue = set(manager.names())
    selected: list[str] = []
    for arg in extra_args:
        name = arg[2:] if arg.startswith("--") else None
        if name is None or name not in catalogue:
            raise typer.BadParameter(f"Unknown arg {arg}")
        selected.append(name)
    if transformer is not None:
        selected.append(transformer)
    return selected


def _processor_factory(
    manager: TransformerManager,
    name: str,
    env: ReplayEnvironment,
    options: dict[str, Any],
) -> ProcessorFactory:
    """Factory giving each pipeline its own freshly reset transformer."""

    def create(pipeline_id: int) -> TokenProcessor:
        transformer = manager.create(name, env, options)
        transformer.reset_state({**options, "toplevel": True})
        return transformer

    return create


def _load_site(settings: ReplaySettings) -> SiteConfig:
    if settings.site_config is None:
        return SiteConfig.default()
    return load_site_config(settings.site_config)


@app.command(
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def replay(
    ctx: typer.Context,
    input_file: Path | None = typer.Option(
        None,
        "--inputFile",
        help="Transcript to replay.",
    ),
    manual: bool = typer.Option(
        False,
        "--manual",
        help="Transcript uses the hand-written manual dialect.",
    ),
    log: bool = typer.Option(
        False,
        "--log",
        help="Enable debug logging (stderr).",
    ),
    break_line: int | None = typer.Option(
        None,
        "--breakLine",
        help="1-based transcript line that emits a debug event before its check.",
    ),
    timing_mode: bool = typer.Option(
        False,
        "--timingMode",
        help="Repeat the replay and report timings.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Report passing checks too.",
    ),
    iteration_count: int | None = typer.Option(
        None,
        "--iterationCount",
        help="Replays in timing mode (default 10000).",
    ),
    transformer: str | None = typer.Option(
        None,
        "--transformer",
        help="Transformer to test (alternative to a --<TransformerName> flag).",
    ),
    settings_file: Path | None = typer.Option(
        None,
        "--settings",
        help="YAML replay settings; command-line flags win.",
    ),
    site_config: Path | None = typer.Option(
        None,
        "--site-config",
        help="YAML site configuration (magic words, HTML allow-lists).",
    ),
    workers: int | None = typer.Option(
        None,
        "--workers",
        help="Threads used to drain pipelines in the generated dialect.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Emit logs as JSON.",
    ),
) -> None:
    """Replay a transcript against one transformer.

    Any other --<TransformerName> flag selects that catalogue entry.
    """
    configure_logging(json_output=json_logs, level="DEBUG" if log else "WARNING")
    manager = get_transformer_manager()

    try:
        selected = _selected_transformers(list(ctx.args), transformer, manager)
    except typer.BadParameter as e:
        typer.echo(e.message)
        echo_usage()
        raise typer.Exit(1) from None

    file_values: dict[str, Any] = {}
    if settings_file is not None:
        try:
            file_values = load_settings_file(settings_file)
        except (OSError, ValueError) as e:
            typer.echo(f"Error: cannot read settings {settings_file}: {e}", err=True)
            raise typer.Exit(1) from None

    if input_file is None and "input_file" not in file_values:
        echo_usage()
        raise typer.Exit(1)

    if not selected and "transformer" in file_values:
        selected = [str(file_values["transformer"])]
    if len(selected) != 1 or selected[0] not in manager.names():
        typer.echo(NO_TRANSFORMER_MESSAGE)
        raise typer.Exit(1)

    cli_values: dict[str, Any] = {
        "input_file": input_file,
        "transformer": selected[0],
        "dialect": Dialect.MANUAL if manual else None,
        "timing_mode": timing_mode or None,
        "iteration_count": iteration_count,
        "verbose": verbose or None,
        "log": log or None,
        "break_line": break_line,
        "workers": workers,
        "site_config": site_config,
    }
    try:
        settings = build_settings(file_values, cli_values)
    except ValidationError as e:
        typer.echo("Configuration errors:", err=True)
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None

    try:
        site = _load_site(settings)
    except SiteConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    start = DEFAULT_CLOCK.now()
    env = ReplayEnvironment.for_transcript(settings.wikitext_file, site)
    try:
        cache = TranscriptCache.load(settings.input_file, settings.dialect)
    except TranscriptError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    oracle = ReplayOracle(
        settings.transformer,
        _processor_factory(manager, settings.transformer, env, dict(settings.transformer_options)),
        reset_between_tests=settings.reset_between_tests,
        break_line=settings.break_line,
        max_workers=settings.workers,
    )

    input_name = str(settings.input_file)
    echo_run_started(input_name, settings.dialect, timing_mode=settings.timing_mode)
    result = oracle.run(
        cache,
        settings.iterations,
        listener=create_console_listener(verbose=settings.verbose, timing_mode=settings.timing_mode),
    )
    echo_run_finished(input_name, settings.dialect, timing_mode=settings.timing_mode)

    echo_summary(result, DEFAULT_CLOCK.now() - start)
    if result.failures > 0:
        raise typer.Exit(1)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return its exit status.

    Usage errors (bad option values, unknown flags) print the usage line
    to stdout and yield 1.
    """
    command = typer.main.get_command(app)
    try:
        result = command.main(args=argv, prog_name="wikiroundtrip", standalone_mode=False)
    except _UsageError as e:
        typer.echo(e.format_message())
        echo_usage()
        return 1
    except typer.Abort:
        return 1
    return result if isinstance(result, int) else 0


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
