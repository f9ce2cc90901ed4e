"""Replay oracle: runs a transcript against a transformer and scores it.

The oracle turns a TranscriptCache into a ReplayResult. Manual
transcripts are replayed line by line; generated transcripts go through
the PipelineReconciler. In timing mode the whole replay repeats
``iterations`` times over the same cache.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog

from wikiroundtrip.contracts import Comparison, Dialect, MalformedTokenError, ReplayResult, TokenLike, decode_token
from wikiroundtrip.engine.clock import DEFAULT_CLOCK, Clock
from wikiroundtrip.engine.comparison import compare
from wikiroundtrip.engine.reconciler import PipelineReconciler, ProcessorFactory, TimedProcessor
from wikiroundtrip.engine.transcripts import EntryKind, TranscriptCache

slog = structlog.get_logger(__name__)

# Receives each check of the final replay
ComparisonListener = Callable[[Comparison], None]


class ReplayOracle:
    """Replays a transcript and compares outputs with the recording.

    Args:
        transformer_name: Catalogue name; manual directives are matched
            against it
        factory: Creates a fresh, reset processor (called once per
            pipeline, and once per manual replay)
        clock: Clock for wall-clock and transformer timings
        reset_between_tests: Manual dialect: reset state at each named test
        break_line: Generated dialect: debug hook line
        max_workers: Generated dialect: channels drained concurrently
    """

    def __init__(
        self,
        transformer_name: str,
        factory: ProcessorFactory,
        *,
        clock: Clock = DEFAULT_CLOCK,
        reset_between_tests: bool = False,
        break_line: int | None = None,
        max_workers: int = 1,
    ) -> None:
        self.transformer_name = transformer_name
        self._factory = factory
        self._clock = clock
        self._reset_between_tests = reset_between_tests
        self._reconciler = PipelineReconciler(
            factory,
            clock=clock,
            break_line=break_line,
            max_workers=max_workers,
        )

    def run(
        self,
        cache: TranscriptCache,
        iterations: int = 1,
        listener: ComparisonListener | None = None,
    ) -> ReplayResult:
        """Replay ``cache`` ``iterations`` times.

        Counts and comparisons in the result come from the last replay;
        timings cover all of them. ``listener`` only sees checks of the
        last replay, so timing runs stay quiet until the end.
        """
        if iterations < 1:
            raise ValueError(f"iterations must be >= 1, got {iterations}")

        result = ReplayResult(iterations=iterations)
        start = self._clock.now()
        for i in range(iterations):
            comparisons, seconds = self.replay_once(cache)
            result.transformer_seconds += seconds
            if i == iterations - 1:
                result.comparisons = comparisons
        result.total_seconds = self._clock.now() - start

        if listener is not None:
            for comparison in result.comparisons:
                listener(comparison)
        slog.info(
            "replay_finished",
            transcript=str(cache.path),
            iterations=iterations,
            passes=result.passes,
            failures=result.failures,
        )
        return result

    def replay_once(self, cache: TranscriptCache) -> tuple[list[Comparison], float]:
        """One full replay: (checks made, seconds inside transformer calls)."""
        if cache.dialect == Dialect.MANUAL:
            return self._replay_manual(cache)
        reports = self._reconciler.reconcile(cache.channels)
        comparisons = [c for report in reports for c in report.comparisons]
        return comparisons, sum(report.transformer_seconds for report in reports)

    def _replay_manual(self, cache: TranscriptCache) -> tuple[list[Comparison], float]:
        processor = TimedProcessor(self._factory(0), self._clock)
        comparisons: list[Comparison] = []
        enabled = True
        test_name: str | None = None
        batch: list[TokenLike] = []

        for entry in cache.entries:
            if entry.kind == EntryKind.DIRECTIVE:
                enabled = entry.text == self.transformer_name
                if not enabled:
                    slog.debug("tests_disabled", directive=entry.text, line=entry.line)
            elif entry.kind == EntryKind.TEST:
                test_name = entry.text
                if self._reset_between_tests:
                    processor.reset_state({"toplevel": True})
            elif not enabled:
                continue
            elif entry.kind == EntryKind.INPUT:
                token = self._decode(entry.payload, entry.line)
                if token is not None:
                    batch.append(token)
            else:
                result = processor.process(batch)
                comparisons.append(compare(entry.text, result, line=entry.line, test_name=test_name))
                batch = []

        return comparisons, processor.seconds

    @staticmethod
    def _decode(payload: Any, line: int) -> TokenLike | None:
        try:
            return decode_token(payload)
        except MalformedTokenError as e:
            slog.warning("malformed_input_line_skipped", line=line, error=e.reason)
            return None
