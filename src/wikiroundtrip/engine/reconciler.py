"""Pipeline reconciler: deterministic replay of interleaved pipeline events.

Events recorded from concurrently scheduled pipelines are demultiplexed
into one FIFO channel per pipeline (see transcripts.demultiplex). The
reconciler drains the channels in ascending pipeline ID order. Within a
channel, IN events accumulate decoded tokens into a pending batch and an
OUT event runs the batch through that pipeline's transformer and checks
the result against the recorded output.

Guarantees:
- Order preservation: events of one pipeline are handled in log order
- Order independence: interleaving across pipelines does not matter
- Exactly once: every recognized event is handled once
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Protocol

import structlog

from wikiroundtrip.contracts import Comparison, Direction, MalformedTokenError, TokenLike, decode_token
from wikiroundtrip.engine.clock import DEFAULT_CLOCK, Clock
from wikiroundtrip.engine.comparison import compare
from wikiroundtrip.engine.transcripts import LogEvent

slog = structlog.get_logger(__name__)


class TokenProcessor(Protocol):
    """What the replay engine drives: a transformer or a chain."""

    def reset_state(self, options: dict[str, Any] | None = None) -> None: ...

    def process(self, tokens: Iterable[Any], options: dict[str, Any] | None = None) -> list[TokenLike]: ...


# Builds a ready-to-use processor for a pipeline ID
ProcessorFactory = Callable[[int], TokenProcessor]


class TimedProcessor:
    """Accumulates the time spent strictly inside ``process`` calls."""

    def __init__(self, processor: TokenProcessor, clock: Clock = DEFAULT_CLOCK) -> None:
        self._processor = processor
        self._clock = clock
        self.seconds = 0.0

    def reset_state(self, options: dict[str, Any] | None = None) -> None:
        self._processor.reset_state(options)

    def process(self, tokens: list[Any]) -> list[TokenLike]:
        start = self._clock.now()
        try:
            return self._processor.process(tokens, {})
        finally:
            self.seconds += self._clock.now() - start


def decode_payload(text: str, line: int) -> TokenLike | None:
    """Decode one IN payload, or log and return None if it is malformed."""
    try:
        return decode_token(json.loads(text))
    except json.JSONDecodeError as e:
        slog.warning("malformed_input_line_skipped", line=line, error=str(e))
    except MalformedTokenError as e:
        slog.warning("malformed_input_line_skipped", line=line, error=e.reason)
    return None


@dataclass
class ChannelReport:
    """Outcome of draining one pipeline channel."""

    pipeline_id: int
    comparisons: list[Comparison] = field(default_factory=list)
    transformer_seconds: float = 0.0


class PipelineReconciler:
    """Replays demultiplexed channels, one transformer instance per pipeline.

    Example:
        reconciler = PipelineReconciler(lambda pid: make_transformer())
        reports = reconciler.reconcile(demultiplex(lines))
    """

    def __init__(
        self,
        factory: ProcessorFactory,
        *,
        clock: Clock = DEFAULT_CLOCK,
        break_line: int | None = None,
        max_workers: int = 1,
    ) -> None:
        """Initialize the reconciler.

        Args:
            factory: Creates the (reset) processor for a pipeline ID
            clock: Clock used to time transformer calls
            break_line: 1-based log line that emits a debug event before
                its OUT check
            max_workers: Channels drained concurrently (1 = sequential)
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._factory = factory
        self._clock = clock
        self._break_line = break_line
        self._max_workers = max_workers

    def reconcile(self, channels: Sequence[Sequence[LogEvent]]) -> list[ChannelReport]:
        """Drain all non-empty channels.

        Returns:
            One report per non-empty channel, in ascending pipeline ID order
        """
        work = [(pipeline_id, events) for pipeline_id, events in enumerate(channels) if events]
        if self._max_workers == 1 or len(work) <= 1:
            return [self._drain(pipeline_id, events) for pipeline_id, events in work]

        # map() yields in submission order, so reports stay in ID order
        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            return list(pool.map(lambda item: self._drain(*item), work))

    def _drain(self, pipeline_id: int, events: Sequence[LogEvent]) -> ChannelReport:
        processor = TimedProcessor(self._factory(pipeline_id), self._clock)
        report = ChannelReport(pipeline_id)
        batch: list[TokenLike] = []

        for event in events:
            if event.direction is None:
                slog.warning("unrecognized_event_skipped", line=event.line, pipeline_id=pipeline_id)
                continue
            if event.direction == Direction.IN:
                token = decode_payload(event.payload, event.line)
                if token is not None:
                    batch.append(token)
                continue

            if self._break_line is not None and event.line == self._break_line:
                slog.debug("break_line_reached", line=event.line, pipeline_id=pipeline_id, pending=len(batch))
            result = processor.process(batch)
            report.comparisons.append(compare(event.payload, result, line=event.line, pipeline_id=pipeline_id))
            batch = []

        report.transformer_seconds = processor.seconds
        return report
