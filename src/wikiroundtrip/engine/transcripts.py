"""Transcript parsing and caching.

Two dialects:

- manual: hand-written unit tests. The first character of each line
  selects its role: ``#`` comment, space blank, ``:`` directive naming the
  transformer the following tests apply to, ``!`` named-test marker, ``[``
  expected result for the input accumulated so far, anything else an
  input token.
- generated: recorded from a live run. Each line starts with a pipeline ID
  (first number within the first four characters) and carries an IN or
  OUT event followed by ``|`` and a JSON payload.

A transcript is parsed once into a TranscriptCache and read many times.
"""

from __future__ import annotations

import json
import re
from collections import deque
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any

import structlog

from wikiroundtrip.contracts import Dialect, Direction, TranscriptError

slog = structlog.get_logger(__name__)

PIPELINE_ID_PATTERN = re.compile(r"(\d+)")
# Only this many leading characters may hold the pipeline ID
PIPELINE_ID_WINDOW = 4
EVENT_PATTERN = re.compile(r"^.*(IN|OUT)\s*\|\s*(.*)$")


class EntryKind(StrEnum):
    """Role of a manual transcript line."""

    DIRECTIVE = "directive"
    TEST = "test"
    INPUT = "input"
    RESULT = "result"


@dataclass(frozen=True)
class ManualEntry:
    """One meaningful line of a manual transcript.

    ``payload`` is the decoded JSON of an INPUT line; ``text`` is the
    directive/test name or the raw expected-result line.
    """

    kind: EntryKind
    line: int
    text: str
    payload: Any = None


@dataclass(frozen=True)
class LogEvent:
    """One line routed to a pipeline channel.

    ``direction`` is None when the line has a pipeline ID but no
    recognizable IN/OUT event; the reconciler skips it.
    """

    line: int
    pipeline_id: int
    direction: Direction | None
    payload: str


def parse_manual(lines: Iterable[str]) -> list[ManualEntry]:
    """Classify manual transcript lines.

    Comments, blank markers and empty lines are dropped. Input lines
    that are not valid JSON are logged and dropped.
    """
    entries: list[ManualEntry] = []
    for number, line in enumerate(lines, start=1):
        if not line:
            continue
        marker = line[0]
        if marker in ("#", " "):
            continue
        if marker == ":":
            entries.append(ManualEntry(EntryKind.DIRECTIVE, number, line[1:].strip()))
        elif marker == "!":
            entries.append(ManualEntry(EntryKind.TEST, number, line[2:]))
        elif marker == "[":
            entries.append(ManualEntry(EntryKind.RESULT, number, line))
        else:
            try:
                payload = json.loads(line)
            except json.JSONDecodeError as e:
                slog.warning("malformed_input_line_skipped", line=number, error=str(e))
                continue
            entries.append(ManualEntry(EntryKind.INPUT, number, line, payload))
    return entries


def extract_pipeline_id(line: str) -> int | None:
    """First number within the leading characters of ``line``, if any."""
    match = PIPELINE_ID_PATTERN.search(line[:PIPELINE_ID_WINDOW])
    if match is None:
        return None
    return int(match.group(1))


def parse_event(number: int, pipeline_id: int, line: str) -> LogEvent:
    match = EVENT_PATTERN.match(line)
    if match is None:
        return LogEvent(number, pipeline_id, None, line)
    return LogEvent(number, pipeline_id, Direction(match.group(1)), match.group(2))


def demultiplex(lines: Iterable[str]) -> list[deque[LogEvent]]:
    """Route log lines into one FIFO channel per pipeline.

    Channel index == pipeline ID; channels for IDs that never occur stay
    empty. Lines without a pipeline ID are dropped. Relative order within
    a channel is the order in the log.
    """
    routed: list[LogEvent] = []
    max_id = -1
    for number, line in enumerate(lines, start=1):
        pipeline_id = extract_pipeline_id(line)
        if pipeline_id is None:
            continue
        max_id = max(max_id, pipeline_id)
        routed.append(parse_event(number, pipeline_id, line))

    channels: list[deque[LogEvent]] = [deque() for _ in range(max_id + 1)]
    for event in routed:
        channels[event.pipeline_id].append(event)
    return channels


@dataclass(frozen=True)
class TranscriptCache:
    """A transcript parsed once and shared by every replay iteration.

    Read-only after construction: replays copy what they consume.
    """

    path: Path
    dialect: Dialect
    entries: tuple[ManualEntry, ...] = ()
    channels: tuple[tuple[LogEvent, ...], ...] = ()

    @classmethod
    def from_lines(cls, lines: Sequence[str], dialect: Dialect, path: Path = Path("<memory>")) -> TranscriptCache:
        if dialect == Dialect.MANUAL:
            return cls(path, dialect, entries=tuple(parse_manual(lines)))
        return cls(path, dialect, channels=tuple(tuple(channel) for channel in demultiplex(lines)))

    @classmethod
    def load(cls, path: Path, dialect: Dialect) -> TranscriptCache:
        """Read and parse a transcript file.

        Raises:
            TranscriptError: If the file cannot be read
        """
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise TranscriptError(f"Cannot read transcript {path}: {e}") from e
        cache = cls.from_lines(text.split("\n"), dialect, path)
        slog.debug(
            "transcript_loaded",
            path=str(path),
            dialect=str(dialect),
            entries=len(cache.entries),
            pipelines=len(cache.channels),
        )
        return cache
