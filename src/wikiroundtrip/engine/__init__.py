"""Replay engine: transformer chains, transcripts, reconciliation and scoring."""

from wikiroundtrip.engine.chain import DEFAULT_STAGE_ORDER, TransformerChain
from wikiroundtrip.engine.clock import DEFAULT_CLOCK, Clock, MockClock, SystemClock
from wikiroundtrip.engine.comparison import compare, normalize
from wikiroundtrip.engine.oracle import ReplayOracle
from wikiroundtrip.engine.reconciler import ChannelReport, PipelineReconciler, TimedProcessor, TokenProcessor
from wikiroundtrip.engine.transcripts import (
    EntryKind,
    LogEvent,
    ManualEntry,
    TranscriptCache,
    demultiplex,
    extract_pipeline_id,
    parse_manual,
)

__all__ = [
    "DEFAULT_CLOCK",
    "DEFAULT_STAGE_ORDER",
    "ChannelReport",
    "Clock",
    "EntryKind",
    "LogEvent",
    "ManualEntry",
    "MockClock",
    "PipelineReconciler",
    "ReplayOracle",
    "SystemClock",
    "TimedProcessor",
    "TokenProcessor",
    "TranscriptCache",
    "TransformerChain",
    "compare",
    "demultiplex",
    "extract_pipeline_id",
    "normalize",
    "parse_manual",
]
