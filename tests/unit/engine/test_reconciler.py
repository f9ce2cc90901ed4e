"""Tests for PipelineReconciler and TimedProcessor."""

from __future__ import annotations

from collections.abc import Callable

import pytest
from structlog.testing import capture_logs

from tests.conftest import IdentityTransformer, RecordingTransformer
from wikiroundtrip.contracts import CheckStatus
from wikiroundtrip.core.environment import ReplayEnvironment
from wikiroundtrip.engine.clock import MockClock
from wikiroundtrip.engine.reconciler import PipelineReconciler, TimedProcessor, decode_payload
from wikiroundtrip.engine.transcripts import demultiplex

P = '{"type":"TagTk","name":"p","attribs":[],"dataAttribs":{}}'


class TestReconcile:
    def test_single_pipeline_pass(self, identity_factory: Callable[[int], IdentityTransformer]) -> None:
        lines = [f"0   IN  | {P}", f"0   OUT | [{P}]"]

        (report,) = PipelineReconciler(identity_factory).reconcile(demultiplex(lines))

        assert report.pipeline_id == 0
        assert [c.status for c in report.comparisons] == [CheckStatus.PASSED]

    def test_pipelines_validated_in_id_order(self, identity_factory: Callable[[int], IdentityTransformer]) -> None:
        lines = [
            '1   IN  | "b"',
            '0   IN  | "a"',
            '1   OUT | ["b"]',
            '0   OUT | ["a"]',
        ]

        reports = PipelineReconciler(identity_factory).reconcile(demultiplex(lines))

        assert [c.pipeline_id for r in reports for c in r.comparisons] == [0, 1]
        assert [c.line for r in reports for c in r.comparisons] == [4, 3]

    def test_one_instance_per_pipeline(self, env: ReplayEnvironment) -> None:
        created: dict[int, RecordingTransformer] = {}

        def factory(pipeline_id: int) -> RecordingTransformer:
            created[pipeline_id] = RecordingTransformer(env)
            return created[pipeline_id]

        lines = ['0   IN  | "a"', '2   IN  | "c"', '0   OUT | ["a"]', '2   OUT | ["c"]', '0   OUT | []']

        PipelineReconciler(factory).reconcile(demultiplex(lines))

        assert sorted(created) == [0, 2]
        assert created[0].batches == [["a"], []]
        assert created[2].batches == [["c"]]

    def test_failure_reported(self, identity_factory: Callable[[int], IdentityTransformer]) -> None:
        (report,) = PipelineReconciler(identity_factory).reconcile(demultiplex(['0   IN  | "a"', '0   OUT | ["b"]']))

        (comparison,) = report.comparisons
        assert comparison.status == CheckStatus.FAILED
        assert comparison.label == "line 2"

    def test_malformed_input_skipped(self, identity_factory: Callable[[int], IdentityTransformer]) -> None:
        lines = ["0   IN  | {oops", '0   IN  | {"type":"Bogus"}', '0   IN  | "a"', '0   OUT | ["a"]']

        with capture_logs() as logs:
            (report,) = PipelineReconciler(identity_factory).reconcile(demultiplex(lines))

        assert report.comparisons[0].passed
        assert [e["line"] for e in logs if e["event"] == "malformed_input_line_skipped"] == [1, 2]

    def test_unrecognized_event_skipped_with_warning(
        self, identity_factory: Callable[[int], IdentityTransformer]
    ) -> None:
        lines = ['0   IN  | "a"', "0   garbage", '0   OUT | ["a"]']

        with capture_logs() as logs:
            (report,) = PipelineReconciler(identity_factory).reconcile(demultiplex(lines))

        assert report.comparisons[0].passed
        warning = next(e for e in logs if e["event"] == "unrecognized_event_skipped")
        assert warning["line"] == 2
        assert warning["log_level"] == "warning"

    def test_break_line_emits_debug_event(self, identity_factory: Callable[[int], IdentityTransformer]) -> None:
        lines = ['0   IN  | "a"', '0   OUT | ["a"]', '0   IN  | "b"', '0   OUT | ["b"]']

        with capture_logs() as logs:
            PipelineReconciler(identity_factory, break_line=4).reconcile(demultiplex(lines))

        (event,) = [e for e in logs if e["event"] == "break_line_reached"]
        assert event["line"] == 4
        assert event["pending"] == 1
        assert event["log_level"] == "debug"

    def test_worker_pool_keeps_id_order(self, identity_factory: Callable[[int], IdentityTransformer]) -> None:
        lines = [f'{pid}   IN  | "{pid}"' for pid in range(6)] + [f'{pid}   OUT | ["{pid}"]' for pid in range(6)]

        reports = PipelineReconciler(identity_factory, max_workers=3).reconcile(demultiplex(lines))

        assert [r.pipeline_id for r in reports] == list(range(6))
        assert all(c.passed for r in reports for c in r.comparisons)

    def test_rejects_zero_workers(self, identity_factory: Callable[[int], IdentityTransformer]) -> None:
        with pytest.raises(ValueError, match="max_workers"):
            PipelineReconciler(identity_factory, max_workers=0)

    def test_transformer_time_measured(self, identity_factory: Callable[[int], IdentityTransformer]) -> None:
        lines = ['0   IN  | "a"', '0   OUT | ["a"]', '0   OUT | []']

        (report,) = PipelineReconciler(identity_factory, clock=MockClock(step=0.25)).reconcile(demultiplex(lines))

        assert report.transformer_seconds == pytest.approx(0.5)


class TestTimedProcessor:
    def test_accumulates_only_process_time(self, env: ReplayEnvironment) -> None:
        clock = MockClock()
        timed = TimedProcessor(IdentityTransformer(env), clock)

        clock.advance(10.0)
        timed.process(["a"])

        assert timed.seconds == 0.0

    def test_forwards_reset(self, env: ReplayEnvironment) -> None:
        inner = IdentityTransformer(env)
        timed = TimedProcessor(inner)

        timed.reset_state({"toplevel": True})

        assert inner.resets == 2


class TestDecodePayload:
    def test_valid(self) -> None:
        assert decode_payload('"a"', 1) == "a"

    def test_invalid_json(self) -> None:
        with capture_logs() as logs:
            assert decode_payload("{", 9) is None

        assert logs[0]["line"] == 9
