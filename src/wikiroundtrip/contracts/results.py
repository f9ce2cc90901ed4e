"""Replay outcomes.

These types answer: "What did replaying a transcript produce?"

IMPORTANT:
- Comparison keeps BOTH normalized strings so mismatches can be surfaced
- ReplayResult counts describe one full replay (the last iteration in
  timing mode); timings cover all iterations
"""

from __future__ import annotations

from dataclasses import dataclass, field

from wikiroundtrip.contracts.enums import CheckStatus


@dataclass(frozen=True)
class Comparison:
    """One expected-vs-actual check.

    Attributes:
        status: PASSED or FAILED
        expected: Normalized expected token array (JSON text)
        actual: Normalized actual token array (JSON text)
        line: 1-based transcript line of the expectation
        pipeline_id: Pipeline the check belongs to (generated dialect)
        test_name: Name from the last named-test marker (manual dialect)
    """

    status: CheckStatus
    expected: str
    actual: str
    line: int
    pipeline_id: int | None = None
    test_name: str | None = None

    @property
    def passed(self) -> bool:
        return self.status == CheckStatus.PASSED

    @property
    def label(self) -> str:
        """How reports refer to this check."""
        if self.test_name is not None:
            return self.test_name
        return f"line {self.line}"


@dataclass
class ReplayResult:
    """Aggregate result of a replay run.

    Attributes:
        comparisons: Checks of the last replay, in validation order
        iterations: Number of full replays performed
        total_seconds: Wall-clock time of all replays
        transformer_seconds: Time spent strictly inside transformer calls
    """

    comparisons: list[Comparison] = field(default_factory=list)
    iterations: int = 1
    total_seconds: float = 0.0
    transformer_seconds: float = 0.0

    @property
    def passes(self) -> int:
        return sum(1 for c in self.comparisons if c.passed)

    @property
    def failures(self) -> int:
        return sum(1 for c in self.comparisons if not c.passed)

    @property
    def failed(self) -> list[Comparison]:
        return [c for c in self.comparisons if not c.passed]
