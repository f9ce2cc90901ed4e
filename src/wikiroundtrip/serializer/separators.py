"""Separator constraints between adjacent serialized nodes.

Every DOM handler states, for its node, how many newlines it needs
before and after itself relative to a neighbour. The serializer combines
the left node's ``after`` with the right node's ``before`` and turns the
result into the separator text emitted between them.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SeparatorConstraint:
    """Bounds on the number of newlines between two outputs.

    None means unconstrained in that direction.
    """

    min: int | None = None
    max: int | None = None

    def __post_init__(self) -> None:
        for bound in (self.min, self.max):
            if bound is not None and bound < 0:
                raise ValueError(f"Separator bounds must be non-negative, got {self}")

    @property
    def is_empty(self) -> bool:
        return self.min is None and self.max is None


NO_CONSTRAINT = SeparatorConstraint()


def combine(left_after: SeparatorConstraint, right_before: SeparatorConstraint) -> SeparatorConstraint:
    """Merge the two sides' needs.

    The minimum is the larger of the specified minimums; the maximum is
    the smaller of the specified maximums.
    """
    mins = [c.min for c in (left_after, right_before) if c.min is not None]
    maxes = [c.max for c in (left_after, right_before) if c.max is not None]
    return SeparatorConstraint(
        min=max(mins) if mins else None,
        max=min(maxes) if maxes else None,
    )


def resolve_newlines(constraint: SeparatorConstraint, original: int | None = None) -> int | None:
    """Number of newlines to emit, or None to fall back to default spacing.

    A known original count is clamped into ``[min, max]`` so unmodified
    content keeps its separator. When ``min > max`` the minimum wins.
    """
    if constraint.is_empty:
        return None
    low = constraint.min if constraint.min is not None else 0
    count = low if original is None else max(original, low)
    if constraint.max is not None:
        count = min(count, constraint.max)
    return max(count, low)


def resolve_separator(constraint: SeparatorConstraint, original: str | None = None) -> str:
    """Separator text between two outputs.

    Without a constraint the original separator is reused verbatim (or
    nothing is emitted when there is none). With one, the original text
    is kept whenever its newline count already satisfies the bounds.
    """
    original_count = original.count("\n") if original is not None else None
    count = resolve_newlines(constraint, original_count)
    if count is None:
        return original or ""
    if original is not None and original_count == count:
        return original
    return "\n" * count
