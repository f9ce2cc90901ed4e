"""Tests for separator constraints."""

from __future__ import annotations

import pytest

from wikiroundtrip.serializer.separators import (
    NO_CONSTRAINT,
    SeparatorConstraint,
    combine,
    resolve_newlines,
    resolve_separator,
)


class TestSeparatorConstraint:
    def test_negative_bound_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            SeparatorConstraint(min=-1)


class TestCombine:
    def test_tightest_bounds_win(self) -> None:
        combined = combine(SeparatorConstraint(min=1), SeparatorConstraint(min=2, max=3))

        assert combined == SeparatorConstraint(min=2, max=3)
        assert resolve_newlines(combined) == 2

    def test_empty_with_empty(self) -> None:
        assert combine(NO_CONSTRAINT, NO_CONSTRAINT).is_empty


class TestResolve:
    @pytest.mark.parametrize(
        ("constraint", "original", "expected"),
        [
            (NO_CONSTRAINT, 3, None),
            (SeparatorConstraint(min=1), None, 1),
            (SeparatorConstraint(min=1), 3, 3),
            (SeparatorConstraint(min=1, max=2), 3, 2),
            (SeparatorConstraint(max=1), None, 0),
            (SeparatorConstraint(min=3, max=1), 0, 3),
        ],
    )
    def test_newline_count(self, constraint: SeparatorConstraint, original: int | None, expected: int | None) -> None:
        assert resolve_newlines(constraint, original) == expected

    def test_unconstrained_reuses_original(self) -> None:
        assert resolve_separator(NO_CONSTRAINT, " \n  ") == " \n  "
        assert resolve_separator(NO_CONSTRAINT) == ""

    def test_original_kept_when_count_satisfies_bounds(self) -> None:
        assert resolve_separator(SeparatorConstraint(min=1), "\n \n") == "\n \n"

    def test_original_replaced_when_out_of_bounds(self) -> None:
        assert resolve_separator(SeparatorConstraint(min=2), "\n  ") == "\n\n"
