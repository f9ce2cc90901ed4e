"""Expected-vs-actual token array comparison."""

from __future__ import annotations

from collections.abc import Sequence

from wikiroundtrip.contracts import CheckStatus, Comparison, TokenLike, encode_tokens


def normalize(text: str) -> str:
    """Replace every ``{}`` with ``[]``.

    Encoders disagree on whether an empty map is ``{}`` or ``[]``; after
    normalization both spell it ``[]``. Idempotent.
    """
    return text.replace("{}", "[]")


def compare(
    expected: str,
    actual: Sequence[TokenLike],
    *,
    line: int,
    pipeline_id: int | None = None,
    test_name: str | None = None,
) -> Comparison:
    """Compare an expected JSON line with the encoded actual output."""
    want = normalize(expected)
    got = normalize(encode_tokens(list(actual)))
    return Comparison(
        status=CheckStatus.PASSED if want == got else CheckStatus.FAILED,
        expected=want,
        actual=got,
        line=line,
        pipeline_id=pipeline_id,
        test_name=test_name,
    )
