"""Tests for the transformer base class contract."""

from __future__ import annotations

from collections.abc import Iterable

from structlog.testing import capture_logs

from tests.conftest import IdentityTransformer
from wikiroundtrip.contracts import MalformedTokenError, NlTk, TagTk, TokenLike
from wikiroundtrip.core.environment import ReplayEnvironment
from wikiroundtrip.plugins.base import BaseTokenTransformer


class RejectsBold(BaseTokenTransformer):
    name = "RejectsBold"

    def reset_state(self, options=None):
        pass

    def on_token(self, token: TokenLike) -> Iterable[TokenLike]:
        if isinstance(token, TagTk) and token.name == "b":
            raise MalformedTokenError(token, "no bold here")
        return [token]


class TestProcess:
    def test_non_tokens_skipped_with_warning(self, env: ReplayEnvironment) -> None:
        with capture_logs() as logs:
            transformer = IdentityTransformer(env)
            out = transformer.process(["a", 42, NlTk(), None])

        assert out == ["a", NlTk()]
        skipped = [e for e in logs if e["event"] == "malformed_token_skipped"]
        assert len(skipped) == 2
        assert skipped[0]["transformer"] == "Identity"
        assert skipped[0]["log_level"] == "warning"

    def test_precondition_failure_skips_only_that_token(self, env: ReplayEnvironment) -> None:
        with capture_logs() as logs:
            transformer = RejectsBold(env)
            out = transformer.process(["x", TagTk("b"), TagTk("i")])

        assert out == ["x", TagTk("i")]
        assert logs[0]["reason"] == "no bold here"

    def test_init_resets_state(self, env: ReplayEnvironment) -> None:
        transformer = IdentityTransformer(env)

        assert transformer.resets == 1

    def test_options_merge_over_defaults(self, env: ReplayEnvironment) -> None:
        class WithDefaults(IdentityTransformer):
            default_options = {"a": 1, "b": 2}

        assert WithDefaults(env, {"b": 3}).options == {"a": 1, "b": 3}
