"""Tests for PreHandler."""

from __future__ import annotations

from wikiroundtrip.contracts import CommentTk, EndTagTk, EOFTk, NlTk, TagTk
from wikiroundtrip.core.environment import ReplayEnvironment
from wikiroundtrip.plugins.transformers.pre import PreHandler


class TestPreHandler:
    def test_indented_lines_form_one_block(self, env: ReplayEnvironment) -> None:
        out = PreHandler(env).process([" code", NlTk(), " more", NlTk(), "text", EOFTk()])

        assert out == [TagTk("pre"), "code", NlTk(), "more", EndTagTk("pre"), NlTk(), "text", EOFTk()]

    def test_block_closed_at_eof(self, env: ReplayEnvironment) -> None:
        out = PreHandler(env).process([" code", EOFTk()])

        assert out == [TagTk("pre"), "code", EndTagTk("pre"), EOFTk()]

    def test_whitespace_only_line_is_not_pre(self, env: ReplayEnvironment) -> None:
        out = PreHandler(env).process(["   ", NlTk(), "a", EOFTk()])

        assert out == ["   ", NlTk(), "a", EOFTk()]

    def test_leading_space_mid_line_ignored(self, env: ReplayEnvironment) -> None:
        out = PreHandler(env).process(["a", " b", EOFTk()])

        assert out == ["a", " b", EOFTk()]

    def test_comment_line_does_not_end_block(self, env: ReplayEnvironment) -> None:
        out = PreHandler(env).process([" x", NlTk(), CommentTk("c"), " y", EOFTk()])

        assert out == [TagTk("pre"), "x", NlTk(), CommentTk("c"), "y", EndTagTk("pre"), EOFTk()]

    def test_in_template_is_passthrough(self, env: ReplayEnvironment) -> None:
        tokens = [" code", NlTk(), "text", EOFTk()]

        assert PreHandler(env, {"inTemplate": True}).process(list(tokens)) == tokens

    def test_reset_state_can_switch_template_mode(self, env: ReplayEnvironment) -> None:
        handler = PreHandler(env)
        handler.reset_state({"inTemplate": True})

        assert handler.process([" code"]) == [" code"]
