"""Tests for TransformerChain."""

from __future__ import annotations

import pytest

from tests.conftest import IdentityTransformer
from wikiroundtrip.contracts import KV, EndTagTk, EOFTk, NlTk, SelfclosingTagTk, TagTk, UnknownTransformerError
from wikiroundtrip.core.environment import ReplayEnvironment
from wikiroundtrip.engine.chain import DEFAULT_STAGE_ORDER, TransformerChain
from wikiroundtrip.plugins.manager import TransformerManager


class TestTransformerChain:
    def test_requires_a_stage(self) -> None:
        with pytest.raises(ValueError, match="at least one stage"):
            TransformerChain([])

    def test_name_joins_stage_names(self, env: ReplayEnvironment) -> None:
        chain = TransformerChain([IdentityTransformer(env), IdentityTransformer(env)])

        assert chain.name == "Identity+Identity"

    def test_output_feeds_next_stage(self, env: ReplayEnvironment, manager: TransformerManager) -> None:
        chain = TransformerChain.from_names(["QuoteTransformer", "ParagraphWrapper"], env, manager=manager)
        quote = SelfclosingTagTk("mw-quote", [KV("value", "'''")])

        out = chain.process([quote, "x", quote, EOFTk()])

        assert out == [TagTk("p"), TagTk("b"), "x", EndTagTk("b"), EndTagTk("p"), EOFTk()]

    def test_from_names_resets_explicit_reset_stages(self, env: ReplayEnvironment, manager: TransformerManager) -> None:
        chain = TransformerChain.from_names(["TokenStreamPatcher"], env, manager=manager)

        assert chain.process(["a", "b", NlTk()]) == ["ab", NlTk()]

    def test_unknown_stage_name(self, env: ReplayEnvironment, manager: TransformerManager) -> None:
        with pytest.raises(UnknownTransformerError):
            TransformerChain.from_names(["NoSuchStage"], env, manager=manager)

    def test_default_order_is_fully_registered(self, env: ReplayEnvironment, manager: TransformerManager) -> None:
        chain = TransformerChain.from_names(DEFAULT_STAGE_ORDER, env, manager=manager)

        assert [stage.name for stage in chain.stages] == list(DEFAULT_STAGE_ORDER)
        assert chain.process(["hello", EOFTk()]) == [TagTk("p"), "hello", EndTagTk("p"), EOFTk()]
