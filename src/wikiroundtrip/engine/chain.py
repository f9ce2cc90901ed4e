"""Transformer chain: a fixed ordering of stages run per batch."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from wikiroundtrip.contracts import TokenLike
from wikiroundtrip.core.environment import ReplayEnvironment
from wikiroundtrip.plugins.base import BaseTokenTransformer
from wikiroundtrip.plugins.manager import TransformerManager, get_transformer_manager

# Registered stage ordering for a full token pipeline
DEFAULT_STAGE_ORDER: tuple[str, ...] = (
    "TokenStreamPatcher",
    "OnlyInclude",
    "IncludeOnly",
    "NoInclude",
    "QuoteTransformer",
    "BehaviorSwitchHandler",
    "ListHandler",
    "Sanitizer",
    "PreHandler",
    "ParagraphWrapper",
)


class TransformerChain:
    """Runs a batch through each stage in order.

    Stage i's output is stage i+1's input. The chain has the same
    ``process``/``reset_state`` surface as a single transformer, so the
    replay engine treats both alike.
    """

    def __init__(self, stages: Sequence[BaseTokenTransformer]) -> None:
        if not stages:
            raise ValueError("A transformer chain needs at least one stage")
        self.stages = list(stages)

    @property
    def name(self) -> str:
        return "+".join(stage.name for stage in self.stages)

    @classmethod
    def from_names(
        cls,
        names: Iterable[str],
        env: ReplayEnvironment,
        options: dict[str, Any] | None = None,
        manager: TransformerManager | None = None,
    ) -> TransformerChain:
        """Build a chain from catalogue names.

        Every stage is reset with ``options`` plus ``toplevel=True``, so
        stages that need an explicit reset are ready to use.

        Raises:
            UnknownTransformerError: If a name is not in the catalogue
        """
        manager = manager if manager is not None else get_transformer_manager()
        options = dict(options or {})
        stages = [manager.create(name, env, options) for name in names]
        chain = cls(stages)
        chain.reset_state({**options, "toplevel": True})
        return chain

    def reset_state(self, options: dict[str, Any] | None = None) -> None:
        for stage in self.stages:
            stage.reset_state(options)

    def process(self, tokens: Iterable[Any], options: dict[str, Any] | None = None) -> list[TokenLike]:
        batch: list[Any] = list(tokens)
        for stage in self.stages:
            batch = stage.process(batch, options)
        return batch
