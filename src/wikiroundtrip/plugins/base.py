# src/wikiroundtrip/plugins/base.py
"""Base class for token transformers.

Transformers MUST subclass BaseTokenTransformer. Plugin discovery uses
issubclass() checks against it, and the base class owns the batch loop so
every transformer skips malformed tokens the same way.

Lifecycle Contract:
    __init__(env, options) -> reset_state(options) -> process(batch)* -> [reset_state -> process*]

- reset_state: clears accumulated state (open-element stacks, run buffers,
  toggle flags). Called by __init__ unless the transformer sets
  ``requires_explicit_reset``, in which case the owner must call it before
  the first batch.
- process: transforms one finite batch. A function of (state, batch) only:
  no I/O, no blocking. May emit fewer, more or zero tokens per input.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

import structlog

from wikiroundtrip.contracts import MalformedTokenError, TokenLike, is_token
from wikiroundtrip.core.environment import ReplayEnvironment

slog = structlog.get_logger(__name__)


class BaseTokenTransformer(ABC):
    """Base class for all token transformers.

    Subclasses implement on_token(), returning the tokens to emit for one
    input token (possibly none, possibly buffered output from earlier
    tokens). A subclass signals a token violating its preconditions by
    raising MalformedTokenError; the base class logs and skips it.

    Example:
        class Identity(BaseTokenTransformer):
            name = "Identity"

            def reset_state(self, options=None):
                pass

            def on_token(self, token):
                return [token]
    """

    name: str
    plugin_version: str = "1.0.0"

    # Construction options applied when the caller does not override them
    default_options: dict[str, Any] = {}

    # When True, __init__ leaves the state uninitialized and the owner must
    # call reset_state() before the first batch.
    requires_explicit_reset: bool = False

    def __init__(self, env: ReplayEnvironment, options: dict[str, Any] | None = None) -> None:
        """Initialize with the replay environment and construction options.

        Args:
            env: Shared read-only environment (site config, page source)
            options: Transformer options (e.g. ``inTemplate``, ``isInclude``)
        """
        self.env = env
        self.options: dict[str, Any] = {**self.default_options, **(options or {})}
        self._log = slog.bind(transformer=self.name)
        if not self.requires_explicit_reset:
            self.reset_state(self.options)

    @abstractmethod
    def reset_state(self, options: dict[str, Any] | None = None) -> None:
        """Clear all accumulated state."""

    @abstractmethod
    def on_token(self, token: TokenLike) -> Iterable[TokenLike]:
        """Handle one well-formed token and return the tokens to emit."""

    def process(self, tokens: Iterable[Any], options: dict[str, Any] | None = None) -> list[TokenLike]:
        """Transform one batch of tokens.

        Args:
            tokens: Input batch
            options: Per-call options (unused by the built-in transformers)

        Returns:
            Output tokens for this batch
        """
        out: list[TokenLike] = []
        for token in tokens:
            if not is_token(token):
                self._log.warning("malformed_token_skipped", reason="not a token", token=repr(token))
                continue
            try:
                out.extend(self.on_token(token))
            except MalformedTokenError as e:
                self._log.warning("malformed_token_skipped", reason=e.reason, token=repr(token))
        return out
