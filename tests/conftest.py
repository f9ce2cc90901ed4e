# tests/conftest.py
"""Shared test fixtures and helpers.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/

Transformers in tests are instantiated directly (``QuoteTransformer(env)``)
rather than through the TransformerManager; manager lookups are tested
separately in tests/unit/plugins.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path
from typing import Any

import pytest
import structlog
from hypothesis import Phase, Verbosity, settings

from wikiroundtrip.contracts import TokenLike, decode_token, encode_tokens
from wikiroundtrip.core.environment import ReplayEnvironment
from wikiroundtrip.plugins.base import BaseTokenTransformer
from wikiroundtrip.plugins.manager import TransformerManager

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "transcripts"


# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Test transformers
# =============================================================================


class IdentityTransformer(BaseTokenTransformer):
    """Emits every token unchanged and counts resets."""

    name = "Identity"

    def reset_state(self, options: dict[str, Any] | None = None) -> None:
        self.resets = getattr(self, "resets", 0) + 1

    def on_token(self, token: TokenLike) -> Iterable[TokenLike]:
        return [token]


class RecordingTransformer(BaseTokenTransformer):
    """Identity transformer that records every batch it sees."""

    name = "Recording"

    def reset_state(self, options: dict[str, Any] | None = None) -> None:
        self.batches: list[list[TokenLike]] = []

    def process(self, tokens: Iterable[Any], options: dict[str, Any] | None = None) -> list[TokenLike]:
        batch = list(tokens)
        self.batches.append(batch)
        return super().process(batch, options)

    def on_token(self, token: TokenLike) -> Iterable[TokenLike]:
        return [token]


# =============================================================================
# Helpers
# =============================================================================


def tokens_from_json(*payloads: Any) -> list[TokenLike]:
    """Decode JSON-form tokens (dicts and strings)."""
    return [decode_token(p) for p in payloads]


def run_batches(transformer: BaseTokenTransformer, *batches: list[Any]) -> list[TokenLike]:
    """Feed batches in order and concatenate the output."""
    out: list[TokenLike] = []
    for batch in batches:
        out.extend(transformer.process(batch))
    return out


def as_json(tokens: list[TokenLike]) -> str:
    return encode_tokens(tokens)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def env() -> ReplayEnvironment:
    """Default replay environment (built-in site config, no page source)."""
    return ReplayEnvironment()


@pytest.fixture
def manager() -> TransformerManager:
    """Manager with the built-in catalogue registered."""
    manager = TransformerManager()
    manager.register_builtin_transformers()
    return manager


@pytest.fixture
def identity_factory(env: ReplayEnvironment) -> Callable[[int], IdentityTransformer]:
    return lambda pipeline_id: IdentityTransformer(env)


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo configure_logging() calls so handlers never outlive a test's streams."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers = []
