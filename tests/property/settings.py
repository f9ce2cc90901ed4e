# tests/property/settings.py
"""Standardized Hypothesis settings profiles for property tests.

Provides consistent test intensity across all property test modules.
Import these instead of using inline @settings(max_examples=...).

Usage:
    from tests.property.settings import STANDARD_SETTINGS

    @given(log=interleaved_logs())
    @STANDARD_SETTINGS
    def test_something(log):
        ...

Tiers:
- DETERMINISM_SETTINGS: 500 examples - reconciliation order guarantees
- STANDARD_SETTINGS: 100 examples - Regular property tests
- QUICK_SETTINGS: 20 examples - Fast validation tests (simple rejection)
"""

from hypothesis import settings

# Replay must be deterministic under every interleaving
DETERMINISM_SETTINGS = settings(max_examples=500)

# Standard property tests - good balance of coverage and speed
STANDARD_SETTINGS = settings(max_examples=100)

# Quick validation tests
# Fast tests where more examples add little value
QUICK_SETTINGS = settings(max_examples=20)
