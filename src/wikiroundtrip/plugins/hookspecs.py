# src/wikiroundtrip/plugins/hookspecs.py
"""pluggy hook specifications for token transformers.

Usage (implementing a plugin):
    from wikiroundtrip.plugins.hookspecs import hookimpl

    class MyPlugin:
        @hookimpl  # NOT @hookspec - that's for defining specs
        def wikiroundtrip_get_transformers(self):
            return [MyTransformer]
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from wikiroundtrip.plugins.base import BaseTokenTransformer

PROJECT_NAME = "wikiroundtrip"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)

hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class TransformerSpec:
    """Hook specifications for transformer plugins."""

    @hookspec
    def wikiroundtrip_get_transformers(self) -> list[type["BaseTokenTransformer"]]:  # type: ignore[empty-body]
        """Return transformer classes (not instances)."""
