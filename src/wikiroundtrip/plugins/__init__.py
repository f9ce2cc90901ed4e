"""Token transformer plugins.

The built-in catalogue lives in ``wikiroundtrip.plugins.transformers`` and
is registered through pluggy by TransformerManager.
"""

from wikiroundtrip.plugins.base import BaseTokenTransformer
from wikiroundtrip.plugins.hookspecs import hookimpl
from wikiroundtrip.plugins.manager import TransformerManager, get_transformer_manager

__all__ = [
    "BaseTokenTransformer",
    "TransformerManager",
    "get_transformer_manager",
    "hookimpl",
]
