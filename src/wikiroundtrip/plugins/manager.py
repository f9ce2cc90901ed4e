# src/wikiroundtrip/plugins/manager.py
"""Transformer manager for discovery, registration and lookup.

Uses pluggy for hook-based registration.
"""

from dataclasses import dataclass
from typing import Any

import pluggy

from wikiroundtrip.contracts.errors import UnknownTransformerError
from wikiroundtrip.core.environment import ReplayEnvironment
from wikiroundtrip.plugins.base import BaseTokenTransformer
from wikiroundtrip.plugins.hookspecs import PROJECT_NAME, TransformerSpec


@dataclass(frozen=True)
class TransformerSpecRecord:
    """Registration record for a transformer."""

    name: str
    version: str
    description: str

    @classmethod
    def from_class(cls, transformer_cls: type[BaseTokenTransformer]) -> "TransformerSpecRecord":
        from wikiroundtrip.plugins.discovery import get_plugin_description

        return cls(
            name=transformer_cls.name,
            version=transformer_cls.plugin_version,
            description=get_plugin_description(transformer_cls),
        )


class TransformerManager:
    """Manages transformer discovery, registration, and lookup.

    Usage:
        manager = TransformerManager()
        manager.register_builtin_transformers()

        quote = manager.create("QuoteTransformer", env)
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(TransformerSpec)
        self._transformers: dict[str, type[BaseTokenTransformer]] = {}

    def register_builtin_transformers(self) -> None:
        """Discover and register the built-in transformer catalogue."""
        from wikiroundtrip.plugins.discovery import create_dynamic_hookimpl, discover_transformers

        self.register(create_dynamic_hookimpl(discover_transformers(), "wikiroundtrip_get_transformers"))

    def register(self, plugin: Any) -> None:
        """Register a plugin object implementing the hook methods."""
        self._pm.register(plugin)
        self._refresh_caches()

    def _refresh_caches(self) -> None:
        """Rebuild the name -> class map from hooks.

        Raises:
            ValueError: If two registered transformers share a name
        """
        new_transformers: dict[str, type[BaseTokenTransformer]] = {}
        for transformers in self._pm.hook.wikiroundtrip_get_transformers():
            for cls in transformers:
                name = cls.name
                if name in new_transformers:
                    raise ValueError(
                        f"Duplicate transformer name: '{name}'. Already registered by {new_transformers[name].__name__}"
                    )
                new_transformers[name] = cls
        self._transformers = new_transformers

    def names(self) -> list[str]:
        """Registered transformer names, sorted."""
        return sorted(self._transformers)

    def get_transformers(self) -> list[type[BaseTokenTransformer]]:
        return list(self._transformers.values())

    def get_transformer_by_name(self, name: str) -> type[BaseTokenTransformer] | None:
        return self._transformers.get(name)

    def describe(self) -> list[TransformerSpecRecord]:
        return [TransformerSpecRecord.from_class(self._transformers[n]) for n in self.names()]

    def create(
        self,
        name: str,
        env: ReplayEnvironment,
        options: dict[str, Any] | None = None,
    ) -> BaseTokenTransformer:
        """Instantiate a transformer by name.

        Raises:
            UnknownTransformerError: If no transformer has that name
        """
        cls = self._transformers.get(name)
        if cls is None:
            raise UnknownTransformerError(name, self.names())
        return cls(env, options)


_manager_cache: TransformerManager | None = None


def get_transformer_manager() -> TransformerManager:
    """Get the initialized transformer manager (singleton)."""
    global _manager_cache

    if _manager_cache is None:
        manager = TransformerManager()
        manager.register_builtin_transformers()
        _manager_cache = manager
    return _manager_cache
