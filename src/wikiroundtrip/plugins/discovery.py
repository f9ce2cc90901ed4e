# src/wikiroundtrip/plugins/discovery.py
"""Transformer discovery by package scanning.

Scans the built-in transformer package for classes that:
1. Inherit from BaseTokenTransformer
2. Have a non-empty `name` class attribute
3. Are not abstract
"""

import importlib
import inspect
import logging
import pkgutil
from types import ModuleType
from typing import Any

logger = logging.getLogger(__name__)

TRANSFORMER_PACKAGE = "wikiroundtrip.plugins.transformers"


def _discover_in_module(module: ModuleType, base_class: type) -> list[type]:
    """Find plugin classes defined in one module."""
    discovered: list[type] = []
    for class_name, obj in inspect.getmembers(module, inspect.isclass):
        # Must be defined in this module (not imported)
        if obj.__module__ != module.__name__:
            continue
        if not issubclass(obj, base_class) or obj is base_class:
            continue
        if inspect.isabstract(obj):
            continue
        plugin_name = getattr(obj, "name", None)
        if not plugin_name:
            logger.warning(
                "Class %s in %s inherits from %s but has no/empty 'name' attribute - skipping",
                class_name,
                module.__name__,
                base_class.__name__,
            )
            continue
        discovered.append(obj)
    return discovered


def discover_transformers(package_name: str = TRANSFORMER_PACKAGE) -> list[type]:
    """Discover all transformer classes in ``package_name`` (non-recursive).

    Transformer modules are system code: import errors propagate.

    Raises:
        ValueError: If two transformers share a name
    """
    from wikiroundtrip.plugins.base import BaseTokenTransformer

    package = importlib.import_module(package_name)
    discovered: list[type] = []
    seen: dict[str, type] = {}

    for module_info in sorted(pkgutil.iter_modules(package.__path__), key=lambda m: m.name):
        if module_info.ispkg or module_info.name.startswith("_"):
            continue
        module = importlib.import_module(f"{package_name}.{module_info.name}")
        for cls in _discover_in_module(module, BaseTokenTransformer):
            cls_name: str = cls.name  # type: ignore[attr-defined]
            if cls_name in seen:
                raise ValueError(
                    f"Duplicate transformer name '{cls_name}': found in both {seen[cls_name].__module__} and {cls.__module__}."
                )
            seen[cls_name] = cls
            discovered.append(cls)

    return discovered


def get_plugin_description(plugin_cls: type) -> str:
    """First non-empty docstring line, or a name-based default."""
    if plugin_cls.__doc__:
        for line in plugin_cls.__doc__.strip().split("\n"):
            cleaned = line.strip()
            if cleaned:
                return cleaned
    name = getattr(plugin_cls, "name", plugin_cls.__name__)
    return f"{name} transformer"


def create_dynamic_hookimpl(
    plugin_classes: list[type],
    hook_method_name: str,
) -> object:
    """Create a pluggy hookimpl object returning ``plugin_classes``.

    Args:
        plugin_classes: Plugin classes to register
        hook_method_name: Name of the hook method (e.g., "wikiroundtrip_get_transformers")
    """
    from wikiroundtrip.plugins.hookspecs import hookimpl

    class DynamicHookImpl:
        """Dynamically generated hook implementer."""

    def hook_method(self: Any) -> list[type]:
        return plugin_classes

    setattr(DynamicHookImpl, hook_method_name, hookimpl(hook_method))

    return DynamicHookImpl()
