"""Base class for DOM handlers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from bs4 import PageElement, Tag

from wikiroundtrip.serializer.separators import NO_CONSTRAINT, SeparatorConstraint

if TYPE_CHECKING:
    from wikiroundtrip.serializer.state import SerializerState


def as_element(node: PageElement) -> Tag:
    """Return ``node`` as an element; element handlers never see text nodes."""
    if not isinstance(node, Tag):
        raise TypeError(f"Expected an element, got {type(node).__name__}")
    return node

class DOMHandler(ABC):
    """Serializes one kind of DOM node.

    handle() emits the node's wikitext through ``state.emit_chunk`` and may
    return a later sibling to resume traversal from (None = continue with
    the next sibling). before()/after() state how many newlines the node
    needs next to ``other``.
    """

    @abstractmethod
    def handle(self, node: PageElement, state: SerializerState) -> PageElement | None: ...

    def before(self, node: PageElement, other: PageElement, state: SerializerState) -> SeparatorConstraint:
        return NO_CONSTRAINT

    def after(self, node: PageElement, other: PageElement, state: SerializerState) -> SeparatorConstraint:
        return NO_CONSTRAINT
