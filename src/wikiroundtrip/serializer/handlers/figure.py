"""Media figures."""

from __future__ import annotations

from bs4 import PageElement, Tag

from wikiroundtrip.serializer.dom import is_body, is_new_element
from wikiroundtrip.serializer.handlers.base import DOMHandler, as_element
from wikiroundtrip.serializer.separators import NO_CONSTRAINT, SeparatorConstraint
from wikiroundtrip.serializer.state import SerializerState


class FigureHandler(DOMHandler):
    def handle(self, node: PageElement, state: SerializerState) -> PageElement | None:
        node = as_element(node)
        state.serializer.figure(node, state)
        return None

    def before(self, node: PageElement, other: PageElement, state: SerializerState) -> SeparatorConstraint:
        return self._block_constraint(node)

    def after(self, node: PageElement, other: PageElement, state: SerializerState) -> SeparatorConstraint:
        return self._block_constraint(node)

    @staticmethod
    def _block_constraint(node: PageElement) -> SeparatorConstraint:
        # A new top-level figure goes on its own line
        if isinstance(node, Tag) and is_new_element(node) and is_body(node.parent):
            return SeparatorConstraint(min=1)
        return NO_CONSTRAINT
