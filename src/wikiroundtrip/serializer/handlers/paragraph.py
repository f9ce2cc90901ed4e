"""Paragraphs: content separated by blank lines."""

from __future__ import annotations

from bs4 import PageElement, Tag

from wikiroundtrip.serializer.dom import data_parsoid
from wikiroundtrip.serializer.handlers.base import DOMHandler, as_element
from wikiroundtrip.serializer.handlers.fallback import FallbackHTMLHandler
from wikiroundtrip.serializer.separators import NO_CONSTRAINT, SeparatorConstraint
from wikiroundtrip.serializer.state import SerializerState


class ParagraphHandler(DOMHandler):
    """Wikitext paragraphs emit only their content.

    Two paragraphs need a blank line between them; a paragraph next to
    another element needs its own line. HTML-syntax paragraphs
    (``dp.stx == "html"``) are written back as tags.
    """

    def __init__(self) -> None:
        self._fallback = FallbackHTMLHandler()

    def handle(self, node: PageElement, state: SerializerState) -> PageElement | None:
        node = as_element(node)
        if data_parsoid(node).get("stx") == "html":
            return self._fallback.handle(node, state)
        state.serializer.serialize_children(node, state)
        return None

    def before(self, node: PageElement, other: PageElement, state: SerializerState) -> SeparatorConstraint:
        return self._constraint(node, other)

    def after(self, node: PageElement, other: PageElement, state: SerializerState) -> SeparatorConstraint:
        return self._constraint(node, other)

    @staticmethod
    def _constraint(node: PageElement, other: PageElement) -> SeparatorConstraint:
        if not isinstance(node, Tag) or data_parsoid(node).get("stx") == "html":
            return NO_CONSTRAINT
        if isinstance(other, Tag):
            if other.name == "p":
                return SeparatorConstraint(min=2)
            return SeparatorConstraint(min=1)
        return NO_CONSTRAINT
