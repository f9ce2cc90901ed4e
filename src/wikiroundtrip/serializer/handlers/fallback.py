"""Literal HTML output for nodes without a wikitext form."""

from __future__ import annotations

from html import escape

from bs4 import PageElement, Tag

from wikiroundtrip.serializer.dom import DATA_MW, DATA_PARSOID, VOID_ELEMENTS
from wikiroundtrip.serializer.handlers.base import DOMHandler, as_element
from wikiroundtrip.serializer.state import SerializerState

# Round-trip metadata never appears in the output
_INTERNAL_ATTRIBUTES = frozenset({DATA_PARSOID, DATA_MW})


def start_tag(node: Tag) -> str:
    attrs = "".join(
        f' {name}="{escape(str(value), quote=True)}"'
        for name, value in node.attrs.items()
        if name not in _INTERNAL_ATTRIBUTES
    )
    if node.name in VOID_ELEMENTS:
        return f"<{node.name}{attrs} />"
    return f"<{node.name}{attrs}>"


class FallbackHTMLHandler(DOMHandler):
    """Serializes an element as an HTML tag around its serialized children."""

    def handle(self, node: PageElement, state: SerializerState) -> PageElement | None:
        node = as_element(node)
        state.emit_chunk(start_tag(node), node)
        if node.name in VOID_ELEMENTS:
            return None
        state.serializer.serialize_children(node, state)
        state.emit_chunk(f"</{node.name}>", node)
        return None
