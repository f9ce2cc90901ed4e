"""Text and comment nodes."""

from __future__ import annotations

from bs4 import Comment, PageElement

from wikiroundtrip.serializer.handlers.base import DOMHandler
from wikiroundtrip.serializer.state import SerializerState


class TextHandler(DOMHandler):
    def handle(self, node: PageElement, state: SerializerState) -> PageElement | None:
        if isinstance(node, Comment):
            state.emit_chunk(f"<!--{node}-->", node)
        else:
            state.emit_chunk(str(node), node)
        return None
