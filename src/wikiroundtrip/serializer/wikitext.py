"""HTML DOM -> wikitext serializer.

Walks a BeautifulSoup tree, dispatching each node to its DOM handler and
placing separators between adjacent siblings. Whitespace-only text
containing a newline between two siblings is the separator recorded in
the original document; it is reused whenever the handlers' constraints
allow.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog
from bs4 import BeautifulSoup, Comment, NavigableString, PageElement, Tag

from wikiroundtrip.core.environment import ReplayEnvironment
from wikiroundtrip.serializer.dom import attr, data_mw, data_parsoid, parse_html
from wikiroundtrip.serializer.handlers import FALLBACK_HANDLER, DOMHandler, get_handler
from wikiroundtrip.serializer.separators import combine, resolve_separator
from wikiroundtrip.serializer.state import SerializerState

slog = structlog.get_logger(__name__)

_FIGURE_FORMATS = {"Thumb": "thumb", "Frame": "frame", "Frameless": "frameless"}
_HALIGN_PREFIX = "mw-halign-"


def _is_separator_text(node: PageElement) -> bool:
    if not isinstance(node, NavigableString) or isinstance(node, Comment):
        return False
    text = str(node)
    return "\n" in text and not text.strip()


class WikitextSerializer:
    """Serializes HTML back to wikitext.

    Example:
        serializer = WikitextSerializer()
        serializer.serialize('<p>Hello</p>\\n\\n<p>World</p>')
        # 'Hello\\n\\nWorld'
    """

    def __init__(
        self,
        env: ReplayEnvironment | None = None,
        handler_lookup: Callable[[PageElement], DOMHandler] = get_handler,
    ) -> None:
        self.env = env if env is not None else ReplayEnvironment()
        self._handler_for = handler_lookup

    def serialize(self, document: str | BeautifulSoup) -> str:
        """Serialize a whole document (or fragment) to wikitext."""
        soup = parse_html(document) if isinstance(document, str) else document
        root: Tag = soup.body if soup.body is not None else soup
        return self.serialize_contents(root)

    def serialize_contents(self, parent: Tag) -> str:
        """Wikitext for the children of ``parent`` in a fresh state."""
        state = SerializerState(self, self.env)
        self.serialize_children(parent, state)
        return state.output()

    def serialize_node(self, node: PageElement, state: SerializerState) -> PageElement | None:
        return self._handler_for(node).handle(node, state)

    def serialize_children(self, parent: Tag, state: SerializerState) -> None:
        children = list(parent.children)
        prev: PageElement | None = None
        separator: str | None = None
        i = 0
        while i < len(children):
            child = children[i]
            if prev is not None and _is_separator_text(child):
                separator = (separator or "") + str(child)
                i += 1
                continue
            if prev is not None:
                constraint = combine(
                    self._handler_for(prev).after(prev, child, state),
                    self._handler_for(child).before(child, prev, state),
                )
                state.emit_separator(resolve_separator(constraint, separator))
                separator = None

            resume = self.serialize_node(child, state)
            prev = child
            i = self._resume_index(children, i, resume)

        if separator is not None:
            state.emit_separator(separator)

    @staticmethod
    def _resume_index(children: list[PageElement], current: int, resume: PageElement | None) -> int:
        if resume is None:
            return current + 1
        # bs4 compares tags structurally; resume must be this exact node
        for j in range(current + 1, len(children)):
            if children[j] is resume:
                return j
        return current + 1

    def serialized_attr_val(self, node: Tag, name: str) -> str:
        """Wikitext value of attribute ``name``.

        An expanded (templated) attribute is re-serialized from its HTML in
        ``data-mw``; otherwise the recorded source value (``dp.sa``) wins
        over the DOM attribute.
        """
        for entry in data_mw(node).get("attribs", []):
            if not (isinstance(entry, list) and len(entry) == 2):
                continue
            key, value = entry
            key_text = key.get("txt") if isinstance(key, dict) else key
            if key_text == name and isinstance(value, dict) and isinstance(value.get("html"), str):
                return self.serialize(value["html"])
        source_attrs: Any = data_parsoid(node).get("sa")
        if isinstance(source_attrs, dict) and isinstance(source_attrs.get(name), str):
            return source_attrs[name]
        return attr(node, name)

    def figure(self, node: Tag, state: SerializerState) -> None:
        """Emit ``[[resource|options|caption]]`` for a media figure."""
        media = node.find("img")
        if not isinstance(media, Tag):
            slog.warning("figure_without_media", html=str(node)[:80])
            FALLBACK_HANDLER.handle(node, state)
            return

        resource = attr(media, "resource") or attr(media, "src")
        if resource.startswith("./"):
            resource = resource[2:]

        parts = [resource]
        for type_name in attr(node, "typeof").split():
            _, _, fmt = type_name.rpartition("/")
            if fmt in _FIGURE_FORMATS:
                parts.append(_FIGURE_FORMATS[fmt])
        for css_class in attr(node, "class").split():
            if css_class.startswith(_HALIGN_PREFIX):
                parts.append(css_class[len(_HALIGN_PREFIX) :])
        alt = attr(media, "alt")
        if alt:
            parts.append(f"alt={alt}")

        caption = node.find("figcaption")
        if isinstance(caption, Tag):
            text = self.serialize_contents(caption)
            if text:
                parts.append(text)

        state.emit_chunk("[[" + "|".join(parts) + "]]", node)
