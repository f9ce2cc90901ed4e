"""DOM handlers and the node-name registry."""

from bs4 import NavigableString, PageElement, Tag

from wikiroundtrip.serializer.handlers.base import DOMHandler
from wikiroundtrip.serializer.handlers.fallback import FallbackHTMLHandler
from wikiroundtrip.serializer.handlers.figure import FigureHandler
from wikiroundtrip.serializer.handlers.meta import MetaHandler
from wikiroundtrip.serializer.handlers.paragraph import ParagraphHandler
from wikiroundtrip.serializer.handlers.text import TextHandler

HANDLERS: dict[str, DOMHandler] = {
    "meta": MetaHandler(),
    "link": MetaHandler(),
    "figure": FigureHandler(),
    "p": ParagraphHandler(),
}
FALLBACK_HANDLER = FallbackHTMLHandler()
TEXT_HANDLER = TextHandler()


def get_handler(node: PageElement) -> DOMHandler:
    """Handler for ``node``; unregistered elements get the HTML fallback."""
    if isinstance(node, NavigableString):
        return TEXT_HANDLER
    if isinstance(node, Tag):
        return HANDLERS.get(node.name, FALLBACK_HANDLER)
    return FALLBACK_HANDLER


__all__ = [
    "FALLBACK_HANDLER",
    "HANDLERS",
    "DOMHandler",
    "FallbackHTMLHandler",
    "FigureHandler",
    "MetaHandler",
    "ParagraphHandler",
    "TextHandler",
    "get_handler",
]
