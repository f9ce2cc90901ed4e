"""BeautifulSoup helpers for round-trip metadata on DOM nodes."""

from __future__ import annotations

import json
from typing import Any

from bs4 import BeautifulSoup, PageElement, Tag

DATA_PARSOID = "data-parsoid"
DATA_MW = "data-mw"

# Elements serialized without a closing tag
VOID_ELEMENTS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "param", "source", "track", "wbr"}
)


def parse_html(html: str) -> BeautifulSoup:
    """Parse HTML keeping attribute values as plain strings."""
    return BeautifulSoup(html, "html.parser", multi_valued_attributes=None)


def _json_attribute(node: Tag, name: str) -> dict[str, Any]:
    raw = node.get(name)
    if not isinstance(raw, str) or not raw:
        return {}
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    return value if isinstance(value, dict) else {}


def data_parsoid(node: Tag) -> dict[str, Any]:
    """Decoded ``data-parsoid`` of ``node`` ({} when absent or invalid)."""
    return _json_attribute(node, DATA_PARSOID)


def data_mw(node: Tag) -> dict[str, Any]:
    return _json_attribute(node, DATA_MW)


def attr(node: Tag, name: str) -> str:
    value = node.get(name)
    return value if isinstance(value, str) else ""


def is_new_element(node: Tag) -> bool:
    """True for nodes inserted by an editor rather than parsed from source."""
    if not node.has_attr(DATA_PARSOID):
        return True
    return bool(data_parsoid(node).get("isNew"))


def is_body(node: PageElement | None) -> bool:
    """The document body (or the fragment root when there is no body)."""
    if isinstance(node, BeautifulSoup):
        return node.body is None
    return isinstance(node, Tag) and node.name == "body"


def has_expanded_attrs(node: Tag) -> bool:
    return "mw:ExpandedAttrs" in attr(node, "typeof").split()
