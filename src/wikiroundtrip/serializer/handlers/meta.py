"""Meta and link marker nodes: page properties, placeholders, include markers."""

from __future__ import annotations

import re

from bs4 import PageElement, Tag

from wikiroundtrip.contracts import MarkerCategory
from wikiroundtrip.serializer.dom import attr, data_mw, data_parsoid, has_expanded_attrs, is_new_element
from wikiroundtrip.serializer.handlers.base import DOMHandler, as_element
from wikiroundtrip.serializer.handlers.fallback import FallbackHTMLHandler
from wikiroundtrip.serializer.markers import (
    INCLUDE_FALLBACK_SOURCE,
    PAGE_PROPERTY_PATTERN,
    classify,
    is_placeholder,
)
from wikiroundtrip.serializer.separators import NO_CONSTRAINT, SeparatorConstraint
from wikiroundtrip.serializer.state import SerializerState

_CATEGORY_PREFIX = re.compile(r"^(?:category)?(.*)$")
_SOURCE_PREFIX = re.compile(r"^([^:]+:)(.*)$", re.DOTALL)


class MetaHandler(DOMHandler):
    """Dispatches marker nodes.

    The ``property`` attribute is checked before ``typeof`` so that page
    properties with templated values (``{{DEFAULTSORT:{{echo|foo}}}}``)
    round-trip through the category path.
    """

    def __init__(self) -> None:
        self._fallback = FallbackHTMLHandler()

    def handle(self, node: PageElement, state: SerializerState) -> PageElement | None:
        node = as_element(node)
        prop = attr(node, "property")
        if prop:
            match = PAGE_PROPERTY_PATTERN.match(prop)
            if match is None:
                return self._fallback.handle(node, state)
            state.emit_chunk(self._page_property(node, match.group(1), state), node)
            return None

        typeof = attr(node, "typeof")
        category = classify(typeof)
        if category == MarkerCategory.DEFAULT:
            return self._fallback.handle(node, state)
        state.emit_chunk(self._marker_source(node, category), node)
        return None

    def _page_property(self, node: Tag, name: str, state: SerializerState) -> str:
        dp = data_parsoid(node)
        stripped = _CATEGORY_PREFIX.match(name)
        magic = stripped.group(1) if stripped else name
        if not (name.startswith("category") or magic in state.site.magic_masqs):
            return state.site.get_magic_word_wt(name, dp.get("magicSrc", ""))

        value = state.serializer.serialized_attr_val(node, "content")
        if has_expanded_attrs(node):
            return "{{" + value + "}}"
        src = dp.get("src")
        if isinstance(src, str):
            return _SOURCE_PREFIX.sub(lambda m: m.group(1) + value + "}}", src, count=1)
        upper = magic.upper()
        state.log.warning("page_property_missing_source", property=magic, rendered_as=upper)
        return "{{" + upper + ":" + value + "}}"

    @staticmethod
    def _marker_source(node: Tag, category: MarkerCategory) -> str:
        dp = data_parsoid(node)
        src = dp.get("src")
        if category == MarkerCategory.PLACEHOLDER:
            return src if isinstance(src, str) else ""
        if category == MarkerCategory.DIFF_MARKER or category == MarkerCategory.INCLUDE_ONLY_END:
            return ""
        if category == MarkerCategory.INCLUDE_ONLY:
            dmw_src = data_mw(node).get("src")
            if isinstance(dmw_src, str):
                return dmw_src
        if isinstance(src, str):
            return src
        return INCLUDE_FALLBACK_SOURCE[category]

    def before(self, node: PageElement, other: PageElement, state: SerializerState) -> SeparatorConstraint:
        node = as_element(node)
        marker = attr(node, "typeof") or attr(node, "property")
        if "mw:PageProp/categorydefaultsort" in marker:
            if isinstance(other, Tag) and other.name == "p" and data_parsoid(other).get("stx") != "html":
                # Outside the paragraph; two newlines keep it out on reparse
                return SeparatorConstraint(min=2)
            return SeparatorConstraint(min=1)
        return self._new_marker_constraint(node)

    def after(self, node: PageElement, other: PageElement, state: SerializerState) -> SeparatorConstraint:
        return self._new_marker_constraint(as_element(node))

    @staticmethod
    def _new_marker_constraint(node: Tag) -> SeparatorConstraint:
        # Placeholders stay inline
        if is_new_element(node) and not (node.name == "meta" and is_placeholder(attr(node, "typeof"))):
            return SeparatorConstraint(min=1)
        return NO_CONSTRAINT
