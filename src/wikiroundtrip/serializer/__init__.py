"""Reverse direction: HTML DOM back to wikitext."""

from wikiroundtrip.serializer.markers import classify
from wikiroundtrip.serializer.separators import (
    NO_CONSTRAINT,
    SeparatorConstraint,
    combine,
    resolve_newlines,
    resolve_separator,
)
from wikiroundtrip.serializer.state import SerializerState
from wikiroundtrip.serializer.wikitext import WikitextSerializer

__all__ = [
    "NO_CONSTRAINT",
    "SeparatorConstraint",
    "SerializerState",
    "WikitextSerializer",
    "classify",
    "combine",
    "resolve_newlines",
    "resolve_separator",
]
