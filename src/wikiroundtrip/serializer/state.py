"""Mutable state of one serialization run."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from bs4 import PageElement

from wikiroundtrip.core.environment import ReplayEnvironment
from wikiroundtrip.core.site_config import SiteConfig

if TYPE_CHECKING:
    from wikiroundtrip.serializer.wikitext import WikitextSerializer

slog = structlog.get_logger(__name__)


class SerializerState:
    """Output buffer plus the context handlers need while emitting.

    Handlers never write to the output directly; they call emit_chunk()
    and the serializer places separators between the chunks of adjacent
    nodes.
    """

    def __init__(self, serializer: WikitextSerializer, env: ReplayEnvironment) -> None:
        self.serializer = serializer
        self.env = env
        self.chunks: list[str] = []
        self.last_node: PageElement | None = None
        self.log = slog

    @property
    def site(self) -> SiteConfig:
        return self.env.site

    def emit_chunk(self, text: str, node: PageElement) -> None:
        """Append ``text`` produced for ``node``."""
        if text:
            self.chunks.append(text)
        self.last_node = node

    def emit_separator(self, text: str) -> None:
        if text:
            self.chunks.append(text)

    def output(self) -> str:
        return "".join(self.chunks)
