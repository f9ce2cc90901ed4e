"""Replay environment handed to every transformer.

Bundles the site configuration with the page source the transcript was
recorded from, when that source is available.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import structlog

from wikiroundtrip.core.site_config import SiteConfig

slog = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ReplayEnvironment:
    """Read-only context shared by the transformers of one run.

    Attributes:
        site: Site configuration (magic words, allow-lists)
        page_content: Original wikitext of the page, if known
    """

    site: SiteConfig = field(default_factory=SiteConfig.default)
    page_content: str | None = None

    @classmethod
    def for_transcript(cls, wikitext_file: Path, site: SiteConfig | None = None) -> ReplayEnvironment:
        """Build an environment, loading ``wikitext_file`` when it exists."""
        site = site if site is not None else SiteConfig.default()
        if wikitext_file.exists():
            slog.debug("page_source_loaded", path=str(wikitext_file))
            return cls(site=site, page_content=wikitext_file.read_text(encoding="utf-8"))
        return cls(site=site)

    def page_source(self, tsr: list[int] | tuple[int, int] | None) -> str | None:
        """Slice of the page source covered by a token's ``tsr`` span."""
        if self.page_content is None or not tsr or len(tsr) != 2:
            return None
        start, end = tsr
        if not isinstance(start, int) or not isinstance(end, int) or start < 0 or end < start:
            return None
        return self.page_content[start:end]
