# src/wikiroundtrip/core/site_config.py
"""Site configuration: magic words, extension tags and HTML allow-lists.

Uses Pydantic for validation and PyYAML for loading. The model is frozen;
magic-word matchers are compiled once at construction and reused for every
lookup.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, PrivateAttr, ValidationError, field_validator

from wikiroundtrip.contracts.errors import SiteConfigError

_DEFAULT_MAGIC_WORDS: dict[str, list[str]] = {
    "notoc": ["__NOTOC__"],
    "forcetoc": ["__FORCETOC__"],
    "toc": ["__TOC__"],
    "noeditsection": ["__NOEDITSECTION__"],
    "newsectionlink": ["__NEWSECTIONLINK__"],
    "nonewsectionlink": ["__NONEWSECTIONLINK__"],
    "nogallery": ["__NOGALLERY__"],
    "hiddencat": ["__HIDDENCAT__"],
    "expectunusedcategory": ["__EXPECTUNUSEDCATEGORY__"],
    "index": ["__INDEX__"],
    "noindex": ["__NOINDEX__"],
    "staticredirect": ["__STATICREDIRECT__"],
    "defaultsort": ["DEFAULTSORT:", "DEFAULTSORTKEY:", "DEFAULTCATEGORYSORT:"],
    "displaytitle": ["DISPLAYTITLE:"],
}

_DEFAULT_HTML_TAGS: frozenset[str] = frozenset(
    {
        "a", "abbr", "b", "bdi", "bdo", "big", "blockquote", "br", "caption", "center", "cite",
        "code", "data", "dd", "del", "dfn", "div", "dl", "dt", "em", "font", "h1", "h2", "h3",
        "h4", "h5", "h6", "hr", "i", "ins", "kbd", "li", "link", "mark", "meta", "ol", "p",
        "pre", "q", "rb", "rp", "rt", "rtc", "ruby", "s", "samp", "small", "span", "strike",
        "strong", "sub", "sup", "table", "td", "th", "time", "tr", "tt", "u", "ul", "var", "wbr",
    }
)  # fmt: skip

_DEFAULT_ATTRIBUTES: dict[str, frozenset[str]] = {
    "*": frozenset({"class", "id", "style", "title", "lang", "dir", "role", "typeof", "property", "about"}),
    "a": frozenset({"href", "rel"}),
    "font": frozenset({"size", "color", "face"}),
    "meta": frozenset({"content", "itemprop"}),
    "link": frozenset({"href", "itemprop"}),
    "ol": frozenset({"start", "type", "reversed"}),
    "li": frozenset({"value", "type"}),
    "table": frozenset({"border", "cellpadding", "cellspacing", "width", "align"}),
    "td": frozenset({"colspan", "rowspan", "align", "valign", "width"}),
    "th": frozenset({"colspan", "rowspan", "align", "valign", "width", "scope"}),
    "time": frozenset({"datetime"}),
    "data": frozenset({"value"}),
}


class SiteConfig(BaseModel):
    """Per-site configuration consumed by transformers and the serializer.

    Example YAML:
        magic_words:
          notoc: ["__NOTOC__", "__KEIN_INHALTSVERZEICHNIS__"]
          defaultsort: ["DEFAULTSORT:"]
        magic_masqs: ["defaultsort", "displaytitle"]
        extension_tags: ["ref", "references", "nowiki"]
    """

    model_config = {"frozen": True}

    magic_words: dict[str, list[str]] = Field(
        default_factory=lambda: dict(_DEFAULT_MAGIC_WORDS),
        description="Canonical magic-word name -> aliases (first alias is preferred)",
    )
    case_sensitive_magic_words: frozenset[str] = Field(
        default=frozenset(),
        description="Canonical names whose aliases only match with exact case",
    )
    magic_masqs: frozenset[str] = Field(
        default=frozenset({"defaultsort", "displaytitle"}),
        description="Page properties that masquerade as categories on the wire",
    )
    extension_tags: frozenset[str] = Field(
        default=frozenset({"ref", "references", "nowiki", "pre", "gallery", "math", "indicator"}),
    )
    allowed_html_tags: frozenset[str] = Field(default=_DEFAULT_HTML_TAGS)
    allowed_attributes: dict[str, frozenset[str]] = Field(default_factory=lambda: dict(_DEFAULT_ATTRIBUTES))

    _matchers: dict[str, re.Pattern[str]] = PrivateAttr(default_factory=dict)
    _alias_to_canonical: dict[str, str] = PrivateAttr(default_factory=dict)

    @field_validator("magic_words")
    @classmethod
    def validate_aliases(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        """Every magic word needs at least one alias."""
        for name, aliases in v.items():
            if not aliases:
                raise ValueError(f"magic word '{name}' has no aliases")
        return v

    def model_post_init(self, context: Any, /) -> None:
        for name, aliases in self.magic_words.items():
            flags = 0 if name in self.case_sensitive_magic_words else re.IGNORECASE
            alternation = "|".join(re.escape(alias) for alias in aliases)
            self._matchers[name] = re.compile(f"^(?:{alternation})$", flags)
            for alias in aliases:
                key = alias if name in self.case_sensitive_magic_words else alias.lower()
                self._alias_to_canonical.setdefault(key, name)

    @classmethod
    def default(cls) -> SiteConfig:
        """Built-in configuration resembling an English-language wiki."""
        return cls()

    def magic_word_canonical_name(self, alias: str) -> str | None:
        """Canonical name for a magic-word alias, or None if unknown."""
        if alias in self._alias_to_canonical:
            return self._alias_to_canonical[alias]
        return self._alias_to_canonical.get(alias.lower())

    def get_magic_word_wt(self, name: str, magic_src: str = "") -> str:
        """Wikitext for a magic word.

        The recorded original spelling wins when it is still a valid alias,
        so unmodified content keeps its casing. Unknown words yield "".
        """
        matcher = self._matchers.get(name)
        if matcher is None:
            return ""
        if magic_src and matcher.match(magic_src):
            return magic_src
        return self.magic_words[name][0]

    def is_extension_tag(self, name: str) -> bool:
        return name.lower() in self.extension_tags

    def is_allowed_tag(self, name: str) -> bool:
        return name.lower() in self.allowed_html_tags

    def allowed_attributes_for(self, tag: str) -> frozenset[str]:
        """Attributes permitted on ``tag`` (global ones included)."""
        return self.allowed_attributes.get("*", frozenset()) | self.allowed_attributes.get(tag.lower(), frozenset())


def load_site_config(path: Path) -> SiteConfig:
    """Load site configuration from a YAML file.

    Raises:
        SiteConfigError: If the file is missing, not YAML, or fails validation
    """
    if not path.exists():
        raise SiteConfigError(f"Site config not found: {path}")
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise SiteConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise SiteConfigError(f"Site config must be a mapping, got {type(raw).__name__}")
    try:
        return SiteConfig(**raw)
    except ValidationError as e:
        raise SiteConfigError(f"Invalid site config {path}: {e}") from e
