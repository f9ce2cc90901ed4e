"""Literal-HTML tag and attribute sanitization."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import replace
from typing import Any

from wikiroundtrip.contracts import KV, EndTagTk, TagToken, TokenLike, token_source
from wikiroundtrip.plugins.base import BaseTokenTransformer

_URL_ATTRIBUTES = frozenset({"href", "src", "action", "formaction", "poster", "background", "cite"})
_UNSAFE_URL = re.compile(r"^\s*(?:javascript|vbscript|data)\s*:", re.IGNORECASE)
_UNSAFE_CSS = re.compile(r"expression\s*\(|url\s*\(|javascript\s*:|behavior\s*:|-moz-binding", re.IGNORECASE)
# data-* attributes are open to authors, except the ones the round trip owns
_RESERVED_DATA_ATTRIBUTES = frozenset({"data-mw", "data-parsoid"})


class Sanitizer(BaseTokenTransformer):
    """Neutralizes literal HTML the site does not allow.

    Options:
        inTemplate: Transclusion content; ``id`` attributes are stripped too.

    A tag written in HTML syntax (``dp.stx == "html"``) whose name is
    neither an allowed HTML tag nor an extension tag is turned back into
    its source text. Allowed tags keep only their permitted attributes.
    """

    name = "Sanitizer"
    default_options = {"inTemplate": False}

    def reset_state(self, options: dict[str, Any] | None = None) -> None:
        if options is not None and "inTemplate" in options:
            self.options["inTemplate"] = options["inTemplate"]

    def on_token(self, token: TokenLike) -> Iterable[TokenLike]:
        if not isinstance(token, TagToken):
            return [token]

        site = self.env.site
        if token.dp.get("stx") == "html" and not site.is_allowed_tag(token.name) and not site.is_extension_tag(token.name):
            self._log.debug("html_tag_escaped", tag=token.name)
            return [token_source(token)]

        if isinstance(token, EndTagTk) or not site.is_allowed_tag(token.name):
            return [token]

        attribs = [kv for kv in token.attribs if self._keep_attribute(token, kv)]
        if len(attribs) == len(token.attribs):
            return [token]
        return [replace(token, attribs=attribs)]

    def _keep_attribute(self, token: TagToken, kv: KV) -> bool:
        if not isinstance(kv.k, str):
            # Generated keys (templated attribute names) are resolved later
            return True
        key = kv.k.strip().lower()
        value = kv.v if isinstance(kv.v, str) else ""

        if key.startswith("on"):
            return False
        if key == "id" and self.options.get("inTemplate"):
            return False
        if key.startswith("data-"):
            if key in _RESERVED_DATA_ATTRIBUTES:
                return False
        elif key not in self.env.site.allowed_attributes_for(token.name):
            return False
        if key in _URL_ATTRIBUTES and _UNSAFE_URL.match(value):
            return False
        if key == "style" and _UNSAFE_CSS.search(value):
            return False
        return True
