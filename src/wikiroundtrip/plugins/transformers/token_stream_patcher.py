"""Late-stage token stream fixups."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from typing import Any

from wikiroundtrip.contracts import EndTagTk, EOFTk, TagTk, TokenLike, TransformerStateError, token_source
from wikiroundtrip.plugins.base import BaseTokenTransformer


class TokenStreamPatcher(BaseTokenTransformer):
    """Drops empty text, merges adjacent text and escapes stray end tags.

    Options:
        inTemplate: Transclusion content. Stray end tags are left alone
            there since the matching open tag may live in the caller.

    Must be reset before first use; ``reset_state({"toplevel": True})``
    marks the stream as a top-level document. Text is merged within a
    batch only: pending text is flushed when the batch ends.
    """

    name = "TokenStreamPatcher"
    default_options = {"inTemplate": False}
    requires_explicit_reset = True

    _ready = False

    def reset_state(self, options: dict[str, Any] | None = None) -> None:
        options = options or {}
        if "inTemplate" in options:
            self.options["inTemplate"] = options["inTemplate"]
        self._toplevel = bool(options.get("toplevel", not self.options.get("inTemplate")))
        self._text: list[str] = []
        self._open: Counter[str] = Counter()
        self._ready = True

    def process(self, tokens: Iterable[Any], options: dict[str, Any] | None = None) -> list[TokenLike]:
        if not self._ready:
            raise TransformerStateError(self.name, "reset_state() must be called before the first batch")
        out = super().process(tokens, options)
        return out + self._flush_text()

    def _flush_text(self) -> list[TokenLike]:
        if not self._text:
            return []
        merged = "".join(self._text)
        self._text = []
        return [merged]

    def on_token(self, token: TokenLike) -> Iterable[TokenLike]:
        if isinstance(token, str):
            if token:
                self._text.append(token)
            return []

        if isinstance(token, EndTagTk):
            name = token.name.lower()
            if self._open[name] > 0:
                self._open[name] -= 1
            elif self._toplevel:
                self._log.debug("stray_end_tag_escaped", tag=token.name)
                self._text.append(token_source(token))
                return []
        elif isinstance(token, TagTk):
            self._open[token.name.lower()] += 1

        out = self._flush_text()
        out.append(token)
        if isinstance(token, EOFTk):
            toplevel = self._toplevel
            self.reset_state({"toplevel": toplevel})
        return out
