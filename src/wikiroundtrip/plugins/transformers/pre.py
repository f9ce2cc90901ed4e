"""Indent-pre: lines starting with a space become a pre block."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from wikiroundtrip.contracts import CommentTk, EndTagTk, EOFTk, NlTk, TagTk, TokenLike
from wikiroundtrip.plugins.base import BaseTokenTransformer


class PreHandler(BaseTokenTransformer):
    """Recognizes leading-space preformatted lines.

    Options:
        inTemplate: When true (transclusion content) the handler is a no-op.

    Whitespace-only lines never start a block and end an open one.
    """

    name = "PreHandler"
    default_options = {"inTemplate": False}

    def reset_state(self, options: dict[str, Any] | None = None) -> None:
        if options is not None and "inTemplate" in options:
            self.options["inTemplate"] = options["inTemplate"]
        self._sol = True
        self._in_pre = False
        self._pending: list[TokenLike] = []

    def _close_pre(self) -> list[TokenLike]:
        if not self._in_pre:
            return []
        self._in_pre = False
        out: list[TokenLike] = [EndTagTk("pre")]
        out += self._pending
        self._pending = []
        return out

    def on_token(self, token: TokenLike) -> Iterable[TokenLike]:
        if self.options.get("inTemplate"):
            return [token]

        if isinstance(token, EOFTk):
            out = self._close_pre() + [token]
            self.reset_state()
            return out

        if isinstance(token, NlTk):
            self._sol = True
            if self._in_pre:
                self._pending.append(token)
                return []
            return [token]

        if not self._sol:
            return [token]

        if isinstance(token, CommentTk):
            if self._in_pre:
                self._pending.append(token)
                return []
            return [token]

        self._sol = False
        if isinstance(token, str) and token.startswith(" ") and token.strip():
            if self._in_pre:
                out = self._pending + [token[1:]]
                self._pending = []
                return out
            self._in_pre = True
            return [TagTk("pre"), token[1:]]

        return self._close_pre() + [token]
