"""Paragraph wrapping of inline content."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from wikiroundtrip.contracts import EndTagTk, EOFTk, NlTk, TagTk, TagToken, TokenLike
from wikiroundtrip.plugins.base import BaseTokenTransformer
from wikiroundtrip.plugins.transformers._util import is_block_tag, is_sol_transparent

# Inside these no paragraphs are generated.
_NO_WRAP_CONTEXT = frozenset({"table", "ul", "ol", "dl", "pre"})


class ParagraphWrapper(BaseTokenTransformer):
    """Inserts p tags around runs of inline content.

    A blank line (two newlines) ends a paragraph, as does any block-level
    tag. Newlines and sol-transparent tokens (comments, whitespace,
    meta/link markers) are held back until the next content token decides
    whether they sit inside or between paragraphs.
    """

    name = "ParagraphWrapper"

    def reset_state(self, options: dict[str, Any] | None = None) -> None:
        self._in_p = False
        self._pending: list[TokenLike] = []
        self._newlines = 0
        self._context_depth = 0

    def _close_p(self) -> list[TokenLike]:
        if not self._in_p:
            return []
        self._in_p = False
        return [EndTagTk("p")]

    def _flush(self) -> list[TokenLike]:
        out = self._pending
        self._pending = []
        self._newlines = 0
        return out

    def on_token(self, token: TokenLike) -> Iterable[TokenLike]:
        if isinstance(token, EOFTk):
            out = self._close_p() + self._flush() + [token]
            self.reset_state()
            return out

        if isinstance(token, TagToken) and is_block_tag(token):
            out = self._close_p() + self._flush() + [token]
            name = token.name.lower()
            if name in _NO_WRAP_CONTEXT:
                if isinstance(token, TagTk):
                    self._context_depth += 1
                elif isinstance(token, EndTagTk):
                    self._context_depth = max(0, self._context_depth - 1)
            return out

        if self._context_depth > 0:
            return [token]

        if isinstance(token, NlTk):
            self._pending.append(token)
            self._newlines += 1
            return []

        if is_sol_transparent(token):
            if self._pending or not self._in_p:
                self._pending.append(token)
                return []
            return [token]

        # Inline content
        if self._in_p:
            if self._newlines >= 2:
                out = self._close_p() + self._flush()
                self._in_p = True
                return [*out, TagTk("p"), token]
            return [*self._flush(), token]
        self._in_p = True
        return [*self._flush(), TagTk("p"), token]
