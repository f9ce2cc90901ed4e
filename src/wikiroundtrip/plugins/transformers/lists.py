"""List-marker tokens -> nested list tags."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from wikiroundtrip.contracts import (
    EndTagTk,
    EOFTk,
    MalformedTokenError,
    NlTk,
    TagTk,
    TokenLike,
)
from wikiroundtrip.plugins.base import BaseTokenTransformer
from wikiroundtrip.plugins.transformers._util import is_sol_transparent

_LIST_TAG = {"*": "ul", "#": "ol", ";": "dl", ":": "dl"}
_ITEM_TAG = {"*": "li", "#": "li", ";": "dt", ":": "dd"}


def _same_level(a: str, b: str) -> bool:
    # ';' and ':' items share one dl
    return a == b or (a in ";:" and b in ";:")


class ListHandler(BaseTokenTransformer):
    """Converts listItem tokens into nested ul/ol/dl and li/dt/dd tags.

    The tokenizer emits ``TagTk("listItem", [KV("bullets", ["*", "#"])])``
    at the start of each list line. The handler keeps a stack of the
    currently open bullets; a new item closes everything below the longest
    common prefix with the stack and opens whatever is missing. The
    listItem token's ``dp`` moves to the innermost item tag it opens.

    A newline inside a list is held back until the next line shows whether
    the list continues; closing tags go before it.
    """

    name = "ListHandler"

    def reset_state(self, options: dict[str, Any] | None = None) -> None:
        self._stack: list[str] = []
        self._pending: list[TokenLike] = []

    def _flush(self) -> list[TokenLike]:
        out = self._pending
        self._pending = []
        return out

    def _close_level(self) -> list[TokenLike]:
        bullet = self._stack.pop()
        return [EndTagTk(_ITEM_TAG[bullet]), EndTagTk(_LIST_TAG[bullet])]

    def _close_all(self) -> list[TokenLike]:
        out: list[TokenLike] = []
        while self._stack:
            out += self._close_level()
        return out

    def _bullets(self, token: TagTk) -> list[str]:
        bullets = token.get_attribute("bullets")
        if bullets is None:
            bullets = token.dp.get("bullets")
        if isinstance(bullets, str):
            bullets = list(bullets)
        if not isinstance(bullets, list) or not bullets or any(b not in _LIST_TAG for b in bullets):
            raise MalformedTokenError(token, "listItem needs a non-empty bullets list of *#:;")
        return bullets

    def _on_list_item(self, token: TagTk) -> list[TokenLike]:
        bullets = self._bullets(token)
        prefix = 0
        while prefix < min(len(bullets), len(self._stack)) and _same_level(self._stack[prefix], bullets[prefix]):
            prefix += 1

        out: list[TokenLike] = []
        while len(self._stack) > prefix:
            out += self._close_level()

        if prefix == len(bullets):
            # Sibling item at an existing depth
            out.append(EndTagTk(_ITEM_TAG[self._stack[-1]]))
            out += self._flush()
            self._stack[-1] = bullets[-1]
            out.append(TagTk(_ITEM_TAG[bullets[-1]], dp=token.dp))
            return out

        out += self._flush()
        new_levels = bullets[prefix:]
        for depth, bullet in enumerate(new_levels, start=1):
            out.append(TagTk(_LIST_TAG[bullet]))
            out.append(TagTk(_ITEM_TAG[bullet], dp=token.dp if depth == len(new_levels) else {}))
            self._stack.append(bullet)
        return out

    def on_token(self, token: TokenLike) -> Iterable[TokenLike]:
        if isinstance(token, TagTk) and token.name == "listItem":
            return self._on_list_item(token)

        if isinstance(token, EOFTk):
            out = self._close_all() + self._flush() + [token]
            self.reset_state()
            return out

        if not self._stack:
            return [token]

        if isinstance(token, NlTk):
            self._pending.append(token)
            return []

        if self._pending:
            if is_sol_transparent(token):
                self._pending.append(token)
                return []
            # The line after the list does not continue it
            return self._close_all() + self._flush() + [token]

        return [token]
