"""Behavior switches (``__NOTOC__`` and friends) -> page-property meta tokens."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from wikiroundtrip.contracts import KV, MalformedTokenError, SelfclosingTagTk, TokenLike
from wikiroundtrip.plugins.base import BaseTokenTransformer


class BehaviorSwitchHandler(BaseTokenTransformer):
    """Converts behavior-switch tokens into ``mw:PageProp`` meta tokens.

    The original spelling of the switch is kept in ``dp.magicSrc`` so the
    serializer can reproduce it. Words the site does not know are emitted
    as literal text, spelled as in the page source when that is known.
    """

    name = "BehaviorSwitchHandler"

    def reset_state(self, options: dict[str, Any] | None = None) -> None:
        pass

    def on_token(self, token: TokenLike) -> Iterable[TokenLike]:
        if not (isinstance(token, SelfclosingTagTk) and token.name == "behavior-switch"):
            return [token]

        word = token.get_attribute("word")
        if not isinstance(word, str) or not word:
            raise MalformedTokenError(token, "behavior-switch needs a 'word' attribute")

        canonical = self.env.site.magic_word_canonical_name(word)
        if canonical is None:
            self._log.debug("unknown_behavior_switch", word=word)
            src = token.dp.get("src")
            if not isinstance(src, str):
                src = self.env.page_source(token.dp.get("tsr")) or word
            return [src]

        dp = {**token.dp, "magicSrc": word}
        return [SelfclosingTagTk("meta", [KV("property", f"mw:PageProp/{canonical}")], dp=dp, dmw=dict(token.dmw))]
