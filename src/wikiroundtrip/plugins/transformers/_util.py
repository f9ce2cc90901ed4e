"""Helpers shared by the built-in transformers (not plugins)."""

from typing import Any

from wikiroundtrip.contracts import KV, CommentTk, SelfclosingTagTk, TagToken, TokenLike

BLOCK_TAGS: frozenset[str] = frozenset(
    {
        "blockquote", "caption", "center", "dd", "div", "dl", "dt", "figure", "h1", "h2", "h3",
        "h4", "h5", "h6", "hr", "li", "ol", "p", "pre", "table", "tbody", "td", "tfoot", "th",
        "thead", "tr", "ul",
    }
)  # fmt: skip

# Markup that never starts or interrupts a line of content.
SOL_TRANSPARENT_TAGS: frozenset[str] = frozenset({"meta", "link"})


def is_block_tag(token: TokenLike) -> bool:
    return isinstance(token, TagToken) and token.name.lower() in BLOCK_TAGS


def is_sol_transparent(token: TokenLike) -> bool:
    """Comments, whitespace and meta/link markers."""
    if isinstance(token, str):
        return token.strip() == ""
    if isinstance(token, CommentTk):
        return True
    return isinstance(token, SelfclosingTagTk) and token.name in SOL_TRANSPARENT_TAGS


def marker_meta(typeof: str, dp: dict[str, Any], dmw: dict[str, Any] | None = None) -> SelfclosingTagTk:
    """A ``meta`` marker token; ``dp`` is copied so the source token's sidecar stays untouched."""
    return SelfclosingTagTk("meta", [KV("typeof", typeof)], dp=dict(dp), dmw=dict(dmw or {}))
