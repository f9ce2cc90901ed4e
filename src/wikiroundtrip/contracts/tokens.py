"""Token model: the lexical units flowing between transformer stages.

Text chunks are plain ``str`` values. Every other variant is a dataclass
carrying two sidecar blobs that transformers pass through untouched:

- ``dp``: parse-time round-trip metadata (source span ``tsr``, syntax
  flag ``stx``, original ``src`` ...), serialized as ``dataAttribs``
- ``dmw``: extension-specific metadata, serialized as ``dataMw``

Wire form (compact JSON, keys in this order):

    {"type":"TagTk","name":"p","attribs":[{"k":"class","v":"x"}],"dataAttribs":{}}
    {"type":"NlTk","dataAttribs":{}}
    {"type":"CommentTk","value":" c ","dataAttribs":{}}
    {"type":"EOFTk"}
    "plain text"
"""

from __future__ import annotations

__all__ = [
    "KV",
    "CommentTk",
    "EOFTk",
    "EndTagTk",
    "NlTk",
    "SelfclosingTagTk",
    "TagTk",
    "TagToken",
    "Token",
    "TokenLike",
    "decode_token",
    "encode_tokens",
    "is_token",
    "token_source",
    "token_to_json",
]

import json
from dataclasses import dataclass, field
from typing import Any, ClassVar

from wikiroundtrip.contracts.enums import TokenType
from wikiroundtrip.contracts.errors import MalformedTokenError


@dataclass
class KV:
    """Attribute key/value pair. Keys may repeat within one attribute list."""

    k: Any
    v: Any

    def to_json(self) -> dict[str, Any]:
        return {"k": _encode_value(self.k), "v": _encode_value(self.v)}


@dataclass
class Token:
    """Base class for all non-text tokens."""

    type: ClassVar[TokenType]

    dp: dict[str, Any] = field(default_factory=dict, kw_only=True)
    dmw: dict[str, Any] = field(default_factory=dict, kw_only=True)


@dataclass
class TagToken(Token):
    """Shared behavior for open, close and self-closing tags."""

    name: str = ""
    attribs: list[KV] = field(default_factory=list)

    def get_attribute(self, key: str) -> Any:
        """Return the value of the first attribute named ``key``, or None."""
        for kv in self.attribs:
            if kv.k == key:
                return kv.v
        return None


@dataclass
class TagTk(TagToken):
    type: ClassVar[TokenType] = TokenType.TAG


@dataclass
class EndTagTk(TagToken):
    type: ClassVar[TokenType] = TokenType.END_TAG


@dataclass
class SelfclosingTagTk(TagToken):
    type: ClassVar[TokenType] = TokenType.SELF_CLOSING


@dataclass
class NlTk(Token):
    type: ClassVar[TokenType] = TokenType.NEWLINE


@dataclass
class EOFTk(Token):
    type: ClassVar[TokenType] = TokenType.EOF


@dataclass
class CommentTk(Token):
    type: ClassVar[TokenType] = TokenType.COMMENT

    value: str = ""


TokenLike = Token | str

_TAG_CLASSES: dict[str, type[TagToken]] = {
    TokenType.TAG: TagTk,
    TokenType.END_TAG: EndTagTk,
    TokenType.SELF_CLOSING: SelfclosingTagTk,
}


def is_token(value: Any) -> bool:
    """True for anything a transformer may legally receive."""
    return isinstance(value, str | Token)


def _encode_value(value: Any) -> Any:
    if isinstance(value, Token):
        return token_to_json(value)
    if isinstance(value, KV):
        return value.to_json()
    if isinstance(value, list):
        return [_encode_value(v) for v in value]
    if isinstance(value, dict):
        return {k: _encode_value(v) for k, v in value.items()}
    return value


def token_to_json(token: TokenLike) -> Any:
    """Convert a token into its JSON-ready form (dict or str)."""
    if isinstance(token, str):
        return token
    if isinstance(token, TagToken):
        out: dict[str, Any] = {
            "type": str(token.type),
            "name": token.name,
            "attribs": [kv.to_json() for kv in token.attribs],
            "dataAttribs": _encode_value(token.dp),
        }
    elif isinstance(token, CommentTk):
        out = {"type": str(token.type), "value": token.value, "dataAttribs": _encode_value(token.dp)}
    elif isinstance(token, NlTk):
        out = {"type": str(token.type), "dataAttribs": _encode_value(token.dp)}
    elif isinstance(token, EOFTk):
        out = {"type": str(token.type)}
        if token.dp:
            out["dataAttribs"] = _encode_value(token.dp)
    else:
        raise TypeError(f"Cannot encode {type(token).__name__} as a token")
    if token.dmw:
        out["dataMw"] = _encode_value(token.dmw)
    return out


def encode_tokens(tokens: list[TokenLike]) -> str:
    """Encode a token array as compact JSON (unescaped unicode and slashes)."""
    return json.dumps([token_to_json(t) for t in tokens], separators=(",", ":"), ensure_ascii=False)


def _decode_attribs(raw: Any, payload: Any) -> list[KV]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise MalformedTokenError(payload, "attribs must be a list")
    attribs: list[KV] = []
    for item in raw:
        if isinstance(item, dict) and "k" in item:
            attribs.append(KV(item["k"], item.get("v", "")))
        elif isinstance(item, list) and len(item) == 2:
            attribs.append(KV(item[0], item[1]))
        else:
            raise MalformedTokenError(payload, f"bad attribute entry {item!r}")
    return attribs


def _decode_sidecar(raw: Any, payload: Any, key: str) -> dict[str, Any]:
    # An empty sidecar may arrive as [] from encoders that cannot tell
    # an empty map from an empty list.
    if raw is None or raw == []:
        return {}
    if not isinstance(raw, dict):
        raise MalformedTokenError(payload, f"{key} must be an object")
    return raw


def decode_token(payload: Any) -> TokenLike:
    """Build a token from its decoded JSON form.

    Raises:
        MalformedTokenError: If the payload is not a recognizable token
    """
    if isinstance(payload, str):
        return payload
    if not isinstance(payload, dict):
        raise MalformedTokenError(payload, "expected a string or an object")

    token_type = payload.get("type")
    dp = _decode_sidecar(payload.get("dataAttribs"), payload, "dataAttribs")
    dmw = _decode_sidecar(payload.get("dataMw"), payload, "dataMw")

    if token_type in _TAG_CLASSES:
        name = payload.get("name")
        if not isinstance(name, str) or not name:
            raise MalformedTokenError(payload, "tag token without a name")
        cls = _TAG_CLASSES[token_type]
        return cls(name, _decode_attribs(payload.get("attribs"), payload), dp=dp, dmw=dmw)
    if token_type == TokenType.NEWLINE:
        return NlTk(dp=dp, dmw=dmw)
    if token_type == TokenType.EOF:
        return EOFTk(dp=dp, dmw=dmw)
    if token_type == TokenType.COMMENT:
        value = payload.get("value", "")
        if not isinstance(value, str):
            raise MalformedTokenError(payload, "comment value must be a string")
        return CommentTk(value, dp=dp, dmw=dmw)
    raise MalformedTokenError(payload, f"unknown token type {token_type!r}")


def token_source(token: TokenLike) -> str:
    """Best-effort original source for a token.

    Prefers the recorded ``dp.src``; otherwise reconstructs the obvious
    wikitext/HTML form of the token.
    """
    if isinstance(token, str):
        return token
    src = token.dp.get("src")
    if isinstance(src, str):
        return src
    if isinstance(token, NlTk):
        return "\n"
    if isinstance(token, CommentTk):
        return f"<!--{token.value}-->"
    if isinstance(token, TagToken):
        attrs = "".join(f' {kv.k}="{kv.v}"' for kv in token.attribs if isinstance(kv.k, str) and isinstance(kv.v, str))
        if isinstance(token, EndTagTk):
            return f"</{token.name}>"
        if isinstance(token, SelfclosingTagTk):
            return f"<{token.name}{attrs} />"
        return f"<{token.name}{attrs}>"
    return ""
