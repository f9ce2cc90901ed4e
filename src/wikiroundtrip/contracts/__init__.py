"""Shared contracts for cross-boundary data types.

This package is a LEAF MODULE with no outbound dependencies to core/engine.

Import patterns:
    from wikiroundtrip.contracts import TagTk, Direction, MalformedTokenError
"""

from wikiroundtrip.contracts.enums import CheckStatus, Dialect, Direction, MarkerCategory, TokenType
from wikiroundtrip.contracts.errors import (
    MalformedTokenError,
    RoundTripError,
    SiteConfigError,
    TranscriptError,
    TransformerStateError,
    UnknownTransformerError,
)
from wikiroundtrip.contracts.results import Comparison, ReplayResult
from wikiroundtrip.contracts.tokens import (
    KV,
    CommentTk,
    EndTagTk,
    EOFTk,
    NlTk,
    SelfclosingTagTk,
    TagTk,
    TagToken,
    Token,
    TokenLike,
    decode_token,
    encode_tokens,
    is_token,
    token_source,
    token_to_json,
)

__all__ = [
    "KV",
    "CheckStatus",
    "CommentTk",
    "Comparison",
    "Dialect",
    "Direction",
    "EOFTk",
    "EndTagTk",
    "MalformedTokenError",
    "MarkerCategory",
    "NlTk",
    "ReplayResult",
    "RoundTripError",
    "SelfclosingTagTk",
    "SiteConfigError",
    "TagTk",
    "TagToken",
    "Token",
    "TokenLike",
    "TokenType",
    "TranscriptError",
    "TransformerStateError",
    "UnknownTransformerError",
    "decode_token",
    "encode_tokens",
    "is_token",
    "token_source",
    "token_to_json",
]
