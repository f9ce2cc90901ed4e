"""Status codes, modes and kinds used across subsystem boundaries."""

from enum import StrEnum


class TokenType(StrEnum):
    """Wire name of each non-text token variant.

    Text chunks are plain ``str`` values and have no entry here.
    """

    TAG = "TagTk"
    END_TAG = "EndTagTk"
    SELF_CLOSING = "SelfclosingTagTk"
    NEWLINE = "NlTk"
    EOF = "EOFTk"
    COMMENT = "CommentTk"


class Direction(StrEnum):
    """Direction of a recorded pipeline event.

    IN: tokens entering a stage
    OUT: the stage's transformed output for the same batch
    """

    IN = "IN"
    OUT = "OUT"


class Dialect(StrEnum):
    """Transcript dialect understood by the replay oracle."""

    MANUAL = "manual"
    GENERATED = "generated"


class CheckStatus(StrEnum):
    """Outcome of a single transcript comparison."""

    PASSED = "passed"
    FAILED = "failed"


class MarkerCategory(StrEnum):
    """Fixed categories of marker nodes handled during serialization.

    DEFAULT is the required fallback arm: anything unclassified is
    serialized by its structural role.
    """

    PAGE_PROPERTY = "page_property"
    PLACEHOLDER = "placeholder"
    INCLUDE_ONLY = "include_only"
    INCLUDE_ONLY_END = "include_only_end"
    NO_INCLUDE = "no_include"
    NO_INCLUDE_END = "no_include_end"
    ONLY_INCLUDE = "only_include"
    ONLY_INCLUDE_END = "only_include_end"
    DIFF_MARKER = "diff_marker"
    DEFAULT = "default"
