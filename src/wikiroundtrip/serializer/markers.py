"""Classification of marker nodes by their ``typeof``.

The table maps a typeof pattern to a MarkerCategory; the first match
wins and anything unmatched is DEFAULT. Page properties are matched on
the ``property`` attribute instead (see PAGE_PROPERTY_PATTERN).
"""

from __future__ import annotations

import re

from wikiroundtrip.contracts import MarkerCategory

PAGE_PROPERTY_PATTERN = re.compile(r"^mw:PageProp/(.*)$")
PLACEHOLDER_PATTERN = re.compile(r"(^|\s)mw:Placeholder(/\w*)?$")
_ANY_PLACEHOLDER = re.compile(r"(^|\s)mw:Placeholder(/|$)")

MARKER_TABLE: tuple[tuple[re.Pattern[str], MarkerCategory], ...] = (
    (PLACEHOLDER_PATTERN, MarkerCategory.PLACEHOLDER),
    (re.compile(r"^mw:Includes/IncludeOnly$"), MarkerCategory.INCLUDE_ONLY),
    (re.compile(r"^mw:Includes/IncludeOnly/End$"), MarkerCategory.INCLUDE_ONLY_END),
    (re.compile(r"^mw:Includes/NoInclude$"), MarkerCategory.NO_INCLUDE),
    (re.compile(r"^mw:Includes/NoInclude/End$"), MarkerCategory.NO_INCLUDE_END),
    (re.compile(r"^mw:Includes/OnlyInclude$"), MarkerCategory.ONLY_INCLUDE),
    (re.compile(r"^mw:Includes/OnlyInclude/End$"), MarkerCategory.ONLY_INCLUDE_END),
    (re.compile(r"^mw:DiffMarker/(?:inserted|deleted|moved)$"), MarkerCategory.DIFF_MARKER),
    (re.compile(r"^mw:Separator$"), MarkerCategory.DIFF_MARKER),
)

# Source emitted for an include marker without recorded source
INCLUDE_FALLBACK_SOURCE: dict[MarkerCategory, str] = {
    MarkerCategory.INCLUDE_ONLY: "",
    MarkerCategory.INCLUDE_ONLY_END: "",
    MarkerCategory.NO_INCLUDE: "<noinclude>",
    MarkerCategory.NO_INCLUDE_END: "</noinclude>",
    MarkerCategory.ONLY_INCLUDE: "<onlyinclude>",
    MarkerCategory.ONLY_INCLUDE_END: "</onlyinclude>",
}


def classify(typeof: str | None) -> MarkerCategory:
    """Category for a ``typeof`` value; DEFAULT when nothing matches."""
    if not typeof:
        return MarkerCategory.DEFAULT
    for pattern, category in MARKER_TABLE:
        if pattern.search(typeof):
            return category
    return MarkerCategory.DEFAULT


def is_placeholder(typeof: str | None) -> bool:
    return typeof is not None and _ANY_PLACEHOLDER.search(typeof) is not None
