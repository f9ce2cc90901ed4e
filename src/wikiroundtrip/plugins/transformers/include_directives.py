"""``<includeonly>``, ``<noinclude>`` and ``<onlyinclude>`` handling.

Each directive arrives as a TagTk/EndTagTk pair named after the directive,
with the original markup in ``dp.src``. Behavior depends on the
``isInclude`` option: whether the page is being transcluded (include
mode) or viewed directly.

============  ==============================  ==================================
Directive     include mode                    direct view
============  ==============================  ==================================
IncludeOnly   tags dropped, content kept      content dropped, one marker pair
NoInclude     tags and content dropped        tags become markers, content kept
OnlyInclude   only enclosed content kept      tags become markers, content kept
============  ==============================  ==================================

Markers are ``meta`` tokens typed ``mw:Includes/<Directive>`` and
``mw:Includes/<Directive>/End``.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Iterable
from typing import Any, TypeGuard

from wikiroundtrip.contracts import EndTagTk, EOFTk, SelfclosingTagTk, TagTk, TagToken, TokenLike, token_source
from wikiroundtrip.plugins.base import BaseTokenTransformer
from wikiroundtrip.plugins.transformers._util import marker_meta


class _IncludeDirective(BaseTokenTransformer):
    """Shared open/close tracking for the three directives."""

    default_options = {"isInclude": False}

    # Lower-case tag name of the directive
    tag_name: str

    def reset_state(self, options: dict[str, Any] | None = None) -> None:
        if options is not None and "isInclude" in options:
            self.options["isInclude"] = options["isInclude"]
        self._inside = False

    @property
    def marker_type(self) -> str:
        return f"mw:Includes/{self.name}"

    def _is_open(self, token: TokenLike) -> TypeGuard[TagTk | SelfclosingTagTk]:
        return isinstance(token, TagTk | SelfclosingTagTk) and token.name.lower() == self.tag_name

    def _is_close(self, token: TokenLike) -> TypeGuard[EndTagTk]:
        return isinstance(token, EndTagTk) and token.name.lower() == self.tag_name

    def on_token(self, token: TokenLike) -> Iterable[TokenLike]:
        if self.options.get("isInclude"):
            return self._include_mode(token)
        return self._direct_mode(token)

    @abstractmethod
    def _include_mode(self, token: TokenLike) -> Iterable[TokenLike]: ...

    @abstractmethod
    def _direct_mode(self, token: TokenLike) -> Iterable[TokenLike]: ...

    def _markers_for_tags(self, token: TokenLike) -> Iterable[TokenLike]:
        """Direct view for NoInclude/OnlyInclude: the tags become markers."""
        if self._is_open(token):
            out: list[TokenLike] = [marker_meta(self.marker_type, token.dp, token.dmw)]
            if isinstance(token, SelfclosingTagTk):
                out.append(marker_meta(f"{self.marker_type}/End", {}))
            return out
        if self._is_close(token):
            return [marker_meta(f"{self.marker_type}/End", token.dp, token.dmw)]
        return [token]


class IncludeOnly(_IncludeDirective):
    """Content shown only when the page is transcluded."""

    name = "IncludeOnly"
    tag_name = "includeonly"

    def reset_state(self, options: dict[str, Any] | None = None) -> None:
        super().reset_state(options)
        self._open_token: TagToken | None = None
        self._source: list[str] = []

    def _include_mode(self, token: TokenLike) -> Iterable[TokenLike]:
        if self._is_open(token) or self._is_close(token):
            return []
        return [token]

    def _direct_mode(self, token: TokenLike) -> Iterable[TokenLike]:
        if self._open_token is None:
            if self._is_open(token):
                if isinstance(token, SelfclosingTagTk):
                    return self._close_block(token, None)
                self._open_token = token
                self._source = [token_source(token)]
                return []
            return [token]

        if self._is_close(token):
            self._source.append(token_source(token))
            return self._close_block(self._open_token, token)
        if isinstance(token, EOFTk):
            # Unterminated block runs to the end of the page
            return [*self._close_block(self._open_token, None), token]
        self._source.append(token_source(token))
        return []

    def _close_block(self, opening: TagToken, end: TagToken | None) -> list[TokenLike]:
        """Collapse the hidden block into its marker pair."""
        src = "".join(self._source) if self._source else token_source(opening)
        self._open_token = None
        self._source = []
        return [
            marker_meta(self.marker_type, opening.dp, {**opening.dmw, "src": src}),
            marker_meta(f"{self.marker_type}/End", end.dp if end is not None else {}),
        ]


class NoInclude(_IncludeDirective):
    """Content hidden when the page is transcluded."""

    name = "NoInclude"
    tag_name = "noinclude"

    def _include_mode(self, token: TokenLike) -> Iterable[TokenLike]:
        if self._is_open(token):
            self._inside = not isinstance(token, SelfclosingTagTk)
            return []
        if self._is_close(token):
            self._inside = False
            return []
        if isinstance(token, EOFTk):
            self._inside = False
            return [token]
        return [] if self._inside else [token]

    def _direct_mode(self, token: TokenLike) -> Iterable[TokenLike]:
        return self._markers_for_tags(token)


class OnlyInclude(_IncludeDirective):
    """When present, the only content kept on transclusion.

    Include mode needs the whole page: only at EOF is it known whether
    any onlyinclude block exists. Without one, the page passes through
    unchanged.
    """

    name = "OnlyInclude"
    tag_name = "onlyinclude"

    def reset_state(self, options: dict[str, Any] | None = None) -> None:
        super().reset_state(options)
        self._buffer: list[TokenLike] = []
        self._enclosed: list[TokenLike] = []
        self._found = False

    def _include_mode(self, token: TokenLike) -> Iterable[TokenLike]:
        if isinstance(token, EOFTk):
            out = self._enclosed if self._found else self._buffer
            out = [*out, token]
            self.reset_state()
            return out

        self._buffer.append(token)
        if self._is_open(token):
            self._found = True
            self._inside = not isinstance(token, SelfclosingTagTk)
        elif self._is_close(token):
            self._inside = False
        elif self._inside:
            self._enclosed.append(token)
        return []

    def _direct_mode(self, token: TokenLike) -> Iterable[TokenLike]:
        return self._markers_for_tags(token)
