"""Apostrophe runs -> italic/bold tags.

The tokenizer emits every run of two or more apostrophes as a
``SelfclosingTagTk("mw-quote", [KV("value", "''")])``. Whether a run means
italic, bold or literal apostrophes depends on the rest of the line, so the
transformer buffers a line once it has seen a quote and resolves it when
the line ends (newline or EOF), even if that happens in a later batch.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from wikiroundtrip.contracts import (
    EndTagTk,
    EOFTk,
    MalformedTokenError,
    NlTk,
    SelfclosingTagTk,
    TagTk,
    TokenLike,
)
from wikiroundtrip.plugins.base import BaseTokenTransformer


@dataclass
class _Quote:
    """One apostrophe run of length 2, 3 or 5 after normalization."""

    length: int
    tsr: list[int] | None


def _shift_tsr(tsr: Any, skip: int) -> list[int] | None:
    if isinstance(tsr, list) and len(tsr) == 2 and all(isinstance(x, int) for x in tsr):
        return [tsr[0] + skip, tsr[1]]
    return None


class QuoteTransformer(BaseTokenTransformer):
    """Converts apostrophe runs into i/b open-close pairs, one line at a time."""

    name = "QuoteTransformer"

    def reset_state(self, options: dict[str, Any] | None = None) -> None:
        self._line: list[TokenLike | _Quote] = []
        self._active = False

    def on_token(self, token: TokenLike) -> Iterable[TokenLike]:
        if isinstance(token, SelfclosingTagTk) and token.name == "mw-quote":
            self._line.extend(self._split_run(token))
            self._active = True
            return []
        if isinstance(token, NlTk | EOFTk):
            if not self._active:
                return [token]
            out = self._resolve_line()
            out.append(token)
            self.reset_state()
            return out
        if self._active:
            self._line.append(token)
            return []
        return [token]

    def _split_run(self, token: SelfclosingTagTk) -> list[TokenLike | _Quote]:
        """Normalize a run: 4 -> "'" + bold, more than 5 -> excess "'" + bold-italic."""
        value = token.get_attribute("value")
        if not isinstance(value, str) or len(value) < 2 or value.strip("'") != "":
            raise MalformedTokenError(token, "mw-quote needs a value of two or more apostrophes")
        tsr = token.dp.get("tsr")
        n = len(value)
        if n == 4:
            return ["'", _Quote(3, _shift_tsr(tsr, 1))]
        if n > 5:
            return ["'" * (n - 5), _Quote(5, _shift_tsr(tsr, n - 5))]
        return [_Quote(n, _shift_tsr(tsr, 0))]

    def _preceding_chars(self, index: int) -> tuple[str, str]:
        """Last two characters of the text directly before ``self._line[index]``."""
        text = ""
        for item in reversed(self._line[:index]):
            if not isinstance(item, str):
                break
            text = item + text
            if len(text) >= 2:
                break
        x1 = text[-1] if text else ""
        x2 = text[-2] if len(text) >= 2 else ""
        return x1, x2

    def _balance(self) -> None:
        """If both italic and bold counts are odd, demote one bold to "'" + italic.

        Preference: a bold after a single-letter word, then after a
        multi-letter word, then after a space.
        """
        quotes = [q for q in self._line if isinstance(q, _Quote)]
        italics = sum(1 for q in quotes if q.length in (2, 5))
        bolds = sum(1 for q in quotes if q.length in (3, 5))
        if italics % 2 == 0 or bolds % 2 == 0:
            return

        first_single: tuple[int, _Quote] | None = None
        first_multi: tuple[int, _Quote] | None = None
        first_space: tuple[int, _Quote] | None = None
        for i, item in enumerate(self._line):
            if not isinstance(item, _Quote) or item.length != 3:
                continue
            x1, x2 = self._preceding_chars(i)
            if x1 == " ":
                if first_space is None:
                    first_space = (i, item)
            elif x2 == " ":
                first_single = (i, item)
                break
            elif first_multi is None:
                first_multi = (i, item)

        for candidate in (first_single, first_multi, first_space):
            if candidate is not None:
                index, bold = candidate
                self._line[index : index + 1] = ["'", _Quote(2, _shift_tsr(bold.tsr, 1))]
                return

    def _resolve_line(self) -> list[TokenLike]:
        self._balance()
        out: list[TokenLike] = []
        state = ""
        buffer: list[TokenLike] = []
        both_tsr: list[int] | None = None

        def tag(cls: type[TagTk] | type[EndTagTk], name: str, tsr: list[int] | None) -> TokenLike:
            return cls(name, dp={"tsr": tsr} if tsr is not None else {})

        for item in self._line:
            if not isinstance(item, _Quote):
                (buffer if state == "both" else out).append(item)
                continue
            t = item.tsr
            if item.length == 2:
                if state == "i":
                    out.append(tag(EndTagTk, "i", t))
                    state = ""
                elif state == "bi":
                    out.append(tag(EndTagTk, "i", t))
                    state = "b"
                elif state == "ib":
                    out += [tag(EndTagTk, "b", t), tag(EndTagTk, "i", t), tag(TagTk, "b", t)]
                    state = "b"
                elif state == "both":
                    out += [tag(TagTk, "b", both_tsr), tag(TagTk, "i", both_tsr), *buffer, tag(EndTagTk, "i", t)]
                    buffer = []
                    state = "b"
                else:
                    out.append(tag(TagTk, "i", t))
                    state += "i"
            elif item.length == 3:
                if state == "b":
                    out.append(tag(EndTagTk, "b", t))
                    state = ""
                elif state == "bi":
                    out += [tag(EndTagTk, "i", t), tag(EndTagTk, "b", t), tag(TagTk, "i", t)]
                    state = "i"
                elif state == "ib":
                    out.append(tag(EndTagTk, "b", t))
                    state = "i"
                elif state == "both":
                    out += [tag(TagTk, "i", both_tsr), tag(TagTk, "b", both_tsr), *buffer, tag(EndTagTk, "b", t)]
                    buffer = []
                    state = "i"
                else:
                    out.append(tag(TagTk, "b", t))
                    state += "b"
            else:
                if state == "b":
                    out += [tag(EndTagTk, "b", t), tag(TagTk, "i", t)]
                    state = "i"
                elif state == "i":
                    out += [tag(EndTagTk, "i", t), tag(TagTk, "b", t)]
                    state = "b"
                elif state == "bi":
                    out += [tag(EndTagTk, "i", t), tag(EndTagTk, "b", t)]
                    state = ""
                elif state == "ib":
                    out += [tag(EndTagTk, "b", t), tag(EndTagTk, "i", t)]
                    state = ""
                elif state == "both":
                    out += [
                        tag(TagTk, "i", both_tsr),
                        tag(TagTk, "b", both_tsr),
                        *buffer,
                        tag(EndTagTk, "b", t),
                        tag(EndTagTk, "i", t),
                    ]
                    buffer = []
                    state = ""
                else:
                    both_tsr = t
                    buffer = []
                    state = "both"

        # Close whatever is still open at end of line
        if state in ("b", "ib"):
            out.append(tag(EndTagTk, "b", None))
        if state in ("i", "bi", "ib"):
            out.append(tag(EndTagTk, "i", None))
        if state == "bi":
            out.append(tag(EndTagTk, "b", None))
        if state == "both" and buffer:
            out += [tag(TagTk, "b", both_tsr), tag(TagTk, "i", both_tsr), *buffer, tag(EndTagTk, "i", None), tag(EndTagTk, "b", None)]
        return out
