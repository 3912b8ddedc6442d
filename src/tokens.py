"""Token model for gitsh input lines.

Each token records the half-open ``[start, end)`` character range it covers
in the frozen source line. The literal slice is ``raw_content``; ``content``
is the semantic value after quote and escape processing.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum


class TokenKind(Enum):
    STRING = "string"
    AND = "and"
    OR = "or"
    END = "end"
    PARTIAL_ACTION = "partial_action"
    UNTERMINATED_STRING = "unterminated_string"
    END_OF_OPTIONS = "end_of_options"


ACTION_KINDS = frozenset({TokenKind.AND, TokenKind.OR, TokenKind.END})
# `--` is still passed through to git as an argument.
STRING_KINDS = frozenset({TokenKind.STRING, TokenKind.END_OF_OPTIONS})

QUOTES = ("'", '"')

_UNQUOTED_ESCAPE = re.compile(r"\\(.)", re.DOTALL)


def _unescape_quoted(body: str, quote: str) -> str:
    # Only \<quote> and \\ are meaningful; any other \x stays as typed.
    out: list[str] = []
    i = 0
    n = len(body)
    while i < n:
        ch = body[i]
        if ch == "\\" and i + 1 < n and body[i + 1] in (quote, "\\"):
            out.append(body[i + 1])
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    start: int
    end: int
    source: str = field(repr=False)

    @property
    def raw_content(self) -> str:
        return self.source[self.start:self.end]

    @property
    def start_char(self) -> str:
        return self.source[self.start:self.start + 1]

    @property
    def quoted(self) -> bool:
        return self.kind in STRING_KINDS and self.start_char in QUOTES

    @property
    def content(self) -> str:
        raw = self.raw_content
        if self.kind is TokenKind.STRING:
            if self.quoted:
                return _unescape_quoted(raw[1:-1], raw[0])
            return _UNQUOTED_ESCAPE.sub(r"\1", raw)
        if self.kind is TokenKind.UNTERMINATED_STRING:
            return raw[1:]
        return raw

    @property
    def location(self) -> str:
        return f"{self.start}:{self.end}"

    def is_action(self) -> bool:
        return self.kind in ACTION_KINDS

    def is_string(self) -> bool:
        return self.kind in STRING_KINDS
