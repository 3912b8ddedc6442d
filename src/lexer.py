"""Lexer for gitsh input lines.

A single left-to-right scan that never fails: malformed input still becomes
tokens (``PARTIAL_ACTION``, ``UNTERMINATED_STRING``) so that the parser and
highlighter can point at the exact characters.
"""
from __future__ import annotations

import re

from errors import UnreachableError
from tokens import Token, TokenKind
from zipper import TokenZipper

_WHITESPACE = re.compile(r"\s+")
_END_OF_OPTIONS = re.compile(r"--(?=\s)")
_SINGLE_QUOTED = re.compile(r"'(?:\\.|[^'])*", re.DOTALL)
_DOUBLE_QUOTED = re.compile(r'"(?:\\.|[^"])*', re.DOTALL)
# Everything that is not an ampersand, a pipe, a semicolon, a quote or
# whitespace, with a backslash escaping the character after it.
_UNQUOTED = re.compile(r"(?:\\.?|[^&|;'\"\s\\])+", re.DOTALL)

_ACTIONS = (
    ("&&", TokenKind.AND),
    ("||", TokenKind.OR),
    (";", TokenKind.END),
)


def tokenize(line: str) -> tuple[Token, ...]:
    tokens: list[Token] = []
    pos = 0
    n = len(line)

    def emit(kind: TokenKind, start: int, end: int) -> None:
        tokens.append(Token(kind, start, end, line))

    while pos < n:
        m = _WHITESPACE.match(line, pos)
        if m:
            pos = m.end()
            continue

        for literal, kind in _ACTIONS:
            if line.startswith(literal, pos):
                emit(kind, pos, pos + len(literal))
                pos += len(literal)
                break
        else:
            ch = line[pos]
            if ch in "&|":
                emit(TokenKind.PARTIAL_ACTION, pos, pos + 1)
                pos += 1
                continue

            m = _END_OF_OPTIONS.match(line, pos)
            if m:
                emit(TokenKind.END_OF_OPTIONS, pos, m.end())
                pos = m.end()
                continue

            if ch in "'\"":
                pattern = _SINGLE_QUOTED if ch == "'" else _DOUBLE_QUOTED
                end = pattern.match(line, pos).end()
                if end < n and line[end] == ch:
                    emit(TokenKind.STRING, pos, end + 1)
                    pos = end + 1
                else:
                    emit(TokenKind.UNTERMINATED_STRING, pos, end)
                    pos = end
                continue

            m = _UNQUOTED.match(line, pos)
            if not m:
                raise UnreachableError(f"{pos}: unknown string parsing error")
            emit(TokenKind.STRING, pos, m.end())
            pos = m.end()

    return tuple(tokens)


def from_line(line: str) -> TokenZipper:
    """Lex ``line`` and return a cursor positioned at the first token."""
    return TokenZipper(line, tokenize(line))
