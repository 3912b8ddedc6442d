"""Cursor over the tokens of a single input line.

A ``TokenZipper`` is an index into a shared, immutable tuple of tokens plus
the frozen source line. Index ``-1`` is the head (before the first token) and
``len(tokens)`` is the tail (after the last token). Moving never mutates
anything; it returns a new cursor over the same tuple, so any number of
cursors can be live at once.
"""
from __future__ import annotations

import re
from typing import Callable, Iterator, Optional, Sequence

from tokens import Token, TokenKind

# Short options like `-s`, long options like `--stat` (or a bare `--` still being typed).
_OPTION_REGEX = re.compile(r"-[^-\s]|--")


class TokenZipper:
    __slots__ = ("source", "tokens", "index")

    def __init__(self, source: str, tokens: Sequence[Token], index: int = 0) -> None:
        self.source = source
        self.tokens = tuple(tokens)
        self.index = min(max(index, -1), len(self.tokens))

    def _move(self, index: int) -> "TokenZipper":
        cursor = TokenZipper.__new__(TokenZipper)
        cursor.source = self.source
        cursor.tokens = self.tokens
        cursor.index = min(max(index, -1), len(self.tokens))
        return cursor

    def __repr__(self) -> str:
        return f"TokenZipper(index={self.index}, token={self.token()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TokenZipper):
            return NotImplemented
        return (
            self.index == other.index
            and self.source == other.source
            and self.tokens == other.tokens
        )

    def __hash__(self) -> int:
        return hash((self.source, self.index))

    def __len__(self) -> int:
        return len(self.tokens)

    def __iter__(self) -> Iterator["TokenZipper"]:
        """Yield a cursor for every token from the first to the last."""
        for index in range(len(self.tokens)):
            yield self._move(index)

    # --- movement ---

    def before(self) -> "TokenZipper":
        return self if self.is_head() else self._move(self.index - 1)

    def after(self) -> "TokenZipper":
        return self if self.is_tail() else self._move(self.index + 1)

    def at(self, index: int) -> "TokenZipper":
        return self if index == self.index else self._move(index)

    def first(self) -> "TokenZipper":
        """The first token, or the head when there are no tokens."""
        return self.at(0 if self.tokens else -1)

    def last(self) -> "TokenZipper":
        """The last token, or the tail when there are no tokens."""
        size = len(self.tokens)
        return self.at(size - 1 if size else size)

    # --- position ---

    def token(self) -> Optional[Token]:
        if self.is_head() or self.is_tail():
            return None
        return self.tokens[self.index]

    def is_head(self) -> bool:
        return self.index < 0

    def is_tail(self) -> bool:
        return self.index >= len(self.tokens)

    def is_first(self) -> bool:
        return self.index == 0 and bool(self.tokens)

    def is_last(self) -> bool:
        return bool(self.tokens) and self.index == len(self.tokens) - 1

    def is_empty(self) -> bool:
        return not self.tokens

    def gap_to_next(self) -> int:
        """Whitespace between this token and the next one, 0 at the boundaries."""
        if self.is_head() or self.is_tail() or self.is_last():
            return 0
        return self.tokens[self.index + 1].start - self.tokens[self.index].end

    def gap_to_prev(self) -> int:
        """Whitespace between the previous token and this one, 0 at the boundaries."""
        if self.is_head() or self.is_tail() or self.index == 0:
            return 0
        return self.tokens[self.index].start - self.tokens[self.index - 1].end

    # --- token kinds ---

    def _kind(self) -> Optional[TokenKind]:
        token = self.token()
        return token.kind if token is not None else None

    def is_string(self) -> bool:
        token = self.token()
        return token is not None and token.is_string()

    def is_and(self) -> bool:
        return self._kind() is TokenKind.AND

    def is_or(self) -> bool:
        return self._kind() is TokenKind.OR

    def is_end(self) -> bool:
        return self._kind() is TokenKind.END

    def is_end_of_options(self) -> bool:
        return self._kind() is TokenKind.END_OF_OPTIONS

    def is_unterminated_string(self) -> bool:
        return self._kind() is TokenKind.UNTERMINATED_STRING

    def is_partial_action(self) -> bool:
        return self._kind() is TokenKind.PARTIAL_ACTION

    def is_action(self) -> bool:
        token = self.token()
        return token is not None and token.is_action()

    # --- derived queries ---

    def is_command(self) -> bool:
        """True when this string names the command to run."""
        if not self.is_string():
            return False
        prev = self.before()
        return prev.is_head() or prev.is_action() or prev.is_partial_action()

    def is_option(self) -> bool:
        if self._kind() is not TokenKind.STRING or self.is_command():
            return False
        return _OPTION_REGEX.match(self.token().raw_content) is not None

    def options_allowed(self) -> bool:
        """False once `--` has been seen since the governing command."""
        cursor = self.before()
        while not cursor.is_head():
            if cursor.is_end_of_options():
                return False
            if cursor.is_command():
                return True
            cursor = cursor.before()
        return False

    def current_command(self) -> Optional["TokenZipper"]:
        """The command-position cursor this argument belongs to, if any."""
        cursor = self
        while cursor.is_string() and not cursor.is_command():
            cursor = cursor.before()
        return cursor if cursor.is_command() else None

    def reverse_find(self, predicate: Callable[["TokenZipper"], bool]) -> Optional["TokenZipper"]:
        for index in range(len(self.tokens) - 1, -1, -1):
            cursor = self.at(index)
            if predicate(cursor):
                return cursor
        return None
