"""Error types raised while analysing an input line.

Line errors keep the offending token and the frozen source rather than
pre-rendered text; ``render`` builds the caret display when the error
reaches the user.
"""
from __future__ import annotations

from tokens import Token
from colors import paint


class ShellError(Exception):
    """Base class for gitsh errors."""


class UnreachableError(ShellError):
    """A state the lexer or parser should never reach."""


class LineError(ShellError):
    kind = "line"

    def __init__(self, token: Token, message: str) -> None:
        super().__init__(message)
        self.token = token
        self.message = message

    @property
    def source(self) -> str:
        return self.token.source

    @property
    def span(self) -> tuple[int, int]:
        return (self.token.start, self.token.end)

    def render(self, color: bool = False) -> str:
        title = paint("error>", "blue", "bold") if color else "error>"
        start, end = self.span
        # Tabs are kept so the carets line up with the echoed source.
        indent = "".join("\t" if ch == "\t" else " " for ch in self.source[:start])
        carets = "^" * max(end - start, 1)
        return (
            f"| {title} {self.message}\n"
            f"|\n"
            f"| {self.source}\n"
            f"| {indent}{carets}\n"
        )

    def __str__(self) -> str:
        return f"{self.token.location}: {self.message}"


class ShellSyntaxError(LineError):
    """Raised for lexical problems: unterminated strings and lone & or |."""

    kind = "syntax"


class ShellParseError(LineError):
    """Raised for misplaced action tokens."""

    kind = "parse"
