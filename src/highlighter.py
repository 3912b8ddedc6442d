"""Syntax highlighting of gitsh input lines.

``annotate`` classifies every token of a line; ``highlight`` turns that into
ANSI-colored text that keeps the original spacing. Neither raises for any
input, however malformed.
"""
from __future__ import annotations

from typing import List, Tuple

from colors import paint
from lexer import from_line
from zipper import TokenZipper

Span = Tuple[int, int]

CATEGORY_COLORS = {
    "action": "springgreen",
    "partial_action": "orange",
    "unterminated_string": "greenyellow",
    "command": "aqua",
    "unknown_command": "crimson",
    "option": "khaki",
    "quoted_string": "yellowgreen",
    "string": "slateblue",
}


def categorize(cursor: TokenZipper, metadata=None) -> str:
    if cursor.is_action():
        return "action"
    if cursor.is_partial_action():
        return "partial_action"
    if cursor.is_unterminated_string():
        return "unterminated_string"
    if cursor.is_command():
        if metadata is not None and not metadata.is_command(cursor.token().content):
            return "unknown_command"
        return "command"
    if cursor.is_option() and cursor.options_allowed():
        return "option"
    if cursor.token().quoted:
        return "quoted_string"
    return "string"


def annotate(line: str, metadata=None) -> List[Tuple[Span, str]]:
    """Return ``((start, end), category)`` for each token in ``line``.

    ``metadata`` is anything with an ``is_command(name)`` method; without it
    every command-position word is reported as a command.
    """
    return [
        ((cursor.token().start, cursor.token().end), categorize(cursor, metadata))
        for cursor in from_line(line)
    ]


def highlight(line: str, metadata=None, color: bool = True) -> str:
    if not color:
        return line
    out: List[str] = []
    pos = 0
    for (start, end), category in annotate(line, metadata):
        out.append(line[pos:start])
        text = line[start:end]
        if category == "unterminated_string":
            # The dangling quote stands out from the partial content.
            out.append(paint(text[:1], "crimson", "bold") + paint(text[1:], CATEGORY_COLORS[category], "bold"))
        else:
            out.append(paint(text, CATEGORY_COLORS[category], "bold"))
        pos = end
    out.append(line[pos:])
    return "".join(out)
