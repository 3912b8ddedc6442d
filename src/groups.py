"""Grouping of lexed tokens into commands joined by control operators.

A line such as ``add . && commit -m 'wip'; status`` becomes one
``CommandGroup`` per command, each tagged with the ``Join`` that connects it
to the command before it. The first group is always tagged ``END``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from errors import ShellParseError, ShellSyntaxError, UnreachableError
from lexer import from_line
from zipper import TokenZipper


class Join(Enum):
    AND = "&&"  # run if the previous command succeeded
    OR = "||"   # run if the previous command failed
    END = ";"   # run regardless


@dataclass(frozen=True)
class CommandGroup:
    """A single command's argument vector (argv[0] is the command name)."""
    join: Join
    arguments: tuple[str, ...]

    @property
    def name(self) -> str:
        return self.arguments[0]


def parse(line: str) -> list[CommandGroup]:
    return parse_zipper(from_line(line))


def parse_zipper(zipper: TokenZipper) -> list[CommandGroup]:
    """Walk the tokens front to back and build the command groups.

    Raises ShellSyntaxError for unterminated strings and lone ``&``/``|``,
    ShellParseError for misplaced ``&&``, ``||`` and ``;``.
    """
    if zipper.is_empty():
        return []

    pending: list[tuple[Join, list[str]]] = [(Join.END, [])]

    for cursor in zipper:
        token = cursor.token()
        if cursor.is_string():
            args = pending[-1][1]
            if cursor.before().is_string() and cursor.gap_to_prev() == 0:
                # Adjacent strings like a'b'"c" form a single argument.
                args[-1] += token.content
            else:
                args.append(token.content)
        elif cursor.is_action():
            content = token.raw_content
            if cursor.is_first():
                raise ShellParseError(token, f"unexpected '{content}' to start the line")
            if cursor.is_last() and not cursor.is_end():
                raise ShellParseError(token, f"unexpected '{content}' to end the line")
            prev = cursor.before()
            if not prev.is_string():
                raise ShellParseError(
                    token,
                    f"expected a string after '{prev.token().raw_content}' but got '{content}' instead",
                )

            if cursor.is_and():
                pending.append((Join.AND, []))
            elif cursor.is_or():
                pending.append((Join.OR, []))
            elif not cursor.is_last():
                pending.append((Join.END, []))
        elif cursor.is_unterminated_string():
            raise ShellSyntaxError(token, "unterminated string")
        elif cursor.is_partial_action():
            content = token.raw_content
            raise ShellSyntaxError(token, f"expected '{content * 2}' but got '{content}' instead")
        else:
            raise UnreachableError(f"{token.location}: unknown token: {token!r}")

    return [CommandGroup(join, tuple(args)) for join, args in pending]


def format_groups(groups: Iterable[CommandGroup]) -> str:
    """Debug rendering, one group per line."""
    lines = [f"{g.join.value:<2} " + " ".join(g.arguments) for g in groups]
    return "\n".join(lines) if lines else "<empty>"
