"""Option names mined from a git command's man page.

Options are only recognised on lines that follow a section heading or a
blank line, since other dash-prefixed lines are usually descriptions or
examples.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

_OVERSTRIKE = re.compile(r".\x08")
_OPTION_INDENT = " " * 7
_ENTRY = re.compile(
    r"(?:--\[no-?\](?P<reversible>[A-Za-z0-9][\w-]*)"
    r"|(?P<prefix>-(?:-[A-Za-z0-9][\w-]*|[A-Za-z0-9])))"
    r"(?P<suffix>(?:[^\n,]|,\S)*)"
)
_PROSE = re.compile(r"^\s*[A-Za-z0-9]")


@dataclass(frozen=True)
class Option:
    prefix: str
    suffix: str = ""

    def __str__(self) -> str:
        return self.prefix + self.suffix


def parse_options(text: str) -> list[Option]:
    options: list[Option] = []
    seen: set[Option] = set()
    text = _OVERSTRIKE.sub("", text)
    after_break = True

    for line in text.splitlines():
        if after_break and line.startswith(_OPTION_INDENT + "-"):
            rest = line[len(_OPTION_INDENT):]
            while rest.startswith("-"):
                m = _ENTRY.match(rest)
                if not m:
                    break
                name = m.group("reversible")
                if name:
                    # --[no-]signed documents both --signed and --no-signed
                    prefixes = [f"--{name}", f"--no-{name}"]
                else:
                    prefixes = [m.group("prefix")]
                suffix = m.group("suffix").rstrip()
                if _PROSE.match(suffix):
                    suffix = ""
                for p in prefixes:
                    option = Option(p, suffix)
                    if option not in seen:
                        seen.add(option)
                        options.append(option)
                rest = rest[m.end():]
                if not rest.startswith(", "):
                    break
                rest = rest[2:]
        stripped = line.strip()
        after_break = not stripped or line[:1].isupper()

    return options


class GitHelp:
    """Parsed help page for a single git command."""

    def __init__(self, command: str, text: Optional[str]) -> None:
        self.command = command
        self.options = parse_options(text) if text else []

    @property
    def option_prefixes(self) -> list[str]:
        prefixes: list[str] = []
        for option in self.options:
            if option.prefix not in prefixes:
                prefixes.append(option.prefix)
        return prefixes
