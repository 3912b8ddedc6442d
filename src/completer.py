"""Tab completion for the word under the cursor.

Everything is decided from ``TokenZipper`` queries over the current line;
names come from a metadata provider (``gitcmd.GitMetadata`` in the shell, a
fake in tests). Filtering is always a prefix test and results are ranked
shortest first, then alphabetically.
"""
from __future__ import annotations

import re
from typing import Callable, Iterable, List, Optional

from gitcmd import MAX_RESULTS
from lexer import from_line
from zipper import TokenZipper

# Options that make a command operate on the index instead of the work tree.
STAGED_OPTIONS = frozenset({"--staged", "--cached", "-S"})

FILE_PREFIX = "./"

# Characters that would end or split a word when typed unquoted.
_SPECIAL = re.compile(r"([\s&|;'\"\\])")


def rank(candidates: Iterable[str], prefix: str, limit: int = MAX_RESULTS) -> List[str]:
    matches = {c for c in candidates if c.startswith(prefix)}
    return sorted(matches, key=lambda c: (len(c), c))[:limit]


def complete(line: str, metadata) -> Optional[List[str]]:
    """Candidates for the last token of ``line``, or None when nothing applies."""
    if not line or line[-1].isspace():
        return None

    last = from_line(line).last()
    token = last.token()
    if token is None or not last.is_string():
        return None
    partial = token.raw_content

    if last.is_command() and not metadata.is_command(partial):
        return rank(metadata.all_command_names(), partial)

    if last.is_option() and last.options_allowed():
        return _for_option(last, partial, metadata)

    if partial.startswith(FILE_PREFIX):
        paths = metadata.file_paths(partial[len(FILE_PREFIX):], MAX_RESULTS)
        return rank((FILE_PREFIX + p for p in paths), partial)

    return _for_argument(last, partial, metadata)


def _for_option(last: TokenZipper, partial: str, metadata) -> Optional[List[str]]:
    governing = last.reverse_find(TokenZipper.is_command)
    if governing is None:
        return None
    prefixes = metadata.option_prefixes(governing.token().content)
    if not prefixes:
        return None
    return rank(prefixes, partial)


def _staged_in_group(command: TokenZipper, last: TokenZipper) -> bool:
    cursor = command.after()
    while cursor.index < last.index:
        if cursor.token().raw_content in STAGED_OPTIONS:
            return True
        cursor = cursor.after()
    return False


def _for_argument(last: TokenZipper, partial: str, metadata) -> Optional[List[str]]:
    command = last.current_command()
    if command is None or command.index == last.index:
        return None

    name = command.token().content
    staged = _staged_in_group(command, last)
    source: Optional[Callable[[str, int], List[str]]] = None

    if name == "add":
        source = metadata.unstaged_files
    elif name in ("restore", "diff"):
        source = metadata.staged_files if staged else metadata.unstaged_files
    elif name == "reset":
        source = metadata.staged_files
    elif name in ("checkout", "switch", "merge", "rebase", "branch", "cherry-pick"):
        source = metadata.branch_names

    if source is None:
        return None
    return rank(source(partial, MAX_RESULTS), partial)


def escape(candidate: str) -> str:
    """Backslash-escape a candidate so the lexer reads it back as one string."""
    return _SPECIAL.sub(r"\\\1", candidate)


def readline_completer(metadata, get_line: Callable[[], str]) -> Callable[[str, int], Optional[str]]:
    """Adapt ``complete`` to readline's ``completer(text, state)`` protocol."""
    matches: List[str] = []

    def completer(text: str, state: int) -> Optional[str]:
        if state == 0:
            matches[:] = [escape(c) for c in complete(get_line(), metadata) or []]
        return matches[state] if state < len(matches) else None

    return completer
