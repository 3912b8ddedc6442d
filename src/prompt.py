# Shell prompt with branch and working tree status

from __future__ import annotations

from typing import Optional

from colors import paint
from gitcmd import Changes

NAME = "gitsh"


def build(status: int = 0, branch: Optional[str] = None, changes: Optional[Changes] = None, color: bool = False) -> str:
    """Render e.g. ``gitsh(main|●1+2)[1]> ``."""

    def c(text: str, *names: str) -> str:
        return paint(text, *names, prompt=True) if color else text

    parts = [c(NAME, "aqua", "bold")]

    if branch:
        parts.append("(" + c(branch, "slateblue", "bold"))
        if changes is not None:
            parts.append("|")
            if changes.staged_count == 0 and changes.unstaged_count == 0:
                parts.append(c("✔", "green", "bold"))
            if changes.staged_count > 0:
                parts.append(c(f"●{changes.staged_count}", "yellowgreen", "bold"))
            if changes.unstaged_count > 0:
                parts.append(c(f"+{changes.unstaged_count}", "blue", "bold"))
        parts.append(")")

    if status > 0:
        parts.append(c(f"[{status}]", "crimson", "bold"))

    parts.append("> ")
    return "".join(parts)


def string(metadata, status: int = 0, color: bool = False) -> str:
    if metadata.is_repo():
        return build(status, metadata.current_branch(), metadata.uncommitted_changes(), color)
    return build(status, color=color)
