# ANSI color helpers shared by the highlighter, prompt and error rendering

from __future__ import annotations

import os
import sys
from typing import Optional, TextIO

RESET = "\033[0m"

# 256-color foregrounds roughly matching the gitsh palette.
CODES = {
    "bold": "1",
    "gray": "38;5;245",
    "blue": "34",
    "green": "32",
    "crimson": "38;5;161",
    "aqua": "38;5;51",
    "orange": "38;5;214",
    "springgreen": "38;5;48",
    "yellowgreen": "38;5;112",
    "greenyellow": "38;5;154",
    "slateblue": "38;5;99",
    "khaki": "38;5;186",
}


def use_color(stream: Optional[TextIO] = None) -> bool:
    """Color is on for terminals unless NO_COLOR is set to a non-empty value."""
    if os.environ.get("NO_COLOR"):
        return False
    stream = stream if stream is not None else sys.stdout
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def paint(text: str, *names: str, prompt: bool = False) -> str:
    if not text or not names:
        return text
    codes = ";".join(CODES[name] for name in names)
    start, end = f"\033[{codes}m", RESET
    if prompt:
        # readline needs non-printing sequences bracketed to measure the prompt.
        start, end = f"\001{start}\002", f"\001{end}\002"
    return f"{start}{text}{end}"
