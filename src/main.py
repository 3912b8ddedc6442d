#!/usr/bin/env python3

# Entry of gitsh

from __future__ import annotations

import argparse
import os
import shutil
import sys
from pathlib import Path
from typing import Optional

try:
    import readline  # type: ignore
except Exception:  # pragma: no cover - fallback when readline unavailable
    readline = None

READLINE_ACTIVE = bool(readline)

WELCOME = "# Welcome to gitsh!"
GOODBYE = "Have a nice day!"
# Completion works on whole tokens, so only token separators break words.
COMPLETER_DELIMS = " \t\n;&|"

import completer  # local modules in the same folder
import prompt
from colors import use_color
from ops import Exit, ShellSession, Success, execute_line


def history_path() -> Path:
    """Where successful lines are kept between sessions."""
    override = os.environ.get("GITSH_HISTORY_FILE")
    if override:
        return Path(override).expanduser()
    data_home = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(data_home) / "gitsh" / "history"


def get_git(force_git: Optional[str] = None) -> str:
    return force_git or os.environ.get("GITSH_GIT") or "git"


def _line_before_cursor() -> str:
    return readline.get_line_buffer()[: readline.get_endidx()]


def setup_readline(session: ShellSession, history_file: Path) -> None:
    if not READLINE_ACTIVE:
        return
    try:
        readline.parse_and_bind("set editing-mode emacs")
        readline.parse_and_bind("Control-l: clear-screen")
        readline.parse_and_bind("tab: complete")
        readline.set_completer_delims(COMPLETER_DELIMS)
        readline.set_completer(completer.readline_completer(session.metadata, _line_before_cursor))
    except Exception:
        pass
    if history_file.exists():
        try:
            readline.read_history_file(str(history_file))
        except OSError as e:
            print(f"gitsh: cannot read history: {e}", file=sys.stderr)


def save_history(line: str, history_file: Path, last_saved: Optional[str]) -> str:
    if line != last_saved:
        try:
            history_file.parent.mkdir(parents=True, exist_ok=True)
            with history_file.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")
        except OSError as e:
            print(f"gitsh: cannot write history: {e}", file=sys.stderr)
    return line


def repl(session: ShellSession, history_file: Optional[Path] = None) -> int:
    history_file = history_file if history_file is not None else history_path()
    setup_readline(session, history_file)
    # readline needs its \001..\002 markers around colors; plain input() would print them.
    prompt_color = session.use_color and READLINE_ACTIVE and sys.stdin.isatty()

    print(WELCOME)
    exit_code = 0
    last_saved: Optional[str] = None
    while True:
        try:
            line = input(prompt.string(session.metadata, exit_code, prompt_color)).strip()
        except EOFError:
            # Ctrl-D -> exit
            print()
            break
        except KeyboardInterrupt:
            # Ctrl-C at prompt -> new line and continue
            print()
            continue

        if not line:
            continue

        if not session.history or session.history[-1] != line:
            session.history.append(line)

        result = execute_line(line, session)
        exit_code = result.exit_code
        if isinstance(result, Exit):
            break
        if isinstance(result, Success):
            # Lines with syntax or parse errors only stay in the session history.
            last_saved = save_history(line, history_file, last_saved)

    print(GOODBYE)
    return exit_code


def parse_args(args=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="gitsh - an interactive shell for git",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gitsh                              # start the interactive shell
  gitsh --git /usr/local/bin/git     # use a specific git executable
  gitsh -c "add . && commit -m wip"  # run one line and exit

Lines are git commands without the leading "git", joined by && || and ;
"""
    )

    parser.add_argument(
        "--git",
        metavar="PATH",
        help="git executable to run (default: $GITSH_GIT or git on PATH)"
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="disable colored prompt, errors and history"
    )
    parser.add_argument(
        "-c", "--command",
        metavar="LINE",
        help="execute LINE and exit with its status"
    )

    return parser.parse_args(args)


def main(argv=None) -> None:
    args = parse_args(argv)
    git = get_git(args.git)
    if shutil.which(git) is None:
        print(f"gitsh: warning: git executable not found: {git}", file=sys.stderr)

    session = ShellSession(git=git, use_color=not args.no_color and use_color(sys.stdout))

    if args.command is not None:
        sys.exit(execute_line(args.command, session).exit_code)
    sys.exit(repl(session))


if __name__ == "__main__":
    main()
