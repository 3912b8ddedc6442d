from __future__ import annotations

import os
import signal
import subprocess
import sys
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, TextIO

import command
from errors import LineError
from gitcmd import GitMetadata
from groups import CommandGroup, Join, parse

# Exit status reported when a line fails to lex or parse, as for "command not found".
FAILURE_EXIT_CODE = 127
INTERRUPT_EXIT_CODE = 130

Runner = Callable[[List[str], TextIO, TextIO], int]


# ---- Execution results ----

@dataclass(frozen=True)
class Success:
    """Every group that should run has run; carries the last exit code."""
    exit_code: int = 0


@dataclass(frozen=True)
class Failure:
    """A syntax or parse error stopped the line before anything ran."""
    exit_code: int = FAILURE_EXIT_CODE


@dataclass(frozen=True)
class Exit:
    """The user asked to leave the shell."""
    exit_code: int = 0


ExecutionResult = Success | Failure | Exit


def _stream_fd(stream: TextIO) -> Optional[int]:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


class CommandRunner:
    """Run a single git invocation as a child process.

    Lifecycle:
    - Initialize with the argument vector (without the leading ``git``).
    - Call run() with the output and error sinks.
    - After running, access exit_code (and stdout/stderr when captured).

    Notes:
    - Sinks backed by a real file descriptor are handed to the child so that
      pagers, editors and colors behave as in a terminal.
    - Other sinks (StringIO in tests) receive captured output after the
      process ends.
    - Start-up failures become exit codes, never exceptions: 127 when the
      executable is missing, 126 for other OS errors, 128+N after signal N.
    """

    def __init__(self, arguments: List[str], git: str = "git", env: Optional[Dict[str, str]] = None) -> None:
        self.arguments: List[str] = list(arguments)
        self.git: str = git
        self.env: Optional[Dict[str, str]] = dict(env) if env is not None else None
        self.exit_code: Optional[int] = None
        self.stdout: Optional[str] = None
        self.stderr: Optional[str] = None

    def run(self, out: TextIO, err: TextIO) -> int:
        out_fd = _stream_fd(out)
        err_fd = _stream_fd(err)
        for stream in (out, err):
            stream.flush()
        try:
            completed = subprocess.run(
                [self.git, *self.arguments],
                stdout=out_fd if out_fd is not None else subprocess.PIPE,
                stderr=err_fd if err_fd is not None else subprocess.PIPE,
                text=True,
                env=self.env,
            )
        except FileNotFoundError:
            self.stderr = f"gitsh: git not found: {self.git}\n"
            err.write(self.stderr)
            err.flush()
            self.exit_code = 127
            return self.exit_code
        except OSError as e:
            self.stderr = f"gitsh: cannot run {self.git}: {e}\n"
            err.write(self.stderr)
            err.flush()
            self.exit_code = 126
            return self.exit_code

        self.stdout = completed.stdout
        self.stderr = completed.stderr
        if self.stdout:
            out.write(self.stdout)
            out.flush()
        if self.stderr:
            err.write(self.stderr)
            err.flush()

        code = completed.returncode
        if code < 0:
            # Killed by a signal; report it the way shells do.
            signum = -code
            if signum == signal.SIGINT:
                raise KeyboardInterrupt
            code = 128 + signum
        self.exit_code = code
        return self.exit_code


class ShellSession:
    """Holds session-wide shell state: git executable, environment, caches."""

    def __init__(
        self,
        git: str = "git",
        inherit_env: bool = True,
        use_color: bool = False,
        metadata: Optional[GitMetadata] = None,
        runner: Optional[Runner] = None,
    ) -> None:
        self.git: str = git
        # String-only environment used for child processes
        self.env: Dict[str, str] = dict(os.environ) if inherit_env else {}
        self.use_color: bool = use_color
        self.metadata = metadata if metadata is not None else GitMetadata(git=git, env=self.env)
        self.runner: Optional[Runner] = runner
        # Lines entered during this session, oldest first
        self.history: List[str] = []

    def get_env(self) -> Dict[str, str]:
        return dict(self.env)

    def run_git(self, arguments: List[str], out: TextIO, err: TextIO) -> int:
        if self.runner is not None:
            return self.runner(arguments, out, err)
        return CommandRunner(arguments, git=self.git, env=self.get_env()).run(out, err)


def run_groups(groups: List[CommandGroup], session: ShellSession, out: TextIO, err: TextIO) -> ExecutionResult:
    exit_code = 0

    # After a success followed by `||`, skip ahead to the next `;`.
    # In `first || second || third && fourth; fifth` only `first` and `fifth`
    # run when `first` succeeds.
    skip_to_end = False

    for group in groups:
        if group.join is Join.AND:
            # Skip the command if the previous one failed.
            if exit_code != 0:
                continue
        elif group.join is Join.OR:
            # Skip to the end if the previous command succeeded.
            if exit_code == 0:
                skip_to_end = True
        else:
            # Always run the command after the `;` action.
            skip_to_end = False

        if skip_to_end:
            continue

        if command.is_exit(group.name) and not command.asks_for_help(list(group.arguments)):
            return Exit(exit_code)

        try:
            exit_code = command.run_group(list(group.arguments), session, out, err)
        except KeyboardInterrupt:
            return Exit(INTERRUPT_EXIT_CODE)

    return Success(exit_code)


def execute_line(line: str, session: ShellSession, out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> ExecutionResult:
    """Lex, parse and run ``line`` as a series of git commands."""
    out = out if out is not None else sys.stdout
    err = err if err is not None else sys.stderr
    try:
        groups = parse(line)
    except LineError as e:
        err.write(e.render(color=session.use_color))
        err.flush()
        return Failure(FAILURE_EXIT_CODE)
    return run_groups(groups, session, out, err)
