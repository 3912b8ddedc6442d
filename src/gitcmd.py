"""Read-only git metadata used for completion, highlighting and the prompt.

A ``GitMetadata`` instance is owned by the shell session; its caches live on
the instance so tests can build a fresh one (or a fake) whenever needed.
Every query shells out with captured output and degrades to an empty answer
when git is missing or the working directory is not a repository.
"""
from __future__ import annotations

import os
import re
import subprocess
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import command
from git_help import GitHelp

# Candidate lists are capped so completion stays fast in large repositories.
MAX_RESULTS = 250

_COMMAND_DESCRIPTION = re.compile(r"^ {3}([a-z][a-z0-9-]*) +(.+)$", re.MULTILINE)
_ALIAS_LINE = re.compile(r"^alias\.(\S+)\s+(.+)$")
_SCOPED_ALIAS_LINE = re.compile(r"^(local|global)\s+alias\.(\S+)\s+(.+)$")


@dataclass(frozen=True)
class Changes:
    staged_count: int = 0
    unstaged_count: int = 0


def limited(items: Iterable[str], prefix: str = "", limit: int = MAX_RESULTS) -> List[str]:
    """Items starting with ``prefix``, de-duplicated, at most ``limit`` of them."""
    out: List[str] = []
    seen = set()
    for item in items:
        if len(out) >= limit:
            break
        if item and item.startswith(prefix) and item not in seen:
            seen.add(item)
            out.append(item)
    return out


class GitMetadata:
    def __init__(self, git: str = "git", env: Optional[Dict[str, str]] = None, cwd: Optional[str] = None) -> None:
        self.git = git
        self.env = env
        self.cwd = cwd
        self._command_names: Optional[List[str]] = None
        self._aliases: Optional[Dict[str, str]] = None
        self._scoped_aliases: Optional[Dict[str, Dict[str, str]]] = None
        self._descriptions: Optional[Dict[str, str]] = None
        self._help: Dict[str, GitHelp] = {}

    def clear_cache(self) -> None:
        self._command_names = None
        self._aliases = None
        self._scoped_aliases = None
        self._descriptions = None
        self._help.clear()

    def capture(self, *args: str, extra_env: Optional[Dict[str, str]] = None) -> str:
        """Run git with captured output; empty string on any failure."""
        env = self.env
        if extra_env:
            env = dict(os.environ if env is None else env)
            env.update(extra_env)
        try:
            completed = subprocess.run(
                [self.git, *args],
                capture_output=True,
                text=True,
                env=env,
                cwd=self.cwd,
                stdin=subprocess.DEVNULL,
            )
        except OSError:
            return ""
        if completed.returncode != 0:
            return ""
        return completed.stdout

    def _lines(self, *args: str) -> List[str]:
        return [line.strip() for line in self.capture(*args).splitlines() if line.strip()]

    # --- commands ---

    def command_names(self) -> List[str]:
        if self._command_names is None:
            self._command_names = self._lines("--list-cmds=main,nohelpers")
        return self._command_names

    def aliases(self) -> Dict[str, str]:
        if self._aliases is None:
            aliases: Dict[str, str] = {}
            for line in self._lines("config", "--get-regexp", r"^alias\."):
                m = _ALIAS_LINE.match(line)
                if m:
                    aliases[m.group(1)] = m.group(2).strip()
            self._aliases = aliases
        return self._aliases

    def scoped_aliases(self) -> Dict[str, Dict[str, str]]:
        """Aliases split by the config level that defines them: ``local`` and ``global``."""
        if self._scoped_aliases is None:
            scoped: Dict[str, Dict[str, str]] = {level: {} for level in command.ALIAS_LEVELS}
            for line in self._lines("config", "--show-scope", "--get-regexp", r"^alias\."):
                m = _SCOPED_ALIAS_LINE.match(line)
                if m:
                    scoped[m.group(1)][m.group(2)] = m.group(3).strip()
            self._scoped_aliases = scoped
        return self._scoped_aliases

    def all_command_names(self) -> List[str]:
        names = list(self.command_names())
        names.extend(self.aliases())
        names.extend(command.internal_command_names())
        return limited(names, limit=len(names))

    def is_command(self, name: str) -> bool:
        return (
            name in self.command_names()
            or name in self.aliases()
            or command.is_internal(name)
        )

    def command_descriptions(self) -> Dict[str, str]:
        if self._descriptions is None:
            self._descriptions = dict(_COMMAND_DESCRIPTION.findall(self.capture("help", "--all")))
        return self._descriptions

    def help_page(self, name: str) -> Optional[str]:
        if name not in self.command_names():
            return None
        text = self.capture(
            "help", "--man", name,
            extra_env={"MANPAGER": "cat", "PAGER": "cat", "MANWIDTH": "120"},
        ).strip()
        return text or None

    def option_prefixes(self, name: str) -> Optional[List[str]]:
        if command.is_internal(name):
            return command.internal_option_prefixes(name)
        # An alias completes like the command it expands to.
        alias = self.aliases().get(name)
        if alias and not alias.startswith("!"):
            name = alias.split()[0]
        if name not in self.command_names():
            return None
        if name not in self._help:
            self._help[name] = GitHelp(name, self.help_page(name))
        return self._help[name].option_prefixes or None

    # --- names for argument completion ---

    def branch_names(self, prefix: str = "", limit: int = MAX_RESULTS) -> List[str]:
        refs = self._lines("for-each-ref", "--format=%(refname:short)", "refs/heads")
        return limited(refs, prefix, limit)

    def staged_files(self, prefix: str = "", limit: int = MAX_RESULTS) -> List[str]:
        return limited(self._lines("diff", "--cached", "--name-only", "--relative"), prefix, limit)

    def unstaged_files(self, prefix: str = "", limit: int = MAX_RESULTS) -> List[str]:
        files = self._lines("ls-files", "--modified", "--others", "--deleted", "--exclude-standard")
        return limited(files, prefix, limit)

    def file_paths(self, prefix: str = "", limit: int = MAX_RESULTS) -> List[str]:
        """Paths under the working directory starting with ``prefix``.

        Directories are returned with a trailing slash.
        """
        directory, _, base = prefix.rpartition("/")
        root = os.path.join(self.cwd or os.getcwd(), directory)
        try:
            entries = sorted(os.scandir(root), key=lambda e: e.name)
        except OSError:
            return []
        paths: List[str] = []
        for entry in entries:
            if not entry.name.startswith(base):
                continue
            path = f"{directory}/{entry.name}" if directory else entry.name
            if entry.is_dir():
                path += "/"
            paths.append(path)
        return limited(paths, prefix, limit)

    # --- repository status for the prompt ---

    def is_repo(self) -> bool:
        return self.capture("rev-parse", "--is-inside-work-tree").strip() == "true"

    def current_branch(self) -> Optional[str]:
        branch = self.capture("rev-parse", "--abbrev-ref", "HEAD").strip()
        return branch or None

    def uncommitted_changes(self) -> Changes:
        staged = unstaged = 0
        for line in self.capture("status", "--porcelain").splitlines():
            if line[:1].isalpha() and line[:1].isupper():
                staged += 1
            if line[1:2].isalpha() and line[1:2].isupper():
                unstaged += 1
        return Changes(staged_count=staged, unstaged_count=unstaged)
