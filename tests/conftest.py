import io
import os
import sys
from pathlib import Path

import pytest

# Ensure we can import modules from src/ before test modules are collected
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import command  # noqa: E402
from gitcmd import limited  # noqa: E402


class FakeRunner:
    """Stands in for git: records argument vectors, returns scripted exit codes.

    ``codes`` maps a command name to its exit status (default 0).
    """

    def __init__(self, codes=None):
        self.codes = dict(codes or {})
        self.calls = []

    def __call__(self, arguments, out, err):
        self.calls.append(list(arguments))
        out.write(f"ran {' '.join(arguments)}\n")
        return self.codes.get(arguments[0], 0)

    @property
    def names(self):
        return [call[0] for call in self.calls]


class FakeMetadata:
    def __init__(self):
        self.commands = ["add", "commit", "commit-graph", "commit-tree", "checkout", "diff",
                         "restore", "reset", "status", "switch", "log"]
        self.alias_map = {"co": "checkout", "st": "status"}
        self.scoped_alias_map = {"local": {"st": "status"}, "global": {"co": "checkout"}}
        self.cache_clears = 0
        self.options = {
            "diff": ["-s", "--stat", "--staged", "--cached", "--output", "--output-indicator-new",
                     "--output-indicator-old", "--output-indicator-context"],
            "commit": ["-m", "--message", "--amend", "--all"],
        }
        self.branches = ["main", "master", "feature/lexer", "feature/zipper"]
        self.staged = ["README.md", "src/lexer.py"]
        self.unstaged = ["notes.txt", "src/zipper.py", "src/ops.py"]
        self.paths = ["src/", "spec.md", "tests/", "setup.cfg"]
        self.descriptions = {"add": "Add file contents to the index", "status": "Show the working tree status"}

    def command_names(self):
        return list(self.commands)

    def aliases(self):
        return dict(self.alias_map)

    def scoped_aliases(self):
        return {level: dict(names) for level, names in self.scoped_alias_map.items()}

    def clear_cache(self):
        self.cache_clears += 1

    def all_command_names(self):
        return self.commands + list(self.alias_map) + command.internal_command_names()

    def is_command(self, name):
        return name in self.all_command_names()

    def command_descriptions(self):
        return dict(self.descriptions)

    def option_prefixes(self, name):
        if command.is_internal(name):
            return command.internal_option_prefixes(name)
        return self.options.get(self.alias_map.get(name, name))

    def branch_names(self, prefix="", limit=250):
        return limited(self.branches, prefix, limit)

    def staged_files(self, prefix="", limit=250):
        return limited(self.staged, prefix, limit)

    def unstaged_files(self, prefix="", limit=250):
        return limited(self.unstaged, prefix, limit)

    def file_paths(self, prefix="", limit=250):
        return limited(self.paths, prefix, limit)

    def is_repo(self):
        return True

    def current_branch(self):
        return "main"

    def uncommitted_changes(self):
        from gitcmd import Changes
        return Changes(staged_count=2, unstaged_count=3)


@pytest.fixture()
def metadata():
    return FakeMetadata()


@pytest.fixture()
def runner():
    return FakeRunner()


@pytest.fixture()
def session(metadata, runner):
    from ops import ShellSession
    return ShellSession(git="git", inherit_env=False, metadata=metadata, runner=runner)


@pytest.fixture()
def streams():
    return io.StringIO(), io.StringIO()


@pytest.fixture()
def sandbox(tmp_path, monkeypatch):
    # Work in an isolated temp directory with a throwaway HOME
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("GITSH_HISTORY_FILE", raising=False)
    monkeypatch.setenv("PATH", os.environ.get("PATH", "/usr/bin:/bin"))
    return tmp_path
