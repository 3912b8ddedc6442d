# Internal `:`-prefixed commands and dispatch of a command group by name

from __future__ import annotations

import textwrap
from typing import TYPE_CHECKING, Dict, List, Optional, TextIO, Type

import highlighter

if TYPE_CHECKING:  # pragma: no cover
    from ops import ShellSession

SUCCESS_CODE = 0
FAILURE_CODE = 1

EXIT_NAMES = frozenset({":exit", ":quit", "exit", "quit"})

HELP_OPTION = "--help"

# Config levels `:alias` writes to, in listing order.
ALIAS_LEVELS = ("local", "global")


class InternalCommand:
    """Base for commands handled by gitsh itself instead of git."""

    name: str = ""
    description: str = ""
    # option prefix -> description, `--help` is added to every command
    options: Dict[str, str] = {}

    def __init__(self, arguments: List[str], session: "ShellSession", out: TextIO, err: TextIO) -> None:
        self.arguments = list(arguments[1:])
        self.session = session
        self.out = out
        self.err = err

    @classmethod
    def short_description(cls) -> str:
        return cls.description.strip().split("\n")[0]

    @classmethod
    def all_options(cls) -> Dict[str, str]:
        merged = dict(cls.options)
        merged[HELP_OPTION] = "Show this help page."
        return merged

    @classmethod
    def help_text(cls) -> str:
        lines = [f"GITSH-{cls.name.lstrip(':').upper()}(1)", "", "NAME", f"      {cls.name}", "", "DESCRIPTION"]
        for paragraph in cls.description.strip().split("\n\n"):
            lines.extend(textwrap.wrap(paragraph, width=60, initial_indent=" " * 6, subsequent_indent=" " * 6))
        lines += ["", "OPTIONS"]
        # Alphabetical with --help last.
        for prefix in sorted(cls.all_options(), key=lambda p: (p == HELP_OPTION, p)):
            lines.append(f"      {prefix}")
            lines.extend(textwrap.wrap(cls.all_options()[prefix], width=60,
                                       initial_indent=" " * 12, subsequent_indent=" " * 12))
        return "\n".join(lines) + "\n"

    def error(self, message: str) -> int:
        self.err.write(f"error: {message}\n")
        self.err.write(self.help_text())
        self.err.flush()
        return FAILURE_CODE

    def run(self) -> int:
        option = self.arguments[0] if self.arguments else None
        if option == HELP_OPTION:
            self.out.write(self.help_text())
            return SUCCESS_CODE
        if option is not None and option not in self.options:
            return self.error(f"invalid option: {option}")
        return self.call(option, self.arguments[1:])

    def call(self, option: Optional[str], params: List[str]) -> int:
        raise NotImplementedError


class ExitCommand(InternalCommand):
    name = ":exit"
    description = "Gracefully exit the program. This is equivalent to ctrl-d."

    def call(self, option: Optional[str], params: List[str]) -> int:
        # The executor ends the session first and run() answers --help.
        return SUCCESS_CODE


class QuitCommand(ExitCommand):
    name = ":quit"


class AliasCommand(InternalCommand):
    name = ":alias"
    description = (
        "Create, delete and list local and global git aliases.\n\n"
        "Aliases are written to git's own config, so they keep working outside of gitsh."
    )
    options = {
        "--global": "Set (NAME COMMAND) or delete (NAME) an alias for the current user.",
        "--list": "List all local and global aliases.",
        "--local": "Set (NAME COMMAND) or delete (NAME) an alias for the current repository.",
    }

    def call(self, option: Optional[str], params: List[str]) -> int:
        if option in (None, "--list"):
            return self.list_aliases()
        return self.set_alias(option[2:], params)

    def list_aliases(self) -> int:
        scoped = self.session.metadata.scoped_aliases()
        for index, level in enumerate(ALIAS_LEVELS):
            if index:
                self.out.write("\n")
            self.out.write(f"{level} aliases\n")
            for name, expansion in sorted(scoped.get(level, {}).items()):
                self.out.write(f"   {name:<24}{expansion}\n")
        self.out.flush()
        return SUCCESS_CODE

    def set_alias(self, level: str, params: List[str]) -> int:
        if not params or not params[0]:
            return self.error("missing alias name")
        name, expansion = params[0], " ".join(params[1:])
        if any(ch.isspace() for ch in name):
            return self.error("alias name must not include whitespace")

        if expansion:
            arguments = ["config", f"--{level}", f"alias.{name}", expansion]
        elif name in self.session.metadata.scoped_aliases().get(level, {}):
            arguments = ["config", f"--{level}", "--unset", f"alias.{name}"]
        else:
            return self.error(f"can't delete nonexistent {level} alias: {name}")

        code = self.session.run_git(arguments, self.out, self.err)
        if code == SUCCESS_CODE:
            # Completion and highlighting must see the new alias set.
            self.session.metadata.clear_cache()
        return code


class CommandsCommand(InternalCommand):
    name = ":commands"
    description = "List all internal and external commands along with descriptions."
    options = {"--internal": "Only list the internal gitsh commands."}

    def call(self, option: Optional[str], params: List[str]) -> int:
        self.out.write("gitsh internal commands\n")
        for cls in sorted(INTERNAL_COMMANDS, key=lambda c: c.name):
            self.out.write(f"   {cls.name:<24}{cls.short_description()}\n")
        if option != "--internal":
            descriptions = self.session.metadata.command_descriptions()
            if descriptions:
                self.out.write("\ngit commands\n")
                for name, description in sorted(descriptions.items()):
                    self.out.write(f"   {name:<24}{description}\n")
        self.out.flush()
        return SUCCESS_CODE


class HistoryCommand(InternalCommand):
    name = ":history"
    description = "Browse your gitsh shell history from newest to oldest with syntax highlighting."
    options = {"--clear": "Forget the history of the current session."}

    def call(self, option: Optional[str], params: List[str]) -> int:
        if option == "--clear":
            self.session.history.clear()
            return SUCCESS_CODE
        for line in reversed(self.session.history):
            if self.session.use_color:
                line = highlighter.highlight(line, self.session.metadata, color=True)
            self.out.write(f"> {line}\n")
        self.out.flush()
        return SUCCESS_CODE


INTERNAL_COMMANDS: List[Type[InternalCommand]] = [
    AliasCommand,
    CommandsCommand,
    ExitCommand,
    HistoryCommand,
    QuitCommand,
]

_BY_NAME: Dict[str, Type[InternalCommand]] = {cls.name: cls for cls in INTERNAL_COMMANDS}


def internal_command_names() -> List[str]:
    return [cls.name for cls in INTERNAL_COMMANDS]


def is_internal(name: str) -> bool:
    return name in _BY_NAME


def is_exit(name: str) -> bool:
    return name in EXIT_NAMES


def asks_for_help(arguments: List[str]) -> bool:
    """`:name --help` shows help, even for the commands that end the session."""
    return len(arguments) == 2 and is_internal(arguments[0]) and arguments[1] == HELP_OPTION


def internal_option_prefixes(name: str) -> List[str]:
    """Declared options of an internal command; `--help` is left out of completion."""
    return sorted(_BY_NAME[name].options)


def misspelling_of(name: str, git_commands: List[str]) -> Optional[str]:
    """The internal command a bare name was probably meant to be, if any."""
    candidate = f":{name}"
    if candidate in _BY_NAME and name not in git_commands and not is_exit(name):
        return candidate
    return None


def run_group(arguments: List[str], session: "ShellSession", out: TextIO, err: TextIO) -> int:
    """Run one command group: an internal command, a hint, or git itself."""
    name = arguments[0]

    if name == "help" and len(arguments) == 2 and is_internal(arguments[1]):
        return _BY_NAME[arguments[1]]([arguments[1], HELP_OPTION], session, out, err).run()

    if is_internal(name):
        return _BY_NAME[name](arguments, session, out, err).run()

    suggestion = misspelling_of(name, session.metadata.command_names())
    if suggestion:
        err.write(
            f"gitsh: '{name}' is not a gitsh command. See ':commands'.\n\n"
            f"The most similar command is\n        {suggestion}\n"
        )
        err.flush()
        return FAILURE_CODE

    return session.run_git(arguments, out, err)
