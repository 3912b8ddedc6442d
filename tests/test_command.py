import pytest

import command
from ops import Success, execute_line


def run_line(line, session, streams):
    out, err = streams
    return execute_line(line, session, out, err)


def test_internal_command_names():
    assert command.internal_command_names() == [":alias", ":commands", ":exit", ":history", ":quit"]
    assert command.is_internal(":history")
    assert not command.is_internal("history")


def test_internal_option_prefixes_leave_out_help():
    assert command.internal_option_prefixes(":history") == ["--clear"]
    assert command.internal_option_prefixes(":exit") == []


def test_commands_lists_internal_and_git_commands(session, runner, streams):
    assert run_line(":commands", session, streams) == Success(0)
    out = streams[0].getvalue()
    assert out.startswith("gitsh internal commands\n")
    assert ":history" in out
    assert "git commands" in out
    assert "Show the working tree status" in out
    assert runner.calls == []


def test_commands_internal_only(session, streams):
    run_line(":commands --internal", session, streams)
    assert "git commands" not in streams[0].getvalue()


def test_history_newest_first(session, streams):
    session.history.extend(["status", "add . && commit"])
    assert run_line(":history", session, streams) == Success(0)
    assert streams[0].getvalue() == "> add . && commit\n> status\n"


def test_history_is_highlighted_with_color(session, streams):
    session.use_color = True
    session.history.append("status")
    run_line(":history", session, streams)
    assert "\033[" in streams[0].getvalue()


def test_history_clear(session, streams):
    session.history.append("status")
    run_line(":history --clear", session, streams)
    assert session.history == []


def test_help_option(session, streams):
    assert run_line(":history --help", session, streams) == Success(0)
    out = streams[0].getvalue()
    assert out.startswith("GITSH-HISTORY(1)\n")
    assert "      --clear\n" in out
    # --help is listed last
    assert out.rstrip().endswith("Show this help page.")


def test_help_for_internal_command(session, runner, streams):
    assert run_line("help :commands", session, streams) == Success(0)
    assert "GITSH-COMMANDS(1)" in streams[0].getvalue()
    assert runner.calls == []


def test_help_for_git_command_goes_to_git(session, runner, streams):
    run_line("help status", session, streams)
    assert runner.calls == [["help", "status"]]


def test_invalid_option(session, streams):
    assert run_line(":history --nope", session, streams) == Success(1)
    err = streams[1].getvalue()
    assert err.startswith("error: invalid option: --nope\n")
    assert "GITSH-HISTORY(1)" in err


def test_misspelled_internal_command(session, runner, streams):
    assert run_line("commands", session, streams) == Success(1)
    assert "The most similar command is\n        :commands" in streams[1].getvalue()
    assert runner.calls == []


def test_bare_name_that_is_a_git_command_runs_git(session, runner, metadata, streams):
    metadata.commands.append("history")
    run_line("history", session, streams)
    assert runner.calls == [["history"]]


def test_exit_help_prints_help_instead_of_exiting(session, streams):
    assert run_line(":exit --help", session, streams) == Success(0)
    assert streams[0].getvalue().startswith("GITSH-EXIT(1)\n")


def test_alias_list_shows_each_level(session, runner, streams):
    assert run_line(":alias --list", session, streams) == Success(0)
    assert streams[0].getvalue() == (
        "local aliases\n"
        "   st                      status\n"
        "\n"
        "global aliases\n"
        "   co                      checkout\n"
    )
    assert runner.calls == []


def test_alias_without_option_lists(session, streams):
    run_line(":alias", session, streams)
    assert streams[0].getvalue().startswith("local aliases\n")


def test_alias_set_runs_git_config(session, runner, metadata, streams):
    assert run_line(":alias --local lg log --oneline --graph", session, streams) == Success(0)
    assert runner.calls == [["config", "--local", "alias.lg", "log --oneline --graph"]]
    assert metadata.cache_clears == 1


def test_alias_set_quoted_command(session, runner, streams):
    run_line(":alias --global hi '!echo hi'", session, streams)
    assert runner.calls == [["config", "--global", "alias.hi", "!echo hi"]]


def test_alias_delete_existing(session, runner, metadata, streams):
    assert run_line(":alias --global co", session, streams) == Success(0)
    assert runner.calls == [["config", "--global", "--unset", "alias.co"]]
    assert metadata.cache_clears == 1


def test_alias_delete_missing_alias_is_an_error(session, runner, streams):
    # `co` is global, not local
    assert run_line(":alias --local co", session, streams) == Success(1)
    assert streams[1].getvalue().startswith("error: can't delete nonexistent local alias: co\n")
    assert runner.calls == []


def test_alias_failed_config_keeps_cache(session, runner, metadata, streams):
    runner.codes["config"] = 3
    assert run_line(":alias --local lg log", session, streams) == Success(3)
    assert metadata.cache_clears == 0


@pytest.mark.parametrize("line", [":alias --local", ":alias --local ''"])
def test_alias_needs_a_name(session, runner, streams, line):
    assert run_line(line, session, streams) == Success(1)
    err = streams[1].getvalue()
    assert err.startswith("error: missing alias name\n")
    assert "GITSH-ALIAS(1)" in err
    assert runner.calls == []


def test_alias_name_must_not_contain_whitespace(session, runner, streams):
    assert run_line(":alias --local 'my alias' status", session, streams) == Success(1)
    err = streams[1].getvalue()
    assert err.startswith("error: alias name must not include whitespace\n")
    assert "GITSH-ALIAS(1)" in err
    assert runner.calls == []
