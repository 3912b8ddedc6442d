import pytest

from gitcmd import Changes, GitMetadata, limited
from test_git_help import DIFF_HELP

GIT_OUTPUT = {
    ("--list-cmds=main,nohelpers",): "add\ncommit\ndiff\nstatus\n\n",
    ("config", "--get-regexp", r"^alias\."): "alias.co checkout\nalias.lg log --oneline --graph\nalias.sh !echo hi\n",
    ("config", "--show-scope", "--get-regexp", r"^alias\."): (
        "global\talias.co checkout\nlocal\talias.lg log --oneline --graph\nglobal\talias.sh !echo hi\n"
    ),
    ("help", "--all"): (
        "See 'git help <command>' to read about a specific subcommand\n\n"
        "Main Porcelain Commands\n"
        "   add                     Add file contents to the index\n"
        "   commit                  Record changes to the repository\n"
    ),
    ("help", "--man", "diff"): DIFF_HELP,
    ("status", "--porcelain"): "M  staged.txt\n M unstaged.txt\nMM both.txt\n?? new.txt\n",
    ("rev-parse", "--abbrev-ref", "HEAD"): "main\n",
    ("rev-parse", "--is-inside-work-tree"): "true\n",
    ("for-each-ref", "--format=%(refname:short)", "refs/heads"): "main\nfeature/x\nfix\n",
}


class ScriptedMetadata(GitMetadata):
    def __init__(self):
        super().__init__(git="git")
        self.requests = []

    def capture(self, *args, extra_env=None):
        self.requests.append(args)
        return GIT_OUTPUT.get(args, "")


@pytest.fixture()
def git():
    return ScriptedMetadata()


def test_command_names_are_cached(git):
    assert git.command_names() == ["add", "commit", "diff", "status"]
    git.command_names()
    assert git.requests.count(("--list-cmds=main,nohelpers",)) == 1
    git.clear_cache()
    git.command_names()
    assert git.requests.count(("--list-cmds=main,nohelpers",)) == 2


def test_aliases(git):
    assert git.aliases() == {"co": "checkout", "lg": "log --oneline --graph", "sh": "!echo hi"}


def test_scoped_aliases_are_cached_until_cleared(git):
    assert git.scoped_aliases() == {
        "local": {"lg": "log --oneline --graph"},
        "global": {"co": "checkout", "sh": "!echo hi"},
    }
    git.scoped_aliases()
    request = ("config", "--show-scope", "--get-regexp", r"^alias\.")
    assert git.requests.count(request) == 1
    git.clear_cache()
    git.scoped_aliases()
    assert git.requests.count(request) == 2


def test_all_command_names_include_aliases_and_internal_commands(git):
    names = git.all_command_names()
    assert names[:4] == ["add", "commit", "diff", "status"]
    assert "co" in names and ":history" in names
    assert len(names) == len(set(names))


@pytest.mark.parametrize("name,expected", [("diff", True), ("co", True), (":exit", True), ("smile", False)])
def test_is_command(git, name, expected):
    assert git.is_command(name) is expected


def test_command_descriptions(git):
    assert git.command_descriptions() == {
        "add": "Add file contents to the index",
        "commit": "Record changes to the repository",
    }


def test_option_prefixes(git):
    assert "--stat" in git.option_prefixes("diff")
    assert git.option_prefixes(":history") == ["--clear"]
    # no help page for commit in the scripted output
    assert git.option_prefixes("commit") is None
    assert git.option_prefixes("smile") is None
    assert git.option_prefixes("sh") is None


def test_option_prefixes_follow_aliases(git):
    git.aliases()["d"] = "diff --cached"
    assert git.option_prefixes("d") == git.option_prefixes("diff")


def test_help_pages_are_parsed_once(git):
    git.option_prefixes("diff")
    git.option_prefixes("diff")
    assert git.requests.count(("help", "--man", "diff")) == 1


def test_repository_status(git):
    assert git.is_repo()
    assert git.current_branch() == "main"
    assert git.uncommitted_changes() == Changes(staged_count=2, unstaged_count=2)


def test_branch_names(git):
    assert git.branch_names("f") == ["feature/x", "fix"]
    assert git.branch_names(limit=1) == ["main"]


def test_file_paths(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "lexer.py").write_text("")
    (tmp_path / "setup.cfg").write_text("")
    (tmp_path / "README.md").write_text("")
    git = GitMetadata(cwd=str(tmp_path))
    assert git.file_paths("s") == ["setup.cfg", "src/"]
    assert git.file_paths("src/") == ["src/lexer.py"]
    assert git.file_paths("missing/") == []


def test_missing_git_gives_empty_answers(tmp_path):
    git = GitMetadata(git=str(tmp_path / "no-such-git"))
    assert git.command_names() == []
    assert git.current_branch() is None
    assert not git.is_repo()
    assert git.uncommitted_changes() == Changes()


def test_limited():
    assert limited(["a", "b", "ab", "a", ""], "a") == ["a", "ab"]
    assert limited(["a", "ab", "abc"], "a", limit=2) == ["a", "ab"]
