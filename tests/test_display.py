"""
Tests for CLI output, terminal prompts and the command-line entry point.

Run with:
    pytest tests/test_display.py -v
    pytest tests/test_display.py -v -s   # see actual terminal output
"""

import re

import pytest

from cpush.cli import main as cli_main
from cpush.cli.args import parse_args
from cpush.cli.commands import show_status, clear_state
from cpush.cli.utils import TerminalPrompter, edit_message
from cpush.config import Config
from cpush.output import Level, notify, display_message
from cpush.workflow import Choice, MemoryStateStore, Outcome, WorkflowState

ANSI_RE = re.compile(r'\033\[[0-9;]*m')


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def strip_ansi():
    """Return a function that removes ANSI escape codes."""
    def _strip(text: str) -> str:
        return ANSI_RE.sub('', text)
    return _strip


@pytest.fixture
def answers(monkeypatch):
    """Feed scripted lines to input(); raise EOFError when exhausted."""
    def _feed(*lines):
        queue = list(lines)

        def fake_input(prompt=''):
            if not queue:
                raise EOFError
            return queue.pop(0)
        monkeypatch.setattr('builtins.input', fake_input)
    return _feed


CHOICES = (Choice("commit", "commit only"), Choice("commit_push", "commit and push"), Choice("cancel", "cancel"))


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

class TestNotify:

    def test_info_goes_to_stdout(self, capsys, strip_ansi):
        notify("changes staged successfully", Level.INFO)
        out, err = capsys.readouterr()
        assert "changes staged successfully" in strip_ansi(out)
        assert err == ""

    def test_warning_goes_to_stdout(self, capsys, strip_ansi):
        notify("no changes to commit after staging", Level.WARN)
        out, err = capsys.readouterr()
        assert "no changes to commit after staging" in strip_ansi(out)

    def test_error_goes_to_stderr(self, capsys, strip_ansi):
        notify("push failed => code=1", Level.ERROR)
        out, err = capsys.readouterr()
        assert out == ""
        assert "push failed => code=1" in strip_ansi(err)

    def test_display_message_shows_every_line(self, capsys, strip_ansi):
        display_message("feat(cli): add flag\n\n- wire it up")
        out = strip_ansi(capsys.readouterr().out)
        assert "feat(cli): add flag" in out
        assert "- wire it up" in out


# ---------------------------------------------------------------------------
# Terminal prompter
# ---------------------------------------------------------------------------

class TestTerminalSelect:

    def test_numbered_choice(self, answers, capsys, strip_ansi):
        answers("2")
        assert TerminalPrompter().select("choose action:", CHOICES) == "commit_push"
        out = strip_ansi(capsys.readouterr().out)
        assert "choose action:" in out
        assert "[1] commit only" in out
        assert "[3] cancel" in out

    def test_invalid_then_valid(self, answers, capsys):
        answers("9", "abc", "1")
        assert TerminalPrompter().select("choose action:", CHOICES) == "commit"
        assert capsys.readouterr().out.count("Enter 1-3 or q") == 2

    @pytest.mark.parametrize("lines", [("q",), ()])
    def test_quit_or_eof_dismisses(self, answers, lines):
        answers(*lines)
        assert TerminalPrompter().select("choose action:", CHOICES) is None


class TestTerminalInput:

    def test_enter_accepts_default_verbatim(self, answers):
        answers("")
        assert TerminalPrompter().input("edit commit message:", "fix: keep  spaces") == "fix: keep  spaces"

    def test_quit_dismisses(self, answers):
        answers("q")
        assert TerminalPrompter().input("edit commit message:", "fix: x") is None

    def test_edit_then_accept(self, answers, monkeypatch):
        answers("e", "")
        monkeypatch.setattr('cpush.cli.utils.edit_message', lambda message: "fix: edited")
        assert TerminalPrompter().input("edit commit message:", "fix: x") == "fix: edited"

    def test_edit_to_empty_returns_empty(self, answers, monkeypatch):
        answers("e")
        monkeypatch.setattr('cpush.cli.utils.edit_message', lambda message: "")
        assert TerminalPrompter().input("edit commit message:", "fix: x") == ""

    def test_editor_failure_keeps_message(self, answers, monkeypatch, capsys):
        answers("e", "")
        monkeypatch.setattr('cpush.cli.utils.edit_message', lambda message: None)
        assert TerminalPrompter().input("edit commit message:", "fix: x") == "fix: x"
        assert "editor failed" in capsys.readouterr().out


class TestEditMessage:

    def test_reads_back_editor_changes(self, monkeypatch):
        def fake_editor(cmd, check):
            with open(cmd[-1], 'w', encoding='utf-8') as f:
                f.write("docs: rewritten\n")
        monkeypatch.setenv('EDITOR', 'myeditor --wait')
        monkeypatch.delenv('VISUAL', raising=False)
        monkeypatch.setattr('cpush.cli.utils.subprocess.run', fake_editor)

        assert edit_message("docs: original") == "docs: rewritten"

    def test_missing_editor_returns_none(self, monkeypatch):
        def missing(cmd, check):
            raise FileNotFoundError(cmd[0])
        monkeypatch.setattr('cpush.cli.utils.subprocess.run', missing)
        assert edit_message("docs: original") is None


# ---------------------------------------------------------------------------
# Status subcommands
# ---------------------------------------------------------------------------

class TestStatus:

    def test_status_without_message(self, capsys):
        assert show_status(MemoryStateStore()) == 0
        assert "no preserved commit message" in capsys.readouterr().out

    def test_status_shows_message(self, capsys, strip_ansi):
        store = MemoryStateStore(WorkflowState("fix: retry me", True))
        assert show_status(store) == 0
        out = strip_ansi(capsys.readouterr().out)
        assert "fix: retry me" in out
        assert "push after commit: yes" in out

    def test_clear_discards(self, capsys):
        store = MemoryStateStore(WorkflowState("fix: retry me", False))
        assert clear_state(store) == 0
        assert not store.load().has_preserved
        assert "discarded" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

class TestMain:

    def test_overrides_precedence(self, monkeypatch):
        monkeypatch.setenv('CPUSH_GENERATOR', 'env-gen draft')
        monkeypatch.setenv('CPUSH_REMOTE', 'env-remote')
        args = parse_args(['--hooks', '--no-persist', '-g', 'cli-gen "with space"'])

        config = cli_main._apply_overrides(args, Config(remote="file-remote"))

        assert config.generator == ['cli-gen', 'with space']
        assert config.remote == 'env-remote'
        assert config.dry_run_hooks is True
        assert config.persist_state is False

    def test_config_file_used_without_overrides(self, monkeypatch):
        monkeypatch.delenv('CPUSH_GENERATOR', raising=False)
        monkeypatch.delenv('CPUSH_REMOTE', raising=False)
        config = cli_main._apply_overrides(parse_args([]), Config(generator=["gen"], remote="file-remote"))
        assert config.generator == ["gen"]
        assert config.remote == "file-remote"

    def test_every_outcome_has_exit_code(self):
        assert set(cli_main.EXIT_CODES) == set(Outcome)

    def test_not_a_repository(self, monkeypatch, capsys):
        class NoRepo(cli_main.GitCommands):
            def verify(self):
                raise cli_main.GitError("Not inside a git repository")

        monkeypatch.setattr(cli_main, 'GitCommands', NoRepo)
        assert cli_main.main([]) == 1
        assert "Not inside a git repository" in capsys.readouterr().err

    def test_runs_engine_and_maps_outcome(self, monkeypatch):
        class Repo(cli_main.GitCommands):
            def verify(self):
                pass

        class FakeEngine:
            def run(self):
                return Outcome.PUSH_FAILED

        monkeypatch.setattr(cli_main, 'GitCommands', Repo)
        monkeypatch.setattr(cli_main, 'build_engine', lambda *a: FakeEngine())
        assert cli_main.main(['--no-persist']) == 1

    def test_unbalanced_generator_quote(self, monkeypatch, capsys):
        monkeypatch.setattr(cli_main, 'load_config', lambda: Config())
        assert cli_main.main(['-g', 'lumen "draft']) == 1
        assert "Invalid generator command" in capsys.readouterr().err
