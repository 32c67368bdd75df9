"""Shared fakes: a scripted command runner and a scripted prompter."""

import pytest

from cpush.draft import CommandDraftGenerator
from cpush.git import CommandRunner, GitCommands, ProcessResult
from cpush.workflow import CommitMachine, MemoryStateStore, Prompter, WorkflowEngine
from cpush.workflow.engine import _no_progress

STAGED_CHECK = ('git', 'diff', '--cached', '--quiet')
STAGE_ALL = ('git', 'add', '-A')
HOOKS = ('git', 'hook', 'run', 'pre-commit')
COMMIT = ('git', 'commit')
PUSH = ('git', 'push')
DRAFT = ('lumen', 'draft')

# git diff --quiet exits 1 when the index has changes
STAGED = ProcessResult(1)
NOT_STAGED = ProcessResult(0)


class FakeRunner(CommandRunner):
    """Answers commands from a script instead of spawning processes.

    Responses are keyed by argv prefix; the longest matching prefix wins.
    Each key holds a queue of results; the last one repeats.
    """

    def __init__(self):
        self.calls = []
        self._responses = {}

    def respond(self, prefix, *results):
        self._responses[tuple(prefix)] = list(results)
        return self

    def _answer(self, args):
        args = tuple(args)
        matches = [key for key in self._responses if args[:len(key)] == key]
        if not matches:
            return ProcessResult(0)
        queue = self._responses[max(matches, key=len)]
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def run(self, args, cwd=None):
        self.calls.append(('run', tuple(args)))
        return self._answer(args)

    def run_interactive(self, args, cwd=None):
        self.calls.append(('interactive', tuple(args)))
        return self._answer(args)

    def commands(self):
        return [args for _, args in self.calls]

    def count(self, prefix):
        prefix = tuple(prefix)
        return sum(1 for args in self.commands() if args[:len(prefix)] == prefix)


class ScriptedPrompter(Prompter):
    """Replies to prompts in order; fails the test on an unexpected prompt."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.asked = []

    def _next(self, kind, prompt):
        if not self.answers:
            raise AssertionError(f"unexpected {kind} prompt: {prompt}")
        return self.answers.pop(0)

    def select(self, prompt, choices):
        self.asked.append(('select', prompt, tuple(c.key for c in choices)))
        answer = self._next('select', prompt)
        return answer(prompt, choices) if callable(answer) else answer

    def input(self, prompt, default):
        self.asked.append(('input', prompt, default))
        answer = self._next('input', prompt)
        return answer(default) if callable(answer) else answer


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def notices():
    return []


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_engine(runner, notices, sleeps):
    """Return a factory building an engine around the fake runner."""
    def _make(prompter, state=None, store=None, dry_run_hooks=False, remote=None, progress=None):
        git = GitCommands(runner)
        generator = CommandDraftGenerator(runner, ['lumen', 'draft'])
        machine = CommitMachine(dry_run_hooks=dry_run_hooks)
        return WorkflowEngine(
            git,
            generator,
            prompter,
            state=state,
            store=store or MemoryStateStore(),
            machine=machine,
            remote=remote,
            notify=lambda message, level: notices.append((message, level)),
            sleep=sleeps.append,
            progress=progress or _no_progress,
        )
    return _make
