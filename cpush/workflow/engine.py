"""Workflow Engine - Performs the machine's actions and feeds results back."""

import contextlib
import time
from typing import Callable, Optional

from cpush.draft import DraftGenerator, DraftError
from cpush.git import GitCommands
from cpush.output import Level, notify as print_notice
from cpush.workflow.machine import (
    CommitMachine, WorkflowError, Outcome, Snapshot, Step,
    Start, StagedChecked, Selected, Edited, CommandDone, DraftReady, DraftFailed,
    CheckStaged, Select, Input, StageAll, GenerateDraft, RunHooks, Commit, Push, Restart, Finish,
)
from cpush.workflow.prompts import Prompter
from cpush.workflow.state import WorkflowState, StateStore, MemoryStateStore


def _no_progress(label: str):
    return contextlib.nullcontext()


class WorkflowEngine:
    """Runs the commit-and-push workflow against real or fake collaborators.

    Args:
        git: GitCommands for the working tree
        generator: source of draft messages
        prompter: user interaction
        state: recovery state; loaded from `store` when omitted
        store: where state changes are written
        machine: transition table; built from defaults when omitted
        remote: push target, None for the upstream
        notify: callable(message, level) for status lines
        sleep: callable(seconds) used for restart delays
        progress: callable(label) returning a context manager shown while waiting
    """

    def __init__(self, git: GitCommands, generator: DraftGenerator, prompter: Prompter,
                 state: Optional[WorkflowState] = None, store: Optional[StateStore] = None,
                 machine: Optional[CommitMachine] = None, remote: Optional[str] = None,
                 notify: Callable[[str, Level], None] = print_notice,
                 sleep: Callable[[float], None] = time.sleep,
                 progress: Callable = _no_progress):
        self.git = git
        self.generator = generator
        self.prompter = prompter
        self.store = store or MemoryStateStore()
        self.state = state if state is not None else self.store.load()
        self.machine = machine or CommitMachine(generator_name=generator.name)
        self.remote = remote
        self.notify = notify
        self.sleep = sleep
        self.progress = progress
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    def run(self) -> Outcome:
        """Run one workflow to a terminal outcome."""
        if self._busy:
            self.notify("commit workflow already running", Level.WARN)
            return Outcome.BUSY

        self._busy = True
        try:
            return self._drive()
        finally:
            self._busy = False

    def _drive(self) -> Outcome:
        snapshot = Snapshot(last_message=self.state.last_message, should_push=self.state.should_push)
        event = Start()
        while True:
            step: Step = self.machine.step(snapshot, event)
            snapshot = step.snapshot
            self._sync_state(snapshot)
            for notice in step.notices:
                self.notify(notice.message, notice.level)
            if isinstance(step.action, Finish):
                return step.action.outcome
            event = self._perform(step.action)

    def _sync_state(self, snapshot: Snapshot) -> None:
        if (snapshot.last_message, snapshot.should_push) == (self.state.last_message, self.state.should_push):
            return
        if snapshot.last_message is None:
            self.state.clear()
        else:
            self.state.preserve(snapshot.last_message, snapshot.should_push)
        self.store.save(self.state)

    def _perform(self, action):
        if isinstance(action, CheckStaged):
            return StagedChecked(self.git.has_staged_changes())
        if isinstance(action, Select):
            return Selected(self.prompter.select(action.prompt, action.choices))
        if isinstance(action, Input):
            return Edited(self.prompter.input(action.prompt, action.default))
        if isinstance(action, StageAll):
            return CommandDone(self.git.stage_all())
        if isinstance(action, GenerateDraft):
            with self.progress("generating commit message..."):
                try:
                    return DraftReady(self.generator.generate())
                except DraftError as e:
                    return DraftFailed(str(e))
        if isinstance(action, RunHooks):
            return CommandDone(self.git.run_precommit_hooks())
        if isinstance(action, Commit):
            return CommandDone(self.git.commit(action.message))
        if isinstance(action, Push):
            # No spinner: git may prompt for credentials on the terminal
            return CommandDone(self.git.push(self.remote))
        if isinstance(action, Restart):
            self.sleep(action.delay_ms / 1000)
            return Start()
        raise WorkflowError(f"Unknown action: {action!r}")
