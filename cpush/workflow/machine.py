"""Commit Machine - Pure transitions of the commit-and-push workflow.

`CommitMachine.step()` maps a snapshot and an event to the next snapshot,
the action the engine must perform, and the notifications to show. It does
no I/O; the engine feeds the result of each action back in as an event.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from cpush import (
    EXIT_SUCCESS, EXIT_GIT_PRECOMMIT_FAIL, EXIT_GIT_ERROR,
    RESTART_DELAY_MS, REGENERATE_DELAY_MS, DEFAULT_GENERATOR,
)
from cpush.git.runner import ProcessResult
from cpush.output import (
    Level, ICON_STAGE, ICON_CANCEL, ICON_PUSH, ICON_WARNING, ICON_COMMIT, ICON_RETRY,
)


class WorkflowError(Exception):
    """Raised when the machine receives an event its phase cannot handle."""
    pass


class Phase(Enum):
    IDLE = "idle"
    CHECK_STAGED = "check_staged"
    STAGE_PROMPT = "stage_prompt"
    STAGING = "staging"
    VERIFY_STAGED = "verify_staged"
    RESTARTING = "restarting"
    RESUME_DECISION = "resume_decision"
    GENERATE = "generate"
    EDIT = "edit"
    CHOOSE_ACTION = "choose_action"
    HOOKS = "hooks"
    COMMITTING = "committing"
    FAILURE_RECOVERY = "failure_recovery"
    RESTAGE_PROMPT = "restage_prompt"
    RESTAGING = "restaging"
    PUSHING = "pushing"
    DONE = "done"


class Outcome(Enum):
    COMMITTED = "committed"
    PUSHED = "pushed"
    PUSH_FAILED = "push_failed"
    CANCELED = "canceled"
    ABORTED = "aborted"
    NOTHING_TO_COMMIT = "nothing_to_commit"
    FAILED = "failed"
    BUSY = "busy"


# Choice keys
YES = "yes"
NO = "no"
REUSE = "reuse"
REGENERATE = "regenerate"
COMMIT_ONLY = "commit"
COMMIT_AND_PUSH = "commit_push"
RETRY = "retry"
FIX = "fix"
CANCEL = "cancel"


@dataclass(frozen=True)
class Snapshot:
    """Machine state. last_message/should_push mirror WorkflowState."""
    phase: Phase = Phase.IDLE
    last_message: Optional[str] = None
    should_push: bool = False
    message: Optional[str] = None  # message being edited or committed


@dataclass(frozen=True)
class Choice:
    key: str
    label: str


@dataclass(frozen=True)
class Notice:
    message: str
    level: Level = Level.INFO


# Events

@dataclass(frozen=True)
class Start:
    pass


@dataclass(frozen=True)
class StagedChecked:
    staged: bool


@dataclass(frozen=True)
class Selected:
    choice: Optional[str]  # None when the prompt was dismissed


@dataclass(frozen=True)
class Edited:
    text: Optional[str]


@dataclass(frozen=True)
class CommandDone:
    result: ProcessResult


@dataclass(frozen=True)
class DraftReady:
    message: str


@dataclass(frozen=True)
class DraftFailed:
    reason: str


# Actions

@dataclass(frozen=True)
class CheckStaged:
    pass


@dataclass(frozen=True)
class Select:
    prompt: str
    choices: tuple[Choice, ...]


@dataclass(frozen=True)
class Input:
    prompt: str
    default: str


@dataclass(frozen=True)
class StageAll:
    pass


@dataclass(frozen=True)
class GenerateDraft:
    pass


@dataclass(frozen=True)
class RunHooks:
    pass


@dataclass(frozen=True)
class Commit:
    message: str


@dataclass(frozen=True)
class Push:
    pass


@dataclass(frozen=True)
class Restart:
    delay_ms: int


@dataclass(frozen=True)
class Finish:
    outcome: Outcome


@dataclass(frozen=True)
class Step:
    snapshot: Snapshot
    action: object
    notices: tuple[Notice, ...] = ()


STAGE_CHOICES = (
    Choice(YES, f"{ICON_STAGE} stage all"),
    Choice(NO, f"{ICON_CANCEL} cancel"),
)

ACTION_CHOICES = (
    Choice(COMMIT_ONLY, f"{ICON_COMMIT} commit only"),
    Choice(COMMIT_AND_PUSH, f"{ICON_PUSH} commit and push"),
    Choice(CANCEL, f"{ICON_CANCEL} cancel"),
)

RECOVERY_CHOICES = (
    Choice(RETRY, f"{ICON_RETRY} retry with same message"),
    Choice(FIX, f"{ICON_STAGE} fix issues and retry"),
    Choice(CANCEL, f"{ICON_CANCEL} cancel"),
)

RESTAGE_CHOICES = (
    Choice(YES, "Yes"),
    Choice(NO, "No"),
)


def _git_add_failed(result: ProcessResult) -> Notice:
    return Notice(f"git add failed => code={result.exit_code} stderr={result.stderr!r}", Level.ERROR)


class CommitMachine:
    """Transition table for one commit-and-push run."""

    def __init__(self, dry_run_hooks: bool = False,
                 restart_delay_ms: int = RESTART_DELAY_MS,
                 regenerate_delay_ms: int = REGENERATE_DELAY_MS,
                 generator_name: str = ' '.join(DEFAULT_GENERATOR)):
        self.dry_run_hooks = dry_run_hooks
        self.restart_delay_ms = restart_delay_ms
        self.regenerate_delay_ms = regenerate_delay_ms
        self.generator_name = generator_name
        self._handlers = {
            Phase.IDLE: self._start,
            Phase.RESTARTING: self._start,
            Phase.DONE: self._start,
            Phase.CHECK_STAGED: self._check_staged,
            Phase.STAGE_PROMPT: self._stage_prompt,
            Phase.STAGING: self._staging,
            Phase.VERIFY_STAGED: self._verify_staged,
            Phase.RESUME_DECISION: self._resume_decision,
            Phase.GENERATE: self._generate,
            Phase.EDIT: self._edit,
            Phase.CHOOSE_ACTION: self._choose_action,
            Phase.HOOKS: self._hooks,
            Phase.COMMITTING: self._committing,
            Phase.FAILURE_RECOVERY: self._failure_recovery,
            Phase.RESTAGE_PROMPT: self._restage_prompt,
            Phase.RESTAGING: self._restaging,
            Phase.PUSHING: self._pushing,
        }

    def step(self, snapshot: Snapshot, event) -> Step:
        return self._handlers[snapshot.phase](snapshot, event)

    @staticmethod
    def _expect(snapshot: Snapshot, event, event_type: type) -> None:
        if not isinstance(event, event_type):
            raise WorkflowError(
                f"{type(event).__name__} is not valid in phase {snapshot.phase.value}"
            )

    @staticmethod
    def _finish(snapshot: Snapshot, outcome: Outcome, *notices: Notice) -> Step:
        return Step(replace(snapshot, phase=Phase.DONE, message=None), Finish(outcome), notices)

    def _canceled(self, snapshot: Snapshot) -> Step:
        return self._finish(snapshot, Outcome.CANCELED, Notice("operation canceled"))

    def _enter_commit(self, snapshot: Snapshot, message: str, should_push: bool,
                      *notices: Notice) -> Step:
        # Preserved before the attempt so a failed or interrupted commit can be resumed
        snapshot = replace(snapshot, last_message=message, should_push=should_push, message=message)
        if self.dry_run_hooks:
            return Step(
                replace(snapshot, phase=Phase.HOOKS),
                RunHooks(),
                notices + (Notice("running pre-commit hooks (dry-run)..."),),
            )
        return Step(replace(snapshot, phase=Phase.COMMITTING), Commit(message), notices)

    def _offer_recovery(self, snapshot: Snapshot, *notices: Notice) -> Step:
        return Step(
            replace(snapshot, phase=Phase.FAILURE_RECOVERY),
            Select("commit failed => choose action:", RECOVERY_CHOICES),
            notices,
        )

    def _start(self, snapshot, event):
        self._expect(snapshot, event, Start)
        return Step(replace(snapshot, phase=Phase.CHECK_STAGED, message=None), CheckStaged())

    def _check_staged(self, snapshot, event):
        self._expect(snapshot, event, StagedChecked)
        if not event.staged:
            return Step(
                replace(snapshot, phase=Phase.STAGE_PROMPT),
                Select("no staged changes => stage all?", STAGE_CHOICES),
            )
        if snapshot.last_message is not None:
            choices = (
                Choice(REUSE, f"{ICON_RETRY} reuse: {snapshot.last_message!r}"),
                Choice(REGENERATE, f"{ICON_COMMIT} generate new (costs resources)"),
                Choice(CANCEL, f"{ICON_CANCEL} cancel"),
            )
            return Step(
                replace(snapshot, phase=Phase.RESUME_DECISION),
                Select("previous commit failed => reuse message?", choices),
            )
        return Step(
            replace(snapshot, phase=Phase.GENERATE),
            GenerateDraft(),
            (Notice(f"generating commit message with {self.generator_name}..."),),
        )

    def _stage_prompt(self, snapshot, event):
        self._expect(snapshot, event, Selected)
        if event.choice != YES:
            return self._canceled(snapshot)
        return Step(replace(snapshot, phase=Phase.STAGING), StageAll())

    def _staging(self, snapshot, event):
        self._expect(snapshot, event, CommandDone)
        if not event.result.ok:
            return self._finish(snapshot, Outcome.FAILED, _git_add_failed(event.result))
        return Step(replace(snapshot, phase=Phase.VERIFY_STAGED), CheckStaged())

    def _verify_staged(self, snapshot, event):
        self._expect(snapshot, event, StagedChecked)
        if not event.staged:
            return self._finish(
                snapshot, Outcome.NOTHING_TO_COMMIT,
                Notice("no changes to commit after staging", Level.WARN),
            )
        return Step(
            replace(snapshot, phase=Phase.RESTARTING),
            Restart(self.restart_delay_ms),
            (Notice("changes staged successfully"),),
        )

    def _resume_decision(self, snapshot, event):
        self._expect(snapshot, event, Selected)
        if event.choice == REUSE:
            return Step(
                replace(snapshot, phase=Phase.EDIT, message=snapshot.last_message),
                Input("edit commit message:", snapshot.last_message),
            )
        if event.choice == REGENERATE:
            return Step(
                replace(snapshot, phase=Phase.RESTARTING, last_message=None, should_push=False),
                Restart(self.regenerate_delay_ms),
            )
        return self._canceled(snapshot)

    def _generate(self, snapshot, event):
        if isinstance(event, DraftFailed):
            return self._finish(
                snapshot, Outcome.FAILED, Notice(f"{ICON_WARNING} {event.reason}", Level.ERROR)
            )
        self._expect(snapshot, event, DraftReady)
        return Step(
            replace(snapshot, phase=Phase.EDIT, message=event.message),
            Input("edit commit message:", event.message),
        )

    def _edit(self, snapshot, event):
        self._expect(snapshot, event, Edited)
        if event.text is None or not event.text.strip():
            return self._finish(
                snapshot, Outcome.ABORTED,
                Notice(f"{ICON_WARNING} commit aborted => empty message", Level.WARN),
            )
        return Step(
            replace(snapshot, phase=Phase.CHOOSE_ACTION, message=event.text),
            Select("choose action:", ACTION_CHOICES),
        )

    def _choose_action(self, snapshot, event):
        self._expect(snapshot, event, Selected)
        if event.choice == COMMIT_ONLY:
            return self._enter_commit(snapshot, snapshot.message, False)
        if event.choice == COMMIT_AND_PUSH:
            return self._enter_commit(snapshot, snapshot.message, True)
        return self._finish(snapshot, Outcome.CANCELED, Notice(f"{ICON_CANCEL} operation canceled"))

    def _hooks(self, snapshot, event):
        self._expect(snapshot, event, CommandDone)
        if not event.result.ok:
            stderr = event.result.stderr.strip()
            return self._offer_recovery(
                snapshot,
                Notice(f"{ICON_WARNING} pre-commit hooks failed => {stderr or 'check output'}", Level.ERROR),
            )
        return Step(
            replace(snapshot, phase=Phase.COMMITTING),
            Commit(snapshot.last_message),
            (Notice("pre-commit hooks passed"),),
        )

    def _committing(self, snapshot, event):
        self._expect(snapshot, event, CommandDone)
        code = event.result.exit_code

        if code == EXIT_SUCCESS:
            done = Notice(f"{ICON_COMMIT} commit successful")
            cleared = replace(snapshot, last_message=None, should_push=False, message=None)
            if snapshot.should_push:
                return Step(replace(cleared, phase=Phase.PUSHING), Push(), (done, Notice("pushing...")))
            return self._finish(cleared, Outcome.COMMITTED, done)

        if code in (EXIT_GIT_PRECOMMIT_FAIL, EXIT_GIT_ERROR):
            err_type = "pre-commit hook" if code == EXIT_GIT_PRECOMMIT_FAIL else "git commit (exit 128)"
            return self._offer_recovery(
                snapshot,
                Notice(f"{ICON_WARNING} {err_type} failed => message preserved", Level.ERROR),
            )

        return self._finish(
            snapshot, Outcome.FAILED,
            Notice(f"{ICON_WARNING} commit failed => code={code}", Level.ERROR),
        )

    def _failure_recovery(self, snapshot, event):
        self._expect(snapshot, event, Selected)
        if event.choice == RETRY:
            return self._enter_commit(snapshot, snapshot.last_message, snapshot.should_push)
        if event.choice == FIX:
            return Step(
                replace(snapshot, phase=Phase.RESTAGE_PROMPT),
                Select("re-stage all files after fixes?", RESTAGE_CHOICES),
                (Notice(f"fix issues, then use message: {snapshot.last_message!r}"),),
            )
        # State stays preserved so the next run can offer to reuse it
        return self._finish(
            snapshot, Outcome.CANCELED,
            Notice(f"{ICON_CANCEL} commit canceled => message: {snapshot.last_message!r}"),
        )

    def _restage_prompt(self, snapshot, event):
        self._expect(snapshot, event, Selected)
        if event.choice == YES:
            return Step(replace(snapshot, phase=Phase.RESTAGING), StageAll())
        return self._enter_commit(snapshot, snapshot.last_message, snapshot.should_push)

    def _restaging(self, snapshot, event):
        self._expect(snapshot, event, CommandDone)
        if not event.result.ok:
            return self._finish(snapshot, Outcome.FAILED, _git_add_failed(event.result))
        return self._enter_commit(snapshot, snapshot.last_message, snapshot.should_push)

    def _pushing(self, snapshot, event):
        self._expect(snapshot, event, CommandDone)
        result = event.result
        if result.ok:
            return self._finish(snapshot, Outcome.PUSHED, Notice(f"{ICON_PUSH} push successful"))
        return self._finish(
            snapshot, Outcome.PUSH_FAILED,
            Notice(f"{ICON_WARNING} push failed => code={result.exit_code} stderr={result.stderr!r}", Level.ERROR),
        )
