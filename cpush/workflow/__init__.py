"""Commit Workflow Package"""

from cpush.workflow.state import WorkflowState, StateStore, MemoryStateStore, FileStateStore
from cpush.workflow.machine import CommitMachine, WorkflowError, Outcome, Phase, Snapshot, Choice
from cpush.workflow.prompts import Prompter
from cpush.workflow.engine import WorkflowEngine

__all__ = [
    "WorkflowState",
    "StateStore",
    "MemoryStateStore",
    "FileStateStore",
    "CommitMachine",
    "WorkflowError",
    "Outcome",
    "Phase",
    "Snapshot",
    "Choice",
    "Prompter",
    "WorkflowEngine",
]
