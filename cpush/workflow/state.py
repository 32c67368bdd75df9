"""Workflow State - The cross-invocation recovery channel."""

import json
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

STATE_FILENAME = "cpush-state.json"


@dataclass
class WorkflowState:
    """Message of the outstanding or failed commit attempt, if any.

    should_push only means something while last_message is set; the two
    are always cleared together.
    """
    last_message: Optional[str] = None
    should_push: bool = False

    @property
    def has_preserved(self) -> bool:
        return self.last_message is not None

    def preserve(self, message: str, should_push: bool) -> None:
        self.last_message = message
        self.should_push = should_push

    def clear(self) -> None:
        self.last_message = None
        self.should_push = False

    def to_dict(self) -> dict:
        return {"last_message": self.last_message, "should_push": self.should_push}

    @classmethod
    def from_dict(cls, data: dict) -> 'WorkflowState':
        message = data.get("last_message")
        if not isinstance(message, str) or not message:
            return cls()
        return cls(last_message=message, should_push=data.get("should_push") is True)


class StateStore(ABC):
    """Where a WorkflowState lives between runs."""

    @abstractmethod
    def load(self) -> WorkflowState:
        pass

    @abstractmethod
    def save(self, state: WorkflowState) -> None:
        pass


class MemoryStateStore(StateStore):
    """Keeps state for the lifetime of the process."""

    def __init__(self, state: Optional[WorkflowState] = None):
        self._data = (state or WorkflowState()).to_dict()

    def load(self) -> WorkflowState:
        return WorkflowState.from_dict(self._data)

    def save(self, state: WorkflowState) -> None:
        self._data = state.to_dict()


class FileStateStore(StateStore):
    """JSON record inside the repository's .git directory."""

    def __init__(self, path: Path):
        self.path = path

    @classmethod
    def for_git_dir(cls, git_dir: Path) -> 'FileStateStore':
        return cls(git_dir / STATE_FILENAME)

    def load(self) -> WorkflowState:
        if not self.path.exists():
            return WorkflowState()
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            print(f"Warning: Could not read {self.path}: {e}", file=sys.stderr)
            return WorkflowState()
        return WorkflowState.from_dict(data) if isinstance(data, dict) else WorkflowState()

    def save(self, state: WorkflowState) -> None:
        """Write state, or remove the record once cleared.

        Write failures only warn; the in-memory state stays authoritative
        for the current run.
        """
        try:
            if not state.has_preserved:
                self.path.unlink(missing_ok=True)
                return
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(state.to_dict(), f, indent=2)
        except OSError as e:
            print(f"Warning: Could not write {self.path}: {e}", file=sys.stderr)
