"""Prompter interface - how the engine asks the user things."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from cpush.workflow.machine import Choice


class Prompter(ABC):

    @abstractmethod
    def select(self, prompt: str, choices: Sequence[Choice]) -> Optional[str]:
        """Return the key of the chosen option, or None if dismissed."""
        pass

    @abstractmethod
    def input(self, prompt: str, default: str) -> Optional[str]:
        """Return the edited text, or None if dismissed."""
        pass
