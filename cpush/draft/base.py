"""Draft Generator Base Classes"""

from abc import ABC, abstractmethod


class DraftError(Exception):
    """Raised when no usable draft message could be produced."""
    pass


class DraftGenerator(ABC):
    """Abstract source of draft commit messages."""

    @abstractmethod
    def generate(self) -> str:
        """Return a non-empty, trimmed draft message or raise DraftError."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass
