"""Draft Message Generation Package"""

from cpush.draft.base import DraftGenerator, DraftError
from cpush.draft.command import CommandDraftGenerator

__all__ = [
    "DraftGenerator",
    "DraftError",
    "CommandDraftGenerator",
]
