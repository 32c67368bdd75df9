"""Git Operations Package"""

from cpush.git.runner import CommandRunner, ProcessResult, COMMAND_NOT_FOUND, CANNOT_EXECUTE
from cpush.git.commands import GitCommands, GitError

__all__ = [
    "CommandRunner",
    "ProcessResult",
    "COMMAND_NOT_FOUND",
    "CANNOT_EXECUTE",
    "GitCommands",
    "GitError",
]
