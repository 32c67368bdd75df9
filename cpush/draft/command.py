"""Draft generation through an external CLI such as `lumen draft`."""

from pathlib import Path
from typing import Optional, Sequence

from cpush import DEFAULT_GENERATOR
from cpush.draft.base import DraftGenerator, DraftError
from cpush.git.runner import CommandRunner


class CommandDraftGenerator(DraftGenerator):
    """Runs a message-generation command and uses its stdout as the draft."""

    def __init__(self, runner: Optional[CommandRunner] = None,
                 command: Optional[Sequence[str]] = None, cwd: Optional[Path] = None):
        self.runner = runner or CommandRunner()
        self.command = list(command or DEFAULT_GENERATOR)
        self.cwd = cwd

    @property
    def name(self) -> str:
        return ' '.join(self.command)

    def generate(self) -> str:
        result = self.runner.run(self.command, cwd=self.cwd)
        if not result.ok:
            raise DraftError(f"{self.name} failed => code={result.exit_code} stderr={result.stderr!r}")

        message = result.stdout.strip()
        if not message:
            raise DraftError(f"{self.name} returned empty message")
        return message
