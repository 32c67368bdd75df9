"""Process Runner - Thin adapter over subprocess for external commands."""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

COMMAND_NOT_FOUND = 127
CANNOT_EXECUTE = 126


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of one external command invocation."""
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class CommandRunner:
    """Runs external commands, either captured or attached to the terminal."""

    def run(self, args: Sequence[str], cwd: Optional[Path] = None) -> ProcessResult:
        """Run a command and capture its output as text."""
        try:
            result = subprocess.run(
                list(args),
                cwd=cwd,
                capture_output=True,
                text=True,
                encoding='utf-8',
                errors='replace',
            )
        except FileNotFoundError:
            return ProcessResult(COMMAND_NOT_FOUND, "", f"{args[0]}: command not found")
        except OSError as e:
            return ProcessResult(CANNOT_EXECUTE, "", f"{args[0]}: {e}")
        return ProcessResult(result.returncode, result.stdout or "", result.stderr or "")

    def run_interactive(self, args: Sequence[str], cwd: Optional[Path] = None) -> ProcessResult:
        """Run a command in the foreground with the terminal attached.

        Used where the child may prompt the user (gpg pinentry, credentials),
        so only the exit code is kept.
        """
        try:
            result = subprocess.run(list(args), cwd=cwd)
        except FileNotFoundError:
            return ProcessResult(COMMAND_NOT_FOUND, "", f"{args[0]}: command not found")
        except OSError as e:
            return ProcessResult(CANNOT_EXECUTE, "", f"{args[0]}: {e}")
        return ProcessResult(result.returncode)
