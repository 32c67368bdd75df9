"""Git Commands - The git invocations the commit workflow depends on."""

from pathlib import Path
from typing import Optional

from cpush.git.runner import CommandRunner, ProcessResult


class GitError(Exception):
    """Raised when the repository cannot be used at all."""
    pass


class GitCommands:
    """Git operations for one working tree."""

    def __init__(self, runner: Optional[CommandRunner] = None, cwd: Optional[Path] = None):
        self.runner = runner or CommandRunner()
        self.cwd = cwd

    def _git(self, *args: str) -> ProcessResult:
        return self.runner.run(['git', *args], cwd=self.cwd)

    def verify(self) -> None:
        """Fail fast if git is missing or cwd is not inside a repository."""
        if not self._git('--version').ok:
            raise GitError("Git is not installed or not in PATH")
        if not self._git('rev-parse', '--git-dir').ok:
            raise GitError("Not inside a git repository")

    def git_dir(self) -> Path:
        """Absolute path of the repository's .git directory."""
        result = self._git('rev-parse', '--absolute-git-dir')
        if not result.ok or not result.stdout.strip():
            raise GitError(f"Could not locate .git directory: {result.stderr.strip()}")
        return Path(result.stdout.strip())

    def has_staged_changes(self) -> bool:
        # --quiet exits nonzero when the index differs from HEAD
        return not self._git('diff', '--cached', '--quiet').ok

    def stage_all(self) -> ProcessResult:
        return self._git('add', '-A')

    def run_precommit_hooks(self) -> ProcessResult:
        """Run the pre-commit hook without committing."""
        return self._git('hook', 'run', 'pre-commit')

    def commit(self, message: str) -> ProcessResult:
        return self.runner.run_interactive(['git', 'commit', '-m', message], cwd=self.cwd)

    def push(self, remote: Optional[str] = None) -> ProcessResult:
        return self._git('push', remote) if remote else self._git('push')
