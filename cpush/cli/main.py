"""CLI Main Entry Point"""

import os
import shlex
import sys

from cpush.config import Config, load_config
from cpush.draft import CommandDraftGenerator
from cpush.git import CommandRunner, GitCommands, GitError
from cpush.output import Spinner, dim, print_error
from cpush.workflow import (
    CommitMachine, FileStateStore, MemoryStateStore, Outcome, StateStore, WorkflowEngine,
)

from cpush.cli.args import parse_args
from cpush.cli.commands import display_config, run_setup, run_install_completion, show_status, clear_state
from cpush.cli.utils import TerminalPrompter

EXIT_CODES = {
    Outcome.COMMITTED: 0,
    Outcome.PUSHED: 0,
    Outcome.CANCELED: 0,
    Outcome.ABORTED: 0,
    Outcome.NOTHING_TO_COMMIT: 1,
    Outcome.FAILED: 1,
    Outcome.PUSH_FAILED: 1,
    Outcome.BUSY: 1,
}


def _handle_subcommands(args):
    """Handle subcommands that don't need a repository.

    Returns:
        tuple: (exit_code, should_exit) - exit_code if should_exit is True
    """
    if args.install_completion:
        return run_install_completion(), True
    if args.display_config:
        return display_config(), True
    if args.setup:
        return run_setup(), True
    return 0, False


def _apply_overrides(args, config: Config) -> Config:
    """Merge CLI args and environment into config.

    Precedence: CLI args > environment variables > config file
    """
    generator = args.generator or os.environ.get('CPUSH_GENERATOR')
    if generator:
        config.generator = shlex.split(generator)
    config.remote = args.remote or os.environ.get('CPUSH_REMOTE') or config.remote
    if args.hooks:
        config.dry_run_hooks = True
    if args.no_persist:
        config.persist_state = False
    return config


def _open_store(git: GitCommands, config: Config) -> StateStore:
    if not config.persist_state:
        return MemoryStateStore()
    return FileStateStore.for_git_dir(git.git_dir())


def build_engine(git: GitCommands, runner: CommandRunner, config: Config, store: StateStore) -> WorkflowEngine:
    generator = CommandDraftGenerator(runner, config.generator)
    machine = CommitMachine(
        dry_run_hooks=config.dry_run_hooks,
        restart_delay_ms=config.restart_delay_ms,
        regenerate_delay_ms=config.regenerate_delay_ms,
        generator_name=generator.name,
    )
    return WorkflowEngine(
        git,
        generator,
        TerminalPrompter(),
        store=store,
        machine=machine,
        remote=config.remote,
        progress=Spinner,
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)

    exit_code, should_exit = _handle_subcommands(args)
    if should_exit:
        return exit_code

    try:
        config = _apply_overrides(args, load_config())
    except ValueError as e:
        print_error(f"Invalid generator command: {e}")
        return 1

    runner = CommandRunner()
    git = GitCommands(runner)
    try:
        git.verify()
        store = _open_store(git, config)
    except GitError as e:
        print_error(str(e))
        return 1

    if args.status:
        return show_status(store)
    if args.clear:
        return clear_state(store)

    engine = build_engine(git, runner, config, store)
    try:
        outcome = engine.run()
    except KeyboardInterrupt:
        print()
        print(dim("Cancelled."))
        return 130
    return EXIT_CODES[outcome]


def run() -> None:
    sys.exit(main())
