"""CLI Commands"""

import os
import shlex
import sys

from cpush.config import Config, load_config, save_config, get_config_path
from cpush.output import bold, dim, info, display_message, print_success, print_info
from cpush.workflow import StateStore


def display_config() -> int:
    """Display current configuration."""
    config = load_config()
    config_path = get_config_path()

    print(f"\n{bold('Current Configuration')}\n")

    if config_path:
        print(f"  {dim('Loaded from:')} {config_path}")
    else:
        print(f"  {dim('Loaded from:')} defaults (no .cpushrc found)")

    env_generator = os.environ.get('CPUSH_GENERATOR')
    env_remote = os.environ.get('CPUSH_REMOTE')
    if env_generator or env_remote:
        print(f"  {dim('Environment overrides:')}")
        if env_generator:
            print(f"    CPUSH_GENERATOR={env_generator}")
        if env_remote:
            print(f"    CPUSH_REMOTE={env_remote}")

    print()
    print(f"  {bold('Settings:')}")
    print(f"    generator:           {info(shlex.join(config.generator))}")
    print(f"    remote:              {info(config.remote or 'upstream')}")
    print(f"    dry_run_hooks:       {info(str(config.dry_run_hooks).lower())}")
    print(f"    persist_state:       {info(str(config.persist_state).lower())}")
    print(f"    restart_delay_ms:    {info(str(config.restart_delay_ms))}")
    print(f"    regenerate_delay_ms: {info(str(config.regenerate_delay_ms))}")

    print(f"\n  {dim('Config locations:')}")
    print(f"    Local:  .cpushrc (in current directory)")
    print(f"    Global: ~/.cpushrc")
    print(f"\n  {dim('Run')} cpush --setup {dim('to configure')}\n")

    return 0


def _ask_yes_no(question: str, default: bool) -> bool:
    hint = "[Y/n]" if default else "[y/N]"
    answer = input(f"{question} {hint}: ").strip().lower()
    if not answer:
        return default
    return answer.startswith('y')


def run_setup() -> int:
    """Quick setup wizard."""
    display_config()
    print(f"{bold('Setup Wizard')}\n")

    defaults = Config()
    generator = input(f"Draft command (Enter for '{shlex.join(defaults.generator)}'): ").strip()
    remote = input("Push remote (Enter for the branch upstream): ").strip() or None
    dry_run_hooks = _ask_yes_no("Dry-run pre-commit hooks before committing?", False)
    persist_state = _ask_yes_no("Keep failed commit messages between runs?", True)

    config = Config(
        generator=shlex.split(generator) if generator else defaults.generator,
        remote=remote,
        dry_run_hooks=dry_run_hooks,
        persist_state=persist_state,
    )
    path = save_config(config, global_config=True)

    print_success(f"Saved to {path}")
    return 0


def run_install_completion() -> int:
    """Install shell tab completion."""
    shell = os.environ.get('SHELL', '')

    print(f"\n{bold('Tab Completion Setup')}\n")

    line = 'eval "$(register-python-argcomplete cpush)"'
    if 'zsh' in shell or 'bash' in shell:
        rc_file = os.path.expanduser('~/.zshrc' if 'zsh' in shell else '~/.bashrc')
        print(f"Add this line to {dim(rc_file)}:\n")
        print(f"  {line}\n")
        print(f"Then run: {dim('source ' + rc_file)}")
    elif sys.platform == 'win32':
        print("For PowerShell, run:\n")
        print("  register-python-argcomplete --shell powershell cpush | Out-String | Invoke-Expression")
    else:
        print("Run one of these based on your shell:\n")
        print(f"  {dim('# Bash/Zsh')}")
        print(f"  {line}\n")
        print(f"  {dim('# Fish')}")
        print("  register-python-argcomplete --shell fish cpush | source")

    print(f"\n{dim('After setup, press TAB to autocomplete flags.')}")
    return 0


def show_status(store: StateStore) -> int:
    """Show the message preserved from a failed commit, if any."""
    state = store.load()
    if not state.has_preserved:
        print_info("no preserved commit message")
        return 0

    print(bold("Preserved commit message:"))
    display_message(state.last_message)
    print(dim(f"  push after commit: {'yes' if state.should_push else 'no'}"))
    return 0


def clear_state(store: StateStore) -> int:
    """Discard the preserved message."""
    state = store.load()
    if not state.has_preserved:
        print_info("no preserved commit message")
        return 0
    state.clear()
    store.save(state)
    print_success("preserved commit message discarded")
    return 0
