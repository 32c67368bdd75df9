"""CLI Utility Functions"""

import os
import subprocess
import sys
import tempfile
from typing import Optional, Sequence

from cpush.output import bold, dim, info, display_message, print_warning
from cpush.workflow import Choice, Prompter


def edit_message(message: str) -> str | None:
    """Open message in user's editor. Returns edited text or None on failure."""
    editor = os.environ.get('VISUAL') or os.environ.get('EDITOR')
    if not editor:
        editor = 'notepad' if sys.platform == 'win32' else 'vi'

    tmp = tempfile.NamedTemporaryFile(mode='w', suffix='.gitcommit', delete=False, encoding='utf-8')
    try:
        tmp.write(message)
        tmp.close()
        subprocess.run([*editor.split(), tmp.name], check=True)
        with open(tmp.name, 'r', encoding='utf-8') as f:
            return f.read().strip()
    except (subprocess.CalledProcessError, OSError):
        return None
    finally:
        try:
            os.unlink(tmp.name)
        except OSError as e:
            print(f"Warning: Could not delete temp file {tmp.name}: {e}", file=sys.stderr)


def display_choices(prompt: str, choices: Sequence[Choice]) -> None:
    print(f"\n{bold(prompt)}")
    for i, choice in enumerate(choices, 1):
        print(f"  {info(f'[{i}]')} {choice.label}")
    print()


class TerminalPrompter(Prompter):
    """Numbered menus and an $EDITOR-backed message editor."""

    def select(self, prompt: str, choices: Sequence[Choice]) -> Optional[str]:
        display_choices(prompt, choices)
        while True:
            try:
                answer = input(f"Select [1-{len(choices)}] or (q)uit: ").strip().lower()
            except (KeyboardInterrupt, EOFError):
                print()
                return None
            if answer == 'q':
                return None
            if answer.isdigit() and 1 <= int(answer) <= len(choices):
                return choices[int(answer) - 1].key
            print(f"Enter 1-{len(choices)} or q")

    def input(self, prompt: str, default: str) -> Optional[str]:
        print(f"\n{bold(prompt)}")
        message = default
        while True:
            display_message(message)
            try:
                action = input(f"\n{dim('(e)dit, Enter to accept, or (q)uit: ')}").strip().lower()
            except (KeyboardInterrupt, EOFError):
                print()
                return None
            if action == 'q':
                return None
            if action == '':
                return message
            if action == 'e':
                edited = edit_message(message)
                if edited is None:
                    print_warning("editor failed => keeping previous message")
                    continue
                message = edited
                if not message:
                    return message
