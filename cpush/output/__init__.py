"""Terminal Output Formatting Package"""

import re
import sys
import os
import threading
from enum import IntEnum


class Colors:
    """ANSI escape codes for terminal colors."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    CYAN = '\033[36m'
    MAGENTA = '\033[35m'


class Level(IntEnum):
    """Severity of a workflow notification."""
    INFO = 0
    WARN = 1
    ERROR = 2


def _supports_color() -> bool:
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    if not hasattr(sys.stdout, 'isatty') or not sys.stdout.isatty():
        return False
    if sys.platform == 'win32':
        try:
            import ctypes
            kernel32 = ctypes.windll.kernel32
            kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7)
            return True
        except Exception:
            return False
    return True


def _supports_unicode() -> bool:
    encoding = getattr(sys.stdout, 'encoding', None) or 'utf-8'
    try:
        '✓⠋'.encode(encoding)
        return True
    except (UnicodeEncodeError, LookupError):
        return False


COLORS_ENABLED = _supports_color()
UNICODE_ENABLED = _supports_unicode()

CHECK = '✓' if UNICODE_ENABLED else '[OK]'
CROSS = '✗' if UNICODE_ENABLED else '[X]'
WARN = '⚠' if UNICODE_ENABLED else '[!]'

# Icons shown in prompts and status lines
ICON_STAGE = '●' if UNICODE_ENABLED else '+'
ICON_CANCEL = '✗' if UNICODE_ENABLED else 'x'
ICON_PUSH = '↑' if UNICODE_ENABLED else '^'
ICON_WARNING = '⚠' if UNICODE_ENABLED else '!'
ICON_COMMIT = '◆' if UNICODE_ENABLED else '*'
ICON_RETRY = '↻' if UNICODE_ENABLED else '~'


def _colorize(text: str, *codes: str) -> str:
    if not COLORS_ENABLED:
        return text
    return f"{''.join(codes)}{text}{Colors.RESET}"


def success(text: str) -> str:
    return _colorize(text, Colors.GREEN)


def error(text: str) -> str:
    return _colorize(text, Colors.RED)


def warning(text: str) -> str:
    return _colorize(text, Colors.YELLOW)


def info(text: str) -> str:
    return _colorize(text, Colors.CYAN)


def dim(text: str) -> str:
    return _colorize(text, Colors.DIM)


def bold(text: str) -> str:
    return _colorize(text, Colors.BOLD)


def print_success(message: str) -> None:
    print(f"{success(CHECK)} {message}")


def print_info(message: str) -> None:
    print(f"{info('·')} {message}" if UNICODE_ENABLED else f"- {message}")


def print_error(message: str) -> None:
    print(f"{error(CROSS)} {error(message)}", file=sys.stderr)


def print_warning(message: str) -> None:
    print(f"{warning(WARN)} {warning(message)}")


def notify(message: str, level: Level = Level.INFO) -> None:
    """Fire-and-forget status line for a workflow notification."""
    if level >= Level.ERROR:
        print_error(message)
    elif level == Level.WARN:
        print_warning(message)
    else:
        print_info(message)


COMMIT_TYPE_COLORS = {
    'feat': Colors.GREEN,
    'fix': Colors.RED,
    'refactor': Colors.YELLOW,
    'docs': Colors.CYAN,
    'test': Colors.MAGENTA,
    'perf': Colors.GREEN,
    'chore': Colors.DIM,
    'style': Colors.DIM,
    'ci': Colors.CYAN,
    'build': Colors.CYAN,
}


def colorize_commit_type(message: str) -> str:
    """Color a conventional-commit type prefix on the first line, if any."""
    if not COLORS_ENABLED or not message:
        return message
    lines = message.split('\n')
    match = re.match(r'^(\w+)(\([^)]*\))?(!?:)', lines[0])
    if match:
        color = COMMIT_TYPE_COLORS.get(match.group(1))
        if color:
            prefix = match.group(0)
            lines[0] = _colorize(prefix, Colors.BOLD, color) + lines[0][len(prefix):]
    return '\n'.join(lines)


def display_message(message: str) -> None:
    """Print a commit message between horizontal rules."""
    raw_lines = message.split('\n')
    lines = colorize_commit_type(message).split('\n')
    width = max((len(line) for line in raw_lines), default=40)
    rule = ('─' if UNICODE_ENABLED else '-') * max(width, 20)
    print(f"\n{dim(rule)}")
    print(bold(lines[0]))
    for line in lines[1:]:
        print(line)
    print(dim(rule))


class Spinner:
    """Animated spinner for long operations. Use as context manager."""
    FRAMES_UNICODE = ['⠋', '⠙', '⠹', '⠸', '⠼', '⠴', '⠦', '⠧', '⠇', '⠏']
    FRAMES_ASCII = ['-', '\\', '|', '/']

    def __init__(self, label: str = ''):
        self.label = label
        self._thread = None
        self._stop_event = threading.Event()
        self._frames = self.FRAMES_UNICODE if UNICODE_ENABLED else self.FRAMES_ASCII

    def _spin(self):
        idx = 0
        while not self._stop_event.is_set():
            frame = self._frames[idx % len(self._frames)]
            print(f'\r\033[K{frame} {dim(self.label)}', end='', flush=True)
            idx += 1
            self._stop_event.wait(0.08)

    def __enter__(self):
        if sys.stdout.isatty():
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._spin, daemon=True)
            self._thread.start()
        return self

    def __exit__(self, *args):
        self._stop_event.set()
        if self._thread:
            self._thread.join()
            self._thread = None
        if sys.stdout.isatty():
            print('\r\033[K', end='', flush=True)


__all__ = [
    "Colors", "Level", "COLORS_ENABLED", "UNICODE_ENABLED",
    "CHECK", "CROSS", "WARN",
    "ICON_STAGE", "ICON_CANCEL", "ICON_PUSH", "ICON_WARNING", "ICON_COMMIT", "ICON_RETRY",
    "success", "error", "warning", "info", "dim", "bold",
    "print_success", "print_info", "print_error", "print_warning", "notify",
    "colorize_commit_type", "display_message", "Spinner", "COMMIT_TYPE_COLORS",
]
