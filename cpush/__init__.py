"""
Commit & Push

Interactive commit-and-push workflow around an external AI draft generator.
"""

__version__ = "1.0.0"

# Exit codes consumed from git
EXIT_SUCCESS = 0
EXIT_GIT_PRECOMMIT_FAIL = 1
EXIT_GIT_ERROR = 128

# Delays before re-checking the index after it was touched
RESTART_DELAY_MS = 100
REGENERATE_DELAY_MS = 10

DEFAULT_GENERATOR = ["lumen", "draft"]
