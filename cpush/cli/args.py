"""CLI Argument Parsing"""

import argparse
import argcomplete

from cpush import __version__


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='cpush',
        description='Stage, commit and push with an AI-drafted commit message',
        epilog='Example: cpush (drafts a message with `lumen draft`, then asks before committing)'
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')

    # Workflow options
    parser.add_argument('-g', '--generator', type=str, metavar='CMD', help='Draft command, e.g. "lumen draft"')
    parser.add_argument('-r', '--remote', type=str, metavar='REMOTE', help='Push to REMOTE instead of the upstream')
    parser.add_argument('--hooks', action='store_true', help='Dry-run pre-commit hooks before committing')
    parser.add_argument('--no-persist', action='store_true', help='Do not keep a failed message for the next run')

    # Preserved message
    parser.add_argument('--status', action='store_true', help='Show the message preserved from a failed commit')
    parser.add_argument('--clear', action='store_true', help='Discard the preserved message')

    # Setup/config
    parser.add_argument('--setup', action='store_true', help='Configure defaults')
    parser.add_argument('--display-config', action='store_true', help='Show current configuration')
    parser.add_argument('--install-completion', action='store_true', help='Install shell tab completion')

    argcomplete.autocomplete(parser)
    return parser.parse_args(argv)
