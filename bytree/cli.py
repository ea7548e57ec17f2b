"""
CLI interface for bytree.
"""

import sys
import argparse
import logging
from pathlib import Path
from typing import Optional, List

from . import __version__
from .core import BytreeError, UsageError
from .commands.add import add_worktree
from .commands.excluded import excluded_command
from .commands.ls import list_command
from .commands.remove import remove_command

EPILOG = """\
Examples:
  bytree add feature-x    Create worktree at ../<repo>-bytree/feature-x
  bytree add issue-123    Create worktree for issue #123
  bytree remove feature-x Remove the worktree
"""


class BytreeArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage problems as UsageError."""

    def error(self, message):
        raise UsageError(message)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = BytreeArgumentParser(
        prog='bytree',
        description='Git worktree manager that copies excluded files',
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    # Add global options
    parser.add_argument(
        '--version', '-v',
        action='version',
        version=__version__
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose output'
    )

    # Add subcommands
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    add_parser = subparsers.add_parser('add', help='Create a worktree with excluded files copied')
    add_parser.add_argument('name', nargs='?', help='Worktree name')
    add_parser.add_argument('--base', help='Base branch (default: auto-detect)')
    add_parser.add_argument('--no-copy', action='store_true', help='Do not copy excluded files')

    remove_parser = subparsers.add_parser('remove', help='Remove a worktree')
    remove_parser.add_argument('name', nargs='?', help='Worktree name')

    subparsers.add_parser('list', help='List all bytree worktrees')

    excluded_parser = subparsers.add_parser('excluded', help='Show patterns in .git/info/exclude')
    excluded_parser.add_argument(
        '--files',
        action='store_true',
        help='Show the existing files the patterns match'
    )

    return parser


def configure_logging(verbose: bool) -> None:
    """Send diagnostics to stderr, at DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s'
    )


def main(args: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    if args is None:
        args = sys.argv[1:]

    parser = create_parser()

    if not args:
        parser.print_help()
        return 0

    try:
        parsed_args = parser.parse_args(args)
    except UsageError as e:
        print(f"Error: {e}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    if not parsed_args.command:
        parser.print_help()
        return 0

    configure_logging(parsed_args.verbose)

    try:
        return dispatch(parsed_args, Path.cwd())

    except UsageError as e:
        print(f"Error: {e}", file=sys.stderr)
        print(f"Usage: bytree {parsed_args.command} <name>", file=sys.stderr)
        return 1
    except BytreeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        if parsed_args.verbose:
            import traceback
            traceback.print_exc()
        else:
            print(f"Unexpected error: {e}", file=sys.stderr)
        return 1


def dispatch(args, cwd: Path) -> int:
    """Run the handler for the parsed command."""
    if args.command == 'add':
        return add_worktree(cwd, args.name, args.base, copy=not args.no_copy)
    elif args.command == 'remove':
        return remove_command(cwd, args.name)
    elif args.command == 'list':
        return list_command(cwd)
    elif args.command == 'excluded':
        return excluded_command(cwd, files=args.files)
    else:
        raise UsageError(f"Unknown command: {args.command}")


if __name__ == '__main__':
    sys.exit(main())
