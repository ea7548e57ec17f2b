"""
Command for showing the local exclude patterns and what they match.
"""

from pathlib import Path

from bytree.core import get_repo_root
from bytree.utils.exclude import find_excluded_files, get_exclude_patterns


def excluded_command(cwd: Path, files: bool = False) -> int:
    """Print patterns from .git/info/exclude, or the files they resolve to."""
    repo_root = get_repo_root(cwd)

    print()
    print("bytree excluded")
    print()

    patterns = get_exclude_patterns(repo_root)
    if not patterns:
        print("No patterns in .git/info/exclude")
        return 0

    if files:
        matched = find_excluded_files(repo_root, patterns)
        if not matched:
            print("No existing files match .git/info/exclude")
        for file_path in sorted(matched):
            print(file_path)
        return 0

    for pattern in patterns:
        print(pattern)
    return 0
