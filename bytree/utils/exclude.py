"""
Utilities for reading .git/info/exclude and resolving it against the filesystem.

Patterns are treated as plain globs relative to the repository root. Negation,
nested .gitignore scoping and the other parts of the gitignore grammar are
deliberately not supported.
"""

import logging
from pathlib import Path
from typing import List, Optional, Set

from ..core import PathLike, get_git_common_dir

logger = logging.getLogger(__name__)


def parse_exclude(exclude_path: Path) -> List[str]:
    """Parse an exclude file and return its patterns in file order."""
    patterns = []

    if not exclude_path.exists():
        return patterns

    with open(exclude_path, 'r') as f:
        for line in f:
            line = line.strip()
            # Skip empty lines and comments
            if not line or line.startswith('#'):
                continue
            patterns.append(line)

    return patterns


def get_exclude_path(repo_root: PathLike) -> Path:
    """Location of the local exclude file, shared by all worktrees."""
    return get_git_common_dir(repo_root) / 'info' / 'exclude'


def get_exclude_patterns(repo_root: PathLike) -> List[str]:
    """Patterns from the repository's local exclude file."""
    return parse_exclude(get_exclude_path(repo_root))


def to_glob(pattern: str) -> str:
    """
    Turn an exclude pattern into a glob relative to the repository root.

    A leading ``/`` anchors the pattern to the root and is dropped. A trailing
    ``/`` marks a directory, which is expanded to every file beneath it.
    """
    if pattern.startswith('/'):
        pattern = pattern[1:]
    if pattern.endswith('/'):
        pattern = f"{pattern}**/*"
    return pattern


def _is_git_metadata(relative_path: Path) -> bool:
    return bool(relative_path.parts) and relative_path.parts[0] == '.git'


def _is_inside(repo_root: Path, path: Path) -> bool:
    if '..' in path.relative_to(repo_root).parts:
        return False
    return path.parent.resolve().is_relative_to(repo_root.resolve())


def match_pattern(repo_root: Path, pattern: str) -> Set[str]:
    """Existing paths under ``repo_root`` matching a single exclude pattern."""
    glob = to_glob(pattern)
    files_only = pattern.endswith('/')
    matches = set()

    try:
        candidates = list(repo_root.glob(glob))
    except (ValueError, NotImplementedError) as e:
        logger.debug("Skipping invalid pattern %r: %s", pattern, e)
        return matches

    for path in candidates:
        relative_path = path.relative_to(repo_root)
        if _is_git_metadata(relative_path):
            continue
        if not _is_inside(repo_root, path):
            logger.debug("Skipping %s: outside the repository", relative_path)
            continue
        # Symlinks are copied as links, even when they point at directories
        if files_only and path.is_dir() and not path.is_symlink():
            continue
        # The glob may be stale by the time we get here
        if not path.exists():
            continue
        matches.add(relative_path.as_posix())

    return matches


def find_excluded_files(
    repo_root: PathLike,
    patterns: Optional[List[str]] = None
) -> Set[str]:
    """
    Resolve exclude patterns into the set of existing relative paths.

    ``patterns`` defaults to the contents of the repository's exclude file.
    Invalid patterns are skipped.
    """
    root = Path(repo_root)
    if patterns is None:
        patterns = get_exclude_patterns(root)

    excluded = set()
    for pattern in patterns:
        pattern = pattern.strip()
        if not pattern or pattern.startswith('#'):
            continue
        excluded.update(match_pattern(root, pattern))

    return excluded
