"""
Utilities for copying excluded files into a worktree.
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, List

from ..core import PathLike, ReplicationFailed
from .exclude import find_excluded_files

logger = logging.getLogger(__name__)


@dataclass
class ReplicationResult:
    """Outcome of copying excluded files into a worktree."""
    copied: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


def copy_entry(source: Path, target: Path) -> None:
    """Copy one file or directory tree, creating parent directories."""
    target.parent.mkdir(parents=True, exist_ok=True)
    # copy2 cannot replace an existing link when copying a link
    if target.is_symlink() or (source.is_symlink() and target.is_file()):
        target.unlink()
    if source.is_dir() and not source.is_symlink():
        shutil.copytree(source, target, symlinks=True, dirs_exist_ok=True)
    else:
        shutil.copy2(source, target, follow_symlinks=False)


def top_level_entries(paths: Iterable[str]) -> List[str]:
    """Sorted paths, leaving out those already covered by a matched ancestor."""
    selected = set(paths)
    entries = []
    for file_path in sorted(selected):
        parents = PurePosixPath(file_path).parents
        if any(parent.as_posix() in selected for parent in parents):
            continue
        entries.append(file_path)
    return entries


def copy_excluded_files(
    repo_root: PathLike,
    worktree_path: PathLike,
    strict: bool = False
) -> ReplicationResult:
    """
    Copy every excluded path from the main repository into a worktree.

    Each entry is copied independently and failures are collected in the
    result. With ``strict`` the first failure raises ReplicationFailed instead.
    """
    source_dir = Path(repo_root)
    target_dir = Path(worktree_path)
    result = ReplicationResult()

    excluded = find_excluded_files(source_dir)
    if not excluded:
        return result

    for file_path in top_level_entries(excluded):
        try:
            copy_entry(source_dir / file_path, target_dir / file_path)
        except (OSError, shutil.Error) as e:
            if strict:
                raise ReplicationFailed(f"Failed to copy {file_path}: {e}")
            logger.debug("Failed to copy %s: %s", file_path, e)
            result.failed[file_path] = str(e)
            continue
        result.copied.append(file_path)

    return result


def format_failures(result: ReplicationResult) -> str:
    """Human-readable summary of entries that could not be copied."""
    lines = [f"Failed to copy {len(result.failed)} excluded file(s):"]
    for file_path in sorted(result.failed):
        lines.append(f"  {file_path}: {result.failed[file_path]}")
    return '\n'.join(lines)
