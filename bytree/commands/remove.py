"""
Command for removing a bytree worktree and its branch.
"""

from pathlib import Path
from typing import Optional

from bytree.core import (
    branch_for,
    get_repo_info,
    get_repo_root,
    get_worktree_base,
    remove_worktree,
    validate_name,
    worktrees_by_name
)


def remove_command(cwd: Path, name: Optional[str]) -> int:
    """Remove worktree ``name``, tolerating already-broken state."""
    name = validate_name(name)
    repo_root = get_repo_root(cwd)
    repo_info = get_repo_info(repo_root)

    # Prefer git's record of the path; fall back to where add would put it
    worktree = worktrees_by_name(repo_root).get(name)
    if worktree is not None:
        worktree_path = worktree.path
    else:
        worktree_path = get_worktree_base(repo_root, repo_info.name) / name

    print()
    print("bytree remove")
    print()

    remove_worktree(repo_root, worktree_path, branch_for(name))
    print(f"✓ Removed {name}")
    return 0
