"""
Command for listing bytree worktrees.
"""

from pathlib import Path

from bytree.core import get_current_branch, get_repo_info, get_repo_root, list_worktrees


def list_command(cwd: Path) -> int:
    """Print every worktree whose branch is in the bytree namespace."""
    repo_root = get_repo_root(cwd)
    repo_info = get_repo_info(repo_root)
    worktrees = list_worktrees(repo_root)

    print()
    print("bytree list")
    current_branch = get_current_branch(repo_root)
    if current_branch:
        print(f"{repo_info} | main checkout: {current_branch}")
    else:
        print(str(repo_info))
    print()

    if not worktrees:
        print("No worktrees found.")
        print("Create one: bytree add <name>")
        return 0

    for worktree in worktrees:
        print(worktree.name)
        print(f"  {worktree.path}")
        print(f"  {worktree.branch}")
        print()

    return 0
