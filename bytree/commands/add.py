"""
Command for creating a worktree with excluded files copied into it.
"""

from pathlib import Path
from typing import Optional

from bytree.config import load_config
from bytree.core import (
    ReplicationFailed,
    create_worktree,
    get_default_branch,
    get_repo_info,
    get_repo_root,
    get_worktree_base,
    validate_name
)
from bytree.utils.replicate import copy_excluded_files, format_failures


def add_worktree(
    cwd: Path,
    name: Optional[str],
    base_branch: Optional[str] = None,
    copy: bool = True
) -> int:
    """Create worktree ``name`` and replicate excluded files into it."""
    name = validate_name(name)
    repo_root = get_repo_root(cwd)
    repo_info = get_repo_info(repo_root)
    config = load_config(repo_root)

    base = base_branch or config.base_branch or get_default_branch(repo_root)
    worktree_base = get_worktree_base(repo_root, repo_info.name)

    print()
    print("bytree add")
    print(f"{repo_info} | base: {base}")
    print()

    print("Creating worktree...")
    worktree = create_worktree(repo_root, worktree_base, name, base)
    print(f"✓ Created {worktree.path}")
    print(f"  Branch: {worktree.branch}")

    if copy and config.copy_excluded:
        print()
        print("Copying excluded files...")
        result = copy_excluded_files(repo_root, worktree.path)

        if result.copied:
            print(f"✓ Copied {len(result.copied)} excluded file(s)")
        elif result.ok:
            print("  No excluded files to copy")

        if not result.ok:
            raise ReplicationFailed(format_failures(result))

    print()
    print("Next:")
    print(f"  cd {worktree.path}")
    return 0
