"""
bytree - Git worktree manager that copies excluded files.

bytree creates worktrees next to the main repository and replicates the
files listed in .git/info/exclude into them, so local-only settings and
caches follow every new checkout.
"""

__version__ = "0.1.0"
