"""
Core bytree functionality - repository location and worktree management.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

import git
from git import Repo

logger = logging.getLogger(__name__)

BRANCH_PREFIX = 'bytree/'
WORKTREE_DIR_SUFFIX = '-bytree'

PathLike = Union[str, Path]

# SSH (git@host:owner/repo.git) and HTTPS (https://host/owner/repo.git)
_REMOTE_RE = re.compile(
    r'(?:github\.com|gitlab\.com|bitbucket\.org)[:/]([^/]+)/([^/]+?)(?:\.git)?/?$'
)


class BytreeError(Exception):
    """Base exception for bytree operations."""
    pass


class NotARepository(BytreeError):
    """Raised when a directory is not inside a Git repository."""
    pass


class UnparsableRemote(BytreeError):
    """Raised when the origin remote is missing or not a recognised URL."""
    pass


class WorktreeCreationFailed(BytreeError):
    """Raised when git refuses to create the worktree."""
    pass


class ReplicationFailed(BytreeError):
    """Raised when excluded files could not be copied into a worktree."""
    pass


class UsageError(BytreeError):
    """Raised for missing arguments and unknown commands."""
    pass


@dataclass
class RepoInfo:
    """Owner and name parsed from the origin remote."""
    owner: str
    name: str

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass
class Worktree:
    """A worktree path and the branch checked out in it."""
    path: Path
    branch: str

    @property
    def name(self) -> str:
        """User-facing name, i.e. the branch without the bytree prefix."""
        if self.branch.startswith(BRANCH_PREFIX):
            return self.branch[len(BRANCH_PREFIX):]
        return self.branch


def _open_repo(path: PathLike) -> Repo:
    try:
        return Repo(path, search_parent_directories=True)
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
        raise NotARepository(f"Not a Git repository: {path}")


def get_git_common_dir(path: PathLike) -> Path:
    """Absolute path of the metadata directory shared by all worktrees."""
    repo = _open_repo(path)
    try:
        common_dir = repo.git.rev_parse('--git-common-dir')
    except git.exc.GitCommandError as e:
        raise NotARepository(f"Not a Git repository: {path} ({e.stderr.strip()})")
    return (Path(repo.working_dir) / common_dir).resolve()


def get_repo_root(cwd: PathLike) -> Path:
    """
    Return the working tree root of the main repository.

    Linked worktrees have a private metadata directory but share the common
    one with the main repository, so the root is found through it even when
    ``cwd`` is inside a linked worktree.
    """
    repo = _open_repo(cwd)
    try:
        common_dir = repo.git.rev_parse('--git-common-dir')
        if common_dir == '.git':
            return Path(repo.git.rev_parse('--show-toplevel')).resolve()
    except git.exc.GitCommandError as e:
        raise NotARepository(f"Not a Git repository: {cwd} ({e.stderr.strip()})")

    return (Path(repo.working_dir) / common_dir).resolve().parent


def parse_remote_url(url: str) -> RepoInfo:
    """Parse owner and repository name from an SSH or HTTPS remote URL."""
    match = _REMOTE_RE.search(url.strip())
    if not match:
        raise UnparsableRemote(f"Could not parse remote URL: {url}")
    return RepoInfo(owner=match.group(1), name=match.group(2))


def get_repo_info(repo_root: PathLike) -> RepoInfo:
    """Get owner and repository name from the origin remote."""
    repo = _open_repo(repo_root)
    try:
        url = repo.git.remote('get-url', 'origin')
    except git.exc.GitCommandError:
        raise UnparsableRemote(f"No 'origin' remote configured in {repo_root}")
    return parse_remote_url(url)


def get_default_branch(repo_root: PathLike) -> str:
    """
    Guess the branch new worktrees should start from.

    Prefers the remote's symbolic HEAD and falls back to whichever of
    ``main``/``master`` exists on the remote. Git failures never propagate.
    """
    repo = _open_repo(repo_root)
    try:
        ref = repo.git.symbolic_ref('refs/remotes/origin/HEAD')
        return ref.strip().replace('refs/remotes/origin/', '', 1)
    except git.exc.GitCommandError as e:
        logger.debug("No symbolic origin/HEAD: %s", e.stderr.strip())

    try:
        output = repo.git.branch('-r')
    except git.exc.GitCommandError as e:
        logger.debug("Could not list remote branches: %s", e.stderr.strip())
        return 'main'

    remote_branches = {line.strip() for line in output.splitlines()}
    if 'origin/main' in remote_branches:
        return 'main'
    if 'origin/master' in remote_branches:
        return 'master'
    return 'main'


def get_current_branch(repo_root: PathLike) -> str:
    """Get the branch checked out in the main repository."""
    repo = _open_repo(repo_root)
    try:
        return repo.git.branch('--show-current').strip()
    except git.exc.GitCommandError as e:
        raise BytreeError(f"Failed to read current branch: {e.stderr.strip()}")


def get_worktree_base(repo_root: PathLike, repo_name: str) -> Path:
    """Directory holding bytree worktrees: ``<parent>/<repo>-bytree``."""
    return Path(repo_root).parent / f"{repo_name}{WORKTREE_DIR_SUFFIX}"


def branch_for(name: str) -> str:
    """Namespaced branch name for a worktree name."""
    return f"{BRANCH_PREFIX}{name}"


def validate_name(name: Optional[str]) -> str:
    """Reject worktree names that would escape the worktree base."""
    if not name or not name.strip():
        raise UsageError("Name required")
    if Path(name).is_absolute() or '..' in Path(name).parts:
        raise UsageError(f"Invalid worktree name: {name}")
    return name


def _branch_exists(repo: Repo, branch: str) -> bool:
    return any(head.name == branch for head in repo.heads)


def _discard_worktree(repo: Repo, worktree_path: Path, branch: str) -> None:
    # Failures are expected when there is nothing left to clean up.
    try:
        repo.git.worktree('remove', '--force', str(worktree_path))
    except git.exc.GitCommandError as e:
        logger.debug("Ignoring worktree remove failure: %s", e.stderr.strip())

    try:
        repo.git.worktree('prune')
    except git.exc.GitCommandError as e:
        logger.debug("Ignoring worktree prune failure: %s", e.stderr.strip())

    try:
        repo.git.branch('-D', branch)
    except git.exc.GitCommandError as e:
        logger.debug("Ignoring branch delete failure: %s", e.stderr.strip())


def create_worktree(
    repo_root: PathLike,
    worktree_base: PathLike,
    name: str,
    base_branch: str
) -> Worktree:
    """
    Create (or recreate) the worktree ``<worktree_base>/<name>``.

    Any worktree or branch left over from an earlier run with the same name
    is forcibly removed first.
    """
    name = validate_name(name)
    repo = _open_repo(repo_root)
    branch = branch_for(name)
    worktree_path = Path(worktree_base) / name

    worktree_path.parent.mkdir(parents=True, exist_ok=True)

    if worktree_path.exists() or _branch_exists(repo, branch):
        logger.debug("Removing previous worktree %s (%s)", worktree_path, branch)
        _discard_worktree(repo, worktree_path, branch)

    try:
        repo.git.worktree('add', '-b', branch, str(worktree_path), base_branch)
    except git.exc.GitCommandError as e:
        raise WorktreeCreationFailed(
            f"Failed to create worktree at {worktree_path}: {e.stderr.strip()}"
        )

    return Worktree(path=worktree_path, branch=branch)


def remove_worktree(repo_root: PathLike, worktree_path: PathLike, branch: str) -> None:
    """Remove a worktree and delete its branch, ignoring git errors."""
    repo = _open_repo(repo_root)
    _discard_worktree(repo, Path(worktree_path), branch)


def parse_worktree_list(output: str, prefix: str = BRANCH_PREFIX) -> List[Worktree]:
    """Parse ``git worktree list --porcelain`` keeping branches under ``prefix``."""
    worktrees = []
    current_path = None

    for line in output.splitlines():
        if line.startswith('worktree '):
            current_path = Path(line[len('worktree '):])
        elif line.startswith('branch ') and current_path is not None:
            branch = line[len('branch '):]
            if branch.startswith('refs/heads/'):
                branch = branch[len('refs/heads/'):]
            if branch.startswith(prefix):
                worktrees.append(Worktree(path=current_path, branch=branch))

    return worktrees


def list_worktrees(repo_root: PathLike) -> List[Worktree]:
    """List worktrees created by bytree."""
    repo = _open_repo(repo_root)
    try:
        output = repo.git.worktree('list', '--porcelain')
    except git.exc.GitCommandError as e:
        raise BytreeError(f"Failed to list worktrees: {e.stderr.strip()}")
    return parse_worktree_list(output)


def worktrees_by_name(repo_root: PathLike) -> Dict[str, Worktree]:
    """Map worktree names to bytree worktrees."""
    return {wt.name: wt for wt in list_worktrees(repo_root)}
