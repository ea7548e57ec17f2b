"""
Per-clone bytree settings stored in ``<git-common-dir>/bytree.toml``.

The file is optional and only ever read. Example::

    [options]
    base_branch = "develop"
    copy_excluded = true
"""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .core import BytreeError, PathLike, get_git_common_dir

CONFIG_FILENAME = 'bytree.toml'


@dataclass
class BytreeConfig:
    """Options read from bytree.toml."""
    base_branch: Optional[str] = None
    copy_excluded: bool = True


def config_path(repo_root: PathLike) -> Path:
    """Path to the bytree.toml file for a repository."""
    return get_git_common_dir(repo_root) / CONFIG_FILENAME


def parse_config(data: Dict[str, Any]) -> BytreeConfig:
    """Build a BytreeConfig from parsed TOML data."""
    options = data.get('options', {})
    if not isinstance(options, dict):
        raise BytreeError("Invalid bytree.toml: [options] must be a table")

    base_branch = options.get('base_branch')
    if base_branch is not None and not isinstance(base_branch, str):
        raise BytreeError("Invalid bytree.toml: base_branch must be a string")

    copy_excluded = options.get('copy_excluded', True)
    if not isinstance(copy_excluded, bool):
        raise BytreeError("Invalid bytree.toml: copy_excluded must be true or false")

    return BytreeConfig(base_branch=base_branch or None, copy_excluded=copy_excluded)


def load_config(repo_root: PathLike) -> BytreeConfig:
    """Load bytree.toml, falling back to defaults when it does not exist."""
    path = config_path(repo_root)
    if not path.exists():
        return BytreeConfig()

    try:
        with open(path, 'rb') as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise BytreeError(f"Invalid {path}: {e}")
    except OSError as e:
        raise BytreeError(f"Could not read {path}: {e}")

    return parse_config(data)
