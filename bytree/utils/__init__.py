"""
Utility modules for bytree.
"""

from .exclude import (
    parse_exclude,
    get_exclude_path,
    get_exclude_patterns,
    to_glob,
    match_pattern,
    find_excluded_files
)

from .replicate import (
    ReplicationResult,
    copy_entry,
    top_level_entries,
    copy_excluded_files,
    format_failures
)

__all__ = [
    # exclude utilities
    'parse_exclude',
    'get_exclude_path',
    'get_exclude_patterns',
    'to_glob',
    'match_pattern',
    'find_excluded_files',

    # replication utilities
    'ReplicationResult',
    'copy_entry',
    'top_level_entries',
    'copy_excluded_files',
    'format_failures'
]
