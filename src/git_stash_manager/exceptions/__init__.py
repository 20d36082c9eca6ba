"""git-stash-manager exception hierarchy.

All exceptions can be imported from this package:
    from git_stash_manager.exceptions import StashError, ConfigError
"""

from __future__ import annotations

from git_stash_manager.exceptions.base import StashManagerError
from git_stash_manager.exceptions.config import ConfigError
from git_stash_manager.exceptions.git import (
    GitError,
    GitNotFoundError,
    NotARepositoryError,
    StashConflictError,
    StashError,
    StashNotFoundError,
)
from git_stash_manager.exceptions.selector import (
    SelectorError,
    SelectorTooOldError,
    SelectorUnavailableError,
)

__all__ = [
    "ConfigError",
    "GitError",
    "GitNotFoundError",
    "NotARepositoryError",
    "SelectorError",
    "SelectorTooOldError",
    "SelectorUnavailableError",
    "StashConflictError",
    "StashError",
    "StashManagerError",
    "StashNotFoundError",
]
