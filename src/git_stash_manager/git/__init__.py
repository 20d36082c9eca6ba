"""Git stash operations using GitPython.

Usage:
    ```python
    from git_stash_manager.git import StashRepository

    repo = StashRepository("/path/to/repo")
    entries = repo.list()
    repo.apply(entries[0].reference)
    ```
"""

from __future__ import annotations

from git_stash_manager.git.repository import (
    StashEntry,
    StashRepository,
    parse_stash_line,
    parse_stash_ref,
)

__all__ = [
    "StashEntry",
    "StashRepository",
    "parse_stash_line",
    "parse_stash_ref",
]
