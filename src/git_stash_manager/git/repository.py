"""GitPython-based stash operations for git-stash-manager.

This module is the only place that talks to git. Every call is a single git
command that either succeeds or fails as a whole; nothing here keeps state
between calls. Entries are re-listed after every mutation because removing
one entry shifts the index of every entry below it.

Example:
    ```python
    from git_stash_manager.git import StashRepository

    repo = StashRepository()
    for entry in repo.list():
        print(entry.reference, entry.message)
    repo.drop("stash@{0}")
    ```
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo
from git.exc import GitCommandNotFound

from git_stash_manager.exceptions import (
    GitNotFoundError,
    NotARepositoryError,
    StashConflictError,
    StashError,
    StashNotFoundError,
)
from git_stash_manager.logging import get_logger

logger = get_logger(__name__)

__all__ = [
    "StashEntry",
    "StashRepository",
    "parse_stash_line",
    "parse_stash_ref",
]

# =============================================================================
# Constants
# =============================================================================

#: Matches the reference token of a listing line (e.g., "stash@{3}")
STASH_REF_PATTERN = re.compile(r"stash@\{(\d+)\}")

#: Listing format: reflog selector, commit id, subject, NUL separated
_LIST_FORMAT = "%gd%x00%H%x00%gs"

#: Stderr fragments meaning the reference does not denote a live stash
NOT_FOUND_PATTERNS: tuple[str, ...] = (
    "unknown revision",
    "not a valid reference",
    "is not a stash-like commit",
    "is not a stash reference",
    "no stash entries",
    "no stash found",
    "bad revision",
    "needed a single revision",
    "log for 'stash' only has",
    "log for 'refs/stash' only has",
)

#: Stderr fragments meaning the working tree blocked the operation
CONFLICT_PATTERNS: tuple[str, ...] = (
    "conflict",
    "would be overwritten",
    "could not restore untracked",
    "already exists, no checkout",
    "needs merge",
)

_CONFLICT_FILE_PATTERN = re.compile(r"CONFLICT \([^)]*\): Merge conflict in (.+)")


# =============================================================================
# Value Objects
# =============================================================================


@dataclass(frozen=True, slots=True)
class StashEntry:
    """One line of the stash list.

    Entries are snapshots: a reference is only meaningful until the next
    mutation of the stash list.

    Attributes:
        index: Position in the list (0 = most recent).
        reference: Token used to address the entry (e.g., "stash@{0}").
        raw_line: Display text, "stash@{N}: <message>".
        message: Human-entered or generated label.
        commit: Full commit id of the stash, when known.
    """

    index: int
    reference: str
    raw_line: str
    message: str
    commit: str = ""


# =============================================================================
# Parsing
# =============================================================================


def parse_stash_ref(line: str) -> str | None:
    """Extract the stash reference from a listing line.

    Args:
        line: A line such as "stash@{2}: WIP on main: 1a2b3c4 msg".

    Returns:
        The reference ("stash@{2}"), or None if the line carries none.
    """
    match = STASH_REF_PATTERN.search(line)
    return match.group(0) if match else None


def parse_stash_line(line: str, index: int | None = None) -> StashEntry | None:
    """Build a StashEntry from a plain ``git stash list`` line.

    Args:
        line: Listing line in the default "stash@{N}: <message>" format.
        index: Position to record; defaults to N from the reference.

    Returns:
        The parsed entry, or None for lines without a reference.
    """
    match = STASH_REF_PATTERN.search(line)
    if match is None:
        return None
    rest = line[match.end() :]
    message = rest[1:].strip() if rest.startswith(":") else rest.strip()
    return StashEntry(
        index=int(match.group(1)) if index is None else index,
        reference=match.group(0),
        raw_line=line.rstrip("\n"),
        message=message,
    )


def _stderr_of(exc: GitCommandError) -> str:
    return str(exc.stderr or exc.stdout or exc)


def _convert_stash_error(
    exc: GitCommandError,
    operation: str,
    reference: str | None = None,
) -> StashError:
    """Convert a GitPython exception into a stash exception.

    Args:
        exc: GitPython exception.
        operation: Name of the stash operation that failed.
        reference: Stash reference the command addressed.

    Returns:
        StashNotFoundError, StashConflictError, or a plain StashError.
    """
    stderr = _stderr_of(exc)
    stderr_lower = stderr.lower()
    target = reference or "stash"

    if any(pattern in stderr_lower for pattern in NOT_FOUND_PATTERNS):
        return StashNotFoundError(
            f"{target} not found",
            reference=reference,
            operation=operation,
            stderr=stderr,
        )

    if any(pattern in stderr_lower for pattern in CONFLICT_PATTERNS):
        output = f"{exc.stdout or ''}\n{stderr}"
        files = tuple(m.strip().strip("'") for m in _CONFLICT_FILE_PATTERN.findall(output))
        return StashConflictError(
            f"{target} conflicts with the working tree",
            reference=reference,
            operation=operation,
            stderr=stderr,
            conflicted_files=files,
        )

    return StashError(
        f"git {operation.replace('_', ' ')} failed for {target}",
        reference=reference,
        operation=operation,
        stderr=stderr,
    )


# =============================================================================
# Main Class: StashRepository
# =============================================================================


class StashRepository:
    """Stash list queries and mutations backed by GitPython.

    Only stores the Repo instance; every method is a single git command.

    Example:
        ```python
        repo = StashRepository("/path/to/repo")
        commit = repo.resolve_commit("stash@{1}")
        repo.store("better message", commit)
        ```
    """

    def __init__(self, path: Path | str | None = None) -> None:
        """Initialize StashRepository.

        Args:
            path: Any directory inside the working tree. Defaults to cwd.

        Raises:
            GitNotFoundError: If git is not installed.
            NotARepositoryError: If path is not inside a git repository.
        """
        resolved_path = Path.cwd() if path is None else Path(path)

        try:
            self._repo = Repo(resolved_path, search_parent_directories=True)
        except GitCommandNotFound as e:
            raise GitNotFoundError("Git CLI not found. Please install git.") from e
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise NotARepositoryError(
                f"Not a git repository: {resolved_path}",
                path=resolved_path,
            ) from e

        self._path = Path(self._repo.working_tree_dir or resolved_path)

    @property
    def path(self) -> Path:
        """Path to the repository root."""
        return self._path

    @property
    def repo(self) -> Repo:
        """Underlying GitPython Repo instance."""
        return self._repo

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list(self) -> list[StashEntry]:
        """List stash entries, newest first.

        Never raises: a missing stash ref or a failing git call is reported
        as an empty list.

        Returns:
            Fresh StashEntry snapshots.
        """
        try:
            output = self._repo.git.stash("list", f"--format={_LIST_FORMAT}")
        except GitCommandError as e:
            logger.warning("stash_list_failed", error=_stderr_of(e))
            return []

        entries: list[StashEntry] = []
        for line in output.splitlines():
            parts = line.split("\x00")
            if len(parts) != 3:
                continue
            reference, commit, message = parts
            entries.append(
                StashEntry(
                    index=len(entries),
                    reference=reference,
                    raw_line=f"{reference}: {message}",
                    message=message,
                    commit=commit,
                )
            )
        logger.debug("stash_listed", count=len(entries))
        return entries

    def resolve_commit(self, reference: str) -> str:
        """Resolve a stash reference to its commit id.

        Args:
            reference: Stash reference (e.g., "stash@{0}").

        Returns:
            Full 40-character commit id.

        Raises:
            StashNotFoundError: If the reference no longer denotes a stash.
        """
        try:
            return self._repo.git.rev_parse(
                "--verify", "--quiet", f"{reference}^{{commit}}"
            ).strip()
        except GitCommandError as e:
            raise StashNotFoundError(
                f"Failed to resolve {reference}",
                reference=reference,
                operation="resolve",
                stderr=_stderr_of(e),
            ) from e

    def show_diff(self, reference: str, *, color: bool = False) -> str:
        """Get the unified diff of a stash entry against its parent.

        Args:
            reference: Stash reference.
            color: Embed ANSI color codes in the output.

        Returns:
            Unified diff text.

        Raises:
            StashNotFoundError: If the reference no longer denotes a stash.
        """
        args = ["show", "-p"]
        if color:
            args.append("--color=always")
        args.append(reference)
        try:
            output = self._repo.git.stash(*args)
        except GitCommandError as e:
            raise _convert_stash_error(e, "stash_show", reference) from e
        return output + "\n" if output else output

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def apply(self, reference: str) -> None:
        """Apply a stash to the working tree, keeping the entry.

        Raises:
            StashConflictError: If the changes conflict with the working tree.
            StashNotFoundError: If the reference is stale.
        """
        self._run("apply", reference)

    def pop(self, reference: str) -> None:
        """Apply a stash and remove it on success.

        Raises:
            StashConflictError: If the changes conflict with the working tree.
            StashNotFoundError: If the reference is stale.
        """
        self._run("pop", reference)

    def drop(self, reference: str) -> None:
        """Remove a stash entry without applying it.

        Raises:
            StashNotFoundError: If the reference is stale.
        """
        self._run("drop", reference)

    def store(self, message: str, commit: str) -> None:
        """Create a new top-of-list stash entry from an existing commit.

        Args:
            message: Label of the new entry.
            commit: Commit id of a stash-like commit.

        Raises:
            StashError: If git refuses the commit.
        """
        try:
            self._repo.git.stash("store", "-m", message, commit)
        except GitCommandError as e:
            raise _convert_stash_error(e, "stash_store", commit[:12]) from e
        logger.info("stash_stored", commit=commit, message=message)

    def copy_commit(self, commit: str, message: str) -> str:
        """Create a new stash-like commit with the same tree and parents.

        ``git stash store`` does nothing when the commit is already the top
        of the stash reflog, so relabelling stash@{0} needs a distinct copy.

        Args:
            commit: Commit id of an existing stash.
            message: Commit message of the copy.

        Returns:
            Full commit id of the copy.

        Raises:
            StashError: If the commit cannot be read or written.
        """
        try:
            parents = self._repo.git.rev_parse(f"{commit}^@").split()
            args = [f"{commit}^{{tree}}"]
            for parent in parents:
                args += ["-p", parent]
            copy = self._repo.git.commit_tree(*args, "-m", message).strip()
        except GitCommandError as e:
            raise _convert_stash_error(e, "commit_tree", commit[:12]) from e
        logger.debug("stash_commit_copied", commit=commit, copy=copy)
        return copy

    def _run(self, subcommand: str, reference: str) -> None:
        operation = f"stash_{subcommand}"
        try:
            self._repo.git.stash(subcommand, reference)
        except GitCommandError as e:
            error = _convert_stash_error(e, operation, reference)
            logger.info(
                f"{operation}_failed",
                reference=reference,
                reason=type(error).__name__,
            )
            raise error from e
        logger.info(f"{operation}_succeeded", reference=reference)
