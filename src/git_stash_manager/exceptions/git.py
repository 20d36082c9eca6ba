from __future__ import annotations

from pathlib import Path

from git_stash_manager.exceptions.base import StashManagerError


class GitError(StashManagerError):
    """A git command, or git itself, failed.

    Attributes:
        message: What failed, ready to show to the operator.
        operation: Short operation name (e.g., "stash_drop", "repo_check").
        recoverable: Whether the operator can fix it and try again.
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        recoverable: bool = False,
    ) -> None:
        self.operation = operation
        self.recoverable = recoverable
        super().__init__(message)


class GitNotFoundError(GitError):
    """The git executable is not on PATH."""

    def __init__(self, message: str = "Git CLI not found") -> None:
        super().__init__(message, operation="git_check")


class NotARepositoryError(GitError):
    """The start directory is not inside a git working tree.

    Fatal: the CLI exits with status 1 before any controller starts.

    Attributes:
        path: Directory the lookup started from.
    """

    def __init__(
        self,
        message: str = "Not a git repository",
        path: Path | str | None = None,
    ) -> None:
        self.path = path
        super().__init__(message, operation="repo_check")


class StashError(GitError):
    """Exception for a failed stash command.

    A plain StashError is the catch-all for failures that are neither a
    missing entry nor a conflict.

    Attributes:
        message: Human-readable error message.
        reference: Stash reference the command addressed, if any.
        operation: Stash operation that failed (e.g., "stash_apply").
        stderr: Captured error stream of the git command.
    """

    def __init__(
        self,
        message: str,
        reference: str | None = None,
        operation: str | None = None,
        stderr: str = "",
        recoverable: bool = True,
    ) -> None:
        """Initialize the StashError.

        Args:
            message: Human-readable error message.
            reference: Stash reference the command addressed.
            operation: Stash operation that failed.
            stderr: Captured error stream of the git command.
            recoverable: True if retrying manually might succeed.
        """
        self.reference = reference
        self.stderr = stderr
        super().__init__(message, operation=operation, recoverable=recoverable)


class StashNotFoundError(StashError):
    """Exception raised when a reference no longer denotes a live stash."""

    def __init__(
        self,
        message: str = "No such stash entry",
        reference: str | None = None,
        operation: str | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(
            message,
            reference=reference,
            operation=operation,
            stderr=stderr,
            recoverable=False,
        )


class StashConflictError(StashError):
    """Exception raised when applying a stash conflicts with the working tree.

    Attributes:
        conflicted_files: Paths git reported as conflicting, when known.
    """

    def __init__(
        self,
        message: str = "Stash conflicts with working tree",
        reference: str | None = None,
        operation: str | None = None,
        stderr: str = "",
        conflicted_files: tuple[str, ...] = (),
    ) -> None:
        self.conflicted_files = conflicted_files
        super().__init__(
            message,
            reference=reference,
            operation=operation,
            stderr=stderr,
            recoverable=True,
        )
