from __future__ import annotations

from git_stash_manager.exceptions.base import StashManagerError


class SelectorError(StashManagerError):
    """Exception for fuzzy selector problems.

    None of these are fatal: the CLI falls back to the numbered menu.

    Attributes:
        message: Human-readable error message.
        command: Selector executable that was looked up.
    """

    def __init__(self, message: str, command: str = "fzf") -> None:
        self.command = command
        super().__init__(message)


class SelectorUnavailableError(SelectorError):
    """Exception raised when the selector executable is not on PATH."""

    def __init__(self, command: str = "fzf") -> None:
        super().__init__(f"{command} is not installed or not in PATH", command)


class SelectorTooOldError(SelectorError):
    """Exception raised when the installed selector lacks required features.

    Attributes:
        found: Version string reported by the selector ("" if unparseable).
        required: Minimum version the interactive controller needs.
    """

    def __init__(self, found: str, required: str, command: str = "fzf") -> None:
        """Initialize the SelectorTooOldError.

        Args:
            found: Version string reported by the selector.
            required: Minimum supported version.
            command: Selector executable.
        """
        self.found = found
        self.required = required
        super().__init__(
            f"{command} {required}+ required for interactive mode "
            f"(found {found or 'unknown version'})",
            command,
        )
