from __future__ import annotations


class StashManagerError(Exception):
    """Base exception class for all git-stash-manager errors.

    Every custom exception in the application inherits from this class so the
    CLI boundary can catch them together while letting system exceptions
    propagate naturally.

    Attributes:
        message: Human-readable error message describing what went wrong.
    """

    def __init__(self, message: str) -> None:
        """Initialize the StashManagerError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
