from __future__ import annotations

import contextlib
from collections.abc import Generator

from git_stash_manager.cli.console import err_console
from git_stash_manager.cli.context import ExitCode
from git_stash_manager.cli.output import format_error
from git_stash_manager.exceptions import (
    ConfigError,
    GitError,
    NotARepositoryError,
    StashManagerError,
)
from git_stash_manager.logging import get_logger


@contextlib.contextmanager
def cli_error_handler() -> Generator[None, None, None]:
    """Context manager for common CLI error handling.

    Handles common error patterns across CLI commands:
    - KeyboardInterrupt: Exit with code 130
    - NotARepositoryError: Exit with code 1 before any mode starts
    - GitError: Format error with operation details
    - StashManagerError: Format error with message

    Example:
        >>> with cli_error_handler():
        >>>     controller.run()
    """
    logger = get_logger(__name__)

    try:
        yield
    except KeyboardInterrupt:
        err_console.print("\nInterrupted by user.")
        raise SystemExit(ExitCode.INTERRUPTED) from None
    except NotARepositoryError as e:
        logger.debug("not_a_repository", path=str(e.path))
        err_console.print(format_error("Not a git repository"))
        raise SystemExit(ExitCode.FAILURE) from e
    except GitError as e:
        err_console.print(
            format_error(
                e.message,
                details=[f"Operation: {e.operation}"] if e.operation else None,
            )
        )
        raise SystemExit(ExitCode.FAILURE) from e
    except ConfigError as e:
        details = []
        if e.field:
            details.append(f"Field: {e.field}")
        if e.value is not None:
            details.append(f"Value: {e.value}")
        err_console.print(format_error(e.message, details=details or None))
        raise SystemExit(ExitCode.FAILURE) from e
    except StashManagerError as e:
        err_console.print(format_error(e.message))
        raise SystemExit(ExitCode.FAILURE) from e
