"""CLI context and exit codes for git-stash-manager."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

from git_stash_manager.config import StashManagerConfig

__all__ = ["CLIContext", "ExitCode"]


class ExitCode(IntEnum):
    """Exit codes for the git-stash-manager CLI.

    - 0 for normal quit or an empty stash list
    - 1 for failure, including running outside a repository
    - 130 for keyboard interrupt (128 + SIGINT=2)
    """

    SUCCESS = 0
    FAILURE = 1
    INTERRUPTED = 130


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Type-safe CLI context containing global options and configuration.

    Attributes:
        config: Loaded configuration.
        config_path: Path to config file (if specified via --config).
        verbosity: Verbosity level (0=default, 1=INFO, 2+=DEBUG).
        quiet: Suppress non-essential output.
        simple: Always use the numbered menu.
    """

    config: StashManagerConfig
    config_path: Path | None = None
    verbosity: int = 0
    quiet: bool = False
    simple: bool = False
