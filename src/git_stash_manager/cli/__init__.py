"""CLI utilities for git-stash-manager.

This package provides CLI-specific utilities including context management,
output formatting, and dependency checks.
"""

from __future__ import annotations

from git_stash_manager.cli.context import CLIContext, ExitCode
from git_stash_manager.cli.validators import DependencyStatus, check_dependencies

__all__ = [
    "CLIContext",
    "DependencyStatus",
    "ExitCode",
    "check_dependencies",
]
