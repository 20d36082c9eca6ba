from __future__ import annotations

from typing import Any

from git_stash_manager.exceptions.base import StashManagerError


class ConfigError(StashManagerError):
    """Invalid settings file, ``--config`` path, or setting value.

    Attributes:
        message: What is wrong, ready to show to the operator.
        field: Dotted setting name (e.g., "selector.min_version"), if known.
        value: The rejected value, if known.

    Example:
        ```python
        raise ConfigError(
            "Invalid configuration: Input should be 'store-first' or 'drop-first'",
            field="rename_strategy",
            value="sideways",
        )
        ```
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        self.field = field
        self.value = value
        super().__init__(message)
