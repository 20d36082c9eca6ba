"""Selector protocol and its request/result value objects.

A selector shows the stash list, lets the operator move the cursor (and, in
search mode, filter), and returns when one of the request's keys is pressed.
Keys never act on the list themselves; the controller decides what a key
means in the current mode.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

__all__ = [
    "Selector",
    "SelectorCapabilities",
    "SelectorRequest",
    "SelectorResult",
]


@dataclass(frozen=True, slots=True)
class SelectorCapabilities:
    """What the installed selector supports.

    Attributes:
        command: Executable name.
        path: PATH location of the executable.
        version: Parsed version, e.g. (0, 46, 1).
    """

    command: str
    path: str
    version: tuple[int, ...]

    @property
    def version_string(self) -> str:
        return ".".join(str(part) for part in self.version)

    @property
    def start_position(self) -> bool:
        """Whether the cursor can be placed when the list opens."""
        return self.version >= (0, 36)


@dataclass(frozen=True, slots=True)
class SelectorRequest:
    """One selector invocation.

    Attributes:
        lines: Entries to display, in order.
        header: Banner shown above the list.
        keys: Keys that end the invocation ("enter", "esc" or a character).
        prompt: Prompt text in front of the query.
        search: Whether typing filters the list.
        query: Initial query text (the editable message in rename mode).
        position: 0-based index of the initially highlighted line.
    """

    lines: tuple[str, ...]
    header: str
    keys: tuple[str, ...]
    prompt: str = "> "
    search: bool = False
    query: str = ""
    position: int = 0


@dataclass(frozen=True, slots=True)
class SelectorResult:
    """How a selector invocation ended.

    Attributes:
        key: Key that ended it, or None if the operator aborted.
        query: Query text at exit.
        line: Highlighted line at exit, if any line was visible.
    """

    key: str | None
    query: str = ""
    line: str | None = None

    @property
    def aborted(self) -> bool:
        return self.key is None


@runtime_checkable
class Selector(Protocol):
    """Interactive list selector."""

    def select(self, request: SelectorRequest) -> SelectorResult:
        """Show ``request`` and block until a key ends it."""
        ...
