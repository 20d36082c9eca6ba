"""Interactive and numbered-menu stash controllers."""

from __future__ import annotations

from git_stash_manager.controller.fallback import (
    FallbackController,
    MenuChoice,
    parse_menu_choice,
)
from git_stash_manager.controller.interactive import (
    InteractiveController,
    Transition,
    clamp_position,
)
from git_stash_manager.controller.modes import (
    ActionMode,
    ConfirmMode,
    ControllerMode,
    PendingConfirmation,
    RenameMode,
    SearchMode,
)

__all__ = [
    "ActionMode",
    "ConfirmMode",
    "ControllerMode",
    "FallbackController",
    "InteractiveController",
    "MenuChoice",
    "PendingConfirmation",
    "RenameMode",
    "SearchMode",
    "Transition",
    "clamp_position",
    "parse_menu_choice",
]
