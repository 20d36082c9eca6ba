"""git-stash-manager constants.

Single source of truth for selector key maps, mode banners, tool versions and
default locations shared across the CLI, controllers and configuration.
"""

from __future__ import annotations

# =============================================================================
# External Tools
# =============================================================================

#: Fuzzy selector executable
DEFAULT_SELECTOR_COMMAND: str = "fzf"

#: Oldest fzf release with the start event and pos() action the controller uses
MIN_SELECTOR_VERSION: str = "0.45.0"

#: Optional syntax-highlighting diff renderer
DEFAULT_DIFF_RENDERER: str = "delta"

#: Pager used when neither the config nor $PAGER names one
DEFAULT_PAGER: str = "less"

#: Preview pane placement passed to the selector
DEFAULT_PREVIEW_WINDOW: str = "right:60%:wrap"

# =============================================================================
# Locations
# =============================================================================

#: Directory name under ~/.config
CONFIG_DIR_NAME: str = "git-stash-manager"

#: File holding the single ``default_action=<value>`` line
PREFERENCES_FILE_NAME: str = "config"

#: YAML settings file inside the config directory
SETTINGS_FILE_NAME: str = "settings.yaml"

# =============================================================================
# Selector Keys
# =============================================================================

#: Keys that leave the selector while in Action mode
ACTION_KEYS: tuple[str, ...] = ("a", "p", "d", "r", "v", "/", "q", "enter")

#: Keys that leave the selector while in Search mode
SEARCH_KEYS: tuple[str, ...] = ("esc",)

#: Keys that leave the selector while in Rename mode
RENAME_KEYS: tuple[str, ...] = ("enter", "esc")

#: Keys that leave the selector while in Confirm mode
CONFIRM_KEYS: tuple[str, ...] = ("y", "n", "esc")

# =============================================================================
# Mode Banners
# =============================================================================

ACTION_HEADER: str = """
  ╭──────────────────────────────────────────────────────────╮
  │  a Apply   p Pop   d Drop   r Rename   v View   q Quit   │
  │  Press / to search  ·  Enter for default action          │
  ╰──────────────────────────────────────────────────────────╯
"""

SEARCH_HEADER: str = """
  ╭──────────────────────────────────────────────────────────╮
  │  [SEARCH MODE]  Type to filter  ·  Esc return to actions │
  ╰──────────────────────────────────────────────────────────╯
"""

RENAME_HEADER: str = """
  ╭──────────────────────────────────────────────────────────╮
  │  [RENAME]  Enter to save  ·  Esc to cancel               │
  ╰──────────────────────────────────────────────────────────╯
"""

CONFIRM_HEADER: str = """
  ╭──────────────────────────────────────────────────────────╮
  │  [CONFIRM]  y to confirm  ·  n or Esc to cancel          │
  ╰──────────────────────────────────────────────────────────╯
"""

#: Prompt shown in Action and Search modes
DEFAULT_PROMPT: str = "> "
