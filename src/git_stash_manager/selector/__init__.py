"""Fuzzy selector abstraction and the fzf implementation."""

from __future__ import annotations

from git_stash_manager.selector.fzf import (
    FzfSelector,
    build_fzf_args,
    detect_selector,
    parse_fzf_output,
    parse_version,
)
from git_stash_manager.selector.protocol import (
    Selector,
    SelectorCapabilities,
    SelectorRequest,
    SelectorResult,
)

__all__ = [
    "FzfSelector",
    "Selector",
    "SelectorCapabilities",
    "SelectorRequest",
    "SelectorResult",
    "build_fzf_args",
    "detect_selector",
    "parse_fzf_output",
    "parse_version",
]
