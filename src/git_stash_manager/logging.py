"""structlog setup for git-stash-manager.

Every record, whether emitted through structlog or plain :mod:`logging`
(GitPython logs through the latter), is rendered by one stderr handler. fzf
owns stdout while the browser runs, so nothing may log there.

Rendering is a colored console line by default, or one JSON object per line
when ``GIT_STASH_MANAGER_LOG_FORMAT=json``.

Usage:
    from git_stash_manager.logging import configure_logging, get_logger

    configure_logging(level=logging.DEBUG)
    logger = get_logger(__name__)
    logger.info("stash_drop_succeeded", reference="stash@{0}")
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog
from structlog.types import Processor

__all__ = [
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_logger",
]

#: "json" selects JSON lines; anything else the console renderer
LOG_FORMAT_ENV_VAR = "GIT_STASH_MANAGER_LOG_FORMAT"

#: Level name (DEBUG, INFO, ...) used when no level is passed explicitly
LOG_LEVEL_ENV_VAR = "GIT_STASH_MANAGER_LOG_LEVEL"

DEFAULT_LOG_LEVEL = logging.WARNING


def _level_from_env() -> int:
    name = os.environ.get(LOG_LEVEL_ENV_VAR, "").strip().upper()
    level = logging.getLevelName(name) if name else DEFAULT_LOG_LEVEL
    return level if isinstance(level, int) else DEFAULT_LOG_LEVEL


def _wants_json() -> bool:
    return os.environ.get(LOG_FORMAT_ENV_VAR, "").strip().lower() == "json"


def _pre_chain() -> list[Processor]:
    """Processors applied to structlog and stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _stderr_handler(level: int, renderer: Processor) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_pre_chain(),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )
    return handler


def configure_logging(
    *,
    force_json: bool = False,
    level: int | None = None,
) -> None:
    """Route all logging to a single stderr handler.

    Safe to call more than once; the CLI calls it again after reading the
    verbosity flags, and each call replaces the previous handler.

    Args:
        force_json: Render JSON even if the format variable is unset.
        level: Minimum level. Defaults to GIT_STASH_MANAGER_LOG_LEVEL, then
            WARNING.
    """
    effective_level = _level_from_env() if level is None else level

    renderer: Processor
    if force_json or _wants_json():
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *_pre_chain(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(_stderr_handler(effective_level, renderer))
    root.setLevel(effective_level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, normally ``get_logger(__name__)``."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger


def bind_context(**context: Any) -> None:
    """Attach key-value pairs to every later log record in this context.

    Example:
        bind_context(repo="/path/to/repo")
    """
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    """Drop everything bound with :func:`bind_context`."""
    structlog.contextvars.clear_contextvars()
