"""Full-screen diff viewing and preview-pane rendering.

A diff renderer (delta by default) is used when it is on PATH. Otherwise the
full view goes through a pager and the preview prints the colored diff as
git produced it.
"""

from __future__ import annotations

import os
import shlex
import shutil
import subprocess
import sys
from collections.abc import Callable
from typing import TextIO

from rich.console import Console

from git_stash_manager.constants import DEFAULT_PAGER
from git_stash_manager.exceptions import StashError
from git_stash_manager.git import StashRepository
from git_stash_manager.logging import get_logger

__all__ = ["DiffViewer"]

logger = get_logger(__name__)


class DiffViewer:
    """Show stash diffs to the operator.

    Args:
        repository: Source of the diffs.
        console: Fallback output when no external program is usable.
        renderer: Diff highlighter executable, or None to never use one.
        pager: Pager command line. None means $PAGER, then less.
        which: PATH lookup, injectable for tests.
        run: Subprocess runner, injectable for tests.
    """

    def __init__(
        self,
        repository: StashRepository,
        console: Console,
        *,
        renderer: str | None = "delta",
        pager: str | None = None,
        which: Callable[[str], str | None] = shutil.which,
        run: Callable[..., subprocess.CompletedProcess[str]] = subprocess.run,
    ) -> None:
        self._repository = repository
        self._console = console
        self._renderer = renderer
        self._pager = pager
        self._which = which
        self._run = run

    def renderer_path(self) -> str | None:
        """PATH location of the diff renderer, if installed."""
        if not self._renderer:
            return None
        return self._which(self._renderer)

    def pager_command(self) -> list[str] | None:
        """Resolve the pager command line, or None if none is installed."""
        command = self._pager or os.environ.get("PAGER") or DEFAULT_PAGER
        argv = shlex.split(command)
        if not argv or self._which(argv[0]) is None:
            return None
        return argv

    def view(self, reference: str) -> None:
        """Page through the full diff of ``reference``.

        Raises:
            StashError: If the diff cannot be produced.
        """
        renderer = self.renderer_path()
        diff = self._repository.show_diff(reference, color=renderer is None)

        if renderer is not None:
            argv = [renderer, "--paging=always"]
        else:
            argv = self.pager_command() or []

        if argv:
            logger.debug("diff_view_started", reference=reference, program=argv[0])
            try:
                self._run(argv, input=diff, text=True, check=False)
                return
            except OSError as e:
                logger.warning("diff_program_failed", program=argv[0], error=str(e))

        self._console.print(diff, markup=False, highlight=False, end="")

    def preview(self, reference: str, out: TextIO | None = None) -> None:
        """Write the preview-pane rendering of ``reference`` to ``out``.

        Never raises: stale references and broken renderers produce a one-line
        message instead, so the selector keeps running.
        """
        stream = out if out is not None else sys.stdout
        renderer = self.renderer_path()
        try:
            diff = self._repository.show_diff(reference, color=renderer is None)
        except StashError as e:
            stream.write(f"{e.message}\n")
            return

        if renderer is not None:
            try:
                self._run(
                    [renderer, "--paging=never"],
                    input=diff,
                    text=True,
                    check=False,
                    stdout=stream if out is not None else None,
                )
                return
            except (OSError, ValueError) as e:
                logger.debug("preview_renderer_failed", error=str(e))

        stream.write(diff)
