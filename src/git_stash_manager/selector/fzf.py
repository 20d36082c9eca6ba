"""fzf-backed selector.

Each :meth:`FzfSelector.select` call runs fzf once. The request's keys are
passed with ``--expect`` so fzf exits and reports which key was pressed;
``--print-query`` reports the edited query. The output is three lines:
query, key (empty for Enter), and the highlighted line.
"""

from __future__ import annotations

import re
import shutil
import subprocess
from collections.abc import Callable

from git_stash_manager.constants import DEFAULT_PREVIEW_WINDOW, MIN_SELECTOR_VERSION
from git_stash_manager.exceptions import (
    SelectorError,
    SelectorTooOldError,
    SelectorUnavailableError,
)
from git_stash_manager.logging import get_logger
from git_stash_manager.selector.protocol import (
    SelectorCapabilities,
    SelectorRequest,
    SelectorResult,
)

__all__ = [
    "FzfSelector",
    "build_fzf_args",
    "detect_selector",
    "parse_fzf_output",
    "parse_version",
]

logger = get_logger(__name__)

_VERSION_PATTERN = re.compile(r"^\s*(\d+)\.(\d+)(?:\.(\d+))?")

#: fzf exit codes that mean "no selection" rather than an error
_ABORT_CODES = frozenset({130})
_NO_MATCH_CODE = 1


def parse_version(text: str) -> tuple[int, ...] | None:
    """Parse the leading dotted version of ``fzf --version`` output.

    Args:
        text: Output such as "0.46.1 (brew)".

    Returns:
        A 3-tuple, or None if no version is found.
    """
    match = _VERSION_PATTERN.match(text)
    if match is None:
        return None
    major, minor, patch = match.groups()
    return (int(major), int(minor), int(patch or 0))


def detect_selector(
    command: str = "fzf",
    min_version: str = MIN_SELECTOR_VERSION,
    *,
    which: Callable[[str], str | None] = shutil.which,
    run: Callable[..., subprocess.CompletedProcess[str]] = subprocess.run,
) -> SelectorCapabilities:
    """Check that the selector is installed and recent enough.

    Args:
        command: Selector executable.
        min_version: Oldest acceptable version.
        which: PATH lookup, injectable for tests.
        run: Subprocess runner, injectable for tests.

    Returns:
        Capabilities of the installed selector.

    Raises:
        SelectorUnavailableError: If the executable is not on PATH.
        SelectorTooOldError: If the version is unknown or too old.
    """
    path = which(command)
    if path is None:
        raise SelectorUnavailableError(command)

    try:
        result = run(
            [path, "--version"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        output = result.stdout.strip()
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("selector_version_failed", command=command, error=str(e))
        output = ""

    version = parse_version(output)
    required = parse_version(min_version) or (0,)
    if version is None or version < required:
        raise SelectorTooOldError(output.split(" ")[0], min_version, command)

    logger.debug("selector_detected", command=command, path=path, version=version)
    return SelectorCapabilities(command=command, path=path, version=version)


def build_fzf_args(
    request: SelectorRequest,
    capabilities: SelectorCapabilities,
    *,
    preview_command: str | None = None,
    preview_window: str = DEFAULT_PREVIEW_WINDOW,
) -> list[str]:
    """Build the fzf command line for ``request``.

    Args:
        request: What to show and which keys end the invocation.
        capabilities: Installed fzf.
        preview_command: Shell command rendering the highlighted line;
            fzf replaces ``{}`` with the quoted line.
        preview_window: Preview pane placement.

    Returns:
        argv for subprocess.
    """
    args = [
        capabilities.path,
        "--ansi",
        "--no-multi",
        "--sync",
        "--print-query",
        "--header",
        request.header,
        "--header-first",
        "--prompt",
        request.prompt,
    ]

    if not request.search:
        args.append("--disabled")

    expect = [key for key in request.keys if key != "enter"]
    if expect:
        args.append(f"--expect={','.join(expect)}")
    if "enter" not in request.keys:
        args += ["--bind", "enter:ignore"]
    if "esc" not in request.keys:
        args += ["--bind", "esc:clear-query"]

    if request.query:
        args += ["--query", request.query]

    if request.position > 0 and capabilities.start_position:
        args += ["--bind", f"start:pos({request.position + 1})"]

    if preview_command:
        args += ["--preview", preview_command, "--preview-window", preview_window]

    return args


def parse_fzf_output(stdout: str, returncode: int) -> SelectorResult:
    """Parse ``--print-query --expect`` output into a SelectorResult.

    Args:
        stdout: Captured standard output.
        returncode: fzf exit status.

    Returns:
        The parsed result; abort when fzf was interrupted.

    Raises:
        SelectorError: If fzf reported an error.
    """
    if returncode in _ABORT_CODES:
        return SelectorResult(key=None)
    if returncode not in (0, _NO_MATCH_CODE):
        raise SelectorError(f"fzf exited with status {returncode}")

    lines = stdout.split("\n")
    query = lines[0] if lines else ""
    key = lines[1] if len(lines) > 1 else ""
    line = lines[2] if len(lines) > 2 and lines[2] else None
    return SelectorResult(key=key or "enter", query=query, line=line)


class FzfSelector:
    """Selector that drives an fzf subprocess.

    Args:
        capabilities: Result of :func:`detect_selector`.
        preview_command: Shell command for the preview pane.
        preview_window: Preview pane placement.
        run: Subprocess runner, injectable for tests.
    """

    def __init__(
        self,
        capabilities: SelectorCapabilities,
        *,
        preview_command: str | None = None,
        preview_window: str = DEFAULT_PREVIEW_WINDOW,
        run: Callable[..., subprocess.CompletedProcess[str]] = subprocess.run,
    ) -> None:
        self._capabilities = capabilities
        self._preview_command = preview_command
        self._preview_window = preview_window
        self._run = run

    @property
    def capabilities(self) -> SelectorCapabilities:
        return self._capabilities

    def select(self, request: SelectorRequest) -> SelectorResult:
        args = build_fzf_args(
            request,
            self._capabilities,
            preview_command=self._preview_command,
            preview_window=self._preview_window,
        )
        logger.debug(
            "selector_launched",
            keys=request.keys,
            search=request.search,
            position=request.position,
        )
        try:
            result = self._run(
                args,
                input="\n".join(request.lines) + "\n",
                stdout=subprocess.PIPE,
                text=True,
                check=False,
            )
        except OSError as e:
            raise SelectorError(f"Failed to run fzf: {e}") from e

        return parse_fzf_output(result.stdout or "", result.returncode)
