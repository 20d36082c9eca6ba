"""External tools the stash browser relies on (git, fzf, delta).

Checks which are installed and builds install hints for the package manager
found on this machine. Used by the ``doctor`` command.
"""

from __future__ import annotations

import platform
import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass

__all__ = [
    "DependencyStatus",
    "check_dependencies",
    "detect_package_manager",
    "install_hint",
]

#: Installation instructions per tool
INSTALL_URLS: dict[str, str] = {
    "git": "https://git-scm.com/downloads",
    "fzf": "https://github.com/junegunn/fzf#installation",
    "delta": "https://github.com/dandavison/delta#installation",
}

#: Package managers to probe, per operating system, in preference order
PACKAGE_MANAGERS: dict[str, tuple[str, ...]] = {
    "Darwin": ("brew",),
    "Linux": ("apt-get", "dnf", "pacman", "apk"),
    "Windows": ("winget", "choco", "scoop"),
}

#: Package names that differ from the tool name
PACKAGE_NAMES: dict[tuple[str, str], str] = {
    ("fzf", "winget"): "junegunn.fzf",
    ("delta", "brew"): "git-delta",
    ("delta", "apt-get"): "git-delta",
    ("delta", "dnf"): "git-delta",
    ("delta", "pacman"): "git-delta",
    ("delta", "winget"): "dandavison.delta",
}

_INSTALL_COMMANDS: dict[str, str] = {
    "brew": "brew install {package}",
    "apt-get": "sudo apt-get install -y {package}",
    "dnf": "sudo dnf install -y {package}",
    "pacman": "sudo pacman -S --noconfirm {package}",
    "apk": "sudo apk add {package}",
    "winget": "winget install {package}",
    "choco": "choco install {package} -y",
    "scoop": "scoop install {package}",
}


@dataclass(frozen=True, slots=True)
class DependencyStatus:
    """Status of an external CLI dependency.

    Attributes:
        name: Dependency name (e.g., "git", "fzf").
        available: Whether the dependency is installed and accessible.
        version: Version string if available.
        path: Path to executable if found.
        error: Error message if not available.
        install_url: URL for installation instructions.
    """

    name: str
    available: bool
    version: str | None = None
    path: str | None = None
    error: str | None = None
    install_url: str | None = None


def check_dependencies(
    required: list[str] | None = None,
    *,
    which: Callable[[str], str | None] = shutil.which,
) -> list[DependencyStatus]:
    """Check external tools and return their status.

    For each tool found on PATH, runs ``<tool> --version`` and keeps the
    first line of output.

    Args:
        required: Tool names to check. Defaults to ["git", "fzf", "delta"].
        which: PATH lookup, injectable for tests.

    Returns:
        One DependencyStatus per tool, in the order given.

    Example:
        >>> statuses = check_dependencies(["git", "fzf"])
        >>> [s.name for s in statuses if not s.available]
        ['fzf']
    """
    if required is None:
        required = ["git", "fzf", "delta"]

    return [_probe(tool, which(tool)) for tool in required]


def _probe(tool: str, path: str | None) -> DependencyStatus:
    if path is None:
        return DependencyStatus(
            name=tool,
            available=False,
            error=f"{tool} is not installed or not in PATH",
            install_url=INSTALL_URLS.get(tool),
        )

    version: str | None
    error: str | None
    try:
        completed = subprocess.run(
            [path, "--version"], capture_output=True, text=True, timeout=5
        )
    except subprocess.TimeoutExpired:
        version, error = None, "Version check timed out"
    except OSError as e:
        version, error = None, f"Error checking version: {e}"
    else:
        first_line = completed.stdout.strip().partition("\n")[0]
        if completed.returncode == 0:
            version, error = first_line or None, None
        else:
            version, error = None, f"--version exited with {completed.returncode}"

    return DependencyStatus(
        name=tool,
        available=True,
        version=version,
        path=path,
        error=error,
        install_url=INSTALL_URLS.get(tool),
    )


def detect_package_manager(
    system: str | None = None,
    *,
    which: Callable[[str], str | None] = shutil.which,
) -> str | None:
    """Find the first known package manager installed for this OS.

    Args:
        system: Operating system name as reported by platform.system().
        which: PATH lookup, injectable for tests.

    Returns:
        Package manager executable name, or None if none is found.
    """
    system = system or platform.system()
    for manager in PACKAGE_MANAGERS.get(system, ()):
        if which(manager) is not None:
            return manager
    return None


def install_hint(tool: str, package_manager: str | None) -> str:
    """Describe how to install ``tool``.

    Args:
        tool: Tool name (e.g., "delta").
        package_manager: Result of :func:`detect_package_manager`.

    Returns:
        An install command, or the tool's installation URL.
    """
    if package_manager in _INSTALL_COMMANDS:
        package = PACKAGE_NAMES.get((tool, package_manager), tool)
        return _INSTALL_COMMANDS[package_manager].format(package=package)
    return INSTALL_URLS.get(tool, f"Install {tool} manually")
