from __future__ import annotations

from git_stash_manager.main import cli

if __name__ == "__main__":
    cli(prog_name="git-stash-manager")
