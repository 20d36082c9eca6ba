"""Click commands for git-stash-manager."""
