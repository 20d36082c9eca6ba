"""Tests for the git_stash_manager.logging module."""

from __future__ import annotations

import json
import logging
import os
import sys
from unittest.mock import patch

import pytest
import structlog

from git_stash_manager.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_default_level_is_warning(self, clean_env: None) -> None:
        configure_logging()

        assert logging.getLogger().level == logging.WARNING

    def test_custom_level(self) -> None:
        """Test setting custom log level."""
        configure_logging(level=logging.DEBUG)

        assert logging.getLogger().level == logging.DEBUG

    def test_level_from_env(self) -> None:
        with patch.dict(os.environ, {"GIT_STASH_MANAGER_LOG_LEVEL": "info"}):
            configure_logging()

            assert logging.getLogger().level == logging.INFO

    def test_single_handler_on_stderr(self) -> None:
        """Test reconfiguring does not stack handlers and never targets stdout."""
        configure_logging()
        configure_logging()

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)
        assert handlers[0].stream is sys.stderr

    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch.dict(os.environ, {"GIT_STASH_MANAGER_LOG_FORMAT": "json"}):
            configure_logging(level=logging.INFO)
            get_logger("test").info("stash_dropped", reference="stash@{0}")

        captured = capsys.readouterr()
        assert captured.out == ""
        record = json.loads(captured.err.strip().splitlines()[-1])
        assert record["event"] == "stash_dropped"
        assert record["reference"] == "stash@{0}"
        assert record["level"] == "info"


class TestGetLogger:
    def test_returns_bound_logger(self) -> None:
        configure_logging()

        log = get_logger(__name__)

        assert log is not None
        assert hasattr(log, "info")


class TestContext:
    def test_bind_and_clear(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(force_json=True, level=logging.INFO)
        bind_context(repo="/tmp/repo")
        get_logger("test").info("with_context")
        clear_context()
        get_logger("test").info("without_context")

        lines = capsys.readouterr().err.strip().splitlines()
        assert json.loads(lines[-2])["repo"] == "/tmp/repo"
        assert "repo" not in json.loads(lines[-1])
        assert structlog.contextvars.get_contextvars() == {}
