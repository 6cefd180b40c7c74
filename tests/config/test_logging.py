"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from modlink.config.logging import configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    project = logging.getLogger("modlink")
    project_level = project.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    project.setLevel(project_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("modlink").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_quiet_by_default(self) -> None:
        configure_logging()
        assert logging.getLogger("modlink").level == logging.WARNING

    def test_json_lines_on_stderr(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("modlink.test").warning("json test", target="lib/blog")
        captured = capfd.readouterr()
        parsed = json.loads(captured.err.strip())
        assert parsed["event"] == "json test"
        assert parsed["target"] == "lib/blog"
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "modlink.test"
        assert "timestamp" in parsed
        assert captured.out == ""

    def test_stdlib_debug_from_engine(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("modlink.infrastructure.resolver").debug("Resolving %s", "x.map")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Resolving x.map"
        assert parsed["level"] == "debug"

    def test_debug_hidden_without_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        logging.getLogger("modlink.infrastructure.projection").debug("noise")
        logging.getLogger("pluggy").debug("noise")
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        configure_logging(verbose=True)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1
