"""Tests for the logging setup module."""

import logging
import sys

from src.utils.logger import get_logger, setup_logging


class TestSetupLogging:
    """Tests for the setup_logging function."""

    def test_setup_creates_stdout_handler(self) -> None:
        root = logging.getLogger()
        saved_level = root.level
        root.handlers.clear()

        setup_logging("DEBUG")
        assert len(root.handlers) == 1
        handler = root.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stdout
        assert root.level == logging.DEBUG

        # Cleanup
        root.handlers.clear()
        root.setLevel(saved_level)

    def test_setup_idempotent(self) -> None:
        root = logging.getLogger()
        saved_level = root.level
        root.handlers.clear()

        setup_logging("INFO")
        setup_logging("DEBUG")
        assert len(root.handlers) == 1
        assert root.level == logging.INFO

        root.handlers.clear()
        root.setLevel(saved_level)

    def test_lowercase_level(self) -> None:
        root = logging.getLogger()
        saved_level = root.level
        root.handlers.clear()

        setup_logging("warning")
        assert root.level == logging.WARNING

        root.handlers.clear()
        root.setLevel(saved_level)

    def test_invalid_level_defaults_to_info(self) -> None:
        root = logging.getLogger()
        saved_level = root.level
        root.handlers.clear()

        setup_logging("NONEXISTENT")
        assert root.level == logging.INFO

        root.handlers.clear()
        root.setLevel(saved_level)


class TestGetLogger:
    """Tests for the get_logger function."""

    def test_returns_named_logger(self) -> None:
        logger = get_logger("src.pipeline.orchestrator")
        assert logger.name == "src.pipeline.orchestrator"
        assert isinstance(logger, logging.Logger)

    def test_same_name_returns_same_logger(self) -> None:
        assert get_logger("src.api.app") is get_logger("src.api.app")
