"""Unit tests for setup_logging."""

import logging
from unittest.mock import patch

from shared_lib.logging import setup_logging


class TestSetupLogging:
    """Tests for the logging bootstrap."""

    def test_quiets_http_loggers(self):
        """Test httpx and httpcore are limited to warnings."""
        with patch("logging.basicConfig"):
            setup_logging()

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_passes_level_to_basic_config(self):
        """Test the requested level is used for the root configuration."""
        with patch("logging.basicConfig") as mock_basic_config:
            setup_logging(logging.DEBUG)

        assert mock_basic_config.call_args.kwargs["level"] == logging.DEBUG
