"""Tests for logging setup."""

import sys

from loguru import logger

from statkit.settings import logging as log_settings


class TestSetupLogging:
    def test_file_sink(self, tmp_path, monkeypatch):
        monkeypatch.setattr(log_settings, "LOG_DIR", tmp_path / "logs")
        try:
            log_settings.setup_logging(level="DEBUG", to_file=True)
            logger.debug("statistic evaluated")
            logger.complete()
            files = list((tmp_path / "logs").glob("statkit_*.log"))
            assert len(files) == 1
            assert "statistic evaluated" in files[0].read_text()
        finally:
            logger.remove()
            logger.add(sys.stderr)
