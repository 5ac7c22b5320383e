"""Unit tests for logging setup."""

from loguru import logger

from app.config.settings import settings
from app.utils.logging import setup_logging


class TestSetupLogging:
    """Test loguru sink configuration."""

    def test_file_sink_receives_records(self, tmp_path, monkeypatch):
        log_file = tmp_path / "app.log"
        monkeypatch.setattr(settings, "log_file", str(log_file))

        setup_logging()
        logger.info("file sink check")
        logger.remove()

        assert "file sink check" in log_file.read_text(encoding="utf-8")
