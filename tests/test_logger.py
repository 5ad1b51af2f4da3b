"""Unit tests for logging setup driven by LOG_* settings."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from unittest.mock import MagicMock
from louage.utils import logger as log_setup


def log_config(log_dir, **overrides):
    config = MagicMock()
    config.LOG_DIR = str(log_dir)
    config.LOG_FILE = "fleet.log"
    config.LOG_MAX_BYTES = 1024
    config.LOG_BACKUP_COUNT = 3
    for key, value in overrides.items():
        setattr(config, key, value)
    return config


class TestLogFile:
    def test_file_location_from_settings(self, tmp_path):
        assert log_setup.log_file_path(log_config(tmp_path)) == str(tmp_path / "fleet.log")

    def test_default_directory_is_project_logs(self, tmp_path):
        path = log_setup.log_file_path(log_config(tmp_path, LOG_DIR=None))
        assert path == os.path.join(log_setup.PROJECT_ROOT, "logs", "fleet.log")

    def test_rotation_from_settings(self, tmp_path):
        handler = log_setup.build_file_handler(log_config(tmp_path / "nested"))
        try:
            assert handler.maxBytes == 1024
            assert handler.backupCount == 3
            assert handler.baseFilename == str(tmp_path / "nested" / "fleet.log")
            assert (tmp_path / "nested").is_dir()
        finally:
            handler.close()

    def test_named_logger(self):
        assert log_setup.get_logger("louage.test").name == "louage.test"
