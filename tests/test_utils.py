"""
Tests for validators and logging setup.
"""

import logging

import pytest

from waybar_updates.utils.logger import (
    ColoredFormatter, get_current_log_file, get_logger, set_global_config
)
from waybar_updates.utils.validators import (
    validate_color, validate_interval, validate_package_name
)


class TestValidators:

    @pytest.mark.parametrize("name", ["firefox", "package-name", "lib32-glibc", "gtk+", "python3.11", "@scope"])
    def test_valid_package_names(self, name):
        assert validate_package_name(name)

    @pytest.mark.parametrize("name", ["", "../invalid", "-dash", "name with space", "a" * 256])
    def test_invalid_package_names(self, name):
        assert not validate_package_name(name)

    @pytest.mark.parametrize("value, expected", [
        ("f7768e", True),
        ("F00", True),
        ("12345", False),
        ("#ff0000", False),
        ("red", False),
        (None, False),
        (123456, False),
    ])
    def test_validate_color(self, value, expected):
        assert validate_color(value) is expected

    @pytest.mark.parametrize("value, expected", [
        (1, True), (600, True), (0, False), (-1, False), (True, False), (1.5, False), ("10", False),
    ])
    def test_validate_interval(self, value, expected):
        assert validate_interval(value) is expected


class TestLogger:

    @pytest.fixture(autouse=True)
    def _reset(self):
        yield
        set_global_config({})

    def test_get_logger_is_cached(self):
        assert get_logger("waybar_updates.test") is get_logger("waybar_updates.test")

    def test_handlers_never_use_stdout(self):
        import sys

        logger = get_logger("waybar_updates.test.stdout")
        for handler in logger.handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                assert handler.stream is not sys.stdout

    def test_verbose_enables_debug(self):
        logger = get_logger("waybar_updates.test.level")
        assert logger.level == logging.INFO

        set_global_config({'verbose_logging': True})
        assert logger.level == logging.DEBUG

    def test_log_file(self, tmp_path):
        log_path = tmp_path / "logs" / "waybar-updates.log"
        set_global_config({'log_file': str(log_path)})
        assert get_current_log_file() == str(log_path)

        get_logger("waybar_updates.test.file").info("tick from pacman")

        assert "tick from pacman" in log_path.read_text()

    def test_colored_formatter_leaves_record_untouched(self):
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "hello", None, None)
        output = ColoredFormatter('%(levelname)s %(message)s').format(record)

        assert "WARNING" in output
        assert record.levelname == "WARNING"
