"""
Logging configuration for Waybar Updates.

Standard output is reserved for the JSON status stream, so every handler
created here writes to stderr or to a log file.
"""

# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import logging
import sys
import threading
from pathlib import Path
from typing import Optional, Dict, Any

from colorama import Fore, Style  # type: ignore[import-untyped]


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for terminal output."""

    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.MAGENTA,
        'RESET': Style.RESET_ALL
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        log_color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        reset_color = self.COLORS['RESET']

        # Work on a copy so file handlers see the plain level name
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{log_color}{record.levelname}{reset_color}"

        return super().format(record)


CONSOLE_FORMAT = '%(levelname)s - %(name)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Global configuration for logging with thread synchronization
_global_config: Optional[Dict[str, Any]] = None
_log_file_path: Optional[str] = None
_logger_instances: Dict[str, logging.Logger] = {}
_global_state_lock = threading.RLock()


def _current_level() -> int:
    if _global_config and _global_config.get('verbose_logging'):
        return logging.DEBUG
    return logging.INFO


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    if sys.stderr.isatty():
        handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def _configure(logger: logging.Logger) -> None:
    """Attach handlers matching the current global settings."""
    level = _current_level()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        if isinstance(handler, logging.FileHandler):
            handler.close()

    logger.setLevel(level)
    logger.addHandler(_console_handler(level))

    if _log_file_path:
        try:
            logger.addHandler(_file_handler(_log_file_path, level))
        except OSError:
            # Don't log this error to avoid recursion
            pass

    logger.propagate = False


def set_global_config(config: Dict[str, Any]) -> None:
    """
    Set global configuration for logging with thread safety.

    Args:
        config: Dictionary with optional 'verbose_logging' and 'log_file' keys
    """
    global _global_config, _log_file_path
    with _global_state_lock:
        _global_config = dict(config)

        log_file = config.get('log_file')
        if log_file:
            log_path = Path(log_file).expanduser()
            try:
                log_path.parent.mkdir(parents=True, exist_ok=True)
                _log_file_path = str(log_path)
            except OSError as e:
                _log_file_path = None
                print(f"Cannot create log directory for {log_path}: {e}", file=sys.stderr)
        else:
            _log_file_path = None

        # Reconfigure all existing loggers
        for logger in _logger_instances.values():
            _configure(logger)


def get_current_log_file() -> Optional[str]:
    """Get the current log file path if file logging is active."""
    with _global_state_lock:
        return _log_file_path


def get_logger(name: str) -> logging.Logger:
    """
    Get or create a logger instance with thread safety.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    with _global_state_lock:
        if name in _logger_instances:
            return _logger_instances[name]

        logger = logging.getLogger(name)
        _configure(logger)
        _logger_instances[name] = logger
        return logger
