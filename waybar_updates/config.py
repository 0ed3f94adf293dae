"""
Configuration management for Waybar Updates.

A Config is built once at startup from the built-in defaults, an optional
JSON file and the command line, validated, and then passed explicitly to
every component.
"""

# SPDX-License-Identifier: GPL-3.0-or-later

import json
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .constants import (
    COLOR_CATEGORIES, DEFAULT_COLORS, DEFAULT_INTERVAL, DEFAULT_INTERVAL_SYNC,
    MIN_INTERVAL_SYNC, get_default_config_path
)
from .exceptions import ConfigurationError
from .models import FormatOptions
from .utils.logger import get_logger
from .utils.validators import validate_color, validate_interval

logger = get_logger(__name__)

MAX_CONFIG_FILE_SIZE = 1024 * 1024

INTERVAL_ERROR = (
    "`interval` and `interval-sync` must be greater than 0 and 9 respectively "
    "and `interval-sync` must be greater or equal to `interval`."
)


def _default_colors() -> Tuple[str, ...]:
    return tuple(DEFAULT_COLORS[category] for category in COLOR_CATEGORIES)


@dataclass(frozen=True)
class Config:
    """Immutable runtime configuration."""
    interval: int = DEFAULT_INTERVAL
    interval_sync: int = DEFAULT_INTERVAL_SYNC
    skip_aur: bool = False
    raw_output: bool = False
    no_color: bool = False
    colors: Tuple[str, ...] = field(default_factory=_default_colors)
    aur_timeout: Optional[float] = None
    verbose: bool = False
    log_file: Optional[str] = None

    @property
    def sync_every_n_ticks(self) -> int:
        """Number of fast ticks between two sync checks."""
        return max(1, self.interval_sync // self.interval)

    def format_options(self) -> FormatOptions:
        return FormatOptions(
            raw_output=self.raw_output,
            no_color=self.no_color,
            colors=self.colors,
        )

    def validate(self) -> None:
        """
        Check the interval constraints and color values.

        Raises:
            ConfigurationError: If any value is invalid
        """
        if (not validate_interval(self.interval)
                or not validate_interval(self.interval_sync)
                or self.interval_sync < MIN_INTERVAL_SYNC
                or self.interval_sync < self.interval):
            raise ConfigurationError(INTERVAL_ERROR)

        if len(self.colors) != len(COLOR_CATEGORIES):
            raise ConfigurationError(f"Expected {len(COLOR_CATEGORIES)} colors, got {len(self.colors)}")
        for category, value in zip(COLOR_CATEGORIES, self.colors):
            if not validate_color(value):
                raise ConfigurationError(
                    f"`color-{category}` must be a hex color without '#', got {value!r}"
                )

        if self.aur_timeout is not None:
            if isinstance(self.aur_timeout, bool) or not isinstance(self.aur_timeout, (int, float)) \
                    or self.aur_timeout <= 0:
                raise ConfigurationError(f"`aur-timeout` must be a positive number, got {self.aur_timeout!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base: Optional['Config'] = None) -> 'Config':
        """
        Create from a config file dictionary, on top of base or the defaults.

        Unknown keys are ignored with a warning; colors may be given
        partially.
        """
        base = base or cls()
        known = {f.name for f in fields(cls)}
        changes: Dict[str, Any] = {}

        for key, value in data.items():
            if key not in known:
                logger.warning(f"Ignoring unknown config key: {key}")
                continue
            if key == "colors":
                changes["colors"] = cls._merge_colors(base.colors, value)
            else:
                changes[key] = value

        return replace(base, **changes)

    @staticmethod
    def _merge_colors(current: Tuple[str, ...], value: Any) -> Tuple[str, ...]:
        if not isinstance(value, dict):
            raise ConfigurationError("`colors` must be an object mapping category to hex color")
        colors = list(current)
        for category, color in value.items():
            if category not in COLOR_CATEGORIES:
                logger.warning(f"Ignoring unknown color category: {category}")
                continue
            colors[COLOR_CATEGORIES.index(category)] = color
        return tuple(colors)


def load_config_file(config_file: Optional[str] = None) -> Dict[str, Any]:
    """
    Read the JSON config file.

    A missing default file is normal. A missing explicit file, unreadable
    file or invalid JSON is logged and treated as empty.

    Args:
        config_file: Explicit path, the default location if None

    Returns:
        Dictionary of settings, possibly empty
    """
    explicit = config_file is not None
    path = Path(config_file).expanduser() if explicit else get_default_config_path()

    try:
        file_size = os.path.getsize(path)
        if file_size > MAX_CONFIG_FILE_SIZE:
            logger.error(f"Config file too large: {file_size} bytes")
            return {}

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        if explicit:
            logger.warning(f"Config file not found: {path}")
        return {}
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in config file {path}: {e}")
        return {}
    except PermissionError as e:
        logger.error(f"Permission denied reading config file {path}: {e}")
        return {}
    except OSError as e:
        logger.error(f"Error reading config file {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.error(f"Config file {path} must contain a JSON object")
        return {}

    logger.debug(f"Loaded configuration from {path}")
    return data
