"""
Input validation helpers.
"""

# SPDX-License-Identifier: GPL-3.0-or-later

import re
from typing import Any

from ..constants import COLOR_PATTERN, MAX_PACKAGE_NAME_LENGTH, PACKAGE_NAME_PATTERN
from .logger import get_logger

logger = get_logger(__name__)


def validate_package_name(name: str) -> bool:
    """
    Validate a package name before it is sent to the AUR.

    Args:
        name: Package name to validate

    Returns:
        True if package name is valid
    """
    if not name or len(name) > MAX_PACKAGE_NAME_LENGTH:
        return False

    if not re.match(PACKAGE_NAME_PATTERN, name):
        logger.warning(f"Invalid package name format: {name!r}")
        return False

    return True


def validate_color(value: Any) -> bool:
    """
    Check that a value is a hex color without the leading '#'.

    Args:
        value: Color value from the command line or config file

    Returns:
        True if Pango will accept '#' + value
    """
    return isinstance(value, str) and re.match(COLOR_PATTERN, value) is not None


def validate_interval(value: Any) -> bool:
    """Check that a value is a positive whole number of seconds."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
