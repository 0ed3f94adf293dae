"""
Utils package for Waybar Updates.
"""

# SPDX-License-Identifier: GPL-3.0-or-later

from .logger import get_logger, set_global_config
from .validators import validate_color, validate_interval, validate_package_name
from .subprocess_wrapper import SecureSubprocess
from .channel import ChannelClosed, ChannelSelector, ChannelTimeout, HandoffChannel

__all__ = [
    "get_logger",
    "set_global_config",
    "validate_color",
    "validate_interval",
    "validate_package_name",
    "SecureSubprocess",
    "ChannelClosed",
    "ChannelSelector",
    "ChannelTimeout",
    "HandoffChannel",
]
