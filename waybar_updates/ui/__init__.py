"""
Tooltip rendering for Waybar Updates.
"""

# SPDX-License-Identifier: GPL-3.0-or-later

from .formatter import classify_version_delta, format_updates

__all__ = [
    "classify_version_delta",
    "format_updates",
]
