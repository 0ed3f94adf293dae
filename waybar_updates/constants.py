"""
Application constants for Waybar Updates.
"""

# SPDX-License-Identifier: GPL-3.0-or-later

from pathlib import Path

# Application info
APP_NAME = "waybar-updates"
APP_VERSION = "1.0.0"
APP_USER_AGENT = f"{APP_NAME}/{APP_VERSION}"

# Default values (seconds)
DEFAULT_INTERVAL = 10
DEFAULT_INTERVAL_SYNC = 600
MIN_INTERVAL_SYNC = 10

# Version category colors, ordered major, minor, patch, pre, other
COLOR_CATEGORIES = ("major", "minor", "patch", "pre", "other")
DEFAULT_COLORS = {
    "major": "f7768e",
    "minor": "ff9e64",
    "patch": "e0af68",
    "pre": "9ece6a",
    "other": "7dcfff",
}
PALETTE_SIZE = len(COLOR_CATEGORIES)

# Hex colors accepted by Pango: #rgb, #rrggbb, #rrrgggbbb, #rrrrggggbbbb
COLOR_PATTERN = r'^(?:[0-9a-fA-F]{3}){1,4}$'

# External commands
CHECKUPDATES_COMMAND = "checkupdates"
CHECKUPDATES_NO_UPDATES_EXIT_CODE = 2
PACMAN_COMMAND = "pacman"

# AUR RPC
AUR_RPC_URL = "https://aur.archlinux.org/rpc/"
AUR_RPC_VERSION = "5"
AUR_PREFIX = "aur"

# Status text
STATUS_CHECKING = "Checking for updates..."
STATUS_UP_TO_DATE = "All packages are up to date"
AUR_NOTHING_INSTALLED = "Nothing from aur installed"

# Exit codes
EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_OUTPUT_ERROR = 2


# Paths
def get_config_dir() -> Path:
    """Get the configuration directory path."""
    return Path.home() / ".config" / APP_NAME


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return get_config_dir() / "config.json"

# Package name validation (pacman rules: no leading dot or hyphen)
PACKAGE_NAME_PATTERN = r'^[a-zA-Z0-9@_+][a-zA-Z0-9@._+\-]*$'
MAX_PACKAGE_NAME_LENGTH = 255
