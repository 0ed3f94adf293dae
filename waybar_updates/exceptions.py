"""
Custom exceptions for Waybar Updates.
"""

# SPDX-License-Identifier: GPL-3.0-or-later


class WaybarUpdatesError(Exception):
    """Base exception for all Waybar Updates errors."""

    pass


class NetworkError(WaybarUpdatesError):
    """Raised when the AUR query fails."""

    pass


class PackageManagerError(WaybarUpdatesError):
    """Raised when a package manager command fails."""

    def __init__(self, message: str, command: str = "") -> None:
        """Initialize the error."""
        super().__init__(message)
        self.command = command


class ConfigurationError(WaybarUpdatesError):
    """Raised when configuration is invalid."""

    pass


class OutputError(WaybarUpdatesError):
    """Raised when a status object cannot be written to stdout."""

    pass
