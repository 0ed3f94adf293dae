"""
Shared pytest fixtures for Waybar Updates.
"""

import subprocess
from unittest.mock import Mock

import pytest

from waybar_updates.aur_client import AurClient
from waybar_updates.package_manager import PackageManager


@pytest.fixture
def completed():
    """Factory for CompletedProcess results."""
    def _make(returncode=0, stdout="", stderr="", args=None):
        return subprocess.CompletedProcess(
            args=args or ["checkupdates"],
            returncode=returncode,
            stdout=stdout,
            stderr=stderr,
        )
    return _make


@pytest.fixture
def package_manager():
    """PackageManager double with no updates and no foreign packages."""
    manager = Mock(spec=PackageManager)
    manager.check_for_updates.return_value = []
    manager.get_foreign_packages.return_value = {}
    return manager


@pytest.fixture
def aur_client():
    """AurClient double returning no records."""
    client = Mock(spec=AurClient)
    client.info.return_value = []
    return client
