"""
Read-only pacman queries for Arch Linux systems.
"""

# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import subprocess
from typing import Dict, List

from .constants import (
    CHECKUPDATES_COMMAND, CHECKUPDATES_NO_UPDATES_EXIT_CODE, PACMAN_COMMAND
)
from .exceptions import PackageManagerError
from .utils.logger import get_logger
from .utils.subprocess_wrapper import SecureSubprocess
from .utils.validators import validate_package_name

logger = get_logger(__name__)


class PackageManager:
    """Runs checkupdates and pacman and parses their output."""

    def check_for_updates(self, sync: bool) -> List[str]:
        """
        List pending repository upgrades.

        Args:
            sync: Refresh a temporary copy of the sync databases first;
                otherwise compare against the last synced metadata only

        Returns:
            Update lines as printed by checkupdates, empty if none

        Raises:
            PackageManagerError: If checkupdates cannot run or fails
        """
        cmd = [CHECKUPDATES_COMMAND, "--nocolor"]
        if not sync:
            cmd.insert(1, "--nosync")

        result = self._run(cmd)

        if result.returncode == CHECKUPDATES_NO_UPDATES_EXIT_CODE:
            return []
        if result.returncode != 0:
            error_msg = result.stderr.strip() if result.stderr else ""
            detail = f"exit status {result.returncode}"
            if error_msg:
                detail = f"{detail}: {error_msg.splitlines()[-1]}"
            raise PackageManagerError(detail, command=CHECKUPDATES_COMMAND)

        output = result.stdout.strip()
        if not output:
            return []
        return [line.strip() for line in output.split('\n') if line.strip()]

    def get_foreign_packages(self) -> Dict[str, str]:
        """
        Get installed packages that are not in any sync repository.

        Returns:
            Mapping of package name to installed version

        Raises:
            PackageManagerError: If pacman cannot run or fails
        """
        result = self._run([PACMAN_COMMAND, "-Qm"])

        # pacman -Qm exits 1 with no output when nothing foreign is installed
        if result.returncode != 0 and (result.stdout.strip() or result.stderr.strip()):
            error_msg = result.stderr.strip() or f"exit status {result.returncode}"
            raise PackageManagerError(error_msg, command=f"{PACMAN_COMMAND} -Qm")

        packages: Dict[str, str] = {}
        skipped = 0
        for line in result.stdout.split('\n'):
            parts = line.split()
            if len(parts) < 2:
                continue
            name, version = parts[0], parts[1]
            if not validate_package_name(name):
                skipped += 1
                continue
            packages[name] = version

        if skipped:
            logger.debug(f"Skipped {skipped} foreign packages with invalid names")
        logger.debug(f"Found {len(packages)} foreign packages")
        return packages

    @staticmethod
    def _run(cmd: List[str]) -> subprocess.CompletedProcess:
        try:
            return SecureSubprocess.run(cmd)
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            raise PackageManagerError(str(e), command=cmd[0])
