"""
Secure subprocess wrapper for the read-only package queries.
"""

# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import os
import stat
import subprocess
import threading
from typing import Any, Dict, List, Optional

from ..constants import CHECKUPDATES_COMMAND, PACMAN_COMMAND
from .logger import get_logger

logger = get_logger(__name__)


class SecureSubprocess:
    """Wrapper around subprocess.run restricted to whitelisted commands."""

    ALLOWED_COMMANDS: Dict[str, str] = {
        CHECKUPDATES_COMMAND: 'Check for pending repository updates',
        PACMAN_COMMAND: 'Package manager',
    }

    STANDARD_PATHS = ['/usr/bin', '/bin', '/usr/local/bin']

    _command_path_cache: Dict[str, str] = {}
    _validation_lock = threading.Lock()

    @classmethod
    def _search_paths(cls) -> List[str]:
        path_env = os.environ.get('PATH', '')
        paths = [p.strip() for p in path_env.split(os.pathsep) if p.strip()]
        for std_path in cls.STANDARD_PATHS:
            if std_path not in paths:
                paths.append(std_path)
        return paths

    @staticmethod
    def _is_safe_executable(file_path: str) -> bool:
        """Reject world-writable executables."""
        try:
            stat_info = os.stat(file_path)
        except OSError:
            return False
        return not (stat_info.st_mode & stat.S_IWOTH)

    @classmethod
    def _find_command_path(cls, command: str) -> Optional[str]:
        """
        Find the absolute path of a command.

        Args:
            command: Command name to find

        Returns:
            Absolute path if found and valid, None otherwise
        """
        with cls._validation_lock:
            cached_path = cls._command_path_cache.get(command)
            if cached_path and os.path.exists(cached_path):
                return cached_path
            cls._command_path_cache.pop(command, None)

            for path_dir in cls._search_paths():
                full_path = os.path.join(path_dir, command)
                if os.path.isfile(full_path) and os.access(full_path, os.X_OK):
                    if cls._is_safe_executable(full_path):
                        cls._command_path_cache[command] = full_path
                        logger.debug(f"Found command {command} at {full_path}")
                        return full_path
                    logger.warning(f"Skipping world-writable executable {full_path}")

            logger.debug(f"Command {command} not found in system PATH")
            return None

    @classmethod
    def validate_command(cls, cmd: List[str]) -> List[str]:
        """
        Validate a command and resolve its executable path.

        Args:
            cmd: Command as list of arguments

        Returns:
            Command with the executable replaced by its absolute path

        Raises:
            ValueError: If the command is not allowed
            FileNotFoundError: If the command is not installed
        """
        if not cmd:
            raise ValueError("Empty command")

        cmd_name = os.path.basename(cmd[0])
        if cmd_name not in cls.ALLOWED_COMMANDS:
            raise ValueError(f"Command '{cmd[0]}' not in allowed list")

        secure_path = cls._find_command_path(cmd_name)
        if not secure_path:
            raise FileNotFoundError(f"{cmd_name}: command not found")

        return [secure_path] + list(cmd[1:])

    @classmethod
    def run(
        cls,
        cmd: List[str],
        timeout: Optional[float] = None,
        **kwargs: Any
    ) -> subprocess.CompletedProcess:
        """
        Run a whitelisted command and capture its text output.

        The C locale is forced so that output parsing does not depend on
        the user's language settings.

        Args:
            cmd: Command to run
            timeout: Timeout in seconds, None to wait forever
            **kwargs: Additional arguments for subprocess.run

        Returns:
            CompletedProcess instance
        """
        resolved = cls.validate_command(cmd)

        env = kwargs.pop('env', None) or os.environ.copy()
        env['LC_ALL'] = 'C'
        kwargs.pop('shell', None)

        logger.debug(f"Running command: {' '.join(resolved)}")
        result = subprocess.run(
            resolved,
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
            env=env,
            **kwargs
        )

        if result.returncode != 0:
            logger.debug(f"Command returned non-zero: {result.returncode}")

        return result
