"""
JSON status stream written to standard output.
"""

# SPDX-License-Identifier: GPL-3.0-or-later

import json
import sys
import threading
from typing import Optional, TextIO

from ..exceptions import OutputError
from ..models import MergedStatus


class StatusWriter:
    """Writes one JSON object per line for Waybar's custom module."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        """
        Initialize the writer.

        Args:
            stream: Destination, sys.stdout by default
        """
        self.stream = stream or sys.stdout
        self._lock = threading.Lock()
        self.written = 0

    def write(self, status: MergedStatus) -> None:
        """
        Encode and flush a status object.

        Raises:
            OutputError: If the status cannot be encoded or written
        """
        try:
            line = json.dumps(status.to_dict(), ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise OutputError(f"Failed to encode status: {e}")

        with self._lock:
            try:
                self.stream.write(line + "\n")
                self.stream.flush()
            except (OSError, ValueError) as e:
                raise OutputError(f"Failed to write status: {e}")
            self.written += 1
