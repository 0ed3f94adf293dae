"""
Data models for Waybar Updates.
"""

# SPDX-License-Identifier: GPL-3.0-or-later

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .constants import DEFAULT_COLORS, COLOR_CATEGORIES


class _NoData:
    """Marker sent by a poller that has nothing new this tick."""

    _instance: Optional['_NoData'] = None

    def __new__(cls) -> '_NoData':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_DATA"

    def __bool__(self) -> bool:
        return False


NO_DATA = _NoData()

PollResult = Union[List[str], _NoData]


class UpdateSource(Enum):
    """Producer a poll result came from."""
    PACMAN = "pacman"
    AUR = "aur"


class StatusClass(Enum):
    """CSS class reported to Waybar."""
    UPDATED = "updated"
    HAS_UPDATES = "has-updates"


@dataclass(frozen=True)
class UpdateLine:
    """A single pending upgrade."""

    package_name: str
    old_version: str
    new_version: str
    repo_prefix: Optional[str] = None

    @property
    def display_name(self) -> str:
        """Name as shown in the tooltip, with the repository prefix if any."""
        if self.repo_prefix:
            return f"{self.repo_prefix}/{self.package_name}"
        return self.package_name

    def __str__(self) -> str:
        return f"{self.display_name} {self.old_version} -> {self.new_version}"

    @classmethod
    def parse(cls, line: str) -> Optional['UpdateLine']:
        """
        Parse a `name old -> new` line.

        Returns:
            UpdateLine, or None if the line is not exactly four tokens
        """
        parts = line.split()
        if len(parts) != 4 or parts[2] != "->":
            return None

        prefix, _, name = parts[0].rpartition("/")
        return cls(
            package_name=name,
            old_version=parts[1],
            new_version=parts[3],
            repo_prefix=prefix or None,
        )


@dataclass(frozen=True)
class AurPackage:
    """A package record returned by the AUR RPC."""
    name: str
    version: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AurPackage':
        """Create from an RPC result, matching keys case-insensitively."""
        lowered = {str(k).lower(): v for k, v in data.items()}
        name = lowered.get("name")
        version = lowered.get("version")
        if not isinstance(name, str) or not isinstance(version, str):
            raise ValueError(f"Invalid AUR record: {data!r}")
        return cls(name=name, version=version)


@dataclass
class MergedStatus:
    """Combined status emitted to the bar."""
    text: str
    tooltip: str
    state: StatusClass

    @property
    def count(self) -> int:
        """Number of entries, zero when up to date."""
        return int(self.text) if self.text else 0

    def to_dict(self) -> Dict[str, str]:
        """Convert to the Waybar wire object."""
        return {
            "text": self.text,
            "tooltip": self.tooltip,
            "class": self.state.value,
            "alt": self.state.value,
        }


@dataclass(frozen=True)
class FormatOptions:
    """Options controlling tooltip rendering."""
    raw_output: bool = False
    no_color: bool = False
    colors: tuple = field(default_factory=lambda: tuple(DEFAULT_COLORS[c] for c in COLOR_CATEGORIES))
