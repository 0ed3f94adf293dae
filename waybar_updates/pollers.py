"""
Background producers feeding the status merger.

Each poller runs in its own daemon thread, performs one check per tick
and hands the result to its channel before sleeping for the tick
interval.
"""

# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import threading
from enum import Enum
from typing import List, Optional

from .aur_client import AurClient
from .constants import AUR_NOTHING_INSTALLED, AUR_PREFIX
from .exceptions import NetworkError, PackageManagerError
from .models import NO_DATA, PollResult, UpdateLine, UpdateSource
from .package_manager import PackageManager
from .utils.channel import ChannelClosed, HandoffChannel
from .utils.logger import get_logger

logger = get_logger(__name__)


class ScheduleState(Enum):
    """Whether the next tick of a SyncSchedule does the slow work."""
    WAITING = "waiting"
    DUE = "due"


class SyncSchedule:
    """
    Two-state machine deciding which ticks do the slow work.

    The first tick is due, then every `every_n_ticks`-th tick after it.
    """

    def __init__(self, every_n_ticks: int) -> None:
        self.every_n_ticks = max(1, every_n_ticks)
        self.state = ScheduleState.DUE
        self._ticks_since_due = 0

    def advance(self) -> bool:
        """
        Consume one tick.

        Returns:
            True if this tick is due
        """
        due = self.state is ScheduleState.DUE
        if due:
            self._ticks_since_due = 0
        self._ticks_since_due += 1

        if self._ticks_since_due >= self.every_n_ticks:
            self.state = ScheduleState.DUE
        else:
            self.state = ScheduleState.WAITING
        return due


class BasePoller:
    """Tick loop shared by the pacman and AUR pollers."""

    source: UpdateSource

    def __init__(self, channel: HandoffChannel, sync_every_n_ticks: int,
                 tick_interval: float, stop_event: Optional[threading.Event] = None) -> None:
        """
        Initialize the poller.

        Args:
            channel: Channel the result of every tick is sent to
            sync_every_n_ticks: Ticks between two slow checks
            tick_interval: Seconds to sleep after each tick
            stop_event: Event that ends the loop when set
        """
        self.channel = channel
        self.schedule = SyncSchedule(sync_every_n_ticks)
        self.tick_interval = tick_interval
        self.stop_event = stop_event or threading.Event()
        self._thread: Optional[threading.Thread] = None

    def poll(self) -> PollResult:
        """Do one tick of work."""
        raise NotImplementedError

    def tick(self) -> PollResult:
        """Run one tick, turning unexpected failures into a diagnostic line."""
        try:
            return self.poll()
        except Exception as e:
            logger.exception(f"Unexpected error in {self.source.value} poller")
            return [f"{self.source.value} poller error: {e}"]

    def run(self) -> None:
        """Tick until the stop event is set or the channel is closed."""
        logger.debug(f"{self.source.value} poller started (interval={self.tick_interval}s, "
                     f"sync every {self.schedule.every_n_ticks} ticks)")
        while not self.stop_event.is_set():
            result = self.tick()
            try:
                self.channel.send(result)
            except ChannelClosed:
                break
            if self.stop_event.wait(self.tick_interval):
                break
        logger.debug(f"{self.source.value} poller stopped")

    def start(self) -> threading.Thread:
        """Run the poller in a daemon thread."""
        self._thread = threading.Thread(
            target=self.run, name=f"{self.source.value}-poller", daemon=True
        )
        self._thread.start()
        return self._thread

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)


class PacmanPoller(BasePoller):
    """Checks the sync repositories every tick, syncing every Nth tick."""

    source = UpdateSource.PACMAN

    def __init__(self, package_manager: PackageManager, channel: HandoffChannel,
                 sync_every_n_ticks: int, tick_interval: float,
                 stop_event: Optional[threading.Event] = None) -> None:
        super().__init__(channel, sync_every_n_ticks, tick_interval, stop_event)
        self.package_manager = package_manager

    def poll(self) -> List[str]:
        sync = self.schedule.advance()
        try:
            updates = self.package_manager.check_for_updates(sync=sync)
        except PackageManagerError as e:
            logger.warning(f"checkupdates failed: {e}")
            return [f"checkupdates failed: {e}"]

        logger.debug(f"{'Sync' if sync else 'Cache-only'} check found {len(updates)} updates")
        return updates


class AurPoller(BasePoller):
    """Compares foreign packages against the AUR on the slow cadence."""

    source = UpdateSource.AUR

    def __init__(self, package_manager: PackageManager, aur_client: AurClient,
                 channel: HandoffChannel, sync_every_n_ticks: int, tick_interval: float,
                 stop_event: Optional[threading.Event] = None) -> None:
        super().__init__(channel, sync_every_n_ticks, tick_interval, stop_event)
        self.package_manager = package_manager
        self.aur_client = aur_client

    def poll(self) -> PollResult:
        if not self.schedule.advance():
            return NO_DATA
        return self.check_aur_updates()

    def check_aur_updates(self) -> List[str]:
        """
        List foreign packages whose AUR version differs from the local one.

        Returns:
            Update lines, or a single informational or diagnostic line
        """
        try:
            local_packages = self.package_manager.get_foreign_packages()
        except PackageManagerError as e:
            logger.error(f"Error running pacman -Qm: {e}")
            return [f"Error running pacman -Qm: {e}"]

        if not local_packages:
            return [AUR_NOTHING_INSTALLED]

        try:
            aur_packages = self.aur_client.info(local_packages.keys())
        except NetworkError as e:
            logger.error(f"Error querying AUR API: {e}")
            return [f"Error querying AUR API: {e}"]

        updates = []
        for aur_pkg in aur_packages:
            local_version = local_packages.get(aur_pkg.name)
            if local_version is None or local_version == aur_pkg.version:
                continue
            line = UpdateLine(
                package_name=aur_pkg.name,
                old_version=local_version,
                new_version=aur_pkg.version,
                repo_prefix=AUR_PREFIX,
            )
            updates.append(str(line))

        logger.debug(f"AUR check found {len(updates)} updates for {len(local_packages)} packages")
        return updates
