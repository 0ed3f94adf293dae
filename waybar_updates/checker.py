"""
Merge and emit loop for Waybar Updates.
"""

# SPDX-License-Identifier: GPL-3.0-or-later

import threading
from typing import Dict, List, Optional

from .aur_client import AurClient
from .cli.output import StatusWriter
from .config import Config
from .constants import STATUS_CHECKING, STATUS_UP_TO_DATE
from .models import (
    NO_DATA, FormatOptions, MergedStatus, PollResult, StatusClass, UpdateSource
)
from .package_manager import PackageManager
from .pollers import AurPoller, BasePoller, PacmanPoller
from .ui.formatter import format_updates
from .utils.channel import ChannelClosed, ChannelSelector, HandoffChannel
from .utils.logger import get_logger

logger = get_logger(__name__)


class StatusMerger:
    """Keeps the last result of each source and builds the combined status."""

    SOURCE_ORDER = (UpdateSource.PACMAN, UpdateSource.AUR)

    def __init__(self, format_options: Optional[FormatOptions] = None) -> None:
        self.format_options = format_options or FormatOptions()
        self._slots: Dict[UpdateSource, List[str]] = {
            source: [] for source in self.SOURCE_ORDER
        }

    def update(self, source: UpdateSource, result: PollResult) -> bool:
        """
        Fold a poll result into the slot of its source.

        NO_DATA leaves the slot untouched; any list, even an empty one,
        replaces it.

        Returns:
            True if the slot was replaced
        """
        if result is NO_DATA:
            return False
        self._slots[source] = list(result)
        return True

    def slot(self, source: UpdateSource) -> List[str]:
        return list(self._slots[source])

    def merged(self) -> List[str]:
        """Pacman entries followed by AUR entries."""
        updates: List[str] = []
        for source in self.SOURCE_ORDER:
            updates.extend(self._slots[source])
        return updates

    def status(self) -> MergedStatus:
        """Build the status for the current slots."""
        updates = self.merged()
        if not updates:
            return MergedStatus(text="", tooltip=STATUS_UP_TO_DATE, state=StatusClass.UPDATED)

        lines = format_updates(updates, self.format_options)
        return MergedStatus(
            text=str(len(lines)),
            tooltip="\n".join(lines),
            state=StatusClass.HAS_UPDATES,
        )

    @staticmethod
    def initial_status() -> MergedStatus:
        """Status shown before the first tick arrives."""
        return MergedStatus(text="0", tooltip=STATUS_CHECKING, state=StatusClass.HAS_UPDATES)


class UpdateChecker:
    """Runs the pollers and emits a status after every tick from either one."""

    def __init__(self, config: Config, writer: Optional[StatusWriter] = None,
                 package_manager: Optional[PackageManager] = None,
                 aur_client: Optional[AurClient] = None) -> None:
        """
        Initialize the update checker.

        Args:
            config: Validated configuration
            writer: Status destination, stdout by default
            package_manager: Package source shared by both pollers
            aur_client: AUR client, created from config when omitted
        """
        self.config = config
        self.writer = writer or StatusWriter()
        self.package_manager = package_manager or PackageManager()
        self.merger = StatusMerger(config.format_options())
        self.stop_event = threading.Event()
        self.selector = ChannelSelector()

        self._sources: Dict[HandoffChannel, UpdateSource] = {}
        self.pollers: List[BasePoller] = []

        pacman_channel = self._channel(UpdateSource.PACMAN)
        self.pollers.append(PacmanPoller(
            self.package_manager,
            pacman_channel,
            sync_every_n_ticks=config.sync_every_n_ticks,
            tick_interval=config.interval,
            stop_event=self.stop_event,
        ))

        self.aur_client: Optional[AurClient] = None
        if not config.skip_aur:
            self.aur_client = aur_client or AurClient(timeout=config.aur_timeout)
            aur_channel = self._channel(UpdateSource.AUR)
            self.pollers.append(AurPoller(
                self.package_manager,
                self.aur_client,
                aur_channel,
                sync_every_n_ticks=config.sync_every_n_ticks,
                tick_interval=config.interval,
                stop_event=self.stop_event,
            ))

        logger.debug(f"Initialized UpdateChecker with {len(self.pollers)} pollers")

    def _channel(self, source: UpdateSource) -> HandoffChannel:
        channel = self.selector.channel(source.value)
        self._sources[channel] = source
        return channel

    def emit(self, status: MergedStatus) -> None:
        """Write a status; OutputError propagates to the caller."""
        self.writer.write(status)

    def receive(self, timeout: Optional[float] = None) -> UpdateSource:
        """
        Wait for the next tick from either poller and fold it in.

        Returns:
            Source the tick came from
        """
        channel, result = self.selector.select(timeout=timeout)
        source = self._sources[channel]
        replaced = self.merger.update(source, result)
        logger.debug(f"Tick from {source.value}: "
                     f"{'replaced slot' if replaced else 'no new data'}")
        return source

    def run(self, max_ticks: Optional[int] = None) -> None:
        """
        Start the pollers and emit until stopped.

        Args:
            max_ticks: Stop after this many received ticks, forever if None

        Raises:
            OutputError: If a status cannot be written
        """
        logger.info(f"Watching for updates every {self.config.interval}s "
                    f"(sync every {self.config.interval_sync}s, "
                    f"AUR {'disabled' if self.config.skip_aur else 'enabled'})")
        ticks = 0
        try:
            self.emit(self.merger.initial_status())

            for poller in self.pollers:
                poller.start()

            while max_ticks is None or ticks < max_ticks:
                try:
                    self.receive()
                except ChannelClosed:
                    break
                ticks += 1
                self.emit(self.merger.status())
        finally:
            self.stop()

    def stop(self) -> None:
        """Stop the pollers and release the AUR session."""
        self.stop_event.set()
        self.selector.close()
        if self.aur_client is not None:
            self.aur_client.close()
