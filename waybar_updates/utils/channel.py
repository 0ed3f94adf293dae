"""
Single-slot handoff channels with a wait-for-either receive.

Every channel created by a ChannelSelector shares the selector's
condition variable, so one select() call can sleep until any of them is
ready. A send blocks until the receiver has taken the value.
"""

# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import random
import threading
from typing import Any, List, Optional, Sequence, Tuple


class ChannelClosed(Exception):
    """Raised when sending to or receiving from a closed channel."""
    pass


class ChannelTimeout(Exception):
    """Raised when no channel became ready before the timeout."""
    pass


class HandoffChannel:
    """Unbuffered channel holding at most one in-flight value."""

    def __init__(self, name: str, condition: threading.Condition) -> None:
        self.name = name
        self._cond = condition
        self._value: Any = None
        self._pending = False
        self._closed = False
        self._sent = 0
        self._taken = 0

    def __repr__(self) -> str:
        return f"HandoffChannel({self.name!r})"

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def send(self, value: Any) -> None:
        """
        Hand a value to the receiver, blocking until it is taken.

        Raises:
            ChannelClosed: If the channel is closed before the handoff
        """
        with self._cond:
            while self._pending and not self._closed:
                self._cond.wait()
            if self._closed:
                raise ChannelClosed(f"Channel {self.name} is closed")

            self._value = value
            self._pending = True
            self._sent += 1
            ticket = self._sent
            self._cond.notify_all()

            while self._taken < ticket and not self._closed:
                self._cond.wait()
            if self._taken < ticket:
                raise ChannelClosed(f"Channel {self.name} closed before the value was received")

    def receive(self, timeout: Optional[float] = None) -> Any:
        """
        Take the next value from this channel only.

        Raises:
            ChannelTimeout: If nothing arrived within timeout seconds
            ChannelClosed: If the channel is closed and empty
        """
        with self._cond:
            ready = self._cond.wait_for(lambda: self._pending or self._closed, timeout)
            if not ready:
                raise ChannelTimeout(f"Nothing received on {self.name} within {timeout}s")
            if not self._pending:
                raise ChannelClosed(f"Channel {self.name} is closed")
            value = self._take()
            self._cond.notify_all()
            return value

    def close(self) -> None:
        """Close the channel and wake every waiter."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def _take(self) -> Any:
        # Caller holds the condition
        value = self._value
        self._value = None
        self._pending = False
        self._taken += 1
        return value


class ChannelSelector:
    """Creates handoff channels and waits on any of them."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._channels: List[HandoffChannel] = []

    def channel(self, name: str) -> HandoffChannel:
        """Create a channel bound to this selector."""
        channel = HandoffChannel(name, self._cond)
        with self._cond:
            self._channels.append(channel)
        return channel

    def select(self, channels: Optional[Sequence[HandoffChannel]] = None,
               timeout: Optional[float] = None) -> Tuple[HandoffChannel, Any]:
        """
        Wait until any channel holds a value and take it.

        When several channels are ready one is chosen at random, so no
        producer is favoured by its position in the list.

        Args:
            channels: Channels to wait on, all of this selector's by default
            timeout: Seconds to wait, None to wait forever

        Returns:
            Tuple of (channel, value)

        Raises:
            ChannelTimeout: If nothing became ready in time
            ChannelClosed: If every channel is closed and empty
        """
        with self._cond:
            watched = list(channels) if channels is not None else list(self._channels)
            if not watched:
                raise ValueError("select() needs at least one channel")

            def _ready() -> bool:
                return (any(ch._pending for ch in watched)
                        or all(ch._closed for ch in watched))

            if not self._cond.wait_for(_ready, timeout):
                raise ChannelTimeout(f"No channel ready within {timeout}s")

            ready = [ch for ch in watched if ch._pending]
            if not ready:
                raise ChannelClosed("All channels are closed")

            channel = random.choice(ready)
            value = channel._take()
            self._cond.notify_all()
            return channel, value

    def close(self) -> None:
        """Close every channel created by this selector."""
        with self._cond:
            for channel in self._channels:
                channel._closed = True
            self._cond.notify_all()
