"""State helpers for the connection status page: uptime text and the packet log."""

from collections import deque
from typing import Deque, Iterator, List, Union

PACKET_LOG_CAPACITY = 50
"""Number of most recent packets kept in the debug log."""


def format_uptime(seconds: Union[int, float]) -> str:
    """Format a session uptime as ``"<h>h <mm>m <ss>s"``; fractions of a second are dropped."""
    if isinstance(seconds, bool):
        raise TypeError("uptime must be a number of seconds")
    total = int(seconds)
    if total < 0:
        raise ValueError(f"uptime cannot be negative: {seconds}")
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours}h {minutes:02d}m {secs:02d}s"


class PacketLog:
    """The most recent packets received, oldest first, bounded in size."""

    def __init__(self, capacity: int = PACKET_LOG_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._entries: Deque[str] = deque(maxlen=capacity)

    def push(self, json_text: str) -> None:
        """Append a packet, dropping the oldest one when the log is full."""
        self._entries.append(json_text)

    def items(self) -> List[str]:
        """A copy of the logged packets, oldest first."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.items())