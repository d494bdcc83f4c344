"""Per-peer state and the in-process registry of connected peers."""

import asyncio
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from gcontinuity.packet import Packet


class PeerNotConnected(LookupError):
    """Raised when a packet is addressed to a device that is not connected."""


@dataclass(frozen=True)
class PeerHandle:
    """Lightweight reference to a connected peer."""

    device_id: str
    name: str
    session_token: str
    tx: asyncio.Queue


@dataclass
class PeerState:
    """Full mutable state tracked for one connected peer."""

    handle: PeerHandle
    connected_at: float = field(default_factory=time.monotonic)
    packets_sent: int = 0
    packets_received: int = 0

    @classmethod
    def create(cls, device_id: str, name: str, tx: asyncio.Queue) -> "PeerState":
        """State for a fresh connection, with a new random session token."""
        return cls(PeerHandle(device_id, name, str(uuid.uuid4()), tx))


class PeerRegistry:
    """Registry of all currently connected peers, keyed by device id."""

    def __init__(self) -> None:
        self._peers: Dict[str, PeerState] = {}

    def register(self, state: PeerState) -> None:
        """Register a newly connected peer, replacing any with the same id."""
        self._peers[state.handle.device_id] = state

    def remove(self, device_id: str) -> None:
        """Forget a peer; unknown ids are ignored."""
        self._peers.pop(device_id, None)

    def get_all(self) -> List[PeerHandle]:
        """Handles of all connected peers."""
        return [state.handle for state in self._peers.values()]

    def find_by_session(self, token: str) -> Optional[PeerHandle]:
        """The peer holding the given session token, if any."""
        return next(
            (s.handle for s in self._peers.values() if s.handle.session_token == token),
            None,
        )

    def _state(self, device_id: str) -> PeerState:
        try:
            return self._peers[device_id]
        except KeyError:
            raise PeerNotConnected(f"Device '{device_id}' not connected") from None

    async def send_to(self, device_id: str, packet: Packet) -> None:
        """Queue a packet for one peer; raises PeerNotConnected if it is unknown."""
        await self._state(device_id).handle.tx.put(packet)

    async def broadcast(self, packet: Packet) -> None:
        """Queue a packet for every connected peer."""
        for handle in self.get_all():
            await handle.tx.put(packet)

    def inc_sent(self, device_id: str) -> None:
        state = self._peers.get(device_id)
        if state is not None:
            state.packets_sent += 1

    def inc_received(self, device_id: str) -> None:
        state = self._peers.get(device_id)
        if state is not None:
            state.packets_received += 1

    def counters(self, device_id: str) -> Tuple[int, int]:
        """(packets sent, packets received) for a connected peer."""
        state = self._state(device_id)
        return state.packets_sent, state.packets_received