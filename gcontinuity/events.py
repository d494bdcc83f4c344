"""Transport events broadcast to observers, and the gate that holds pairing decisions."""

import asyncio
from dataclasses import dataclass
from typing import Dict

from gcontinuity.packet import Packet


class TransportEvent:
    """Base of every event emitted by the transport layer."""

    __slots__ = ()


@dataclass(frozen=True)
class DeviceConnected(TransportEvent):
    """A peer completed the handshake and is now connected."""

    device_id: str
    name: str
    addr: str


@dataclass(frozen=True)
class DeviceDisconnected(TransportEvent):
    """A connected peer went away."""

    device_id: str


@dataclass(frozen=True)
class PairingRequested(TransportEvent):
    """An unknown device asks to pair; a user decision is awaited."""

    device_id: str
    name: str
    fingerprint: str


@dataclass(frozen=True)
class PairingAccepted(TransportEvent):
    """The user accepted a pairing request."""

    device_id: str


@dataclass(frozen=True)
class PairingRejected(TransportEvent):
    """A pairing was rejected, by the user or for a fingerprint mismatch."""

    device_id: str


@dataclass(frozen=True)
class PacketReceived(TransportEvent):
    """A well-formed packet arrived from a connected peer."""

    device_id: str
    packet: Packet


@dataclass(frozen=True)
class FileProgressEvent(TransportEvent):
    """Progress of a file transfer; ``total`` is 0 while still unknown."""

    file_id: str
    bytes_done: int
    total: int


class PairingGate:
    """Delivers the user's accept/reject decision to a waiting handshake.

    A pending request that is dropped, either by ``remove`` or by a new
    registration for the same device, resolves its waiter with ``False``.
    """

    def __init__(self) -> None:
        self._pending: Dict[str, asyncio.Future] = {}

    @staticmethod
    def _drop(future: asyncio.Future) -> None:
        if not future.done():
            future.set_result(False)

    def register(self, device_id: str) -> asyncio.Future:
        """Open a pending decision for a device and return the future to await."""
        future = asyncio.get_running_loop().create_future()
        previous = self._pending.pop(device_id, None)
        if previous is not None:
            self._drop(previous)
        self._pending[device_id] = future
        return future

    def resolve(self, device_id: str, accepted: bool) -> bool:
        """Deliver a decision; return whether a request for the device was pending."""
        future = self._pending.pop(device_id, None)
        if future is None:
            return False
        if not future.done():
            future.set_result(bool(accepted))
        return True

    def remove(self, device_id: str) -> None:
        """Drop a pending request without a decision; unknown ids are ignored."""
        future = self._pending.pop(device_id, None)
        if future is not None:
            self._drop(future)