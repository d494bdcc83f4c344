"""Single dispatch point for every packet that arrives from a peer."""

import asyncio
from dataclasses import dataclass

from gcontinuity.packet import Packet, Ping, Pong
from gcontinuity.peers import PeerNotConnected, PeerRegistry


@dataclass(frozen=True)
class FeatureEvent:
    """A packet the transport layer hands on to feature subsystems."""

    device_id: str
    packet: Packet


async def route_packet(
    packet: Packet,
    device_id: str,
    registry: PeerRegistry,
    feature_queue: asyncio.Queue,
) -> None:
    """Answer keepalives inline and forward everything else to ``feature_queue``."""
    if isinstance(packet, Ping):
        try:
            await registry.send_to(device_id, Pong())
        except PeerNotConnected:
            pass
        return
    if isinstance(packet, Pong):
        # The keepalive timer lives in the per-peer loop.
        return
    await feature_queue.put(FeatureEvent(device_id, packet))