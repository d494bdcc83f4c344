import asyncio
import dataclasses

import pytest

from gcontinuity.events import (
    DeviceConnected,
    DeviceDisconnected,
    FileProgressEvent,
    PacketReceived,
    PairingAccepted,
    PairingGate,
    PairingRejected,
    PairingRequested,
    TransportEvent,
)
from gcontinuity.packet import Ping


def test_events_are_transport_events_with_fields():
    events = [
        DeviceConnected("dev1", "Phone", "10.0.0.2:5000"),
        DeviceDisconnected("dev1"),
        PairingRequested("dev1", "Phone", "AA:BB"),
        PairingAccepted("dev1"),
        PairingRejected("dev1"),
        PacketReceived("dev1", Ping()),
        FileProgressEvent("f1", 512, 1024),
    ]
    assert all(isinstance(e, TransportEvent) for e in events)
    assert [e.device_id for e in events[:6]] == ["dev1"] * 6
    assert events[5].packet == Ping()
    assert (events[6].bytes_done, events[6].total) == (512, 1024)


def test_events_compare_by_value_and_are_frozen():
    a = DeviceConnected("dev1", "Phone", "addr")
    assert a == DeviceConnected("dev1", "Phone", "addr")
    assert a != DeviceConnected("dev2", "Phone", "addr")
    with pytest.raises(dataclasses.FrozenInstanceError):
        a.name = "Other"


@pytest.mark.asyncio
async def test_resolve_accept_delivers_true():
    gate = PairingGate()
    waiter = gate.register("dev1")
    assert gate.resolve("dev1", True) is True
    assert await asyncio.wait_for(waiter, 1) is True


@pytest.mark.asyncio
async def test_resolve_reject_delivers_false():
    gate = PairingGate()
    waiter = gate.register("dev1")
    assert gate.resolve("dev1", False) is True
    assert await asyncio.wait_for(waiter, 1) is False


@pytest.mark.asyncio
async def test_resolve_unknown_returns_false():
    gate = PairingGate()
    assert gate.resolve("ghost", True) is False


@pytest.mark.asyncio
async def test_resolve_only_once():
    gate = PairingGate()
    gate.register("dev1")
    assert gate.resolve("dev1", True) is True
    assert gate.resolve("dev1", True) is False


@pytest.mark.asyncio
async def test_remove_drops_pending_request():
    gate = PairingGate()
    waiter = gate.register("dev1")
    gate.remove("dev1")
    assert await asyncio.wait_for(waiter, 1) is False
    assert gate.resolve("dev1", True) is False


@pytest.mark.asyncio
async def test_reregister_replaces_previous_waiter():
    gate = PairingGate()
    first = gate.register("dev1")
    second = gate.register("dev1")
    assert await asyncio.wait_for(first, 1) is False
    assert gate.resolve("dev1", True) is True
    assert await asyncio.wait_for(second, 1) is True


@pytest.mark.asyncio
async def test_resolve_after_waiter_cancelled_still_reports_pending():
    gate = PairingGate()
    waiter = gate.register("dev1")
    waiter.cancel()
    assert gate.resolve("dev1", True) is True
    assert waiter.cancelled()


@pytest.mark.asyncio
async def test_gates_are_independent_per_device():
    gate = PairingGate()
    w1 = gate.register("dev1")
    w2 = gate.register("dev2")
    gate.resolve("dev2", True)
    assert w2.result() is True
    assert not w1.done()
    gate.resolve("dev1", False)
    assert w1.result() is False