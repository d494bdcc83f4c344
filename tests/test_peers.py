import asyncio

import pytest

from gcontinuity.packet import Ping, Pong
from gcontinuity.peers import PeerNotConnected, PeerRegistry, PeerState


def make_state(device_id):
    queue = asyncio.Queue(maxsize=8)
    return PeerState.create(device_id, f"{device_id}-name", queue), queue


@pytest.mark.asyncio
async def test_register_and_get_all():
    reg = PeerRegistry()
    state, _ = make_state("dev1")
    reg.register(state)
    handles = reg.get_all()
    assert len(handles) == 1
    assert handles[0].device_id == "dev1"
    assert handles[0].name == "dev1-name"


@pytest.mark.asyncio
async def test_remove():
    reg = PeerRegistry()
    state, _ = make_state("dev1")
    reg.register(state)
    reg.remove("dev1")
    assert reg.get_all() == []


@pytest.mark.asyncio
async def test_find_by_session():
    reg = PeerRegistry()
    state, _ = make_state("dev1")
    reg.register(state)
    found = reg.find_by_session(state.handle.session_token)
    assert found is not None
    assert found.device_id == "dev1"


@pytest.mark.asyncio
async def test_find_by_unknown_session_is_none():
    reg = PeerRegistry()
    state, _ = make_state("dev1")
    reg.register(state)
    assert reg.find_by_session("token") is None


@pytest.mark.asyncio
async def test_send_to_delivers():
    reg = PeerRegistry()
    state, queue = make_state("dev1")
    reg.register(state)
    await reg.send_to("dev1", Ping())
    assert await queue.get() == Ping()


@pytest.mark.asyncio
async def test_send_to_unknown_errors():
    reg = PeerRegistry()
    with pytest.raises(PeerNotConnected):
        await reg.send_to("ghost", Ping())


@pytest.mark.asyncio
async def test_broadcast_reaches_all():
    reg = PeerRegistry()
    s1, q1 = make_state("dev1")
    s2, q2 = make_state("dev2")
    reg.register(s1)
    reg.register(s2)
    await reg.broadcast(Pong())
    assert await q1.get() == Pong()
    assert await q2.get() == Pong()


@pytest.mark.asyncio
async def test_counters():
    reg = PeerRegistry()
    state, _ = make_state("dev1")
    reg.register(state)
    reg.inc_sent("dev1")
    reg.inc_sent("dev1")
    reg.inc_received("dev1")
    reg.inc_received("ghost")
    assert reg.counters("dev1") == (2, 1)


def test_counters_unknown_raises():
    with pytest.raises(PeerNotConnected):
        PeerRegistry().counters("ghost")


def test_session_tokens_are_unique():
    a, _ = make_state("dev1")
    b, _ = make_state("dev1")
    assert a.handle.session_token != b.handle.session_token
    assert len(a.handle.session_token) == 36


def test_register_replaces_same_device():
    reg = PeerRegistry()
    first, _ = make_state("dev1")
    second, _ = make_state("dev1")
    reg.register(first)
    reg.register(second)
    handles = reg.get_all()
    assert len(handles) == 1
    assert handles[0].session_token == second.handle.session_token