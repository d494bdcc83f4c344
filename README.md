# gcontinuity

Building blocks for the desktop side of a phone–desktop link: a typed wire
protocol, a registry of connected peers, a packet router, a pairing gate,
chunked file transfer with SHA-256 checks, and small text helpers for a
settings UI. It uses only the standard library.

## Install

```
pip install .
pip install ".[test]"   # with the test tools
```

## Packets (`gcontinuity.packet`)

Every message is a JSON object with a `"type"` tag in snake case, followed by
the packet's fields. Each packet type is a frozen dataclass deriving from
`Packet`: `Hello`, `Ack`, `Ping`, `Pong`, `SessionResume`, `Disconnect`,
`ClipboardSync`, `BatteryUpdate`, `FileSendOffer`, `FileSendAccept`,
`FileSendReject`, `FileSendEof`, `FileProgress`, `NotificationPost`,
`NotificationDismiss`, `NotificationReply`, `ObsidianFileDelta`,
`MediaStateUpdate`, `MediaCommand`, `InputEvent`, `RunCommandRequest`,
`RunCommandOutput`, `ScreenShareStart`, `ScreenShareStop`, `WebcamStart`,
`WebcamStop`, `WebRtcSdpOffer`, `WebRtcSdpAnswer`, `WebRtcIceCandidate` and
`WebRtcClose`.

```python
from gcontinuity.packet import Packet, Hello, MediaCommand, MediaAction

pkt = Hello(device_id="id1", name="Phone", version=2)
text = pkt.to_json()   # '{"type":"hello","device_id":"id1","name":"Phone","version":2}'
assert Packet.from_json(text) == pkt

seek = MediaCommand(action=MediaAction("seek_to", ms=5000))
assert seek.to_dict() == {"type": "media_command", "action": {"seek_to": {"ms": 5000}}}
```

Integer fields are checked against their ranges (u8, u32, u64, i32).
Unknown types, missing fields, wrong field types and malformed JSON raise
`PacketError`, a `ValueError`. `InputKind` is a string enum of input event
categories.

## Peers and routing

`gcontinuity.peers.PeerRegistry` tracks connected devices by id. Each
`PeerHandle` carries an `asyncio.Queue` as its outbound channel, and
`PeerState.create` gives a new connection a random session token.
`send_to` raises `PeerNotConnected` for an unknown device, `broadcast` puts
a packet on every peer's queue, and `find_by_session` looks a peer up by its
token. `inc_sent`, `inc_received` and `counters` keep per-peer packet counts.

`gcontinuity.router.route_packet(packet, device_id, registry, feature_queue)`
answers `Ping` with `Pong`, ignores `Pong`, and puts every other packet on
the feature queue as a `FeatureEvent`.

## Events and pairing (`gcontinuity.events`)

Transport events are frozen dataclasses deriving from `TransportEvent`:
`DeviceConnected`, `DeviceDisconnected`, `PairingRequested`,
`PairingAccepted`, `PairingRejected`, `PacketReceived` and
`FileProgressEvent`.

`PairingGate` holds one pending decision per device. `register(device_id)`
returns a future; `resolve(device_id, accepted)` completes it and returns
whether a request was pending. A request dropped by `remove` or replaced by
a new `register` resolves to `False`.

## File transfer (`gcontinuity.file_transfer`)

`FileTransferSender(file_id, channel, events=None).send_file(path)` sends a
JSON header, binary chunks of up to 64 KiB (each prefixed by a 4-byte
little-endian index, see `encode_chunk` / `decode_chunk`), and a JSON EOF
frame with the SHA-256 of the whole file. The channel is any object with
async `send_text(str)` and `send(bytes)` methods.

`FileTransferReceiver(file_id, dest_dir, events=None, tmp_dir=...)` takes
`DataChannelMessage` objects through `on_message`. On the EOF frame it joins
the chunks in index order, checks the digest and writes the file to
`dest_dir / file_id`, returning that path; a wrong digest raises
`ChecksumMismatch`. Both sides put a `FileProgressEvent` on the optional
events queue for every 1 MiB moved.

## UI helpers

- `gcontinuity.fingerprint`: `truncate_fingerprint`, `format_fingerprint_two_lines`,
  `device_row_subtitle`, `status_css_class`
- `gcontinuity.connection_status`: `format_uptime` and `PacketLog`, which keeps the
  last 50 packets by default
- `gcontinuity.device_json`: `extract_json_str` and `parse_device_json`, which read a
  device's name and fingerprint from a small JSON string

## What it does not do

The package has no network server: it does not listen for connections,
perform TLS or WebSocket handshakes, or run keepalive timers. It offers no
D-Bus service or client, no graphical settings window, and no persistent
store of trusted devices. It is a library with no command to run.

## Tests

```
pytest
```