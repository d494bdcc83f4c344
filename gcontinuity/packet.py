"""Typed packets exchanged with a peer device, and their JSON wire form.

Every packet is an object with a ``"type"`` tag in lower snake case
followed by the packet's own fields, e.g. ``{"type":"hello", ...}``.
"""

import functools
import json
from dataclasses import dataclass, fields
from enum import Enum
from typing import Annotated, Any, ClassVar, Optional, get_args, get_origin


class PacketError(ValueError):
    """Raised for packets that are unknown, malformed or out of range."""


@dataclass(frozen=True)
class _IntRange:
    lo: int
    hi: int
    label: str


U8 = Annotated[int, _IntRange(0, 2**8 - 1, "u8")]
U32 = Annotated[int, _IntRange(0, 2**32 - 1, "u32")]
U64 = Annotated[int, _IntRange(0, 2**64 - 1, "u64")]
I32 = Annotated[int, _IntRange(-(2**31), 2**31 - 1, "i32")]


def _check_int(name: str, value: Any, rng: _IntRange) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise PacketError(f"field `{name}`: expected {rng.label}, got {type(value).__name__}")
    if not rng.lo <= value <= rng.hi:
        raise PacketError(f"field `{name}`: {value} is out of range for {rng.label}")


# ── Sub-types ────────────────────────────────────────────────────────────────


class InputKind(str, Enum):
    """Categories of raw input events forwarded from the peer."""

    MOUSE_MOVE = "mouse_move"
    MOUSE_BUTTON = "mouse_button"
    MOUSE_SCROLL = "mouse_scroll"
    KEY_PRESS = "key_press"
    KEY_RELEASE = "key_release"


_UNIT_ACTIONS = ("play", "pause", "next", "previous")
_PARAM_ACTIONS = {
    "seek_to": ("ms", get_args(U64)[1]),
    "volume_set": ("pct", get_args(U8)[1]),
}


@dataclass(frozen=True)
class MediaAction:
    """A media playback command: play, pause, next, previous, seek_to(ms) or volume_set(pct)."""

    kind: str
    ms: Optional[int] = None
    pct: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind in _UNIT_ACTIONS:
            if self.ms is not None or self.pct is not None:
                raise PacketError(f"media action `{self.kind}` takes no parameters")
            return
        if self.kind not in _PARAM_ACTIONS:
            raise PacketError(f"unknown media action `{self.kind}`")
        param, rng = _PARAM_ACTIONS[self.kind]
        _check_int(param, getattr(self, param), rng)
        other = "pct" if param == "ms" else "ms"
        if getattr(self, other) is not None:
            raise PacketError(f"media action `{self.kind}` takes no `{other}`")

    def to_value(self) -> Any:
        """Return the JSON-ready form: a bare string or a one-key object."""
        if self.kind in _UNIT_ACTIONS:
            return self.kind
        param, _ = _PARAM_ACTIONS[self.kind]
        return {self.kind: {param: getattr(self, param)}}

    @classmethod
    def from_value(cls, value: Any) -> "MediaAction":
        """Build an action from its JSON-ready form."""
        if isinstance(value, str):
            if value in _UNIT_ACTIONS:
                return cls(value)
            raise PacketError(f"invalid media action {value!r}")
        if isinstance(value, dict) and len(value) == 1:
            ((kind, body),) = value.items()
            if kind in _UNIT_ACTIONS and body is None:
                return cls(kind)
            if kind in _PARAM_ACTIONS:
                param, _ = _PARAM_ACTIONS[kind]
                if not isinstance(body, dict) or param not in body:
                    raise PacketError(f"media action `{kind}`: missing field `{param}`")
                return cls(kind, **{param: body[param]})
        raise PacketError(f"invalid media action {value!r}")


# ── Field handling ───────────────────────────────────────────────────────────


@functools.lru_cache(maxsize=None)
def _field_specs(cls: type) -> tuple:
    return tuple((f.name, f.type) for f in fields(cls))


def _check(name: str, hint: Any, value: Any) -> None:
    if get_origin(hint) is Annotated:
        _check_int(name, value, get_args(hint)[1])
    elif hint is str:
        if not isinstance(value, str):
            raise PacketError(f"field `{name}`: expected string, got {type(value).__name__}")
    elif hint is bool:
        if not isinstance(value, bool):
            raise PacketError(f"field `{name}`: expected bool, got {type(value).__name__}")
    elif hint == Optional[str]:
        if value is not None and not isinstance(value, str):
            raise PacketError(f"field `{name}`: expected string or null, got {type(value).__name__}")
    elif hint is MediaAction or hint is InputKind:
        if not isinstance(value, hint):
            raise PacketError(f"field `{name}`: expected {hint.__name__}, got {type(value).__name__}")


def _decode(name: str, hint: Any, raw: Any) -> Any:
    if hint is MediaAction:
        return MediaAction.from_value(raw)
    if hint is InputKind:
        try:
            return InputKind(raw)
        except (ValueError, TypeError):
            raise PacketError(f"field `{name}`: unknown input kind {raw!r}") from None
    return raw


def _encode(value: Any) -> Any:
    if isinstance(value, MediaAction):
        return value.to_value()
    if isinstance(value, InputKind):
        return value.value
    return value


# ── Packets ──────────────────────────────────────────────────────────────────


class Packet:
    """Base of every packet type; subclasses declare their wire tag."""

    tag: ClassVar[str]
    _registry: ClassVar[dict] = {}

    def __init_subclass__(cls, *, tag: str, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if tag in Packet._registry:
            raise TypeError(f"duplicate packet tag {tag!r}")
        cls.tag = tag
        Packet._registry[tag] = cls

    def __post_init__(self) -> None:
        for name, hint in _field_specs(type(self)):
            _check(name, hint, getattr(self, name))

    def to_dict(self) -> dict:
        """Return the JSON-ready mapping, ``"type"`` first."""
        out: dict = {"type": self.tag}
        for name, _ in _field_specs(type(self)):
            out[name] = _encode(getattr(self, name))
        return out

    @classmethod
    def from_dict(cls, data: Any) -> "Packet":
        """Build a packet from a decoded JSON object."""
        if not isinstance(data, dict):
            raise PacketError(f"expected a JSON object, got {type(data).__name__}")
        if "type" not in data:
            raise PacketError("missing field `type`")
        tag = data["type"]
        target = Packet._registry.get(tag) if isinstance(tag, str) else None
        if target is None:
            raise PacketError(f"unknown packet type {tag!r}")
        if not issubclass(target, cls):
            raise PacketError(f"packet type {tag!r} is not a {cls.__name__}")
        values = {}
        for name, hint in _field_specs(target):
            if name in data:
                values[name] = _decode(name, hint, data[name])
            elif hint == Optional[str]:
                values[name] = None
            else:
                raise PacketError(f"{tag}: missing field `{name}`")
        return target(**values)

    def to_json(self) -> str:
        """Serialise to compact JSON."""
        try:
            return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise PacketError(f"packet is not JSON-serialisable: {exc}") from exc

    @classmethod
    def from_json(cls, text: "str | bytes") -> "Packet":
        """Parse a packet from JSON text."""
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise PacketError(f"malformed JSON: {exc}") from exc
        return cls.from_dict(data)


# Handshake


@dataclass(frozen=True)
class Hello(Packet, tag="hello"):
    """First packet sent by a peer after the TLS handshake."""

    device_id: str
    name: str
    version: U32


@dataclass(frozen=True)
class Ack(Packet, tag="ack"):
    """Acknowledges a valid Hello from a trusted peer."""


@dataclass(frozen=True)
class Ping(Packet, tag="ping"):
    """Keepalive probe."""


@dataclass(frozen=True)
class Pong(Packet, tag="pong"):
    """Keepalive response."""


@dataclass(frozen=True)
class SessionResume(Packet, tag="session_resume"):
    """Request to resume a previous session with a stored token."""

    session_token: str


@dataclass(frozen=True)
class Disconnect(Packet, tag="disconnect"):
    """Graceful connection teardown."""


# Data


@dataclass(frozen=True)
class ClipboardSync(Packet, tag="clipboard_sync"):
    mime: str
    data: str


@dataclass(frozen=True)
class BatteryUpdate(Packet, tag="battery_update"):
    percent: U8
    charging: bool


@dataclass(frozen=True)
class FileSendOffer(Packet, tag="file_send_offer"):
    file_id: str
    name: str
    size: U64
    mime: str


@dataclass(frozen=True)
class FileSendAccept(Packet, tag="file_send_accept"):
    file_id: str


@dataclass(frozen=True)
class FileSendReject(Packet, tag="file_send_reject"):
    file_id: str


@dataclass(frozen=True)
class FileSendEof(Packet, tag="file_send_eof"):
    file_id: str
    sha256: str


@dataclass(frozen=True)
class FileProgress(Packet, tag="file_progress"):
    file_id: str
    bytes_done: U64
    total: U64


# Sync


@dataclass(frozen=True)
class NotificationPost(Packet, tag="notification_post"):
    id: U64
    app: str
    title: str
    body: str
    icon_b64: Optional[str] = None


@dataclass(frozen=True)
class NotificationDismiss(Packet, tag="notification_dismiss"):
    id: U64


@dataclass(frozen=True)
class NotificationReply(Packet, tag="notification_reply"):
    id: U64
    text: str


@dataclass(frozen=True)
class ObsidianFileDelta(Packet, tag="obsidian_file_delta"):
    path: str
    hash: str
    data_b64: str


@dataclass(frozen=True)
class MediaStateUpdate(Packet, tag="media_state_update"):
    title: str
    artist: str
    album: str
    playing: bool
    position_ms: U64
    duration_ms: U64


@dataclass(frozen=True)
class MediaCommand(Packet, tag="media_command"):
    action: MediaAction


# Control


@dataclass(frozen=True)
class InputEvent(Packet, tag="input_event"):
    """Raw pointer or keyboard input; ``data`` is any JSON value."""

    kind: InputKind
    data: Any


@dataclass(frozen=True)
class RunCommandRequest(Packet, tag="run_command_request"):
    command_id: str


@dataclass(frozen=True)
class RunCommandOutput(Packet, tag="run_command_output"):
    command_id: str
    stdout: str
    stderr: str
    exit_code: I32


@dataclass(frozen=True)
class ScreenShareStart(Packet, tag="screen_share_start"):
    pass


@dataclass(frozen=True)
class ScreenShareStop(Packet, tag="screen_share_stop"):
    pass


# Experimental


@dataclass(frozen=True)
class WebcamStart(Packet, tag="webcam_start"):
    pass


@dataclass(frozen=True)
class WebcamStop(Packet, tag="webcam_stop"):
    pass


# WebRTC signaling


@dataclass(frozen=True)
class WebRtcSdpOffer(Packet, tag="web_rtc_sdp_offer"):
    session_id: str
    sdp: str


@dataclass(frozen=True)
class WebRtcSdpAnswer(Packet, tag="web_rtc_sdp_answer"):
    session_id: str
    sdp: str


@dataclass(frozen=True)
class WebRtcIceCandidate(Packet, tag="web_rtc_ice_candidate"):
    session_id: str
    candidate: str
    sdp_mid: str
    sdp_m_line_index: U32


@dataclass(frozen=True)
class WebRtcClose(Packet, tag="web_rtc_close"):
    session_id: str