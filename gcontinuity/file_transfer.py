"""File transfer over a data channel.

Frame protocol:

* header: JSON text frame ``{"file_id":..,"name":..,"size":..,"total_chunks":..}``
* chunks: binary frames, a 4-byte little-endian chunk index then up to
  ``CHUNK_SIZE`` bytes of payload
* EOF: JSON text frame ``{"type":"eof","file_id":..,"sha256":<hex>}``

The SHA-256 of the reassembled file must match the checksum in the EOF frame.
"""

import asyncio
import hashlib
import json
import logging
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Tuple, Union

from gcontinuity.events import FileProgressEvent

log = logging.getLogger(__name__)

CHUNK_SIZE = 65_536
"""Payload size per binary chunk."""

PROGRESS_INTERVAL_BYTES = 1_048_576
"""A progress event is emitted every time this many more bytes have moved."""

DEFAULT_TMP_DIR = Path("/tmp/gcontinuity")

_INDEX = struct.Struct("<I")


class ChecksumMismatch(ValueError):
    """The reassembled file does not match the checksum in the EOF frame."""


@dataclass(frozen=True)
class DataChannelMessage:
    """One message received from a data channel."""

    is_string: bool
    data: bytes


class _DataChannel(Protocol):
    async def send_text(self, text: str) -> Any: ...

    async def send(self, data: bytes) -> Any: ...


def encode_chunk(index: int, payload: bytes) -> bytes:
    """Build a binary chunk frame: 4-byte LE index followed by the payload."""
    try:
        return _INDEX.pack(index) + bytes(payload)
    except struct.error as exc:
        raise ValueError(f"chunk index {index!r} does not fit in 32 bits") from exc


def decode_chunk(data: bytes) -> Tuple[int, bytes]:
    """Split a binary chunk frame into its index and payload."""
    if len(data) < _INDEX.size:
        raise ValueError("Chunk too short")
    (index,) = _INDEX.unpack_from(data)
    return index, bytes(data[_INDEX.size:])


def _dumps(obj: Dict[str, Any]) -> str:
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)


def _emit(events: Optional[asyncio.Queue], event: FileProgressEvent) -> None:
    if events is None:
        return
    try:
        events.put_nowait(event)
    except asyncio.QueueFull:
        pass


def _is_uint(value: Any, bits: int) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value < 2**bits


def _parse_eof(obj: Any) -> Optional[Dict[str, str]]:
    if not isinstance(obj, dict):
        return None
    if all(isinstance(obj.get(key), str) for key in ("type", "file_id", "sha256")):
        return obj
    return None


def _parse_header(obj: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(obj, dict):
        return None
    if not (isinstance(obj.get("file_id"), str) and isinstance(obj.get("name"), str)):
        return None
    if not (_is_uint(obj.get("size"), 64) and _is_uint(obj.get("total_chunks"), 32)):
        return None
    return obj


class FileTransferSender:
    """Sends a local file over a data channel in ``CHUNK_SIZE`` binary chunks."""

    def __init__(
        self,
        file_id: str,
        channel: _DataChannel,
        events: Optional[asyncio.Queue] = None,
    ) -> None:
        self.file_id = file_id
        self._channel = channel
        self._events = events

    async def send_file(self, path: Union[str, Path]) -> None:
        """Send a header, the file's chunks, then an EOF frame with its SHA-256."""
        path = Path(path)
        file_size = path.stat().st_size
        total_chunks = -(-file_size // CHUNK_SIZE)
        if not path.name:
            raise ValueError(f"Path has no filename: {path}")

        header = {
            "file_id": self.file_id,
            "name": path.name,
            "size": file_size,
            "total_chunks": total_chunks,
        }
        await self._channel.send_text(_dumps(header))
        log.info("File transfer %s started: %d bytes, %d chunks", self.file_id, file_size, total_chunks)

        hasher = hashlib.sha256()
        bytes_sent = 0
        last_progress = 0
        with path.open("rb") as handle:
            index = 0
            while True:
                payload = await asyncio.to_thread(handle.read, CHUNK_SIZE)
                if not payload:
                    break
                hasher.update(payload)
                await self._channel.send(encode_chunk(index, payload))
                bytes_sent += len(payload)
                index += 1
                if bytes_sent - last_progress >= PROGRESS_INTERVAL_BYTES:
                    last_progress = bytes_sent
                    _emit(self._events, FileProgressEvent(self.file_id, bytes_sent, file_size))

        eof = {"type": "eof", "file_id": self.file_id, "sha256": hasher.hexdigest()}
        await self._channel.send_text(_dumps(eof))
        log.info("File transfer %s complete: %d bytes sent", self.file_id, bytes_sent)


class FileTransferReceiver:
    """Reassembles chunks from a data channel and saves the verified file to ``dest_dir``."""

    def __init__(
        self,
        file_id: str,
        dest_dir: Union[str, Path],
        events: Optional[asyncio.Queue] = None,
        tmp_dir: Union[str, Path] = DEFAULT_TMP_DIR,
    ) -> None:
        self.file_id = file_id
        self.dest_dir = Path(dest_dir)
        self.tmp_dir = Path(tmp_dir)
        self.tmp_path = self.tmp_dir / file_id
        self.total_chunks: Optional[int] = None
        self.expected_sha256: Optional[str] = None
        self.bytes_received = 0
        self._chunks: Dict[int, bytes] = {}
        self._last_progress = 0
        self._events = events

    async def on_message(self, msg: DataChannelMessage) -> Optional[Path]:
        """Feed one message; return the saved file's path once complete and verified."""
        if msg.is_string:
            text = bytes(msg.data).decode("utf-8")
            try:
                obj = json.loads(text)
            except json.JSONDecodeError:
                return None
            eof = _parse_eof(obj)
            if eof is not None and eof["type"] == "eof":
                self.expected_sha256 = eof["sha256"]
                return await self._assemble()
            header = _parse_header(obj)
            if header is not None:
                self.total_chunks = header["total_chunks"]
                log.info(
                    "File transfer %s incoming: %s (%d bytes)",
                    self.file_id,
                    header["name"],
                    header["size"],
                )
            return None

        index, payload = decode_chunk(msg.data)
        self.bytes_received += len(payload)
        self._chunks[index] = payload
        if self.bytes_received - self._last_progress >= PROGRESS_INTERVAL_BYTES:
            self._last_progress = self.bytes_received
            _emit(self._events, FileProgressEvent(self.file_id, self.bytes_received, 0))
        return None

    async def _assemble(self) -> Path:
        self.tmp_dir.mkdir(parents=True, exist_ok=True)

        assembled = b"".join(self._chunks[index] for index in sorted(self._chunks))
        actual = hashlib.sha256(assembled).hexdigest()
        if self.expected_sha256 is None:
            raise ValueError("EOF frame not yet received")
        if actual != self.expected_sha256:
            self.tmp_path.unlink(missing_ok=True)
            raise ChecksumMismatch(
                f"SHA-256 mismatch for file '{self.file_id}': "
                f"expected {self.expected_sha256}, got {actual}"
            )

        self.dest_dir.mkdir(parents=True, exist_ok=True)
        dest_path = self.dest_dir / self.file_id
        await asyncio.to_thread(dest_path.write_bytes, assembled)
        log.info("File transfer %s verified and saved to %s", self.file_id, dest_path)
        return dest_path