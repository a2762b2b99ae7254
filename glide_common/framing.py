"""
Framing codec for the Glide protocol.

Text frames (usernames, commands, responses, transfer metadata) are UTF-8
lines terminated by FRAME_TERMINATOR. File payloads are streamed raw after
their metadata frame.
"""

import asyncio
from dataclasses import dataclass

from glide_common.constants import CHUNK_SIZE, ENCODING, FRAME_TERMINATOR, METADATA_DELIMITER
from glide_common.errors import ConnectionClosed, MalformedFrame


def encode_frame(text: str) -> bytes:
    """Encode one text message as a terminated frame."""
    return text.encode(ENCODING) + FRAME_TERMINATOR


def decode_frame(data: bytes) -> str:
    """Decode one frame back into text, dropping the terminator."""
    if data.endswith(FRAME_TERMINATOR):
        data = data[:-len(FRAME_TERMINATOR)]
    try:
        return data.decode(ENCODING)
    except UnicodeDecodeError as e:
        raise MalformedFrame(f"Frame is not valid text: {e}") from e


async def write_all(writer: asyncio.StreamWriter, data: bytes):
    """Write all bytes and wait for the transport to flush them."""
    try:
        writer.write(data)
        await writer.drain()
    except ConnectionError as e:
        raise ConnectionClosed(f"Connection lost while sending: {e}") from e


async def read_frame(reader: asyncio.StreamReader, limit: int = CHUNK_SIZE) -> bytes:
    """
    Read exactly one terminated frame.

    Raises ConnectionClosed when the peer closes the stream before a full frame
    arrives, and MalformedFrame when the frame is longer than ``limit``. An
    oversized frame is consumed through its terminator first, so the next read
    starts at the following frame.
    """
    try:
        data = await reader.readuntil(FRAME_TERMINATOR)
    except asyncio.IncompleteReadError as e:
        raise ConnectionClosed() from e
    except ConnectionError as e:
        raise ConnectionClosed(f"Connection lost while receiving: {e}") from e
    except asyncio.LimitOverrunError as e:
        skipped = await _discard_frame(reader, e.consumed)
        raise MalformedFrame(f"Frame of {skipped} bytes exceeds the stream read limit") from e

    if len(data) > limit:
        raise MalformedFrame(f"Frame of {len(data)} bytes exceeds the {limit} byte limit")
    return data


async def _discard_frame(reader: asyncio.StreamReader, consumed: int) -> int:
    """Drop the rest of an oversized frame, terminator included. Returns the bytes dropped."""
    skipped = 0
    try:
        while True:
            if consumed:
                skipped += len(await reader.readexactly(consumed))
            try:
                return skipped + len(await reader.readuntil(FRAME_TERMINATOR))
            except asyncio.LimitOverrunError as e:
                consumed = e.consumed
    except asyncio.IncompleteReadError as e:
        raise ConnectionClosed() from e
    except ConnectionError as e:
        raise ConnectionClosed(f"Connection lost while receiving: {e}") from e


async def read_chunk(reader: asyncio.StreamReader, limit: int = CHUNK_SIZE) -> bytes:
    """Read up to ``limit`` payload bytes; an empty read means the peer is gone."""
    try:
        data = await reader.read(limit)
    except ConnectionError as e:
        raise ConnectionClosed(f"Connection lost while receiving: {e}") from e
    if not data:
        raise ConnectionClosed()
    return data


def chunk_count(size: int, chunk_size: int = CHUNK_SIZE) -> int:
    """Number of chunks needed to stream ``size`` bytes."""
    return size // chunk_size + (1 if size % chunk_size > 0 else 0)


@dataclass(frozen=True)
class TransferMetadata:
    """Leading frame of a file transfer: ``<filename>:<size>``."""
    filename: str
    size: int

    def to_bytes(self) -> bytes:
        return encode_frame(f"{self.filename}{METADATA_DELIMITER}{self.size}")

    @classmethod
    def from_bytes(cls, data: bytes) -> "TransferMetadata":
        text = decode_frame(data)
        parts = text.split(METADATA_DELIMITER)
        if len(parts) != 2:
            raise MalformedFrame(f"Invalid metadata format: {text!r}")

        filename = parts[0].strip()
        size_field = parts[1].strip()
        if not size_field.isascii() or not size_field.isdigit():
            raise MalformedFrame(f"Invalid file size in metadata: {size_field!r}")

        return cls(filename=filename, size=int(size_field))
