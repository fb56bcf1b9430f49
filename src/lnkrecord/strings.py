"""Primitive stream codecs: counted strings, size-prefixed chunks, id lists."""

import logging
import struct
from typing import BinaryIO

from ._constants import ANSI_CODEPAGE
from .errors import InvalidLength, TruncatedInput

LOGGER = logging.getLogger(__name__)


def read_exact(stream: BinaryIO, size: int, what: str = "data") -> bytes:
    """Read exactly *size* bytes from *stream* or raise :class:`TruncatedInput`."""
    data = stream.read(size) if size else b""
    if len(data) != size:
        raise TruncatedInput(f"{what}: expected {size} bytes, got {len(data)}")
    return data


def _read_u16(stream: BinaryIO, what: str) -> int:
    return struct.unpack("<H", read_exact(stream, 2, what))[0]


def _read_u32(stream: BinaryIO, what: str) -> int:
    return struct.unpack("<I", read_exact(stream, 4, what))[0]


def utf16_units(value: str) -> int:
    """Length of *value* in UTF-16 code units."""
    return len(value.encode("utf-16-le", "surrogatepass")) // 2


# ---------------------------------------------------------------------------
# Counted strings
# ---------------------------------------------------------------------------
def read_counted_string(
    stream: BinaryIO, wide: bool, codepage: str = ANSI_CODEPAGE
) -> str:
    """Read a uint16 element count followed by that many narrow or wide chars.

    The returned string stops at the first NUL, so a terminator written as
    part of the count never leaks into the value.
    """
    count = _read_u16(stream, "string length")
    size = count * 2 if wide else count
    raw = read_exact(stream, size, "string data")
    if wide:
        value = raw.decode("utf-16-le", "surrogatepass")
    else:
        value = raw.decode(codepage, errors="replace")
    value = value.split("\x00", 1)[0]
    LOGGER.debug("read %s string of %d units: %r", "wide" if wide else "ansi", count, value)
    return value


def write_counted_string(stream: BinaryIO, value: str) -> None:
    """Write *value* as a wide counted string, terminator included in the count."""
    encoded = value.encode("utf-16-le", "surrogatepass") + b"\x00\x00"
    count = len(encoded) // 2
    if count > 0xFFFF:
        raise ValueError(
            f"string of {count - 1} UTF-16 code units exceeds the 65534-unit limit"
        )
    stream.write(struct.pack("<H", count))
    stream.write(encoded)


# ---------------------------------------------------------------------------
# Chunks
# ---------------------------------------------------------------------------
def read_chunk(stream: BinaryIO) -> bytes:
    """Read a uint32 size-prefixed chunk, returning it *including* the size field.

    The size counts itself, so anything below 4 is rejected.
    """
    size = _read_u32(stream, "chunk size")
    if size < 4:
        raise InvalidLength(f"chunk size {size} is smaller than its own size field")
    payload = read_exact(stream, size - 4, "chunk data")
    LOGGER.debug("read chunk of %d bytes", size)
    return struct.pack("<I", size) + payload


# ---------------------------------------------------------------------------
# Target id list (opaque)
# ---------------------------------------------------------------------------
def read_id_list(stream: BinaryIO) -> bytes:
    """Read the uint16-length-prefixed id list and return its payload verbatim."""
    size = _read_u16(stream, "id list size")
    blob = read_exact(stream, size, "id list")
    LOGGER.debug("read id list of %d bytes", size)
    return blob


def write_id_list(stream: BinaryIO, blob: bytes) -> None:
    """Write *blob* behind its uint16 length prefix."""
    if len(blob) > 0xFFFF:
        raise ValueError(f"id list of {len(blob)} bytes exceeds the 65535-byte limit")
    stream.write(struct.pack("<H", len(blob)))
    stream.write(blob)
