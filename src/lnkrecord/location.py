"""Location (LinkInfo) block: volume information plus the local target path.

Layout of the block, all offsets relative to the block start::

    +00 total size          +04 header size        +08 flags
    +0C volume table offset +10 local path offset
    +14 network volume table offset (never written)
    +18 final path offset

The volume table is ``size, drive type, serial, label offset`` followed by
the narrow label.  Paths are narrow, NUL-terminated strings.
"""

import enum
import logging
import struct
from dataclasses import dataclass

from ._constants import (
    ANSI_CODEPAGE,
    DRIVE_TYPES,
    LOCAL_VOLUME_SIZE,
    LOCATION_FLAG_LOCAL,
    LOCATION_HEADER_SIZE,
    VOLUME_LABEL_CAPACITY,
)
from .errors import CorruptRecord

LOGGER = logging.getLogger(__name__)


class DriveType(enum.IntEnum):
    UNKNOWN = 0
    NO_ROOT_DIR = 1
    REMOVABLE = 2
    FIXED = 3
    REMOTE = 4
    CDROM = 5
    RAMDISK = 6


@dataclass(slots=True)
class VolumeInfo:
    """Drive type, serial number and label of the volume holding the target.

    The label is clipped to the 11 characters an 8.3 volume label can hold.
    """

    kind: DriveType = DriveType.UNKNOWN
    serial: int = 0
    label: str = ""

    def __post_init__(self) -> None:
        self.kind = drive_type(self.kind)
        self.serial &= 0xFFFFFFFF
        self.label = self.label[:VOLUME_LABEL_CAPACITY]


def drive_type(value: int) -> DriveType:
    """Map a raw drive-type word to :class:`DriveType` (unknown values -> UNKNOWN)."""
    if value in DRIVE_TYPES:
        return DriveType(value)
    LOGGER.debug("unrecognised drive type %d, treating as UNKNOWN", value)
    return DriveType.UNKNOWN


def _read_u32(data: bytes, off: int) -> int:
    return struct.unpack_from("<I", data, off)[0]


def _narrow_at(data: bytes, start: int, end: int, codepage: str) -> str:
    """Decode the NUL-terminated narrow string in ``data[start:end]``."""
    raw = data[start:end].split(b"\x00", 1)[0]
    return raw.decode(codepage, errors="replace")


# ---------------------------------------------------------------------------
# Decode
# ---------------------------------------------------------------------------
def _decode_volume(chunk: bytes, off: int, total: int, codepage: str) -> VolumeInfo:
    size = _read_u32(chunk, off)
    kind = _read_u32(chunk, off + 4)
    serial = _read_u32(chunk, off + 8)
    label_off = _read_u32(chunk, off + 12)

    label = ""
    if label_off and size > label_off:
        end = min(off + size, total)
        label = _narrow_at(chunk, off + label_off, end, codepage)
    return VolumeInfo(kind=drive_type(kind), serial=serial, label=label)


def decode_location(
    chunk: bytes, codepage: str = ANSI_CODEPAGE
) -> tuple[VolumeInfo, str | None]:
    """Decode a location chunk (as returned by ``read_chunk``).

    Returns ``(volume, local_path)``.  A missing volume table yields an empty
    :class:`VolumeInfo`; a missing local path yields ``None``.
    """
    total = len(chunk)
    if total < LOCATION_HEADER_SIZE:
        raise CorruptRecord(
            f"location block of {total} bytes is smaller than its "
            f"{LOCATION_HEADER_SIZE}-byte header"
        )
    # read_chunk output always matches; only hand-sliced chunks can differ
    declared = _read_u32(chunk, 0)
    if declared != total:
        raise CorruptRecord(f"location size field {declared} != block length {total}")

    vol_off = _read_u32(chunk, 12)
    path_off = _read_u32(chunk, 16)

    volume = VolumeInfo()
    if vol_off and vol_off + LOCAL_VOLUME_SIZE <= total:
        volume = _decode_volume(chunk, vol_off, total, codepage)

    path = None
    if path_off and path_off < total:
        path = _narrow_at(chunk, path_off, total, codepage)

    LOGGER.debug(
        "location: type %s serial %08x label %r path %r",
        volume.kind.name,
        volume.serial,
        volume.label,
        path,
    )
    return volume, path


# ---------------------------------------------------------------------------
# Encode
# ---------------------------------------------------------------------------
def encode_location(
    path: str, volume: VolumeInfo, codepage: str = ANSI_CODEPAGE
) -> bytes:
    """Build a location block for *path* on *volume*.

    The network volume table is never written and the final path is always
    the empty string.
    """
    label = volume.label[:VOLUME_LABEL_CAPACITY].encode(codepage, errors="replace")
    label += b"\x00"
    local_path = path.encode(codepage, errors="replace") + b"\x00"
    final_path = b"\x00"

    volume_size = LOCAL_VOLUME_SIZE + len(label)
    vol_off = LOCATION_HEADER_SIZE
    path_off = vol_off + volume_size
    final_off = path_off + len(local_path)
    total = final_off + len(final_path)

    out = bytearray()
    out += struct.pack("<I", total)  # total size
    out += struct.pack("<I", LOCATION_HEADER_SIZE)  # header size
    out += struct.pack("<I", LOCATION_FLAG_LOCAL)  # flags
    out += struct.pack("<I", vol_off)  # volume table
    out += struct.pack("<I", path_off)  # local path
    out += struct.pack("<I", 0)  # network volume table
    out += struct.pack("<I", final_off)  # final path
    out += struct.pack("<I", volume_size)
    out += struct.pack("<I", int(volume.kind))
    out += struct.pack("<I", volume.serial & 0xFFFFFFFF)
    out += struct.pack("<I", LOCAL_VOLUME_SIZE)  # label follows the table
    out += label
    out += local_path
    out += final_path
    return bytes(out)
