"""Small binary helpers: GUID text <-> bytes and FILETIME <-> datetime."""

import re as _re
import struct
import uuid
from datetime import datetime, timedelta, timezone

from ._types import Timestamp

_FILETIME_EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)

# Registry form: {XXXXXXXX-XXXX-XXXX-XXXX-XXXXXXXXXXXX}, 38 characters
_GUID_RE = _re.compile(
    r"\{[0-9A-Fa-f]{8}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{12}\}"
)


def is_guid_str(text: str) -> bool:
    """Return True if *text* is a braced, 38-character GUID string."""
    return len(text) == 38 and _GUID_RE.fullmatch(text) is not None


def parse_guid_str(text: str) -> bytes:
    """Convert ``{XXXXXXXX-...}`` to the 16-byte little-endian GUID layout.

    Raises :class:`ValueError` when *text* is not in registry format.
    """
    if not is_guid_str(text):
        raise ValueError(f"Invalid GUID string: {text!r}")
    return uuid.UUID(text).bytes_le


def format_guid(data: bytes, off: int = 0) -> str:
    """Format 16 little-endian GUID bytes at *off* as upper-case text (no braces)."""
    return str(uuid.UUID(bytes_le=bytes(data[off : off + 16]))).upper()


def canonical_guid(text: str) -> str:
    """Normalise a braced GUID string to upper case, validating it."""
    return "{" + format_guid(parse_guid_str(text)) + "}"


def _resolve_timestamp(val: Timestamp) -> datetime | int | None:
    """Normalise a Timestamp to datetime, int, or None.

    Parses ISO 8601 and ``"YYYY-MM-DD HH:MM:SS UTC"`` strings into
    timezone-aware datetime objects.
    """
    if val is None or isinstance(val, (int, datetime)):
        return val
    if isinstance(val, str):
        if not val:
            return None
        s = val.replace(" UTC", "+00:00")
        dt = datetime.fromisoformat(s)
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt
    raise TypeError(f"Expected None, int, datetime, or str, got {type(val).__name__}")


def to_filetime(val: Timestamp) -> int:
    """Convert *val* to raw FILETIME ticks (100 ns since 1601-01-01 UTC).

    ``None`` maps to 0, the "unset" FILETIME.
    """
    val = _resolve_timestamp(val)
    if val is None:
        return 0
    if isinstance(val, int):
        if not 0 <= val < 1 << 64:
            raise ValueError(f"FILETIME out of range: {val}")
        return val
    if val.tzinfo is None:
        raise TypeError("datetime must be timezone-aware (e.g. tzinfo=timezone.utc)")
    td = val - _FILETIME_EPOCH
    ticks = td.days * 864_000_000_000 + td.seconds * 10_000_000 + td.microseconds * 10
    if not 0 <= ticks < 1 << 64:
        raise ValueError(f"{val.isoformat()} is outside the FILETIME range")
    return ticks


def from_filetime(ticks: int) -> datetime | None:
    """Convert FILETIME ticks to an aware UTC datetime (microsecond resolution).

    Returns ``None`` for 0 and for values a datetime cannot represent.
    """
    if ticks == 0:
        return None
    try:
        return _FILETIME_EPOCH + timedelta(microseconds=ticks // 10)
    except OverflowError:
        return None


def pack_filetime(val: Timestamp) -> bytes:
    """Return *val* as an 8-byte packed FILETIME."""
    return struct.pack("<Q", to_filetime(val))
