"""Read and write shell link records.

A record is a 76-byte header followed by optional sections, each present
only when its header flag bit is set, in this fixed order::

    id list -> location -> name -> relative path -> working dir ->
    arguments -> icon location -> product block -> component block

and a trailing zero uint32.
"""

import io
import logging
import os
import struct
import warnings
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from ._constants import (
    ANSI_CODEPAGE,
    EXP_DARWIN_ID_SIG,
    EXP_SZ_ICON_SIG,
    FLAG_NAMES,
    HAS_ARGS,
    HAS_DARWINID,
    HAS_ICONLOCATION,
    HAS_ID_LIST,
    HAS_LINK_INFO,
    HAS_LOGO3ID,
    HAS_NAME,
    HAS_RELPATH,
    HAS_WORKINGDIR,
    HEADER_SIZE,
    HOTKEY_MOD,
    IS_UNICODE,
    LINK_CLSID,
    SHOW_CMD,
    TERMINATOR,
    VK_KEYS,
)
from ._types import Source
from ._util import from_filetime, pack_filetime, to_filetime
from .advertise import build_advertise_block, read_advertise_block
from .errors import NotALinkFile, TerminatorWarning
from .location import decode_location, encode_location
from .record import LinkRecord
from .resolver import resolve_path
from .strings import (
    read_chunk,
    read_counted_string,
    read_id_list,
    write_counted_string,
    write_id_list,
)

LOGGER = logging.getLogger(__name__)

# (flag, LinkRecord attribute) for the counted-string sections, in wire order
_STRING_SECTIONS = (
    (HAS_NAME, "description"),
    (HAS_RELPATH, "relative_path"),
    (HAS_WORKINGDIR, "working_dir"),
    (HAS_ARGS, "arguments"),
    (HAS_ICONLOCATION, "icon_path"),
)

# (flag, LinkRecord attribute, block signature) for the advertise blocks
_ADVERTISE_SECTIONS = (
    (HAS_LOGO3ID, "product", EXP_SZ_ICON_SIG),
    (HAS_DARWINID, "component", EXP_DARWIN_ID_SIG),
)


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------
@dataclass(slots=True)
class LinkHeader:
    """The fixed 76-byte header, with FILETIMEs left as raw ticks."""

    flags: int = 0
    file_attributes: int = 0
    creation_time: int = 0
    access_time: int = 0
    write_time: int = 0
    file_size: int = 0
    icon_index: int = 0
    show_command: int = 0
    hotkey: int = 0

    @property
    def flag_names(self) -> list[str]:
        return [
            FLAG_NAMES.get(bit, f"Bit{bit}")
            for bit in range(32)
            if self.flags & (1 << bit)
        ]


def read_header(data: bytes) -> LinkHeader:
    """Validate and unpack the fixed header at the start of *data*."""
    if len(data) < HEADER_SIZE:
        raise NotALinkFile(
            f"Data too short for a link header (need >= {HEADER_SIZE} bytes, "
            f"got {len(data)})"
        )
    size = struct.unpack_from("<I", data, 0)[0]
    if size != HEADER_SIZE:
        raise NotALinkFile(
            f"Invalid header size 0x{size:08X} (expected 0x{HEADER_SIZE:X})"
        )
    if data[4:20] != LINK_CLSID:
        raise NotALinkFile("Header magic is not CLSID_ShellLink")

    (
        flags,
        attrs,
        ctime,
        atime,
        wtime,
        file_size,
        icon_index,
        show_command,
        hotkey,
    ) = struct.unpack_from("<IIQQQIiiI", data, 20)
    return LinkHeader(
        flags=flags,
        file_attributes=attrs,
        creation_time=ctime,
        access_time=atime,
        write_time=wtime,
        file_size=file_size,
        icon_index=icon_index,
        show_command=show_command,
        hotkey=hotkey & 0xFFFF,
    )


def _check_header_fields(record: LinkRecord) -> None:
    for name, value, lo, hi in (
        ("file_attributes", record.file_attributes, 0, 0xFFFFFFFF),
        ("file_size", record.file_size, 0, 0xFFFFFFFF),
        ("icon_index", record.icon_index, -(1 << 31), (1 << 31) - 1),
        ("show_command", record.show_command, -(1 << 31), (1 << 31) - 1),
        ("hotkey", record.hotkey, 0, 0xFFFF),
    ):
        if not lo <= value <= hi:
            raise ValueError(f"{name} {value} does not fit its header field")
    for name in ("creation_time", "access_time", "write_time"):
        try:
            to_filetime(getattr(record, name))
        except ValueError as exc:
            raise ValueError(f"{name}: {exc}") from None


def _build_header(record: LinkRecord, flags: int) -> bytes:
    _check_header_fields(record)
    hdr = bytearray(HEADER_SIZE)
    struct.pack_into("<I", hdr, 0, HEADER_SIZE)
    hdr[4:20] = LINK_CLSID
    struct.pack_into("<I", hdr, 20, flags)
    struct.pack_into("<I", hdr, 24, record.file_attributes)
    hdr[28:36] = pack_filetime(record.creation_time)
    hdr[36:44] = pack_filetime(record.access_time)
    hdr[44:52] = pack_filetime(record.write_time)
    struct.pack_into("<I", hdr, 52, record.file_size)  # FileSize
    struct.pack_into("<i", hdr, 56, record.icon_index)  # IconIndex
    struct.pack_into("<i", hdr, 60, record.show_command)  # ShowCommand
    struct.pack_into("<I", hdr, 64, record.hotkey)  # HotKey
    # +68, +72 reserved
    return bytes(hdr)


# ---------------------------------------------------------------------------
# Load
# ---------------------------------------------------------------------------
def _as_stream(source: Source) -> BinaryIO:
    if isinstance(source, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(source))
    if isinstance(source, (str, os.PathLike)):
        return io.BytesIO(Path(source).read_bytes())
    return source


def load(
    source: Source,
    record: LinkRecord | None = None,
    codepage: str = ANSI_CODEPAGE,
) -> LinkRecord:
    """Decode one link record from *source* (bytes, a path, or a binary stream).

    The whole record is decoded into a fresh :class:`LinkRecord` first; when
    *record* is given it is overwritten only after decoding succeeded, so a
    failure never leaves it half updated.  ``dirty`` is cleared.
    """
    stream = _as_stream(source)
    header = read_header(stream.read(HEADER_SIZE))
    flags = header.flags
    LOGGER.debug("header flags 0x%08X %s", flags, header.flag_names)

    new = LinkRecord(
        icon_index=header.icon_index,
        hotkey=header.hotkey,
        show_command=header.show_command,
        file_attributes=header.file_attributes,
        file_size=header.file_size,
        creation_time=from_filetime(header.creation_time),
        access_time=from_filetime(header.access_time),
        write_time=from_filetime(header.write_time),
    )

    if flags & HAS_ID_LIST:
        new.id_list = read_id_list(stream)

    if flags & HAS_LINK_INFO:
        new.volume, new.target_path = decode_location(read_chunk(stream), codepage)

    wide = bool(flags & IS_UNICODE)
    for flag, attr in _STRING_SECTIONS:
        if flags & flag:
            setattr(new, attr, read_counted_string(stream, wide, codepage))

    for flag, attr, _sig in _ADVERTISE_SECTIONS:
        if flags & flag:
            setattr(new, attr, read_advertise_block(stream))

    tail = stream.read(4)
    if tail != TERMINATOR:
        warnings.warn(
            f"Last word was not zero (got {tail.hex() or 'end of data'})",
            TerminatorWarning,
            stacklevel=2,
        )

    if record is None:
        return new
    record.assign(new)
    record.dirty = False
    return record


def load_file(
    path: str | os.PathLike,
    record: LinkRecord | None = None,
    resolve: bool = True,
    codepage: str = ANSI_CODEPAGE,
    exists: Callable[[str], bool] = os.path.exists,
    canonicalize: Callable[[str], str] = os.path.abspath,
) -> LinkRecord:
    """Load a link file and reconcile its relative path with the filesystem.

    Unless *resolve* is false or the link is advertised, a missing target
    path is recomputed from the relative path, trying the link file's own
    directory and then the working directory.
    """
    with open(path, "rb") as fh:
        new = load(fh, codepage=codepage)

    if resolve and not new.is_advertised:
        link_dir = os.path.dirname(os.path.abspath(path))
        new.target_path = resolve_path(
            new.relative_path,
            link_dir,
            new.working_dir,
            cached=new.target_path,
            exists=exists,
            canonicalize=canonicalize,
        )

    if record is None:
        return new
    record.assign(new)
    record.dirty = False
    return record


# ---------------------------------------------------------------------------
# Save
# ---------------------------------------------------------------------------
def derive_flags(record: LinkRecord) -> int:
    """Return the header flags implied by the populated fields of *record*."""
    flags = IS_UNICODE
    if record.id_list:
        flags |= HAS_ID_LIST
    if record.target_path:
        flags |= HAS_LINK_INFO
    for flag, attr in _STRING_SECTIONS:
        if getattr(record, attr):
            flags |= flag
    for flag, attr, _sig in _ADVERTISE_SECTIONS:
        if getattr(record, attr):
            flags |= flag
    return flags


def build(record: LinkRecord, codepage: str = ANSI_CODEPAGE) -> bytes:
    """Return the raw bytes of *record* without touching its dirty state."""
    flags = derive_flags(record)
    out = io.BytesIO()
    out.write(_build_header(record, flags))

    if flags & HAS_ID_LIST:
        write_id_list(out, record.id_list)
    if flags & HAS_LINK_INFO:
        out.write(encode_location(record.target_path, record.volume, codepage))
    for flag, attr in _STRING_SECTIONS:
        if flags & flag:
            write_counted_string(out, getattr(record, attr))
    for flag, attr, sig in _ADVERTISE_SECTIONS:
        if flags & flag:
            out.write(build_advertise_block(getattr(record, attr), sig, codepage))
    out.write(TERMINATOR)
    return out.getvalue()


def save(record: LinkRecord, stream: BinaryIO, codepage: str = ANSI_CODEPAGE) -> int:
    """Encode *record* into *stream*.  Returns the number of bytes written.

    The full image is built before anything is written; ``dirty`` is cleared
    only once the write returned.
    """
    data = build(record, codepage)
    stream.write(data)
    record.dirty = False
    return len(data)


def save_file(
    record: LinkRecord, path: str | os.PathLike, codepage: str = ANSI_CODEPAGE
) -> int:
    """Write *record* to *path*, removing the file again if the write fails.

    Returns the number of bytes written.
    """
    data = build(record, codepage)
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    try:
        with open(p, "wb") as fh:
            fh.write(data)
    except BaseException:
        LOGGER.warning("Failed to create shortcut %s", p)
        with suppress(OSError):
            p.unlink()
        raise
    record.dirty = False
    return len(data)


# ---------------------------------------------------------------------------
# Human-readable formatter
# ---------------------------------------------------------------------------
def _hotkey_str(hotkey: int) -> str:
    vk, mod = hotkey & 0xFF, hotkey >> 8
    parts = [n for b, n in HOTKEY_MOD.items() if mod & b]
    if vk:
        parts.append(VK_KEYS.get(vk, f"0x{vk:02X}"))
    return "+".join(parts)


def format_record(record: LinkRecord) -> str:
    """Return a human-readable string representation of *record*."""
    lines: list[str] = []
    flags = derive_flags(record)

    lines.append("--- HEADER ---")
    lines.append(f"  LinkFlags:       0x{flags:08X}")
    for name in LinkHeader(flags=flags).flag_names:
        lines.append(f"    - {name}")
    lines.append(f"  FileAttributes:  0x{record.file_attributes:08X}")
    for label, ts in (
        ("CreationTime", record.creation_time),
        ("AccessTime", record.access_time),
        ("WriteTime", record.write_time),
    ):
        text = ts.strftime("%Y-%m-%d %H:%M:%S UTC") if ts else "0 (unset)"
        lines.append(f"  {label + ':':<17}{text}")
    lines.append(f"  FileSize:        {record.file_size}")
    lines.append(f"  IconIndex:       {record.icon_index}")
    show_name = SHOW_CMD.get(record.show_command, "?")
    lines.append(f"  ShowCommand:     {record.show_command} ({show_name})")
    lines.append(
        f"  HotKey:          {_hotkey_str(record.hotkey) or 'None'} "
        f"(0x{record.hotkey:04X})"
    )

    if record.id_list:
        lines.append("")
        lines.append("--- LINK TARGET ID LIST ---")
        lines.append(f"  {len(record.id_list)} bytes (opaque)")

    if record.target_path:
        vol = record.volume
        lines.append("")
        lines.append("--- LINK INFO ---")
        lines.append(f'  VolumeLabel:     "{vol.label}"')
        lines.append(f"  DriveType:       {int(vol.kind)} ({vol.kind.name})")
        lines.append(f"  DriveSerial:     0x{vol.serial:08X}")
        lines.append(f'  LocalBasePath:   "{record.target_path}"')

    strings = [
        ("Name", record.description),
        ("RelativePath", record.relative_path),
        ("WorkingDir", record.working_dir),
        ("Arguments", record.arguments),
        ("IconLocation", record.icon_path),
    ]
    if any(v for _, v in strings):
        lines.append("")
        lines.append("--- STRING DATA ---")
        for name, value in strings:
            if value:
                lines.append(f'  {name + ":":<19}"{value}"')

    if record.is_advertised:
        lines.append("")
        lines.append("--- ADVERTISED ---")
        lines.append(f"  Product:         {record.product or '(none)'}")
        lines.append(f"  Component:       {record.component or '(none)'}")

    lines.append("")
    lines.append("--- RESOLVED ---")
    lines.append(f"  TargetPath:      {record.get_path() or '(empty)'}")
    lines.append(f"  Arguments:       {record.arguments or '(empty)'}")
    lines.append(f"  WorkingDirectory: {record.working_dir or '(empty)'}")

    return "\n".join(lines)
