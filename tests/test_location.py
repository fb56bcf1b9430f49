"""Tests for lnkrecord.location."""

import struct

import pytest

from lnkrecord.errors import CorruptRecord
from lnkrecord.location import DriveType, VolumeInfo, decode_location, encode_location


def _raw_location(
    path: bytes = b"C:\\x.exe",
    label: bytes = b"DATA",
    kind: int = 3,
    serial: int = 0x12345678,
    vol_off: int = 28,
    path_off: int | None = None,
) -> bytes:
    """Assemble a location block by hand, volume table first."""
    volume = struct.pack("<IIII", 16 + len(label) + 1, kind, serial, 16) + label + b"\x00"
    if path_off is None:
        path_off = 28 + len(volume)
    body = volume + path + b"\x00"
    total = 28 + len(body)
    header = struct.pack("<7I", total, 28, 1, vol_off, path_off, 0, 0)
    return header + body


class TestDecodeLocation:
    """Decoding volume info and the local path."""

    def test_basic(self):
        volume, path = decode_location(_raw_location())
        assert path == "C:\\x.exe"
        assert volume == VolumeInfo(kind=DriveType.FIXED, serial=0x12345678, label="DATA")

    def test_long_label_truncated(self):
        volume, _ = decode_location(_raw_location(label=b"ABCDEFGHIJKLMNOP"))
        assert volume.label == "ABCDEFGHIJK"

    def test_unknown_drive_type(self):
        volume, _ = decode_location(_raw_location(kind=99))
        assert volume.kind is DriveType.UNKNOWN

    def test_no_volume_table(self):
        volume, path = decode_location(_raw_location(vol_off=0))
        assert volume == VolumeInfo()
        assert path == "C:\\x.exe"

    def test_volume_table_past_end_ignored(self):
        chunk = _raw_location()
        volume, _ = decode_location(_raw_location(vol_off=len(chunk) - 8))
        assert volume == VolumeInfo()

    def test_no_local_path(self):
        _, path = decode_location(_raw_location(path_off=0))
        assert path is None

    def test_path_offset_past_end(self):
        chunk = _raw_location()
        _, path = decode_location(_raw_location(path_off=len(chunk) + 10))
        assert path is None

    def test_narrow_codepage(self):
        _, path = decode_location(_raw_location(path=b"C:\\caf\xe9.exe"))
        assert path == "C:\\caf\u00e9.exe"

    def test_size_mismatch(self):
        chunk = bytearray(_raw_location())
        struct.pack_into("<I", chunk, 0, len(chunk) + 4)
        with pytest.raises(CorruptRecord, match="size field"):
            decode_location(bytes(chunk))

    def test_smaller_than_header(self):
        chunk = struct.pack("<I", 20) + b"\x00" * 16
        with pytest.raises(CorruptRecord, match="header"):
            decode_location(chunk)


class TestEncodeLocation:
    """Layout of a freshly built location block."""

    @pytest.fixture
    def block(self):
        volume = VolumeInfo(kind=DriveType.FIXED, serial=0x4A2D5E79, label="SYSTEM")
        return encode_location(r"C:\Windows\notepad.exe", volume)

    def test_header_fields(self, block):
        total, hdr, flags, vol_off, path_off, net_off, final_off = struct.unpack_from(
            "<7I", block, 0
        )
        assert total == len(block)
        assert hdr == 28
        assert flags == 1
        assert vol_off == 28
        assert net_off == 0
        assert path_off == vol_off + 16 + len(b"SYSTEM\x00")
        assert final_off == path_off + len(b"C:\\Windows\\notepad.exe\x00")

    def test_volume_table(self, block):
        size, kind, serial, label_off = struct.unpack_from("<4I", block, 28)
        assert size == 16 + 7
        assert kind == DriveType.FIXED
        assert serial == 0x4A2D5E79
        assert label_off == 16
        assert block[44:51] == b"SYSTEM\x00"

    def test_final_path_empty(self, block):
        final_off = struct.unpack_from("<I", block, 24)[0]
        assert block[final_off:] == b"\x00"

    def test_decodes_back(self, block):
        volume, path = decode_location(block)
        assert path == r"C:\Windows\notepad.exe"
        assert volume.label == "SYSTEM"
        assert volume.serial == 0x4A2D5E79

    def test_empty_volume(self):
        block = encode_location("/tmp/a", VolumeInfo())
        volume, path = decode_location(block)
        assert volume == VolumeInfo()
        assert path == "/tmp/a"


class TestVolumeInfo:
    def test_label_clipped(self):
        assert VolumeInfo(label="A" * 20).label == "A" * 11

    def test_serial_masked(self):
        assert VolumeInfo(serial=0x1_0000_0001).serial == 1

    def test_raw_kind_normalised(self):
        assert VolumeInfo(kind=5).kind is DriveType.CDROM
        assert VolumeInfo(kind=42).kind is DriveType.UNKNOWN
