"""Tests for lnkrecord.advertise."""

import io
import struct

import pytest

from lnkrecord._constants import (
    ADVERTISE_BLOCK_SIZE,
    EXP_DARWIN_ID_SIG,
    EXP_SZ_ICON_SIG,
)
from lnkrecord.advertise import (
    AdvertisedTarget,
    build_advertise_block,
    format_advertised_path,
    parse_advertised_path,
    read_advertise_block,
)
from lnkrecord.errors import (
    CorruptRecord,
    InvalidAdvertisedFormat,
    TruncatedInput,
    UnknownFormat,
)

COMPONENT = "{9db1186e-40df-11d1-aa8c-00c04fb67863}"
PRODUCT = "{9db1186f-40df-11d1-aa8c-00c04fb67863}"


class TestDescriptorBlock:
    """The fixed 788-byte product / component block."""

    def test_layout(self):
        block = build_advertise_block("abc", EXP_DARWIN_ID_SIG)
        assert len(block) == ADVERTISE_BLOCK_SIZE
        assert struct.unpack_from("<II", block, 0) == (788, EXP_DARWIN_ID_SIG)
        assert block[8:12] == b"abc\x00"
        assert block[268:276] == "abc".encode("utf-16-le") + b"\x00\x00"

    def test_read_returns_wide_string(self):
        block = bytearray(build_advertise_block("wide", EXP_SZ_ICON_SIG))
        block[8:12] = b"ansi"  # narrow copy is ignored on read
        assert read_advertise_block(io.BytesIO(bytes(block))) == "wide"

    def test_value_clipped(self):
        block = build_advertise_block("x" * 400, EXP_SZ_ICON_SIG)
        assert len(block) == ADVERTISE_BLOCK_SIZE
        assert read_advertise_block(io.BytesIO(block)) == "x" * 259

    def test_wrong_size(self):
        block = bytearray(build_advertise_block("abc", EXP_SZ_ICON_SIG))
        struct.pack_into("<I", block, 0, 400)
        with pytest.raises(CorruptRecord):
            read_advertise_block(io.BytesIO(bytes(block)))

    def test_unknown_signature(self):
        block = build_advertise_block("abc", 0xB0000001)
        with pytest.raises(UnknownFormat, match="0xB0000001"):
            read_advertise_block(io.BytesIO(block))

    @pytest.mark.parametrize("sig", [0xA0000001, 0xA0000006, 0xA0000007, 0xA000FFFF])
    def test_any_a000_signature_accepted(self, sig):
        block = build_advertise_block("ok", sig)
        assert read_advertise_block(io.BytesIO(block)) == "ok"

    def test_truncated(self):
        block = build_advertise_block("abc", EXP_SZ_ICON_SIG)
        with pytest.raises(TruncatedInput):
            read_advertise_block(io.BytesIO(block[:500]))


class TestParseAdvertisedPath:
    """The ``::{GUID}:value::`` mini-language."""

    def test_component_only(self):
        assert parse_advertised_path(f"::{COMPONENT}:Comp::") == AdvertisedTarget(
            component="Comp"
        )

    def test_product_and_component(self):
        target = parse_advertised_path(f"::{PRODUCT}:Prod::{COMPONENT}:Comp::")
        assert target.product == "Prod"
        assert target.component == "Comp"

    def test_component_first(self):
        target = parse_advertised_path(f"::{COMPONENT}:Comp::{PRODUCT}:Prod::")
        assert target == AdvertisedTarget(component="Comp", product="Prod")

    def test_guid_case_insensitive(self):
        target = parse_advertised_path(f"::{COMPONENT.upper()}:Comp::")
        assert target.component == "Comp"

    def test_empty_value(self):
        assert parse_advertised_path(f"::{COMPONENT}:::").component == ""

    @pytest.mark.parametrize(
        "text",
        [
            r"C:\Windows\notepad.exe",
            "",
            "::",
            f"{COMPONENT}:Comp::",
            f"::{PRODUCT}:Prod::",
            f"::{COMPONENT}:Comp",
            f"::{COMPONENT}",
            f"::{COMPONENT}:A::{COMPONENT}:B::",
            "::{00000000-0000-0000-0000-000000000000}:X::",
            "::{not-a-guid}:X::",
            f"::{COMPONENT}:Comp:extra",
        ],
    )
    def test_rejected(self, text):
        with pytest.raises(InvalidAdvertisedFormat):
            parse_advertised_path(text)


class TestFormatAdvertisedPath:
    def test_product_written_first(self):
        text = format_advertised_path("Comp", "Prod")
        assert text == f"::{PRODUCT}:Prod::{COMPONENT}:Comp::"

    def test_component_only(self):
        assert format_advertised_path("Comp") == f"::{COMPONENT}:Comp::"

    def test_parses_back(self):
        text = format_advertised_path("Dc@4]Ko!V^e=kz", "{90120000-0030}")
        target = parse_advertised_path(text)
        assert target == AdvertisedTarget(component="Dc@4]Ko!V^e=kz", product="{90120000-0030}")

    def test_colon_rejected(self):
        with pytest.raises(ValueError):
            format_advertised_path("a:b")
