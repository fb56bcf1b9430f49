"""Advertised (MSI-deferred) shortcut support.

Two pieces live here:

* the fixed-size descriptor block stored for the product ("Logo3") and
  component ("Darwin") identifiers, and
* the ``::{GUID}:value::{GUID}:value::`` mini-language accepted by
  :func:`lnkrecord.record.LinkRecord.set_path`.

Block layout (788 bytes)::

    +000 size (uint32, always 788)
    +004 signature (uint32, high word 0xA000)
    +008 narrow string, 260 bytes
    +268 wide string, 520 bytes
"""

import logging
import struct
from dataclasses import dataclass
from typing import BinaryIO

from ._constants import (
    ADVERTISE_BLOCK_SIZE,
    ADVERTISE_SIG_BASE,
    ADVERTISE_SIG_MASK,
    ADVERTISED_COMPONENT_GUID,
    ADVERTISED_PRODUCT_GUID,
    ANSI_CODEPAGE,
    MAX_PATH,
)
from ._util import canonical_guid, is_guid_str
from .errors import CorruptRecord, InvalidAdvertisedFormat, UnknownFormat
from .strings import read_exact

LOGGER = logging.getLogger(__name__)

_ANSI_OFFSET = 8
_WIDE_OFFSET = _ANSI_OFFSET + MAX_PATH


# ---------------------------------------------------------------------------
# Descriptor block
# ---------------------------------------------------------------------------
def read_advertise_block(stream: BinaryIO) -> str:
    """Read one descriptor block and return its wide string."""
    size = struct.unpack("<I", read_exact(stream, 4, "advertise block size"))[0]
    if size != ADVERTISE_BLOCK_SIZE:
        raise CorruptRecord(
            f"advertise block size {size} != expected {ADVERTISE_BLOCK_SIZE}"
        )
    body = read_exact(stream, ADVERTISE_BLOCK_SIZE - 4, "advertise block")
    block = struct.pack("<I", size) + body

    sig = struct.unpack_from("<I", block, 4)[0]
    if sig & ADVERTISE_SIG_MASK != ADVERTISE_SIG_BASE:
        raise UnknownFormat(f"unknown magic 0x{sig:08X} in advertised shortcut")

    wide = block[_WIDE_OFFSET:ADVERTISE_BLOCK_SIZE].decode("utf-16-le", "surrogatepass")
    value = wide.split("\x00", 1)[0]
    LOGGER.debug("advertise block sig 0x%08X: %r", sig, value)
    return value


def build_advertise_block(
    value: str, signature: int, codepage: str = ANSI_CODEPAGE
) -> bytes:
    """Build a descriptor block holding *value* in both encodings.

    Each copy is clipped to 259 units so its terminator always fits.
    """
    block = bytearray(ADVERTISE_BLOCK_SIZE)
    struct.pack_into("<I", block, 0, ADVERTISE_BLOCK_SIZE)
    struct.pack_into("<I", block, 4, signature)
    ansi = value.encode(codepage, errors="replace")[: MAX_PATH - 1] + b"\x00"
    block[_ANSI_OFFSET : _ANSI_OFFSET + len(ansi)] = ansi
    uni = value.encode("utf-16-le", "surrogatepass")[: (MAX_PATH - 1) * 2] + b"\x00\x00"
    block[_WIDE_OFFSET : _WIDE_OFFSET + len(uni)] = uni
    return bytes(block)


# ---------------------------------------------------------------------------
# Mini-language
# ---------------------------------------------------------------------------
@dataclass(slots=True)
class AdvertisedTarget:
    """Product / component pair named by an advertised-target string."""

    component: str
    product: str | None = None


def parse_advertised_path(text: str) -> AdvertisedTarget:
    """Parse ``::{GUID}:value::...::`` into an :class:`AdvertisedTarget`.

    Every segment starts with ``::``, names the product or component GUID,
    and carries a value up to the next colon.  The string ends with a bare
    ``::``.  A component is mandatory; the product is optional.
    """
    component = None
    product = None
    pos = 0
    end = len(text)

    while pos < end:
        if text[pos : pos + 2] != "::":
            raise InvalidAdvertisedFormat(f"expected '::' at offset {pos} in {text!r}")
        if pos + 2 == end:
            break
        pos += 2

        colon = text.find(":", pos)
        if colon < 0:
            raise InvalidAdvertisedFormat(f"no ':' after GUID at offset {pos}")
        guid = text[pos:colon]
        if not is_guid_str(guid):
            raise InvalidAdvertisedFormat(f"malformed GUID {guid!r}")
        guid = canonical_guid(guid)
        pos = colon + 1

        nxt = text.find(":", pos)
        if nxt < 0:
            raise InvalidAdvertisedFormat(f"missing trailing '::' after offset {pos}")
        value = text[pos:nxt]
        if guid == ADVERTISED_COMPONENT_GUID and component is None:
            component = value
        elif guid == ADVERTISED_PRODUCT_GUID and product is None:
            product = value
        else:
            raise InvalidAdvertisedFormat(f"unexpected GUID {guid}")
        pos = nxt

    if component is None:
        raise InvalidAdvertisedFormat("advertised target has no component id")
    return AdvertisedTarget(component=component, product=product)


def format_advertised_path(component: str, product: str | None = None) -> str:
    """Inverse of :func:`parse_advertised_path`."""
    parts = []
    for guid, value in (
        (ADVERTISED_PRODUCT_GUID, product),
        (ADVERTISED_COMPONENT_GUID, component),
    ):
        if value is None:
            continue
        if ":" in value:
            raise ValueError(f"advertised value may not contain ':': {value!r}")
        parts.append(f"::{guid.lower()}:{value}")
    return "".join(parts) + "::"
