"""Shell link constants and lookup tables shared by the codecs."""

# ---------------------------------------------------------------------------
# ANSI code page
# ---------------------------------------------------------------------------
# Narrow strings in a link file are encoded with the code page of the system
# that wrote them.  Western/English Windows uses CP-1252, which is a strict
# superset of ASCII, so it is the default for reading and writing.
ANSI_CODEPAGE = "cp1252"

# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------
HEADER_SIZE = 0x4C

# CLSID_ShellLink {00021401-0000-0000-C000-000000000046}, little-endian GUID
LINK_CLSID = b"\x01\x14\x02\x00\x00\x00\x00\x00\xc0\x00\x00\x00\x00\x00\x00\x46"

# ---------------------------------------------------------------------------
# Link flags (header +20)
# ---------------------------------------------------------------------------
HAS_ID_LIST = 0x00000001
HAS_LINK_INFO = 0x00000002
HAS_NAME = 0x00000004
HAS_RELPATH = 0x00000008
HAS_WORKINGDIR = 0x00000010
HAS_ARGS = 0x00000020
HAS_ICONLOCATION = 0x00000040
IS_UNICODE = 0x00000080
HAS_LOGO3ID = 0x00000800
HAS_DARWINID = 0x00001000

FLAG_NAMES = {
    0: "HasLinkTargetIDList",
    1: "HasLinkInfo",
    2: "HasName",
    3: "HasRelativePath",
    4: "HasWorkingDir",
    5: "HasArguments",
    6: "HasIconLocation",
    7: "IsUnicode",
    8: "ForceNoLinkInfo",
    9: "HasExpString",
    10: "RunInSeparateProcess",
    11: "HasLogo3ID",
    12: "HasDarwinID",
}

# ---------------------------------------------------------------------------
# Location block (LinkInfo)
# ---------------------------------------------------------------------------
LOCATION_HEADER_SIZE = 28  # 7 x uint32
LOCAL_VOLUME_SIZE = 16  # size, type, serial, label offset
VOLUME_LABEL_CAPACITY = 11  # 12-char buffer including terminator (8.3)
LOCATION_FLAG_LOCAL = 0x00000001

# ---------------------------------------------------------------------------
# Advertised-info ("Darwin") blocks
# ---------------------------------------------------------------------------
MAX_PATH = 260
ADVERTISE_BLOCK_SIZE = 4 + 4 + MAX_PATH + MAX_PATH * 2  # 788 == 0x314
ADVERTISE_SIG_MASK = 0xFFFF0000
ADVERTISE_SIG_BASE = 0xA0000000
EXP_DARWIN_ID_SIG = 0xA0000006  # component
EXP_SZ_ICON_SIG = 0xA0000007  # product ("Logo3")

# Mini-language identifiers for "::{GUID}:value::" advertised targets
ADVERTISED_COMPONENT_GUID = "{9DB1186E-40DF-11D1-AA8C-00C04FB67863}"
ADVERTISED_PRODUCT_GUID = "{9DB1186F-40DF-11D1-AA8C-00C04FB67863}"

# ---------------------------------------------------------------------------
# Terminator
# ---------------------------------------------------------------------------
TERMINATOR = b"\x00\x00\x00\x00"

# ---------------------------------------------------------------------------
# ShowWindow commands
# ---------------------------------------------------------------------------
SW_SHOWNORMAL = 1
SW_SHOWMAXIMIZED = 3
SW_SHOWMINNOACTIVE = 7

SHOW_CMD = {1: "SW_SHOWNORMAL", 3: "SW_SHOWMAXIMIZED", 7: "SW_SHOWMINNOACTIVE"}

# ---------------------------------------------------------------------------
# Hotkey modifier masks and virtual key names
# ---------------------------------------------------------------------------
HOTKEY_MOD = {0x01: "SHIFT", 0x02: "CTRL", 0x04: "ALT"}

VK_KEYS = {
    **{k: chr(k) for k in range(0x30, 0x3A)},  # 0-9
    **{k: chr(k) for k in range(0x41, 0x5B)},  # A-Z
    **{k: f"F{k - 0x6F}" for k in range(0x70, 0x88)},  # F1-F24
    0x90: "NUMLOCK",
    0x91: "SCROLLLOCK",
}

# ---------------------------------------------------------------------------
# Drive types (VolumeID)
# ---------------------------------------------------------------------------
DRIVE_TYPES = {
    0: "UNKNOWN",
    1: "NO_ROOT_DIR",
    2: "REMOVABLE",
    3: "FIXED",
    4: "REMOTE",
    5: "CDROM",
    6: "RAMDISK",
}
