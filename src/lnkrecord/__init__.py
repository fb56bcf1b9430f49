"""lnkrecord -- read and write Windows shell link (.lnk) records."""

__version__ = "0.1.0"

from .advertise import AdvertisedTarget, format_advertised_path, parse_advertised_path
from .codec import (
    LinkHeader,
    build,
    derive_flags,
    format_record,
    load,
    load_file,
    read_header,
    save,
    save_file,
)
from .errors import (
    CorruptRecord,
    InvalidAdvertisedFormat,
    InvalidLength,
    LinkError,
    NotALinkFile,
    TerminatorWarning,
    TruncatedInput,
    UnknownFormat,
)
from .location import DriveType, VolumeInfo
from .record import LinkRecord
from .resolver import resolve_path

__all__ = [
    "load",
    "load_file",
    "save",
    "save_file",
    "build",
    "derive_flags",
    "read_header",
    "format_record",
    "resolve_path",
    "parse_advertised_path",
    "format_advertised_path",
    "AdvertisedTarget",
    "LinkHeader",
    "LinkRecord",
    "VolumeInfo",
    "DriveType",
    "LinkError",
    "NotALinkFile",
    "TruncatedInput",
    "CorruptRecord",
    "InvalidLength",
    "UnknownFormat",
    "InvalidAdvertisedFormat",
    "TerminatorWarning",
    "__version__",
]
