"""Volume information lookup used when a link is pointed at a literal path."""

import os
from collections.abc import Callable
from pathlib import PurePath

from .location import DriveType, VolumeInfo

VolumeProvider = Callable[[str], VolumeInfo]


def volume_root(path: str) -> str:
    """Return the root (drive or anchor) of *path*, e.g. ``C:\\`` or ``/``."""
    anchor = PurePath(path).anchor
    return anchor or os.sep


def local_volume_info(root: str) -> VolumeInfo:
    """Describe the volume mounted at *root* using only portable information.

    The serial is the low 32 bits of the device number; no label is known.
    A root that does not exist reports ``NO_ROOT_DIR``.
    """
    try:
        st = os.stat(root)
    except OSError:
        return VolumeInfo(kind=DriveType.NO_ROOT_DIR)
    return VolumeInfo(kind=DriveType.FIXED, serial=st.st_dev & 0xFFFFFFFF)
