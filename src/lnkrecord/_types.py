"""Shared type aliases for lnkrecord modules."""

from datetime import datetime
from os import PathLike
from typing import BinaryIO

Timestamp = int | datetime | str | None
Source = str | PathLike | bytes | BinaryIO
