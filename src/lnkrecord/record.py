"""In-memory shortcut record and its mutators."""

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, field, fields
from datetime import datetime

from ._constants import SW_SHOWNORMAL
from .advertise import format_advertised_path, parse_advertised_path
from .errors import InvalidAdvertisedFormat
from .location import VolumeInfo
from .resolver import resolve_path
from .volume import VolumeProvider, local_volume_info, volume_root

LOGGER = logging.getLogger(__name__)

_INT32_MIN, _INT32_MAX = -(1 << 31), (1 << 31) - 1


def _check_range(name: str, value: int, lo: int, hi: int) -> int:
    if not lo <= value <= hi:
        raise ValueError(f"{name} {value} is outside {lo}..{hi}")
    return value


@dataclass(slots=True)
class LinkRecord:
    """Decoded form of one shortcut.

    Optional strings use ``None`` for "absent"; the mutators store empty
    strings as ``None`` so that a section is written exactly when it has
    content.  ``dirty`` is excluded from equality.
    """

    # Target
    id_list: bytes | None = None
    target_path: str | None = None
    relative_path: str | None = None
    volume: VolumeInfo = field(default_factory=VolumeInfo)

    # Advertised target
    product: str | None = None
    component: str | None = None

    # StringData
    description: str | None = None
    working_dir: str | None = None
    arguments: str | None = None
    icon_path: str | None = None

    # Header
    icon_index: int = 0
    hotkey: int = 0
    show_command: int = SW_SHOWNORMAL
    file_attributes: int = 0
    file_size: int = 0
    creation_time: datetime | None = None
    access_time: datetime | None = None
    write_time: datetime | None = None

    dirty: bool = field(default=False, compare=False)

    # -- queries -----------------------------------------------------------
    @property
    def is_advertised(self) -> bool:
        return self.product is not None or self.component is not None

    def get_path(self) -> str | None:
        """Return the target path, or ``None`` for an advertised shortcut."""
        if self.is_advertised:
            return None
        return self.target_path

    def advertised_path(self) -> str | None:
        """Return the ``::{GUID}:value::`` form of an advertised target.

        ``None`` when there is no component, or when a decoded value holds a
        ``:`` and so has no string form.
        """
        if self.component is None:
            return None
        try:
            return format_advertised_path(self.component, self.product)
        except ValueError:
            LOGGER.debug("advertised values %r / %r contain ':'", self.product, self.component)
            return None

    # -- mutators ----------------------------------------------------------
    def set_id_list(self, blob: bytes | None) -> None:
        self.id_list = bytes(blob) if blob else None
        self.dirty = True

    def set_description(self, value: str | None) -> None:
        self.description = value or None
        self.dirty = True

    def set_working_dir(self, value: str | None) -> None:
        self.working_dir = value or None
        self.dirty = True

    def set_arguments(self, value: str | None) -> None:
        self.arguments = value or None
        self.dirty = True

    def set_icon_location(self, path: str | None, index: int = 0) -> None:
        self.icon_path = path or None
        self.icon_index = _check_range("icon index", index, _INT32_MIN, _INT32_MAX)
        self.dirty = True

    def set_hotkey(self, hotkey: int) -> None:
        """Set the hotkey word: virtual key in the low byte, modifiers in the high."""
        self.hotkey = _check_range("hotkey", hotkey, 0, 0xFFFF)
        self.dirty = True

    def set_show_command(self, show_command: int) -> None:
        self.show_command = _check_range(
            "show command", show_command, _INT32_MIN, _INT32_MAX
        )
        self.dirty = True

    def set_relative_path(self, value: str | None) -> None:
        self.relative_path = value or None
        self.dirty = True

    def set_path(
        self,
        text: str,
        volume_provider: VolumeProvider = local_volume_info,
        exists: Callable[[str], bool] = os.path.exists,
    ) -> bool:
        """Point the link at *text*.

        *text* is first tried as an advertised-target string
        (``::{GUID}:value::``); failing that it is taken as a filesystem path,
        made absolute, and the volume it lives on is recorded.  The id list,
        target path, volume and component are always cleared first.

        Returns ``False`` only when a literal path was given that does not
        exist; the link is still updated in that case.
        """
        self.target_path = None
        self.component = None
        self.id_list = None
        self.volume = VolumeInfo()
        self.dirty = True

        try:
            target = parse_advertised_path(text)
        except InvalidAdvertisedFormat:
            pass
        else:
            self.component = target.component
            self.product = target.product
            LOGGER.debug("advertised target %r / %r", target.product, target.component)
            return True

        if not text:
            return True
        full = os.path.abspath(text)
        self.volume = volume_provider(volume_root(full))
        self.target_path = full
        return exists(full)

    def resolve(self, exists: Callable[[str], bool] = os.path.exists) -> None:
        """Fill in derived fields the way a shell does before using a link.

        A missing target path is recomputed from the relative path and the
        working directory; a missing icon location falls back to the target
        path with index 0.
        """
        if not self.target_path and self.relative_path and not self.is_advertised:
            self.target_path = resolve_path(
                self.relative_path, None, self.working_dir, exists=exists
            )
            self.dirty = True
        if not self.icon_path and self.target_path:
            self.icon_path = self.target_path
            self.icon_index = 0
            self.dirty = True

    # -- bulk --------------------------------------------------------------
    def assign(self, other: "LinkRecord") -> None:
        """Replace every field of this record with the values from *other*."""
        for f in fields(self):
            setattr(self, f.name, getattr(other, f.name))
