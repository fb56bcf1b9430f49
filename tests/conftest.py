"""Shared fixtures for lnkrecord tests."""

from datetime import datetime, timezone

import pytest

from lnkrecord._constants import SW_SHOWMAXIMIZED
from lnkrecord.codec import build
from lnkrecord.location import DriveType, VolumeInfo
from lnkrecord.record import LinkRecord


@pytest.fixture
def simple_record():
    """A link with only a target path on a fixed drive."""
    return LinkRecord(
        target_path=r"C:\Windows\notepad.exe",
        volume=VolumeInfo(kind=DriveType.FIXED, serial=0x4A2D5E79, label="SYSTEM"),
    )


@pytest.fixture
def full_record():
    """A record with every optional section populated except the advertised ones."""
    return LinkRecord(
        id_list=bytes(range(1, 41)),
        target_path=r"C:\Program Files\Google\Chrome\Application\chrome.exe",
        relative_path=r"..\..\Program Files\Google\Chrome\Application\chrome.exe",
        volume=VolumeInfo(kind=DriveType.FIXED, serial=0x4A2D5E79, label="Windows"),
        description="Google Chrome",
        working_dir=r"C:\Program Files\Google\Chrome\Application",
        arguments="--profile-directory=Default",
        icon_path=r"C:\Program Files\Google\Chrome\Application\chrome.exe",
        icon_index=3,
        hotkey=0x0243,  # CTRL+C
        show_command=SW_SHOWMAXIMIZED,
        file_attributes=0x20,
        file_size=3309208,
        creation_time=datetime(2024, 1, 2, 3, 4, 5, 678901, tzinfo=timezone.utc),
        access_time=datetime(2024, 6, 7, 8, 9, 10, tzinfo=timezone.utc),
        write_time=datetime(2023, 12, 31, 23, 59, 59, 999999, tzinfo=timezone.utc),
    )


@pytest.fixture
def advertised_record():
    """An MSI-advertised link carrying product and component descriptors."""
    return LinkRecord(
        product="{90120000-0030-0000-0000-0000000FF1CE}",
        component="Dc@4]Ko!V^e=kz,LO7-L>M5KJbo0ud*_g(8i6{@]?",
        description="Microsoft Word",
    )


@pytest.fixture
def full_link_bytes(full_record):
    return build(full_record)


@pytest.fixture
def simple_link_bytes(simple_record):
    return build(simple_record)
