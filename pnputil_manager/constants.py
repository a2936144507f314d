"""Immutable settings for driving pnputil and presenting the driver store."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class PnpUtilSetting:
    executable_name: str
    enum_drivers_verb: str
    delete_driver_verb: str
    uninstall_flag: str
    force_flag: str


@dataclass(frozen=True)
class DisplaySetting:
    search_placeholder: str
    column_captions: Tuple[str, ...]
    default_sort_column: int


@dataclass(frozen=True)
class ImmutableConfig:
    pnputil: PnpUtilSetting
    display: DisplaySetting


PNPUTIL_SETTING = PnpUtilSetting(
    executable_name="pnputil.exe",
    enum_drivers_verb="/enum-drivers",
    delete_driver_verb="/delete-driver",
    uninstall_flag="/uninstall",
    force_flag="/force",
)

DISPLAY_SETTING = DisplaySetting(
    search_placeholder="Search by Provider...",
    column_captions=("Published Name", "Original Name", "Provider", "Driver Version", "Class"),
    default_sort_column=2,
)

IMMUTABLE_CONFIG = ImmutableConfig(
    pnputil=PNPUTIL_SETTING,
    display=DISPLAY_SETTING,
)
