"""Parse ``pnputil /enum-drivers`` text into driver records.

pnputil prints one block per driver package: a ``Published name`` line that
opens the block, followed by property lines (``Original name``, ``Provider
name``, ...). Labels are localized, so every known label for a field is tried
on every line regardless of the display language of the machine.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final, Iterable, Mapping

from services.errors import MalformedBoundaryError

PUBLISHED_NAME: Final = "PublishedName"
ORIGINAL_NAME: Final = "OriginalName"
PROVIDER: Final = "Provider"
CLASS: Final = "Class"
DRIVER_VERSION: Final = "DriverVersion"

# Label order per field: English (pre-1903 and current capitalization), then Traditional Chinese.
FIELD_LABELS: Final[Mapping[str, tuple[str, ...]]] = {
    PUBLISHED_NAME: ("Published name", "Published Name", "發佈名稱"),
    ORIGINAL_NAME: ("Original name", "Original Name", "原始名稱"),
    PROVIDER: ("Provider name", "Provider Name", "提供者名稱"),
    CLASS: ("Class name", "Class Name", "類別名稱"),
    DRIVER_VERSION: ("Driver Version", "驅動程式版本"),
}

PROPERTY_FIELDS: Final = (ORIGINAL_NAME, PROVIDER, CLASS, DRIVER_VERSION)

_LINE_SPLIT = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class DriverRecord:
    published_name: str
    original_name: str = ""
    provider: str = ""
    driver_class: str = ""
    driver_version: str = ""


def labels_for(field: str) -> tuple[str, ...]:
    return FIELD_LABELS[field]


def _value_after_colon(line: str) -> str | None:
    if ":" not in line:
        return None
    return line.split(":", 1)[1].strip()


def _is_boundary(line: str) -> bool:
    text = line.lstrip()
    return any(text.startswith(label) for label in FIELD_LABELS[PUBLISHED_NAME])


def _match_property(line: str) -> str | None:
    for field in PROPERTY_FIELDS:
        if any(label in line for label in FIELD_LABELS[field]):
            return field
    return None


class _RecordBuilder:
    def __init__(self, published_name: str) -> None:
        self.values: dict[str, str] = {PUBLISHED_NAME: published_name}

    def build(self) -> DriverRecord:
        return DriverRecord(
            published_name=self.values[PUBLISHED_NAME],
            original_name=self.values.get(ORIGINAL_NAME, ""),
            provider=self.values.get(PROVIDER, ""),
            driver_class=self.values.get(CLASS, ""),
            driver_version=self.values.get(DRIVER_VERSION, ""),
        )


def iter_lines(text: str) -> Iterable[tuple[int, str]]:
    for number, line in enumerate(_LINE_SPLIT.split(text), start=1):
        if line.strip():
            yield number, line


def parse_enum_drivers(text: str) -> list[DriverRecord]:
    records: list[DriverRecord] = []
    current: _RecordBuilder | None = None

    def flush() -> None:
        if current is not None:
            records.append(current.build())

    for number, line in iter_lines(text):
        if _is_boundary(line):
            published_name = _value_after_colon(line)
            if not published_name:
                raise MalformedBoundaryError(number, line)
            flush()
            current = _RecordBuilder(published_name)
            continue
        if current is None:
            continue
        field = _match_property(line)
        if field is None:
            continue
        value = _value_after_colon(line)
        if value is None:
            continue
        current.values[field] = value
    flush()
    return records
