"""Errors raised by the driver store services."""
from __future__ import annotations


class DriverStoreError(RuntimeError):
    pass


class MalformedBoundaryError(DriverStoreError, ValueError):
    """A ``Published name`` line has no colon or no identifier after it."""

    def __init__(self, line_number: int, line: str) -> None:
        super().__init__(f"Malformed published name on line {line_number}: {line.strip()!r}")
        self.line_number = line_number
        self.line = line


class EnumerationError(DriverStoreError):
    pass


class EmptyCatalogError(DriverStoreError):
    def __init__(self) -> None:
        super().__init__("No drivers loaded. Enumerate drivers first.")
