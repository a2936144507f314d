"""Filesystem locations used by the application."""
from __future__ import annotations

import os
import sys
from pathlib import Path, PureWindowsPath

APP_DIR_NAME = "PnpUtilManager"


def get_application_directory() -> Path:
    """Return the per-user data directory, creating it when missing."""
    base = os.environ.get("LOCALAPPDATA") or os.environ.get("XDG_DATA_HOME")
    if base:
        root = Path(base)
    elif sys.platform == "win32":
        root = Path.home() / "AppData" / "Local"
    else:
        root = Path.home() / ".local" / "share"
    target = root / APP_DIR_NAME
    target.mkdir(parents=True, exist_ok=True)
    return target


def default_pnputil_path(executable_name: str = "pnputil.exe") -> str:
    system_root = os.environ.get("SystemRoot") or os.environ.get("WINDIR") or r"C:\Windows"
    return str(PureWindowsPath(system_root, "System32", executable_name))
