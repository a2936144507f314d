"""Elevation checks; pnputil refuses to delete drivers without admin rights."""
from __future__ import annotations

import ctypes
import os
import subprocess
import sys
from typing import Final, Sequence

SHELLEXECUTE_SUCCESS: Final[int] = 32


def is_admin() -> bool:
    try:
        return bool(ctypes.windll.shell32.IsUserAnAdmin())  # type: ignore[attr-defined]
    except AttributeError:
        geteuid = getattr(os, "geteuid", None)
        return bool(geteuid and geteuid() == 0)


def relaunch_as_admin(argv: Sequence[str] | None = None) -> bool:
    """Start an elevated copy of this process; True when the UAC launch was accepted."""
    args = list(sys.argv[1:] if argv is None else argv)
    params = subprocess.list2cmdline([sys.argv[0], *args])
    try:
        handle = ctypes.windll.shell32.ShellExecuteW(None, "runas", sys.executable, params, None, 1)  # type: ignore[attr-defined]
    except AttributeError:
        return False
    return int(handle) > SHELLEXECUTE_SUCCESS
