"""Platform detection and host identity."""

from __future__ import annotations

import os
import shutil
import socket
import sys
from pathlib import Path


def is_windows() -> bool:
    """Return True if running on Windows."""
    return sys.platform == "win32"


def get_fqdn() -> str:
    """Return the fully qualified domain name of this host.

    Falls back to the short hostname when the resolver gives nothing useful.
    """
    fqdn = socket.getfqdn()
    if not fqdn or fqdn in ("localhost", "localhost.localdomain"):
        return socket.gethostname()
    return fqdn


def state_dir() -> Path:
    """Return the platform-specific directory for cache and log files."""
    if is_windows():
        base = os.environ.get("PROGRAMDATA", r"C:\ProgramData")
        return Path(base) / "winupdate-probe"
    return Path("/var/lib/winupdate-probe")


def get_powershell_path() -> str | None:
    """Return path to PowerShell executable, or None if not found.

    Prefers pwsh (PowerShell 7+) over powershell.exe (Windows PowerShell 5.1).
    """
    for name in ("pwsh", "powershell.exe", "powershell"):
        path = shutil.which(name)
        if path:
            return path
    return None
