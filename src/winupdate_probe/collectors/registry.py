"""Windows Registry key probe.

Wraps the winreg standard library module with a platform guard.
"""

from __future__ import annotations

from winupdate_probe.platform import is_windows

# Registry hive constants (match winreg values for use as pass-through)
HKEY_LOCAL_MACHINE = 0x80000002


class RegistryUnavailable(OSError):
    """Raised when the registry cannot be read on this platform."""


def key_exists(hive: int, path: str, wow64_64: bool = True) -> bool:
    """Return True if the registry key exists.

    Args:
        hive: Registry hive constant (e.g., HKEY_LOCAL_MACHINE).
        path: Subkey path.
        wow64_64: Open the 64-bit registry view so a 32-bit interpreter
            sees the same keys Windows Update writes.

    Raises:
        RegistryUnavailable: Off Windows, or when the key cannot be opened
            for a reason other than not existing (e.g. access denied).
    """
    if not is_windows():
        raise RegistryUnavailable("Windows registry is not available on this platform")

    import winreg

    access = winreg.KEY_READ
    if wow64_64:
        access |= winreg.KEY_WOW64_64KEY

    try:
        with winreg.OpenKey(hive, path, 0, access):
            return True
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise RegistryUnavailable(f"Cannot open {path}: {exc}") from exc
