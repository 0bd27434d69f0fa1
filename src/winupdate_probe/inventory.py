"""Pending-update inventory sources.

WindowsUpdateInventory asks the Windows Update Agent COM searcher for
updates that are not installed yet, and reads the pending-reboot flag
Windows Update leaves in the registry. CachedInventory puts the on-disk
snapshot in front of any source.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from winupdate_probe.cache import InventoryCache
from winupdate_probe.collectors import registry
from winupdate_probe.collectors.powershell import PowerShellError, run_json
from winupdate_probe.models import ProbeError, UpdateRecord
from winupdate_probe.platform import is_windows

logger = logging.getLogger(__name__)

REBOOT_REQUIRED_KEY = (
    r"SOFTWARE\Microsoft\Windows\CurrentVersion\WindowsUpdate\Auto Update\RebootRequired"
)

# Hidden updates are excluded by the searcher unless asked for explicitly
SEARCH_CRITERIA = "IsInstalled=0 and IsHidden=0 or IsInstalled=0 and IsHidden=1"

_SEARCH_COMMAND = (
    "try {"
    "  $searcher = (New-Object -ComObject Microsoft.Update.Session).CreateUpdateSearcher();"
    f"  $result = $searcher.Search('{SEARCH_CRITERIA}');"
    "  $updates = @();"
    "  foreach ($update in $result.Updates) {"
    "    $updates += @{"
    "      Title = $update.Title;"
    "      IsHidden = [bool]$update.IsHidden;"
    "      AutoSelectOnWebSites = [bool]$update.AutoSelectOnWebSites"
    "    }"
    "  };"
    "  @{Count=$result.Updates.Count; Updates=$updates}"
    "    | Select-Object Count, Updates"
    "} catch {"
    "  @{Error=$_.Exception.Message; Count=-1; Updates=@()}"
    "    | Select-Object Error, Count, Updates"
    "}"
)


class InventoryError(ProbeError):
    """The update inventory could not be read or made no sense."""


class InventorySource(Protocol):
    def fetch_pending_updates(self) -> list[UpdateRecord]: ...

    def is_reboot_pending(self) -> bool: ...


def parse_search_output(data: Any) -> list[UpdateRecord]:
    """Turn the JSON emitted by the search command into UpdateRecords.

    Raises:
        InventoryError: On a COM error or a payload of the wrong shape.
    """
    if isinstance(data, list):
        if not data:
            raise InventoryError("Empty update search output")
        data = data[0]
    if not isinstance(data, dict):
        raise InventoryError(f"Unexpected update search output: {type(data).__name__}")

    com_error = data.get("Error")
    if com_error:
        raise InventoryError(f"Update search failed: {com_error}")

    updates = data.get("Updates")
    if updates is None:
        updates = []
    # ConvertTo-Json collapses single-element arrays into an object
    if isinstance(updates, dict):
        updates = [updates]
    if not isinstance(updates, list):
        raise InventoryError(f"Unexpected Updates field: {type(updates).__name__}")

    records: list[UpdateRecord] = []
    for entry in updates:
        if not isinstance(entry, dict):
            raise InventoryError(f"Unexpected update entry: {entry!r}")
        records.append(UpdateRecord(
            title=str(entry.get("Title") or "Unknown"),
            is_hidden=bool(entry.get("IsHidden", False)),
            is_auto_selectable=bool(entry.get("AutoSelectOnWebSites", False)),
        ))
    return records


class WindowsUpdateInventory:
    """Live inventory read from the local Windows Update Agent."""

    def __init__(self, search_timeout: int = 600):
        self.search_timeout = search_timeout

    def fetch_pending_updates(self) -> list[UpdateRecord]:
        if not is_windows():
            raise InventoryError("Windows Update inventory requires Windows")

        try:
            output = run_json(_SEARCH_COMMAND, timeout=self.search_timeout)
        except PowerShellError as exc:
            raise InventoryError(f"Could not search for pending updates: {exc}") from exc

        records = parse_search_output(output)
        logger.info("Update search returned %d pending update(s)", len(records))
        return records

    def is_reboot_pending(self) -> bool:
        try:
            return registry.key_exists(registry.HKEY_LOCAL_MACHINE, REBOOT_REQUIRED_KEY)
        except registry.RegistryUnavailable as exc:
            raise InventoryError(f"Cannot read pending-reboot flag: {exc}") from exc


class CachedInventory:
    """Serve the update list from a cache snapshot while it is fresh.

    The reboot flag always comes from the wrapped source.
    """

    def __init__(self, source: InventorySource, cache: InventoryCache):
        self.source = source
        self.cache = cache

    def fetch_pending_updates(self) -> list[UpdateRecord]:
        snapshot = self.cache.load_fresh()
        if snapshot is not None:
            logger.info(
                "Using cached inventory from %s (%d update(s))",
                snapshot.fetched_at.isoformat(), len(snapshot.updates),
            )
            return list(snapshot.updates)

        logger.info("Inventory cache absent or stale, fetching fresh update list")
        records = self.source.fetch_pending_updates()
        self.cache.store(records)
        return records

    def is_reboot_pending(self) -> bool:
        return self.source.is_reboot_pending()
