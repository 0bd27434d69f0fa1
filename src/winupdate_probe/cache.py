"""On-disk cache for the pending-update list.

Searching Windows Update is slow (often minutes on WSUS-managed hosts), so
the update list is kept in a JSON snapshot and reused until it expires.
The pending-reboot flag is never cached.

The cache file is a serialized InventorySnapshot::

    {
      "fetched_at": "2026-02-27T08:00:00Z",
      "updates": [{"title": "...", "is_hidden": false, "is_auto_selectable": true}]
    }
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

from pydantic import ValidationError

from winupdate_probe.models import InventorySnapshot, UpdateRecord

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY = timedelta(hours=24)


class InventoryCache:
    """JSON file holding the most recent inventory snapshot."""

    def __init__(self, path: str | Path, expiry: timedelta = DEFAULT_EXPIRY):
        self.path = Path(path)
        self.expiry = expiry

    def load(self) -> InventorySnapshot | None:
        """Return the stored snapshot, or None if missing or unreadable."""
        if not self.path.exists():
            return None
        try:
            return InventorySnapshot.model_validate_json(
                self.path.read_text(encoding="utf-8")
            )
        except (OSError, UnicodeDecodeError, ValidationError) as exc:
            # Corrupt cache; a fresh fetch will overwrite it
            logger.warning("Ignoring unreadable inventory cache %s: %s", self.path, exc)
            return None

    def is_fresh(self, snapshot: InventorySnapshot, now: datetime | None = None) -> bool:
        """Return True if the snapshot is younger than the expiry window."""
        now = now or datetime.now(timezone.utc)
        fetched_at = snapshot.fetched_at
        if fetched_at.tzinfo is None:
            fetched_at = fetched_at.replace(tzinfo=timezone.utc)
        age = now - fetched_at
        # A timestamp from the future means the clock moved; don't trust it
        return timedelta(0) <= age < self.expiry

    def load_fresh(self, now: datetime | None = None) -> InventorySnapshot | None:
        """Return the stored snapshot only if it has not expired."""
        snapshot = self.load()
        if snapshot is None or not self.is_fresh(snapshot, now):
            return None
        return snapshot

    def store(self, updates: list[UpdateRecord], now: datetime | None = None) -> InventorySnapshot:
        """Persist a new snapshot.

        Write failures are logged and do not raise.
        """
        snapshot = InventorySnapshot(
            fetched_at=now or datetime.now(timezone.utc),
            updates=updates,
        )
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not write inventory cache %s: %s", self.path, exc)
        return snapshot
