"""Shared test fixtures and fakes for the probe's collaborators."""

from __future__ import annotations

import sys

import pytest

from winupdate_probe.config import Config
from winupdate_probe.inventory import InventoryError
from winupdate_probe.models import ProbeResult, Session, UpdateRecord
from winupdate_probe.reporting import AuthError, SubmitError

# Platform skip markers
windows_only = pytest.mark.skipif(
    sys.platform != "win32",
    reason="Test requires Windows",
)


class FakeInventory:
    """In-memory inventory source that records how it was used."""

    def __init__(
        self,
        records: list[UpdateRecord] | None = None,
        reboot_pending: bool = False,
        fetch_error: str | None = None,
        reboot_error: str | None = None,
    ):
        self.records = records or []
        self.reboot_pending = reboot_pending
        self.fetch_error = fetch_error
        self.reboot_error = reboot_error
        self.fetch_calls = 0
        self.reboot_calls = 0

    def fetch_pending_updates(self) -> list[UpdateRecord]:
        self.fetch_calls += 1
        if self.fetch_error:
            raise InventoryError(self.fetch_error)
        return list(self.records)

    def is_reboot_pending(self) -> bool:
        self.reboot_calls += 1
        if self.reboot_error:
            raise InventoryError(self.reboot_error)
        return self.reboot_pending


class FakeClient:
    """Stand-in for OpsviewClient."""

    def __init__(self, auth_error: str | None = None, submit_error: str | None = None):
        self.auth_error = auth_error
        self.submit_error = submit_error
        self.auth_calls: list[tuple[str, str]] = []
        self.submissions: list[tuple[str, str, Session, ProbeResult]] = []

    def authenticate(self, username: str, password: str) -> Session:
        self.auth_calls.append((username, password))
        if self.auth_error:
            raise AuthError(self.auth_error)
        return Session(token="tok-123", username=username)

    def submit(self, hostname: str, service_name: str, session: Session, result: ProbeResult) -> None:
        self.submissions.append((hostname, service_name, session, result))
        if self.submit_error:
            raise SubmitError(self.submit_error)


@pytest.fixture
def default_config(tmp_path) -> Config:
    """Return a complete Config that writes nothing outside tmp_path."""
    return Config(
        server="opsview.example.com",
        username="probe",
        password="secret",
        hostname="host01.example.com",
        cache_path=tmp_path / "cache.json",
        log_file=tmp_path / "probe.log",
    )


@pytest.fixture
def critical_records() -> list[UpdateRecord]:
    """Two auto-selectable updates and one optional one."""
    return [
        UpdateRecord(title="Update1", is_auto_selectable=True),
        UpdateRecord(title="Update2", is_auto_selectable=True),
        UpdateRecord(title="Optional1"),
    ]


@pytest.fixture
def hidden_records() -> list[UpdateRecord]:
    return [UpdateRecord(title=f"Hidden{i}", is_hidden=True) for i in range(3)]
