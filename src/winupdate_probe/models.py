"""Core Pydantic models for winupdate-probe."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field


class ProbeError(Exception):
    """Base class for failures that end a probe run early."""


class ProbeStatus(IntEnum):
    """Monitoring status code. The integer value is the process exit code."""
    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3

    @classmethod
    def parse(cls, value: str | int) -> ProbeStatus:
        """Parse a status from a name ("warning") or a code ("1", 1).

        Raises:
            ValueError: If the value names no status.
        """
        if isinstance(value, int):
            return cls(value)
        text = str(value).strip()
        if text.isdigit():
            return cls(int(text))
        try:
            return cls[text.upper()]
        except KeyError:
            raise ValueError(f"Unknown status: {value!r}") from None


class UpdateRecord(BaseModel):
    """One pending update as reported by the inventory source."""
    model_config = ConfigDict(frozen=True)

    title: str
    is_hidden: bool = False
    is_auto_selectable: bool = False


class Classification(BaseModel):
    """Pending updates bucketed into critical, optional and hidden."""
    model_config = ConfigDict(frozen=True)

    critical_count: int = Field(default=0, ge=0)
    optional_count: int = Field(default=0, ge=0)
    hidden_count: int = Field(default=0, ge=0)
    critical_titles: list[str] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return self.critical_count + self.optional_count + self.hidden_count


class PerfData(BaseModel):
    """Update counts attached to the plugin output as performance data."""
    model_config = ConfigDict(frozen=True)

    critical: int = 0
    optional: int = 0
    hidden: int = 0

    @classmethod
    def from_classification(cls, classification: Classification) -> PerfData:
        return cls(
            critical=classification.critical_count,
            optional=classification.optional_count,
            hidden=classification.hidden_count,
        )

    def render(self) -> str:
        """Return the perfdata string, e.g. ``critical=0;optional=2;hidden=1``."""
        return f"critical={self.critical};optional={self.optional};hidden={self.hidden}"


class ProbeResult(BaseModel):
    """Final result of one probe run. This is what gets reported."""
    model_config = ConfigDict(frozen=True)

    status: ProbeStatus
    message: str
    perf_data: PerfData | None = None

    def output_line(self) -> str:
        """Plugin output line with perfdata appended after a pipe."""
        if self.perf_data is None:
            return self.message
        return f"{self.message} | {self.perf_data.render()}"


class Session(BaseModel):
    """Authenticated Opsview session. Lives for a single run only."""
    model_config = ConfigDict(frozen=True)

    token: str
    username: str


# Wire bodies for the Opsview REST API

class LoginRequest(BaseModel):
    """Body of POST /rest/login."""
    username: str
    password: str


class SetState(BaseModel):
    """Service check state. ``result`` is the status code as a string."""
    result: str
    output: str
    perfdata: str | None = None


class StatusPayload(BaseModel):
    """Body of POST /rest/detail."""
    set_state: SetState

    @classmethod
    def from_result(cls, result: ProbeResult) -> StatusPayload:
        return cls(set_state=SetState(
            result=str(int(result.status)),
            output=result.message,
            perfdata=result.perf_data.render() if result.perf_data is not None else None,
        ))


class InventorySnapshot(BaseModel):
    """Cached copy of the pending-update list."""
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updates: list[UpdateRecord] = Field(default_factory=list)


class ProbeReport(BaseModel):
    """Summary of one probe run, including whether the result was submitted."""
    hostname: str
    service_name: str
    started: datetime
    finished: datetime
    result: ProbeResult
    submitted: bool = False
    exit_status: ProbeStatus
