"""YAML configuration loader with defaults."""

from __future__ import annotations

import logging
from datetime import timedelta
from importlib import resources
from pathlib import Path

import yaml

from winupdate_probe.models import ProbeStatus
from winupdate_probe.platform import get_fqdn, state_dir

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_RESOURCE = "winupdate_probe.data"
_DEFAULT_CONFIG_FILE = "probe_config.yaml"

DEFAULT_SERVICE_NAME = "Windows Updates"


class ConfigError(ValueError):
    """The configuration file is unusable."""


def _parse_severity(value: object, current: ProbeStatus) -> ProbeStatus:
    """Parse a severity setting, keeping ``current`` when it is not valid."""
    if value is None or value == "":
        return current
    try:
        return ProbeStatus.parse(value)
    except ValueError:
        logger.warning("Ignoring invalid severity %r, keeping %s", value, current.name)
        return current


def _require_severity(value: str | None, current: ProbeStatus, option: str) -> ProbeStatus:
    """Parse a severity given on the command line; invalid values are an error."""
    if value is None or value == "":
        return current
    try:
        return ProbeStatus.parse(value)
    except ValueError:
        raise ConfigError(f"invalid value for {option}: {value!r}") from None


def _number(value: object, cast: type, name: str) -> float | int:
    """Convert a numeric setting, raising ConfigError when it is not a number."""
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {value!r}") from None


def _section(raw: dict, name: str) -> dict:
    section = raw.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Config section '{name}' must be a mapping, got {type(section).__name__}")
    return section


class Config:
    """Probe configuration loaded from YAML with CLI overrides."""

    def __init__(
        self,
        server: str | None = None,
        username: str | None = None,
        password: str | None = None,
        hostname: str | None = None,
        service_name: str = DEFAULT_SERVICE_NAME,
        timeout: float = 30,
        verify_tls: bool = True,
        reboot_severity: ProbeStatus = ProbeStatus.WARNING,
        optional_severity: ProbeStatus = ProbeStatus.WARNING,
        cache_path: str | Path | None = None,
        cache_expiry_hours: float = 24,
        log_file: str | Path | None = None,
        log_max_bytes: int = 1024 * 1024,
        log_backup_count: int = 3,
        verbose: bool = False,
    ):
        self.server = server
        self.username = username
        self.password = password
        self.hostname = hostname or get_fqdn()
        self.service_name = service_name
        self.timeout = timeout
        self.verify_tls = verify_tls
        self.reboot_severity = reboot_severity
        self.optional_severity = optional_severity
        self.cache_path = Path(cache_path) if cache_path else state_dir() / "inventory_cache.json"
        self.cache_expiry_hours = cache_expiry_hours
        self.log_file = Path(log_file) if log_file else state_dir() / "probe.log"
        self.log_max_bytes = log_max_bytes
        self.log_backup_count = log_backup_count
        self.verbose = verbose

    @property
    def cache_enabled(self) -> bool:
        return self.cache_expiry_hours > 0

    @property
    def cache_expiry(self) -> timedelta:
        return timedelta(hours=self.cache_expiry_hours)

    def missing(self) -> list[str]:
        """Return the names of required settings that are not set."""
        return [
            name for name in ("server", "username", "password")
            if not getattr(self, name)
        ]

    @classmethod
    def from_yaml(cls, path: str | Path) -> Config:
        """Load configuration from a YAML file over the built-in defaults."""
        config = cls.from_defaults()
        try:
            with open(path, encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Cannot read config {path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError(f"Config must be a YAML mapping, got {type(raw).__name__}: {path}")
        config._apply_dict(raw)
        return config

    @classmethod
    def from_defaults(cls) -> Config:
        """Load built-in default configuration."""
        config = cls()
        try:
            ref = resources.files(_DEFAULT_CONFIG_RESOURCE).joinpath(_DEFAULT_CONFIG_FILE)
            raw = yaml.safe_load(ref.read_text(encoding="utf-8")) or {}
        except (FileNotFoundError, TypeError):
            return config
        config._apply_dict(raw)
        return config

    def _apply_dict(self, raw: dict) -> None:
        """Apply the sections of a parsed YAML document.

        Raises:
            ConfigError: If a section is not a mapping or a numeric setting
                is not a number.
        """
        opsview = _section(raw, "opsview")
        severity = _section(raw, "severity")
        cache = _section(raw, "cache")
        log_section = _section(raw, "logging")

        for key in ("server", "username", "password", "hostname", "service_name"):
            if opsview.get(key):
                setattr(self, key, str(opsview[key]))
        if opsview.get("timeout") is not None:
            self.timeout = _number(opsview["timeout"], float, "opsview.timeout")
        if opsview.get("verify_tls") is not None:
            self.verify_tls = bool(opsview["verify_tls"])

        self.reboot_severity = _parse_severity(severity.get("reboot_pending"), self.reboot_severity)
        self.optional_severity = _parse_severity(severity.get("optional_updates"), self.optional_severity)

        if cache.get("path"):
            self.cache_path = Path(str(cache["path"]))
        if cache.get("expiry_hours") is not None:
            self.cache_expiry_hours = _number(cache["expiry_hours"], float, "cache.expiry_hours")

        if log_section.get("file"):
            self.log_file = Path(str(log_section["file"]))
        if log_section.get("max_bytes") is not None:
            self.log_max_bytes = _number(log_section["max_bytes"], int, "logging.max_bytes")
        if log_section.get("backup_count") is not None:
            self.log_backup_count = _number(log_section["backup_count"], int, "logging.backup_count")

    def apply_overrides(
        self,
        server: str | None = None,
        username: str | None = None,
        password: str | None = None,
        hostname: str | None = None,
        service_name: str | None = None,
        reboot_severity: str | None = None,
        optional_severity: str | None = None,
        cache_path: str | None = None,
        cache_expiry_hours: str | float | None = None,
        no_cache: bool = False,
        log_file: str | None = None,
        timeout: str | float | None = None,
        insecure: bool = False,
        verbose: bool = False,
    ) -> None:
        """Apply CLI flag overrides to this config.

        Raises:
            ConfigError: If a severity or numeric flag value is invalid.
        """
        if server:
            self.server = server
        if username:
            self.username = username
        if password:
            self.password = password
        if hostname:
            self.hostname = hostname
        if service_name:
            self.service_name = service_name
        self.reboot_severity = _require_severity(reboot_severity, self.reboot_severity, "--reboot-severity")
        self.optional_severity = _require_severity(optional_severity, self.optional_severity, "--optional-severity")
        if cache_path:
            self.cache_path = Path(cache_path)
        if cache_expiry_hours is not None:
            self.cache_expiry_hours = _number(cache_expiry_hours, float, "--cache-expiry")
        if no_cache:
            self.cache_expiry_hours = 0
        if log_file:
            self.log_file = Path(log_file)
        if timeout is not None:
            self.timeout = _number(timeout, float, "--timeout")
        if insecure:
            self.verify_tls = False
        if verbose:
            self.verbose = True
