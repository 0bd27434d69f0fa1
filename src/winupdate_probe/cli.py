"""Click CLI interface for winupdate-probe."""

from __future__ import annotations

import logging
import sys
from typing import NoReturn

import click
from rich.console import Console

from winupdate_probe import __version__
from winupdate_probe.cache import InventoryCache
from winupdate_probe.config import Config, ConfigError
from winupdate_probe.inventory import CachedInventory, InventorySource, WindowsUpdateInventory
from winupdate_probe.logs import configure_logging
from winupdate_probe.models import ProbeStatus
from winupdate_probe.probe import Probe
from winupdate_probe.reporters import console_reporter, json_reporter
from winupdate_probe.reporting import OpsviewClient

logger = logging.getLogger(__name__)

console = Console(highlight=False, soft_wrap=True, emoji=False)

def _exit_unknown(message: str) -> NoReturn:
    """Print an UNKNOWN plugin line and exit 3."""
    console.print(f"UNKNOWN - {message}", markup=False)
    sys.exit(int(ProbeStatus.UNKNOWN))


class ProbeCommand(click.Command):
    """Command whose usage errors exit UNKNOWN instead of click's code 2."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as exc:
            _exit_unknown(exc.format_message())


@click.command(cls=ProbeCommand)
@click.version_option(version=__version__, prog_name="winupdate-probe")
@click.option("--config", "config_path", default=None, help="Path to config YAML")
@click.option("--server", default=None, help="Opsview server hostname or URL")
@click.option("--username", default=None, help="Opsview API user")
@click.option("--password", default=None, envvar="WINUPDATE_PROBE_PASSWORD", help="Opsview API password (or WINUPDATE_PROBE_PASSWORD)")
@click.option("--hostname", default=None, help="Opsview host name to report for (default: local FQDN)")
@click.option("--service-name", default=None, help="Opsview service check name (default: Windows Updates)")
@click.option("--reboot-severity", default=None, help="Status for a pending reboot: ok, warning, critical, unknown or 0-3 (default: warning)")
@click.option("--optional-severity", default=None, help="Status for optional-only updates: ok, warning, critical, unknown or 0-3 (default: warning)")
@click.option("--cache-file", default=None, help="Inventory cache file")
@click.option("--cache-expiry", default=None, help="Inventory cache lifetime in hours (default: 24)")
@click.option("--no-cache", is_flag=True, help="Always search Windows Update, never use the cache")
@click.option("--log-file", default=None, help="Rotating log file path")
@click.option("--timeout", default=None, help="Network timeout in seconds (default: 30)")
@click.option("--insecure", is_flag=True, help="Do not verify the server TLS certificate")
@click.option("--report-file", default=None, help="Also write the run report as JSON")
@click.option("--verbose", is_flag=True, help="Log progress and print a run summary to stderr")
def main(
    config_path: str | None,
    server: str | None,
    username: str | None,
    password: str | None,
    hostname: str | None,
    service_name: str | None,
    reboot_severity: str | None,
    optional_severity: str | None,
    cache_file: str | None,
    cache_expiry: str | None,
    no_cache: bool,
    log_file: str | None,
    timeout: str | None,
    insecure: bool,
    report_file: str | None,
    verbose: bool,
):
    """Check Windows Update posture and report it to Opsview.

    Exit codes: 0 OK, 1 WARNING, 2 CRITICAL, 3 UNKNOWN.
    """
    try:
        config = Config.from_yaml(config_path) if config_path else Config.from_defaults()
        config.apply_overrides(
            server=server,
            username=username,
            password=password,
            hostname=hostname,
            service_name=service_name,
            reboot_severity=reboot_severity,
            optional_severity=optional_severity,
            cache_path=cache_file,
            cache_expiry_hours=cache_expiry,
            no_cache=no_cache,
            log_file=log_file,
            timeout=timeout,
            insecure=insecure,
            verbose=verbose,
        )
    except ConfigError as exc:
        _exit_unknown(str(exc))

    configure_logging(
        config.log_file,
        max_bytes=config.log_max_bytes,
        backup_count=config.log_backup_count,
        verbose=config.verbose,
    )

    missing = config.missing()
    if missing:
        logger.error("Missing required settings: %s", ", ".join(missing))
        _exit_unknown(f"missing required settings: {', '.join(missing)}")

    inventory: InventorySource = WindowsUpdateInventory()
    if config.cache_enabled:
        inventory = CachedInventory(inventory, InventoryCache(config.cache_path, config.cache_expiry))

    client = OpsviewClient(config.server, timeout=config.timeout, verify_tls=config.verify_tls)

    try:
        report = Probe(config, inventory, client).run()
    except Exception as exc:
        logger.exception("Probe run aborted")
        _exit_unknown(f"{type(exc).__name__}: {exc}")

    console_reporter.generate(report, verbose=config.verbose, console=console)

    if report_file:
        try:
            path = json_reporter.generate(report, report_file)
            logger.info("Run report written to %s", path)
        except OSError as exc:
            logger.error("Could not write run report %s: %s", report_file, exc)

    sys.exit(int(report.exit_status))
