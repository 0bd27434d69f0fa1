"""One end-to-end probe run: inventory, classify, resolve, format, report."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from winupdate_probe.classifier import classify
from winupdate_probe.config import Config
from winupdate_probe.formatter import format_result
from winupdate_probe.inventory import InventoryError, InventorySource
from winupdate_probe.models import ProbeReport, ProbeResult, ProbeStatus
from winupdate_probe.reporting import AuthError, OpsviewClient, SubmitError
from winupdate_probe.resolver import resolve_status

logger = logging.getLogger(__name__)


class Probe:
    """Runs the Windows Update probe once and reports the result."""

    def __init__(self, config: Config, inventory: InventorySource, client: OpsviewClient):
        self.config = config
        self.inventory = inventory
        self.client = client

    def evaluate(self) -> ProbeResult:
        """Determine the local result without talking to the server.

        A pending reboot short-circuits the update search. Inventory
        failures become an UNKNOWN result without perfdata.
        """
        try:
            if self.inventory.is_reboot_pending():
                logger.info("Reboot pending, skipping update inventory")
                status, message = resolve_status(
                    True, None, reboot_severity=self.config.reboot_severity,
                )
                return format_result(status, message, None)

            records = self.inventory.fetch_pending_updates()
        except InventoryError as exc:
            logger.error("Inventory unavailable: %s", exc)
            return ProbeResult(status=ProbeStatus.UNKNOWN, message=f"UNKNOWN - {exc}")

        classification = classify(records)
        logger.info(
            "Pending updates: critical=%d optional=%d hidden=%d",
            classification.critical_count,
            classification.optional_count,
            classification.hidden_count,
        )
        status, message = resolve_status(
            False,
            classification,
            reboot_severity=self.config.reboot_severity,
            optional_severity=self.config.optional_severity,
        )
        return format_result(status, message, classification)

    def report(self, result: ProbeResult) -> tuple[bool, ProbeStatus]:
        """Authenticate and submit the result exactly once.

        Returns:
            Tuple of (submitted, exit status). A login failure turns the
            exit status into UNKNOWN; a failed submission does not change it.
        """
        try:
            session = self.client.authenticate(self.config.username, self.config.password)
        except AuthError as exc:
            logger.error("Authentication failed, result not submitted: %s", exc)
            return False, ProbeStatus.UNKNOWN

        try:
            self.client.submit(self.config.hostname, self.config.service_name, session, result)
        except SubmitError as exc:
            logger.error("Submission failed, keeping local status %s: %s", result.status.name, exc)
            return False, result.status

        return True, result.status

    def run(self) -> ProbeReport:
        """Evaluate and report.

        Returns:
            ProbeReport whose exit_status is the process exit code.
        """
        started = datetime.now(timezone.utc)
        result = self.evaluate()
        logger.info("Resolved %s: %s", result.status.name, result.message)

        submitted, exit_status = self.report(result)

        return ProbeReport(
            hostname=self.config.hostname,
            service_name=self.config.service_name,
            started=started,
            finished=datetime.now(timezone.utc),
            result=result,
            submitted=submitted,
            exit_status=exit_status,
        )
