"""Map a classification and the reboot flag to a monitoring status."""

from __future__ import annotations

import logging

from winupdate_probe.models import Classification, ProbeStatus

logger = logging.getLogger(__name__)

REBOOT_REQUIRED_MESSAGE = "updates installed, reboot required"
NO_UPDATES_MESSAGE = "OK - no pending updates."
UNKNOWN_STATE_MESSAGE = "UNKNOWN script state"


def updates_message(classification: Classification) -> str:
    """Summary line for pending critical/optional updates.

    Every bracketed critical title is followed by a single space.
    """
    titles = "".join(f"{title} " for title in classification.critical_titles)
    return (
        f"Updates: {classification.critical_count} critical, "
        f"{classification.optional_count} optional - {titles}"
    )


def resolve_status(
    pending_reboot: bool,
    classification: Classification | None,
    *,
    reboot_severity: ProbeStatus = ProbeStatus.WARNING,
    optional_severity: ProbeStatus = ProbeStatus.WARNING,
) -> tuple[ProbeStatus, str]:
    """Resolve the status code and raw message. First matching rule wins.

    1. Reboot pending: ``reboot_severity``. The classification is not looked at.
    2. Nothing pending at all: OK.
    3. Any critical update: CRITICAL.
    4. Only optional updates (hidden ones may exist too): ``optional_severity``.
    5. Only hidden updates: OK.
    6. Anything else is an internal inconsistency: UNKNOWN.

    Args:
        pending_reboot: True when the OS reports a reboot is required.
        classification: Bucketed updates. May be None when a reboot is pending.
        reboot_severity: Status reported for a pending reboot.
        optional_severity: Status reported for optional-only updates.

    Returns:
        Tuple of (status, raw message).
    """
    if pending_reboot:
        return reboot_severity, REBOOT_REQUIRED_MESSAGE

    if classification is None:
        logger.error("No classification available and no reboot pending")
        return ProbeStatus.UNKNOWN, UNKNOWN_STATE_MESSAGE

    critical = classification.critical_count
    optional = classification.optional_count
    hidden = classification.hidden_count

    if critical == 0 and optional == 0 and hidden == 0:
        return ProbeStatus.OK, NO_UPDATES_MESSAGE
    if critical > 0:
        return ProbeStatus.CRITICAL, updates_message(classification)
    if optional > 0:
        return optional_severity, updates_message(classification)
    if hidden > 0:
        return ProbeStatus.OK, f"OK - {hidden} hidden updates."

    logger.error(
        "Unresolvable update counts: critical=%d optional=%d hidden=%d",
        critical, optional, hidden,
    )
    return ProbeStatus.UNKNOWN, UNKNOWN_STATE_MESSAGE
