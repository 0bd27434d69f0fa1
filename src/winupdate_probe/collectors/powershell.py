"""Run a PowerShell script and decode the JSON it prints."""

from __future__ import annotations

import json
import logging
import subprocess
from typing import Any

from winupdate_probe.platform import get_powershell_path

logger = logging.getLogger(__name__)

JSON_DEPTH = 5


class PowerShellError(RuntimeError):
    """PowerShell could not be started, failed, or printed no usable JSON."""


def run_json(script: str, timeout: float = 60) -> Any:
    """Run ``script`` and return its pipeline output decoded from JSON.

    The script output is piped through ``ConvertTo-Json -Compress``, so
    a single object comes back as a dict and several as a list.

    Raises:
        PowerShellError: If PowerShell is missing, times out, exits
            non-zero, or prints nothing that decodes as JSON.
    """
    ps_path = get_powershell_path()
    if ps_path is None:
        raise PowerShellError("PowerShell not found on this system")

    args = [
        ps_path,
        "-NoProfile",
        "-NonInteractive",
        "-ExecutionPolicy", "Bypass",
        "-Command",
        f"{script} | ConvertTo-Json -Depth {JSON_DEPTH} -Compress",
    ]

    logger.debug("Running PowerShell (timeout=%ss)", timeout)
    try:
        proc = subprocess.run(
            args,
            capture_output=True,
            timeout=timeout,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except subprocess.TimeoutExpired as exc:
        raise PowerShellError(f"PowerShell timed out after {timeout} seconds") from exc
    except OSError as exc:
        raise PowerShellError(f"Cannot start PowerShell: {exc}") from exc

    # Windows PowerShell 5 prefixes redirected output with a BOM
    stdout = proc.stdout.strip().lstrip("\ufeff")

    if proc.returncode != 0:
        detail = (proc.stderr or "").strip() or f"exit code {proc.returncode}"
        raise PowerShellError(f"PowerShell failed: {detail}")
    if not stdout:
        raise PowerShellError("PowerShell printed no output")

    try:
        return json.loads(stdout)
    except json.JSONDecodeError as exc:
        logger.debug("Undecodable PowerShell output: %.200s", stdout)
        raise PowerShellError(f"PowerShell output is not JSON: {exc}") from exc
