"""Tests for the PowerShell JSON runner, with the subprocess mocked out."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from winupdate_probe.collectors.powershell import PowerShellError, run_json


def _completed(stdout: str = "", stderr: str = "", returncode: int = 0) -> MagicMock:
    proc = MagicMock()
    proc.stdout = stdout
    proc.stderr = stderr
    proc.returncode = returncode
    return proc


PS = "winupdate_probe.collectors.powershell"


class TestRunJson:
    def test_no_powershell(self):
        with patch(f"{PS}.get_powershell_path", return_value=None):
            with pytest.raises(PowerShellError, match="not found"):
                run_json("Get-Date")

    def test_json_output_decoded(self):
        with patch(f"{PS}.get_powershell_path", return_value="pwsh"), \
                patch(f"{PS}.subprocess.run", return_value=_completed('\ufeff{"Count": 0}\r\n')) as run:
            assert run_json("Get-Thing", timeout=7) == {"Count": 0}

        command = run.call_args[0][0][-1]
        assert command.startswith("Get-Thing | ConvertTo-Json")
        assert "-Compress" in command
        assert run.call_args.kwargs["timeout"] == 7

    def test_nonzero_exit_uses_stderr(self):
        with patch(f"{PS}.get_powershell_path", return_value="pwsh"), \
                patch(f"{PS}.subprocess.run", return_value=_completed("", "boom", 1)):
            with pytest.raises(PowerShellError, match="boom"):
                run_json("Get-Thing")

    def test_nonzero_exit_without_stderr(self):
        with patch(f"{PS}.get_powershell_path", return_value="pwsh"), \
                patch(f"{PS}.subprocess.run", return_value=_completed("", "", 5)):
            with pytest.raises(PowerShellError, match="exit code 5"):
                run_json("Get-Thing")

    def test_empty_output(self):
        with patch(f"{PS}.get_powershell_path", return_value="pwsh"), \
                patch(f"{PS}.subprocess.run", return_value=_completed("  \n")):
            with pytest.raises(PowerShellError, match="no output"):
                run_json("Get-Thing")

    def test_invalid_json(self):
        with patch(f"{PS}.get_powershell_path", return_value="pwsh"), \
                patch(f"{PS}.subprocess.run", return_value=_completed("not json")):
            with pytest.raises(PowerShellError, match="not JSON"):
                run_json("Get-Thing")

    def test_timeout(self):
        with patch(f"{PS}.get_powershell_path", return_value="pwsh"), \
                patch(f"{PS}.subprocess.run", side_effect=subprocess.TimeoutExpired("pwsh", 5)):
            with pytest.raises(PowerShellError, match="timed out"):
                run_json("Get-Thing", timeout=5)

    def test_cannot_start(self):
        with patch(f"{PS}.get_powershell_path", return_value="pwsh"), \
                patch(f"{PS}.subprocess.run", side_effect=PermissionError("denied")):
            with pytest.raises(PowerShellError, match="Cannot start"):
                run_json("Get-Thing")
