"""JSON report output."""

from __future__ import annotations

from pathlib import Path

from winupdate_probe.models import ProbeReport


def generate(report: ProbeReport, output_path: str | Path) -> str:
    """Serialize the run report to a JSON file.

    Args:
        report: The probe report to serialize.
        output_path: File to write. Parent directories are created.

    Returns:
        Path to the written file.
    """
    filepath = Path(output_path)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    filepath.write_text(report.model_dump_json(indent=2), encoding="utf-8")
    return str(filepath)
