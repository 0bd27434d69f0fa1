"""Plugin output on the console."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from winupdate_probe.models import ProbeReport, ProbeStatus

STATUS_COLORS = {
    ProbeStatus.OK: "green",
    ProbeStatus.WARNING: "yellow",
    ProbeStatus.CRITICAL: "bold red",
    ProbeStatus.UNKNOWN: "magenta",
}


def generate(report: ProbeReport, verbose: bool = False, console: Console | None = None) -> str:
    """Print the plugin output line, and a run summary when verbose.

    The output line goes to stdout unstyled so schedulers can parse it.
    The summary table goes to stderr.

    Returns:
        The output line that was printed.
    """
    con = console or Console(highlight=False, soft_wrap=True, emoji=False)
    line = report.result.output_line()
    con.print(line, markup=False, highlight=False)

    if verbose:
        err = Console(stderr=True)
        table = Table(title="Probe run")
        table.add_column("Field", style="bold")
        table.add_column("Value")
        style = STATUS_COLORS.get(report.result.status, "")
        table.add_row("Host", report.hostname)
        table.add_row("Service", report.service_name)
        table.add_row("Status", f"[{style}]{report.result.status.name}[/{style}]")
        table.add_row("Submitted", "Yes" if report.submitted else "No")
        table.add_row("Exit code", str(int(report.exit_status)))
        duration = (report.finished - report.started).total_seconds()
        table.add_row("Duration (s)", f"{duration:.2f}")
        err.print(table)

    return line
