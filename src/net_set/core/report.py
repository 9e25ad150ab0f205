"""Diagnostics report rendering — rich table for the terminal, plain text otherwise."""

from __future__ import annotations

from rich.markup import escape
from rich.table import Table

from net_set.core.base import SCRIPT_APPLIED, DiagnosticOutcome, DiagnosticsReport

_OUTCOME_STYLES = {
    DiagnosticOutcome.PENDING: "dim",
    DiagnosticOutcome.PASS: "green",
    DiagnosticOutcome.FAIL: "red",
}


def _rows(report: DiagnosticsReport) -> list[tuple[str, str, str]]:
    """(label, value, rich style) for each line of the report."""
    rows = [
        (label, outcome.display_text, _OUTCOME_STYLES[outcome])
        for label, outcome in (
            ("IPv4 connectivity", report.ipv4),
            ("IPv6 connectivity", report.ipv6),
            ("DNS resolution", report.dns_resolution),
            ("Encrypted DNS", report.encrypted_dns),
        )
    ]
    rows.append(
        ("IPv6 enabled", "Yes" if report.ipv6_enabled else "No", "green" if report.ipv6_enabled else "yellow")
    )
    rows.append(("Current DNS servers", report.current_resolvers, ""))
    rows.append(
        ("Script status", report.script_status, "green" if report.script_status == SCRIPT_APPLIED else "dim")
    )
    return rows


def format_report(report: DiagnosticsReport) -> str:
    """Plain-text rendering, one "label: value" per line."""
    lines = [f"{label}: {value}" for label, value, _style in _rows(report)]
    if report.errors:
        lines.append(f"Errors: {report.errors}")
    return "\n".join(lines)


def render_report_table(report: DiagnosticsReport, provider_name: str) -> Table:
    table = Table(title=f"Network Diagnostics — {provider_name}")
    table.add_column("Check", style="bold")
    table.add_column("Result")

    for label, value, style in _rows(report):
        table.add_row(label, f"[{style}]{escape(value)}[/{style}]" if style else escape(value))
    if report.errors:
        table.add_row("Errors", f"[red]{escape(report.errors)}[/red]")
    return table
