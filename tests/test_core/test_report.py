"""Tests for report rendering and the result models."""

from rich.console import Console

from net_set.core.base import DiagnosticOutcome, DiagnosticsReport, StepResult
from net_set.core.report import format_report, render_report_table


def test_default_report_is_pending():
    report = DiagnosticsReport()
    assert report.ipv4 == DiagnosticOutcome.PENDING
    assert report.current_resolvers == "Unknown"
    assert report.script_status == "Not executed"
    assert report.ipv6_enabled is False


def test_display_text():
    assert DiagnosticOutcome.PASS.display_text == "✓ Pass"
    assert DiagnosticOutcome.FAIL.display_text == "✗ Fail"
    assert DiagnosticOutcome.PENDING.display_text == "⏳ Pending"


def test_format_report():
    report = DiagnosticsReport(
        ipv4=DiagnosticOutcome.PASS,
        ipv6=DiagnosticOutcome.FAIL,
        dns_resolution=DiagnosticOutcome.PASS,
        encrypted_dns=DiagnosticOutcome.FAIL,
        ipv6_enabled=True,
        current_resolvers="1.1.1.1, 1.0.0.1",
        script_status="Applied",
        errors="IPv6: timed out",
    )
    text = format_report(report)
    assert "IPv4 connectivity: ✓ Pass" in text
    assert "IPv6 connectivity: ✗ Fail" in text
    assert "IPv6 enabled: Yes" in text
    assert "Current DNS servers: 1.1.1.1, 1.0.0.1" in text
    assert text.endswith("Errors: IPv6: timed out")


def test_render_report_table():
    report = DiagnosticsReport(ipv4=DiagnosticOutcome.PASS, errors="[odd] text")
    console = Console(record=True, width=100)
    console.print(render_report_table(report, "Quad9"))
    output = console.export_text()
    assert "Network Diagnostics" in output
    assert "Quad9" in output
    assert "[odd] text" in output


def test_step_result_render():
    assert StepResult.success("done").render() == "done"
    assert StepResult.failure("disk full").render() == "Error: disk full"
    assert StepResult.failure("Error creating script").render() == "Error creating script"
