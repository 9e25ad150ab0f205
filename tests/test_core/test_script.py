"""Tests for the configuration script generator."""

from net_set.core.base import NOT_SET, DnsProvider
from net_set.core.registry import ProviderRegistry
from net_set.core.runner import CommandRunner
from net_set.core.script import generate_script


def test_quad9_script_mentions_only_quad9():
    registry = ProviderRegistry()
    registry.select("Quad9")
    script = generate_script(registry.selected)

    assert "9.9.9.9" in script
    assert "149.112.112.112" in script
    assert "Quad9" in script
    assert "Cloudflare" not in script


def test_script_is_non_interactive():
    script = generate_script(ProviderRegistry().selected)
    lines = [line.strip() for line in script.splitlines()]
    assert not any(line.startswith("read ") or " read " in line for line in lines)
    assert script.startswith("#!/bin/sh\n")
    assert "set -eu" in script


def test_steps_in_order():
    script = generate_script(ProviderRegistry().selected)
    markers = [
        "[1/4] IPv6 Configuration",
        "[2/4] DNS Provider Configuration",
        "[3/4] Network Interface Check",
        "[4/4] Connectivity Test",
    ]
    positions = [script.index(m) for m in markers]
    assert positions == sorted(positions)


def test_best_effort_steps_cannot_abort():
    script = generate_script(ProviderRegistry().selected)
    assert "2>/dev/null || echo" in script
    assert "if ping -c 1 -W 3 1.1.1.1" in script
    assert "Internet connectivity: OK" in script
    assert "Internet connectivity: Limited" in script


def test_missing_secondary_falls_back_to_not_set():
    provider = DnsProvider(name="Solo", ipv4=["203.0.113.53"], ipv6=["2001:db8::53"])
    script = generate_script(provider)
    assert f"Secondary DNS: {NOT_SET}" in script
    assert "Primary DNS: 203.0.113.53" in script


def test_every_registry_provider_renders():
    for provider in ProviderRegistry().all():
        script = generate_script(provider)
        assert f"Selected DNS Provider: {provider.name}" in script
        assert provider.ipv4[1] in script


def test_generated_script_runs_cleanly(tmp_path):
    path = tmp_path / "net_set_auto.sh"
    path.write_text(generate_script(ProviderRegistry().get("Quad9")))

    syntax = CommandRunner().run(["sh", "-n", str(path)], timeout=5)
    assert syntax.exit_code == 0, syntax.stderr

    result = CommandRunner().run(["/bin/sh", str(path)], timeout=15)
    assert result.exit_code == 0, result.stderr
    assert result.stderr == ""
    assert "Selected DNS Provider: Quad9" in result.stdout
    assert "Internet connectivity: " in result.stdout
    assert result.stdout.rstrip().endswith("Basic network settings have been applied where possible.")
