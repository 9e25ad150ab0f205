"""Tests for the netset CLI."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from net_set.cli.main import cli
from net_set.core.base import CommandResult
from net_set.core.engine import NetSetEngine


@pytest.fixture
def fake_engine(make_runner):
    """Patch the CLI so every engine it builds uses a FakeRunner."""
    runner = make_runner(lambda argv: CommandResult(argv=argv, exit_code=0, stdout="ok"))

    def factory(settings):
        return NetSetEngine(settings, runner=runner)

    with patch("net_set.cli.main.NetSetEngine", side_effect=factory):
        yield runner


@pytest.fixture
def invoke(tmp_path, monkeypatch):
    monkeypatch.setenv("NETSET_SCRIPTS_DIR", str(tmp_path / "scripts"))
    monkeypatch.delenv("NETSET_PROVIDER", raising=False)
    config = tmp_path / "netset.toml"
    config.write_text("")

    def _invoke(*args):
        return CliRunner().invoke(cli, ["--config", str(config), *args])

    return _invoke


def test_providers(invoke, fake_engine):
    result = invoke("providers")
    assert result.exit_code == 0
    assert "Cloudflare" in result.output
    assert "149.112.112.112" in result.output


def test_script_for_provider(invoke, fake_engine):
    result = invoke("script", "--provider", "quad9")
    assert result.exit_code == 0
    assert result.output.startswith("#!/bin/sh")
    assert "9.9.9.9" in result.output
    assert "Cloudflare" not in result.output


def test_unknown_provider_exits_1(invoke, fake_engine):
    result = invoke("select", "OpenNIC")
    assert result.exit_code == 1
    assert "unknown DNS provider" in result.output


def test_select_shows_addresses(invoke, fake_engine):
    result = invoke("select", "Google")
    assert result.exit_code == 0
    assert "8.8.4.4" in result.output
    assert "Provider Google is valid" in result.output
    assert "NETSET_PROVIDER" in result.output


def test_diagnose_json(invoke, fake_engine):
    result = invoke("diagnose", "--format", "json", "--provider", "Google")
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["provider"] == "Google"
    assert data["ipv4"] == "pass"
    assert data["script_status"] == "Not executed"


def test_configure(invoke, fake_engine):
    result = invoke("configure")
    assert result.exit_code == 0
    assert "Device Config" in result.output
    assert ["/bin/sh"] == [c[0] for c in fake_engine.calls if c[0] != "su"]


def test_launch_with_diagnose(invoke, fake_engine):
    result = invoke("launch", "--diagnose")
    assert result.exit_code == 0
    assert "Configuration Script" in result.output
    assert "Applied" in result.output


def test_verify(invoke, fake_engine, tmp_path):
    result = invoke("verify")
    assert result.exit_code == 0
    assert (tmp_path / "scripts" / "network-verify.sh").exists()


def test_bad_config_exits_1(tmp_path):
    config = tmp_path / "netset.toml"
    config.write_text("probe_timeout = 'fast'\n")
    result = CliRunner().invoke(cli, ["--config", str(config), "providers"])
    assert result.exit_code == 1
    assert "Configuration error" in result.output
