"""Network diagnostics battery — independent probes aggregated into one report."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from net_set.core.base import (
    SCRIPT_NOT_EXECUTED,
    CommandResult,
    DiagnosticOutcome,
    DiagnosticsReport,
    DnsProvider,
    ProbeResult,
)
from net_set.core.runner import CANNOT_EXECUTE_EXIT_CODE, NOT_FOUND_EXIT_CODE, CommandRunner

logger = logging.getLogger(__name__)

# Fixed control targets; the IPv6 probe deliberately ignores the selected provider
IPV4_TARGET = "1.1.1.1"
IPV6_TARGET = "2606:4700:4700::1111"
RESOLVE_HOSTNAME = "cloudflare.com"

IPV6_DISABLE_PATH = Path("/proc/sys/net/ipv6/conf/all/disable_ipv6")
RESOLV_CONF_PATH = Path("/etc/resolv.conf")

DEFAULT_PROBE_TIMEOUT = 3.0
# Extra time the runner allows on top of the utilities' own bound
PROBE_GRACE = 2.0

MAX_RESOLVERS = 2


def parse_resolvers(content: str, fallback: str) -> str:
    """First two nameserver entries of a resolv.conf, joined with ", "."""
    servers = [
        line[len("nameserver") :].strip()
        for line in content.splitlines()
        if line.startswith("nameserver")
    ]
    servers = [s for s in servers if s][:MAX_RESOLVERS]
    return ", ".join(servers) or fallback


def _classify(result: CommandResult, passed: bool) -> ProbeResult:
    if result.timed_out or result.exit_code in (CANNOT_EXECUTE_EXIT_CODE, NOT_FOUND_EXIT_CODE):
        return ProbeResult(outcome=DiagnosticOutcome.FAIL, error=result.stderr.strip())
    return ProbeResult(outcome=DiagnosticOutcome.PASS if passed else DiagnosticOutcome.FAIL)


class DiagnosticsBattery:
    def __init__(
        self,
        runner: CommandRunner,
        probe_timeout: float = DEFAULT_PROBE_TIMEOUT,
        ipv6_disable_path: Path = IPV6_DISABLE_PATH,
        resolv_conf_path: Path = RESOLV_CONF_PATH,
    ) -> None:
        self.runner = runner
        self.probe_timeout = probe_timeout
        self.ipv6_disable_path = ipv6_disable_path
        self.resolv_conf_path = resolv_conf_path

    @property
    def _bound(self) -> str:
        return str(max(1, int(self.probe_timeout)))

    def _run(self, argv: list[str]) -> CommandResult:
        return self.runner.run(argv, self.probe_timeout + PROBE_GRACE)

    def check_ipv4(self) -> ProbeResult:
        result = self._run(["ping", "-c", "1", "-W", self._bound, IPV4_TARGET])
        logger.debug("IPv4 ping exit code: %s", result.exit_code)
        return _classify(result, result.exit_code == 0)

    def check_ipv6(self) -> ProbeResult:
        result = self._run(["ping6", "-c", "1", "-W", self._bound, IPV6_TARGET])
        logger.debug("IPv6 ping exit code: %s", result.exit_code)
        return _classify(result, result.exit_code == 0)

    def check_dns_resolution(self, provider: DnsProvider) -> ProbeResult:
        result = self._run(["nslookup", RESOLVE_HOSTNAME, provider.primary_ipv4])
        logger.debug(
            "DNS resolution via %s exit code: %s, output length: %d",
            provider.primary_ipv4,
            result.exit_code,
            len(result.stdout),
        )
        passed = result.exit_code == 0 and RESOLVE_HOSTNAME in result.stdout.lower()
        return _classify(result, passed)

    def check_encrypted_dns(self, provider: DnsProvider) -> ProbeResult:
        # Providers whose DoH host does not follow dns.<name>.com just FAIL here
        url = f"https://{provider.doh_hostname}/dns-query?name={RESOLVE_HOSTNAME}&type=A"
        pipeline = (
            f"curl -s -m {self._bound} '{url}' -H 'Accept: application/dns-json' "
            f"| grep -q cloudflare && echo pass || echo fail"
        )
        result = self.runner.run_shell(pipeline, self.probe_timeout + PROBE_GRACE)
        tokens = result.stdout.split()
        verdict = tokens[-1].lower() if tokens else ""
        logger.debug("Encrypted DNS probe against %s: %r", provider.doh_hostname, verdict)
        return _classify(result, verdict == "pass")

    def check_ipv6_enabled(self) -> bool:
        try:
            content = self.ipv6_disable_path.read_text().strip()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("IPv6 status unreadable, assuming disabled: %s", e)
            return False
        return content != "1"

    def get_current_resolvers(self, provider: DnsProvider) -> str:
        try:
            content = self.resolv_conf_path.read_text(errors="replace")
        except OSError as e:
            logger.debug("Could not read %s: %s", self.resolv_conf_path, e)
            return provider.primary_ipv4
        return parse_resolvers(content, provider.primary_ipv4)

    async def run_all(
        self,
        provider: DnsProvider,
        script_status: str = SCRIPT_NOT_EXECUTED,
    ) -> DiagnosticsReport:
        """Run every probe concurrently and assemble a fresh report."""
        ipv4, ipv6, dns, doh, ipv6_enabled, resolvers = await asyncio.gather(
            asyncio.to_thread(self.check_ipv4),
            asyncio.to_thread(self.check_ipv6),
            asyncio.to_thread(self.check_dns_resolution, provider),
            asyncio.to_thread(self.check_encrypted_dns, provider),
            asyncio.to_thread(self.check_ipv6_enabled),
            asyncio.to_thread(self.get_current_resolvers, provider),
        )

        errors = [
            f"{label}: {probe.error}"
            for label, probe in (
                ("IPv4", ipv4),
                ("IPv6", ipv6),
                ("DNS", dns),
                ("Encrypted DNS", doh),
            )
            if probe.error
        ]
        report = DiagnosticsReport(
            ipv4=ipv4.outcome,
            ipv6=ipv6.outcome,
            dns_resolution=dns.outcome,
            encrypted_dns=doh.outcome,
            ipv6_enabled=ipv6_enabled,
            current_resolvers=resolvers,
            script_status=script_status,
            errors="; ".join(errors),
        )
        logger.info(
            "Diagnostics for %s: ipv4=%s ipv6=%s dns=%s doh=%s",
            provider.name,
            report.ipv4,
            report.ipv6,
            report.dns_resolution,
            report.encrypted_dns,
        )
        return report
