"""Core data model — providers, command results, and diagnostics reports."""

from __future__ import annotations

import ipaddress
import re
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

NOT_SET = "Not set"

SCRIPT_NOT_EXECUTED = "Not executed"
SCRIPT_APPLIED = "Applied"

# Provider names end up inside generated shell text and DoH hostnames
_PROVIDER_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9 -]*$")


class DiagnosticOutcome(StrEnum):
    PENDING = "pending"
    PASS = "pass"
    FAIL = "fail"

    @property
    def display_text(self) -> str:
        return {
            DiagnosticOutcome.PENDING: "⏳ Pending",
            DiagnosticOutcome.PASS: "✓ Pass",
            DiagnosticOutcome.FAIL: "✗ Fail",
        }[self]


class DnsProvider(BaseModel):
    """A DNS service with ordered resolver addresses (index 0 is primary)."""

    model_config = ConfigDict(frozen=True)

    name: str
    ipv4: list[str] = Field(min_length=1)
    ipv6: list[str] = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not _PROVIDER_NAME_RE.match(value):
            raise ValueError(f"invalid provider name: {value!r}")
        return value

    @field_validator("ipv4")
    @classmethod
    def _check_ipv4(cls, value: list[str]) -> list[str]:
        for address in value:
            ipaddress.IPv4Address(address)
        return value

    @field_validator("ipv6")
    @classmethod
    def _check_ipv6(cls, value: list[str]) -> list[str]:
        for address in value:
            ipaddress.IPv6Address(address)
        return value

    @property
    def primary_ipv4(self) -> str:
        return self.ipv4[0]

    @property
    def secondary_ipv4(self) -> str:
        return self.ipv4[1] if len(self.ipv4) > 1 else NOT_SET

    @property
    def doh_hostname(self) -> str:
        """DoH host derived from the display name, e.g. dns.quad9.com."""
        return f"dns.{self.name.lower().replace(' ', '')}.com"


class CommandResult(BaseModel):
    """Outcome of a single external command invocation."""

    model_config = ConfigDict(frozen=True)

    argv: list[str] = Field(default_factory=list)
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.exit_code == 0 and not self.timed_out

    @property
    def combined_output(self) -> str:
        return f"{self.stdout}\n{self.stderr}"


class ProbeResult(BaseModel):
    """Classified result of one diagnostic probe."""

    model_config = ConfigDict(frozen=True)

    outcome: DiagnosticOutcome = DiagnosticOutcome.PENDING
    error: str = ""  # spawn failure or timeout text that forced a FAIL


class DiagnosticsReport(BaseModel):
    """Snapshot of one diagnostics run."""

    model_config = ConfigDict(frozen=True)

    ipv4: DiagnosticOutcome = DiagnosticOutcome.PENDING
    ipv6: DiagnosticOutcome = DiagnosticOutcome.PENDING
    dns_resolution: DiagnosticOutcome = DiagnosticOutcome.PENDING
    encrypted_dns: DiagnosticOutcome = DiagnosticOutcome.PENDING
    ipv6_enabled: bool = False
    current_resolvers: str = "Unknown"
    script_status: str = SCRIPT_NOT_EXECUTED
    errors: str = ""


class StepResult(BaseModel):
    """Tagged success/error result of an engine step.

    Engine operations return plain strings to their callers; render() maps
    this result onto that single display channel.
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    output: str

    @classmethod
    def success(cls, output: str) -> StepResult:
        return cls(ok=True, output=output)

    @classmethod
    def failure(cls, message: str) -> StepResult:
        return cls(ok=False, output=message)

    def render(self) -> str:
        if self.ok or self.output.startswith("Error"):
            return self.output
        return f"Error: {self.output}"
