"""Orchestration — the operations callers drive: configure, launch, diagnose, verify."""

from __future__ import annotations

import asyncio
import logging
import shutil
import threading
from pathlib import Path

from net_set.core.base import (
    SCRIPT_APPLIED,
    SCRIPT_NOT_EXECUTED,
    DiagnosticOutcome,
    DiagnosticsReport,
    DnsProvider,
    StepResult,
)
from net_set.core.config import Settings
from net_set.core.diagnostics import DiagnosticsBattery
from net_set.core.paths import BUNDLED_SCRIPTS_DIR, VERIFY_SCRIPT_NAME
from net_set.core.privilege import PrivilegeFallbackExecutor, render_output
from net_set.core.registry import ProviderRegistry, UnknownProviderError
from net_set.core.runner import CommandRunner
from net_set.core.script import SCRIPT_NAME, generate_script

logger = logging.getLogger(__name__)

ALREADY_EXECUTED = "Already executed during this session"


def device_commands(provider: DnsProvider) -> list[str]:
    """Direct configuration commands, each run on its own under elevation."""
    return [
        "getprop ro.boot.secure_volume",
        "echo 2 > /proc/sys/net/ipv6/conf/all/use_tempaddr",
        f'echo "Configuring DNS to {provider.name}"',
        f'echo "Primary: {provider.primary_ipv4}"',
        f'echo "Secondary: {provider.secondary_ipv4}"',
    ]


class NetSetEngine:
    """Owns the session state (launch flag, provider selection) and its collaborators.

    Every public operation returns a string or a DiagnosticsReport; failures
    are reported in-band rather than raised.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        runner: CommandRunner | None = None,
        registry: ProviderRegistry | None = None,
        battery: DiagnosticsBattery | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.runner = runner or CommandRunner(self.settings.elevation_wrapper)
        self.registry = registry or ProviderRegistry(default=self.settings.provider)
        self.executor = PrivilegeFallbackExecutor(
            self.runner,
            interpreter=self.settings.interpreter,
            timeout=self.settings.script_timeout,
        )
        self.battery = battery or DiagnosticsBattery(
            self.runner, probe_timeout=self.settings.probe_timeout
        )
        self._launch_lock = threading.Lock()
        self._has_executed_on_launch = False

    @property
    def scripts_dir(self) -> Path:
        return self.settings.scripts_dir

    @property
    def has_executed_on_launch(self) -> bool:
        with self._launch_lock:
            return self._has_executed_on_launch

    @property
    def selected_provider(self) -> DnsProvider:
        return self.registry.selected

    def select_provider(self, name: str) -> str:
        try:
            provider = self.registry.select(name)
        except UnknownProviderError as e:
            return StepResult.failure(str(e)).render()
        return f"DNS provider set to: {provider.name}"

    def generate_script(self) -> str:
        return generate_script(self.selected_provider)

    def run_on_launch(self) -> str:
        with self._launch_lock:
            if self._has_executed_on_launch:
                logger.debug("Already executed on launch, skipping")
                return ALREADY_EXECUTED
            self._has_executed_on_launch = True

        logger.info("Executing network configuration on launch")
        result = self.run_configuration()
        logger.info("Launch execution completed")
        return result

    async def launch(self) -> str:
        """Awaitable run_on_launch; the caller joins the result."""
        return await asyncio.to_thread(self.run_on_launch)

    def run_configuration(self) -> str:
        try:
            provider = self.selected_provider
            device = self._run_device_commands(provider)
            script = self._run_configuration_script(provider)
            return (
                f"Device Config:\n{device.render()}\n\n"
                f"Configuration Script:\n{script.render()}"
            )
        except Exception as e:
            logger.exception("Configuration run failed")
            return f"Error running configuration: {e}"

    def _run_device_commands(self, provider: DnsProvider) -> StepResult:
        lines = []
        failed = 0
        for command in device_commands(provider):
            result = self.runner.run_elevated(command, self.settings.command_timeout)
            if result.stderr:
                lines.append(f"{command}: Error - {result.stderr.strip()}")
                failed += 1
            else:
                lines.append(f"{command}: {result.stdout.strip() or 'Success'}")
        logger.info("Device commands finished for %s (%d failed)", provider.name, failed)
        output = "\n".join(lines)
        if failed == len(lines):
            return StepResult.failure(output)
        return StepResult.success(output)

    def _write_script(self, provider: DnsProvider) -> Path:
        self.scripts_dir.mkdir(parents=True, exist_ok=True)
        path = self.scripts_dir / SCRIPT_NAME
        path.write_text(generate_script(provider))
        path.chmod(0o755)
        return path

    def _run_configuration_script(self, provider: DnsProvider) -> StepResult:
        try:
            path = self._write_script(provider)
        except OSError as e:
            return StepResult.failure(f"Error creating configuration script: {e}")

        result = self.executor.execute(str(path))
        logger.info("Configuration script exited with %s", result.exit_code)
        if result.stderr:
            return StepResult.failure(render_output(result))
        return StepResult.success(render_output(result))

    async def run_diagnostics(self) -> DiagnosticsReport:
        provider = self.selected_provider
        status = SCRIPT_APPLIED if self.has_executed_on_launch else SCRIPT_NOT_EXECUTED
        try:
            return await self.battery.run_all(provider, script_status=status)
        except Exception as e:
            logger.exception("Diagnostics run failed")
            return DiagnosticsReport(
                ipv4=DiagnosticOutcome.FAIL,
                ipv6=DiagnosticOutcome.FAIL,
                dns_resolution=DiagnosticOutcome.FAIL,
                encrypted_dns=DiagnosticOutcome.FAIL,
                current_resolvers=provider.primary_ipv4,
                script_status=status,
                errors=f"Error running diagnostics: {e}",
            )

    def install_scripts(self) -> str:
        """Copy the bundled scripts into scripts_dir and mark them executable."""
        try:
            self.scripts_dir.mkdir(parents=True, exist_ok=True)
            installed = []
            for source in sorted(BUNDLED_SCRIPTS_DIR.glob("*.sh")):
                target = self.scripts_dir / source.name
                shutil.copyfile(source, target)
                target.chmod(0o755)
                installed.append(source.name)
        except OSError as e:
            logger.error("Error copying scripts: %s", e)
            return StepResult.failure(f"Error copying scripts: {e}").render()
        logger.debug("Scripts copied to %s", self.scripts_dir)
        return f"Installed {', '.join(installed)} to {self.scripts_dir}"

    def run_verify_only(self) -> str:
        path = self.scripts_dir / VERIFY_SCRIPT_NAME
        if not path.exists():
            return f"Error: {VERIFY_SCRIPT_NAME} not found at {path}"
        try:
            return render_output(self.executor.run_once(str(path), elevated=False))
        except Exception as e:
            logger.exception("Verification run failed")
            return f"Error running diagnostics: {e}"
