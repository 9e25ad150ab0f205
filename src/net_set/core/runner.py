"""External command execution with timeouts and an optional elevation wrapper."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from collections.abc import Sequence

from net_set.core.base import CommandResult

logger = logging.getLogger(__name__)

TIMEOUT_EXIT_CODE = -1
NOT_FOUND_EXIT_CODE = 127
CANNOT_EXECUTE_EXIT_CODE = 126

DEFAULT_ELEVATION_WRAPPER = ("su", "-c")


class CommandRunner:
    """Spawn-and-wait runner. Never raises; failures come back as CommandResults."""

    def __init__(self, elevation_wrapper: Sequence[str] = DEFAULT_ELEVATION_WRAPPER) -> None:
        self.elevation_wrapper = list(elevation_wrapper)

    def run(self, argv: Sequence[str], timeout: float) -> CommandResult:
        """Run argv (no shell) and capture stdout, stderr and the exit code."""
        argv = list(argv)
        logger.debug("Running %s (timeout %ss)", argv, timeout)
        try:
            proc = subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                encoding="utf-8",
                errors="replace",
                start_new_session=True,
            )
        except FileNotFoundError as e:
            logger.debug("Executable not found: %s", e)
            return CommandResult(argv=argv, exit_code=NOT_FOUND_EXIT_CODE, stderr=str(e))
        except OSError as e:
            logger.debug("Could not launch %s: %s", argv, e)
            return CommandResult(argv=argv, exit_code=CANNOT_EXECUTE_EXIT_CODE, stderr=str(e))

        try:
            stdout, stderr = proc.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            _kill_group(proc)
            # Drain whatever was written before the kill; grandchildren holding
            # the pipes open are gone with the process group.
            try:
                proc.communicate(timeout=1)
            except subprocess.TimeoutExpired:
                proc.kill()
                proc.wait()
            logger.warning("Command timed out after %s seconds: %s", timeout, argv)
            return CommandResult(
                argv=argv,
                exit_code=TIMEOUT_EXIT_CODE,
                stderr=f"Command timed out after {timeout:g} seconds",
                timed_out=True,
            )

        return CommandResult(
            argv=argv,
            exit_code=proc.returncode,
            stdout=stdout or "",
            stderr=stderr or "",
        )

    def run_shell(self, command: str, timeout: float) -> CommandResult:
        return self.run(["sh", "-c", command], timeout)

    def run_elevated(self, command: str, timeout: float) -> CommandResult:
        """Run a command string through the elevation wrapper (su -c by default)."""
        return self.run([*self.elevation_wrapper, command], timeout)


def _kill_group(proc: subprocess.Popen[str]) -> None:
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except (ProcessLookupError, PermissionError):
        proc.kill()
