"""Run scripts unprivileged first, falling back once to the elevation wrapper."""

from __future__ import annotations

import logging

from net_set.core.base import CommandResult
from net_set.core.runner import CommandRunner

logger = logging.getLogger(__name__)

ELEVATION_MARKERS = ("must be run as root", "permission denied")

DEFAULT_INTERPRETER = "/bin/sh"
DEFAULT_SCRIPT_TIMEOUT = 60.0

NO_OUTPUT_MESSAGE = "Script completed successfully"


def needs_elevation(output: str) -> bool:
    """Heuristic: does this output say the script wanted root?"""
    lowered = output.lower()
    return any(marker in lowered for marker in ELEVATION_MARKERS)


def render_output(result: CommandResult) -> str:
    """Collapse a script result to the single display string callers expect."""
    if result.stderr:
        return f"Error: {result.stderr}"
    return result.stdout or NO_OUTPUT_MESSAGE


class PrivilegeFallbackExecutor:
    def __init__(
        self,
        runner: CommandRunner,
        interpreter: str = DEFAULT_INTERPRETER,
        timeout: float = DEFAULT_SCRIPT_TIMEOUT,
    ) -> None:
        self.runner = runner
        self.interpreter = interpreter
        self.timeout = timeout

    def run_once(self, path: str, elevated: bool) -> CommandResult:
        """Single attempt, either under the interpreter or the elevation wrapper."""
        if elevated:
            return self.runner.run([*self.runner.elevation_wrapper, path], self.timeout)
        return self.runner.run([self.interpreter, path], self.timeout)

    def execute(self, path: str, force_elevated: bool = False) -> CommandResult:
        if force_elevated:
            return self.run_once(path, elevated=True)

        result = self.run_once(path, elevated=False)
        if needs_elevation(result.combined_output):
            logger.info("Script %s needs root, retrying through %s", path, self.runner.elevation_wrapper)
            result = self.run_once(path, elevated=True)
        return result

    def run_script(self, path: str, force_elevated: bool = False) -> str:
        return render_output(self.execute(path, force_elevated))
