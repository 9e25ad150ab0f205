"""Shared test fixtures."""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from net_set.core.base import CommandResult
from net_set.core.config import Settings
from net_set.core.runner import CommandRunner

Responder = Callable[[list[str]], CommandResult]


class FakeRunner(CommandRunner):
    """CommandRunner that records argv and answers from a responder instead of spawning."""

    def __init__(self, responder: Responder | None = None) -> None:
        super().__init__()
        self.responder = responder or (lambda argv: CommandResult(argv=argv, exit_code=0))
        self.calls: list[list[str]] = []
        self._lock = threading.Lock()

    def run(self, argv: Sequence[str], timeout: float) -> CommandResult:
        argv = list(argv)
        with self._lock:
            self.calls.append(argv)
        return self.responder(argv)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(scripts_dir=tmp_path / "scripts", probe_timeout=1.0)


@pytest.fixture
def make_runner() -> Callable[..., FakeRunner]:
    """Build a FakeRunner around a responder(argv) -> CommandResult."""
    return FakeRunner
