"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from selfheal.audit.log import AuditLogger
from selfheal.health.machine import HealthMachine
from selfheal.subsystems.registry import SubsystemRegistry


class FakeClock:
    """Fixed timestamp; sleeps are recorded instead of blocking."""

    def __init__(self, now: datetime | None = None) -> None:
        self._now = now or datetime(2025, 1, 1, 12, 0, 0)
        self.sleeps: list[float] = []

    def now(self) -> datetime:
        return self._now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)


class ScriptedRandom:
    """Returns queued ``randrange`` values in order."""

    def __init__(self, values: list[int]) -> None:
        self.values = list(values)
        self.calls: list[int] = []

    def randrange(self, stop: int) -> int:
        self.calls.append(stop)
        value = self.values.pop(0)
        assert 0 <= value < stop
        return value


def read_lines(path: Path) -> list[str]:
    if not path.exists():
        return []
    return path.read_text(encoding="utf-8").splitlines()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def manual_log(tmp_path: Path) -> Path:
    return tmp_path / "manual_kernel_log.txt"


@pytest.fixture
def auto_log(tmp_path: Path) -> Path:
    return tmp_path / "auto_kernel_log.txt"


@pytest.fixture
def registry() -> SubsystemRegistry:
    return SubsystemRegistry()


@pytest.fixture
def audit(clock: FakeClock) -> AuditLogger:
    return AuditLogger(clock=clock)


@pytest.fixture
def machine(registry: SubsystemRegistry, audit: AuditLogger, clock: FakeClock) -> HealthMachine:
    return HealthMachine(registry, audit, clock=clock)
