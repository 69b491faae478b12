"""Automatic mode — failure injection and auto-heal on a fixed tick.

Each tick runs the failure injector, then the auto-healer, then pauses for
the tick period. The pause waits on an ``asyncio.Event`` so a stop request
set by another task (e.g. the operator-input watcher) ends the loop without
the tick cadence ever waiting on input.
"""

from __future__ import annotations

import asyncio
import logging
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from selfheal.audit.log import LogLevel
from .machine import HealthMachine, Outcome

logger = logging.getLogger(__name__)

FAILURE_PERCENT = 20  # chance per tick that one subsystem is picked to crash
TICK_SECONDS = 1.0


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...


@dataclass
class TickReport:
    """What happened during one tick."""

    tick: int
    crashed: int | None = None
    healed: list[int] = field(default_factory=list)


class FailureInjector:
    """Crashes at most one randomly chosen HEALTHY subsystem per tick."""

    def __init__(self, machine: HealthMachine, rng: RandomSource | None = None) -> None:
        self.machine = machine
        self.rng = rng or random.Random()

    def inject(self, destination: Path) -> int | None:
        """Roll once; return the id of the subsystem crashed, if any."""
        if self.rng.randrange(100) >= FAILURE_PERCENT:
            return None

        subsystem_id = self.rng.randrange(len(self.machine.registry)) + 1
        ss = self.machine.registry.get(subsystem_id)
        # No retry on a different subsystem if the pick is not HEALTHY
        if ss is None or not ss.is_healthy:
            return None

        if self.machine.crash(subsystem_id, destination) is Outcome.APPLIED:
            return subsystem_id
        return None


class AutoHealer:
    """Heals every FAILED subsystem, one after the other, in registry order."""

    def __init__(self, machine: HealthMachine) -> None:
        self.machine = machine

    def sweep(self, destination: Path) -> list[int]:
        healed = []
        for subsystem_id in self.machine.registry.failed_ids():
            if self.machine.heal(subsystem_id, destination) is Outcome.APPLIED:
                healed.append(subsystem_id)
        return healed


class AutoScheduler:
    """Drives the injector and healer tick by tick against one destination.

    Lifecycle:
        stop = asyncio.Event()
        await scheduler.run(stop)          # returns once stop is set
    """

    def __init__(
        self,
        machine: HealthMachine,
        destination: Path,
        rng: RandomSource | None = None,
        tick_seconds: float = TICK_SECONDS,
    ) -> None:
        self.machine = machine
        self.destination = destination
        self.injector = FailureInjector(machine, rng)
        self.healer = AutoHealer(machine)
        self.tick_seconds = tick_seconds
        self.ticks = 0
        self._executor = ThreadPoolExecutor(max_workers=1)  # ticks never overlap

    def tick(self) -> TickReport:
        """Run one injection + heal sweep synchronously."""
        self.ticks += 1
        report = TickReport(tick=self.ticks)
        report.crashed = self.injector.inject(self.destination)
        report.healed = self.healer.sweep(self.destination)
        if report.crashed or report.healed:
            logger.debug(
                "Tick %d: crashed=%s healed=%s", report.tick, report.crashed, report.healed,
            )
        return report

    async def run(self, stop: asyncio.Event, max_ticks: int | None = None) -> list[TickReport]:
        """Tick until ``stop`` is set (or ``max_ticks`` ticks have run)."""
        self.machine.audit.append(self.destination, LogLevel.INFO, "Automatic mode started.")
        logger.info("Automatic mode started (tick=%.1fs)", self.tick_seconds)

        loop = asyncio.get_running_loop()
        reports: list[TickReport] = []
        try:
            while not stop.is_set() and (max_ticks is None or len(reports) < max_ticks):
                reports.append(await loop.run_in_executor(self._executor, self.tick))
                if max_ticks is not None and len(reports) >= max_ticks:
                    break
                try:
                    await asyncio.wait_for(stop.wait(), timeout=self.tick_seconds)
                except asyncio.TimeoutError:
                    pass
        finally:
            self.machine.audit.append(self.destination, LogLevel.INFO, "Exited automatic mode.")
            logger.info("Automatic mode stopped after %d ticks", len(reports))

        return reports

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)
