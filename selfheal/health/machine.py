"""Health state machine — crash / heal / restart for a single subsystem.

States: HEALTHY (initial) → FAILED → RECOVERING → HEALTHY. RECOVERING only
exists for the duration of the simulated recovery delay.

Guards:
  crash    only when not already FAILED
  heal     only when FAILED
  restart  always (force semantics, even on a HEALTHY subsystem)

Every operation returns an ``Outcome`` instead of raising; an out-of-range id
is ``Outcome.IGNORED`` and leaves no log record.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Any

from selfheal.audit.log import AuditLogger, LogLevel
from selfheal.clock import Clock, SystemClock
from selfheal.subsystems.registry import Subsystem, SubsystemRegistry

logger = logging.getLogger(__name__)

RECOVERY_LATENCY_SECONDS = 0.4


class Outcome(str, Enum):
    APPLIED = "applied"
    NOOP = "noop"  # guard rejected the operation
    IGNORED = "ignored"  # unknown subsystem id


TransitionCallback = Callable[[int, Subsystem, str], Any]


class HealthMachine:
    """Applies health transitions to subsystems of an owned registry."""

    def __init__(
        self,
        registry: SubsystemRegistry,
        audit: AuditLogger,
        clock: Clock | None = None,
        on_transition: TransitionCallback | None = None,
    ) -> None:
        self.registry = registry
        self.audit = audit
        self.clock = clock or SystemClock()
        self.on_transition = on_transition  # operator echo, e.g. "CPU crashed."

    # -- operations ------------------------------------------------------------

    def crash(self, subsystem_id: int, destination: Path) -> Outcome:
        """Mark a subsystem FAILED. Crashing a FAILED subsystem is a no-op."""
        ss = self.registry.get(subsystem_id)
        if ss is None:
            return Outcome.IGNORED
        if ss.is_failed:
            return Outcome.NOOP

        ss.mark_failed()
        self.audit.append(destination, LogLevel.WARNING, f"Subsystem {ss.name} crashed.")
        self._notify(subsystem_id, ss, f"{ss.name} crashed.")
        return Outcome.APPLIED

    def heal(self, subsystem_id: int, destination: Path) -> Outcome:
        """Recover a FAILED subsystem; anything else is left untouched."""
        ss = self.registry.get(subsystem_id)
        if ss is None:
            return Outcome.IGNORED
        if not ss.is_failed:
            return Outcome.NOOP

        ss.mark_recovering()
        self.audit.append(destination, LogLevel.INFO, f"Healing subsystem {ss.name}...")
        self.clock.sleep(RECOVERY_LATENCY_SECONDS)
        ss.mark_healthy()
        self.audit.append(destination, LogLevel.SUCCESS, f"Subsystem {ss.name} healed successfully.")
        self._notify(subsystem_id, ss, f"{ss.name} healed successfully.")
        return Outcome.APPLIED

    def restart(self, subsystem_id: int, destination: Path) -> Outcome:
        """Restart a subsystem regardless of its current status."""
        ss = self.registry.get(subsystem_id)
        if ss is None:
            return Outcome.IGNORED

        ss.mark_recovering()
        self.audit.append(destination, LogLevel.INFO, f"Restarting subsystem {ss.name}...")
        self.clock.sleep(RECOVERY_LATENCY_SECONDS)
        ss.mark_healthy()
        ss.restart_count += 1
        self.audit.append(
            destination, LogLevel.SUCCESS, f"Subsystem {ss.name} restarted successfully.",
        )
        self._notify(subsystem_id, ss, f"{ss.name} restarted successfully.")
        return Outcome.APPLIED

    # -- internals -------------------------------------------------------------

    def _notify(self, subsystem_id: int, ss: Subsystem, message: str) -> None:
        logger.debug("Subsystem %d (%s) -> %s", subsystem_id, ss.name, ss.status.value)
        if self.on_transition:
            try:
                self.on_transition(subsystem_id, ss, message)
            except Exception:
                logger.exception("Transition callback error")
