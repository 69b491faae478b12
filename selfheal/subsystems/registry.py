"""Subsystem registry — the fixed, ordered set of simulated subsystems.

Identifiers are 1-based and stable for the life of the process. The registry
is an owned object handed to every operation; there is no module-level state.
Names can optionally be loaded from a YAML file shaped like::

    subsystems:
      - CPU
      - Memory
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_NAMES = ("CPU", "Memory", "I/O", "Network", "Storage")


# ── Data models ──────────────────────────────────────────────────────────────


class Status(str, Enum):
    HEALTHY = "HEALTHY"
    FAILED = "FAILED"
    RECOVERING = "RECOVERING"


@dataclass
class Subsystem:
    """A named unit whose simulated health is tracked by the registry.

    Status changes go through the ``mark_*`` helpers so that ``health`` is
    always 100 when HEALTHY and 0 otherwise.
    """

    name: str
    status: Status = Status.HEALTHY
    health: int = 100
    restart_count: int = 0

    def mark_failed(self) -> None:
        self.status = Status.FAILED
        self.health = 0

    def mark_recovering(self) -> None:
        self.status = Status.RECOVERING
        self.health = 0

    def mark_healthy(self) -> None:
        self.status = Status.HEALTHY
        self.health = 100

    @property
    def is_healthy(self) -> bool:
        return self.status == Status.HEALTHY

    @property
    def is_failed(self) -> bool:
        return self.status == Status.FAILED

    def __setattr__(self, key: str, value: Any) -> None:
        if key == "name" and "name" in self.__dict__:
            raise AttributeError("Subsystem name is read-only")
        super().__setattr__(key, value)


class RegistryError(ValueError):
    """Raised when a registry is built from an unusable name list."""


# ── Registry ─────────────────────────────────────────────────────────────────


class SubsystemRegistry:
    """Ordered, fixed-size mapping of 1-based ids to subsystems."""

    def __init__(self, names: list[str] | tuple[str, ...] = DEFAULT_NAMES) -> None:
        names = [str(n).strip() for n in names]
        if not names or not all(names):
            raise RegistryError("Registry needs at least one non-empty subsystem name")
        if len(set(names)) != len(names):
            raise RegistryError(f"Duplicate subsystem names: {names}")
        self._subsystems: tuple[Subsystem, ...] = tuple(Subsystem(name=n) for n in names)

    @classmethod
    def from_yaml(cls, path: Path) -> SubsystemRegistry:
        """Build a registry from a YAML name list, falling back to the defaults."""
        if not path.exists():
            logger.debug("Subsystem file not found: %s — using defaults", path)
            return cls()

        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
            names = raw.get("subsystems") or []
            if not isinstance(names, list):
                raise RegistryError(f"'subsystems' must be a list, got {type(names).__name__}")
            registry = cls(names)
        except Exception as e:
            logger.warning("Failed to load %s (%s) — using defaults", path, e)
            return cls()

        logger.info("Loaded %d subsystems from %s", len(registry), path)
        return registry

    def __len__(self) -> int:
        return len(self._subsystems)

    def __iter__(self) -> Iterator[Subsystem]:
        return iter(self._subsystems)

    def get(self, subsystem_id: int) -> Subsystem | None:
        """Return the subsystem for a 1-based id, or None if out of range."""
        if 1 <= subsystem_id <= len(self._subsystems):
            return self._subsystems[subsystem_id - 1]
        return None

    def items(self) -> Iterator[tuple[int, Subsystem]]:
        """Yield ``(id, subsystem)`` pairs in id order."""
        for i, ss in enumerate(self._subsystems, start=1):
            yield i, ss

    def failed_ids(self) -> list[int]:
        return [i for i, ss in self.items() if ss.is_failed]
