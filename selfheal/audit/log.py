"""Audit log — append-only text records with size-based rotation.

Each append opens the destination, writes one line and closes it again:

    [2025-01-01 12:00:00] [WARNING] Subsystem CPU crashed.

After the write the file size is checked; once it is over the threshold the
file is moved to ``<name>.old`` (replacing the previous generation) and a new
file is started with a rotation notice. A destination that cannot be written
is dropped silently — callers only see ``AppendResult.DROPPED``.
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path

from selfheal.clock import Clock, SystemClock

logger = logging.getLogger(__name__)

MAX_LOG_BYTES = 16_384
ROTATED_SUFFIX = ".old"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class LogLevel(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    SUCCESS = "SUCCESS"


class AppendResult(str, Enum):
    WRITTEN = "written"
    ROTATED = "rotated"  # written, then the file was rotated
    DROPPED = "dropped"  # destination unwritable, record discarded


def rotated_path(destination: Path) -> Path:
    return destination.with_name(destination.name + ROTATED_SUFFIX)


class AuditLogger:
    """Writes audit records to any number of independent destinations."""

    def __init__(self, clock: Clock | None = None, max_bytes: int = MAX_LOG_BYTES) -> None:
        self._clock = clock or SystemClock()
        self.max_bytes = max_bytes

    def format_record(self, level: LogLevel, message: str) -> str:
        ts = self._clock.now().strftime(TIMESTAMP_FORMAT)
        return f"[{ts}] [{LogLevel(level).value}] {message}\n"

    def append(self, destination: Path | str, level: LogLevel, message: str) -> AppendResult:
        """Append one record, then rotate the destination if it is oversized."""
        path = Path(destination)
        line = self.format_record(level, message)
        try:
            if path.parent != Path("."):
                path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a", encoding="utf-8") as f:
                f.write(line)
        except (OSError, ValueError) as e:
            logger.debug("Dropped audit record for %s: %s", path, e)
            return AppendResult.DROPPED

        if self._rotate_if_needed(path):
            return AppendResult.ROTATED
        return AppendResult.WRITTEN

    def _rotate_if_needed(self, path: Path) -> bool:
        try:
            size = path.stat().st_size
        except OSError:
            return False
        if size <= self.max_bytes:
            return False

        old = rotated_path(path)
        try:
            os.replace(path, old)
        except OSError as e:
            logger.debug("Could not rotate %s: %s", path, e)
            return False

        notice = self.format_record(LogLevel.INFO, f"Log rotated. Old log saved as {old}")
        try:
            with path.open("w", encoding="utf-8") as f:
                f.write(notice)
        except OSError as e:
            logger.debug("Could not start new log %s: %s", path, e)

        logger.info("Rotated audit log %s (%d bytes) -> %s", path, size, old)
        return True
