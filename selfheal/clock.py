"""Clock abstraction — wall-clock timestamps and blocking delays.

The state machine never calls ``time.sleep`` directly so tests can swap in a
zero-delay clock.
"""

from __future__ import annotations

import time
from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...

    def sleep(self, seconds: float) -> None: ...


class SystemClock:
    """Local wall-clock time with real blocking sleeps."""

    def now(self) -> datetime:
        return datetime.now()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)
