"""Health subsystem — state machine, failure injector, auto-healer."""

from .machine import RECOVERY_LATENCY_SECONDS, HealthMachine, Outcome
from .scheduler import AutoHealer, AutoScheduler, FailureInjector, TickReport
