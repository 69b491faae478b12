"""Operator console — mode menu, manual command REPL, automatic-mode watcher.

Manual commands:
    status | crash <id> | heal <id> | restart <id> | help | exit

Automatic mode ticks in the background while a separate task waits for the
operator to type ``exit``.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from selfheal.audit.log import LogLevel
from selfheal.health.machine import HealthMachine, Outcome
from selfheal.health.scheduler import TICK_SECONDS, AutoScheduler, RandomSource, TickReport
from selfheal.subsystems.registry import Status, Subsystem

logger = logging.getLogger(__name__)

HELP_TEXT = "Commands: status | crash <id> | heal <id> | restart <id> | exit"

STATUS_STYLES = {
    Status.HEALTHY: "green",
    Status.FAILED: "bold red",
    Status.RECOVERING: "yellow",
}

Reader = Callable[[str], str]


class KernelShell:
    """Command surface over a HealthMachine.

    ``reader`` takes a prompt and returns one line of input, raising
    ``EOFError`` when input is exhausted (same contract as ``input``).
    """

    def __init__(
        self,
        machine: HealthMachine,
        manual_log: Path,
        auto_log: Path,
        console: Console | None = None,
        reader: Reader | None = None,
        rng: RandomSource | None = None,
        tick_seconds: float = TICK_SECONDS,
    ) -> None:
        self.machine = machine
        self.manual_log = Path(manual_log)
        self.auto_log = Path(auto_log)
        self.console = console or Console()
        self._read = reader or self.console.input
        self.rng = rng or random.Random()
        self.tick_seconds = tick_seconds
        if machine.on_transition is None:
            machine.on_transition = self._echo

    # -- entry points ----------------------------------------------------------

    def show_status(self) -> None:
        table = Table(title="Subsystem Status")
        table.add_column("ID", justify="right")
        table.add_column("Name")
        table.add_column("Status")
        table.add_column("Health", justify="right")
        table.add_column("Restarts", justify="right")
        for subsystem_id, ss in self.machine.registry.items():
            table.add_row(
                str(subsystem_id),
                escape(ss.name),
                f"[{STATUS_STYLES[ss.status]}]{ss.status.value}[/]",
                f"{ss.health}%",
                str(ss.restart_count),
            )
        self.console.print(table)

    def crash(self, subsystem_id: int) -> Outcome:
        return self.machine.crash(subsystem_id, self.manual_log)

    def heal(self, subsystem_id: int) -> Outcome:
        return self.machine.heal(subsystem_id, self.manual_log)

    def restart(self, subsystem_id: int) -> Outcome:
        return self.machine.restart(subsystem_id, self.manual_log)

    # -- manual mode -----------------------------------------------------------

    def handle(self, command: str) -> bool:
        """Execute one manual command. Returns False when the REPL should exit."""
        command = command.strip()
        parts = command.split()
        ops = {"crash": self.crash, "heal": self.heal, "restart": self.restart}

        if command == "status":
            self.show_status()
        elif len(parts) == 2 and parts[0] in ops:
            try:
                subsystem_id = int(parts[1])
            except ValueError:
                self.console.print(f"Invalid subsystem id: {parts[1]}", markup=False)
                return True
            ops[parts[0]](subsystem_id)
        elif command == "exit":
            self.machine.audit.append(self.manual_log, LogLevel.INFO, "Exited manual mode.")
            return False
        elif command == "help":
            self.console.print(HELP_TEXT, markup=False)
        else:
            self.console.print("Unknown command. Type 'help'.")
        return True

    def manual_mode(self) -> None:
        self.machine.audit.append(self.manual_log, LogLevel.INFO, "Manual mode started.")
        while True:
            try:
                command = self._read("kernel(manual)> ")
            except EOFError:
                return
            if not self.handle(command):
                return

    # -- automatic mode --------------------------------------------------------

    def automatic_mode(self) -> list[TickReport]:
        self.console.print("Automatic mode running... type 'exit' to return.")
        return asyncio.run(self._run_automatic())

    async def _run_automatic(self) -> list[TickReport]:
        stop = asyncio.Event()
        scheduler = AutoScheduler(self.machine, self.auto_log, self.rng, self.tick_seconds)
        input_pool = ThreadPoolExecutor(max_workers=1)
        watcher = asyncio.create_task(self._watch_for_exit(stop, input_pool))
        try:
            return await scheduler.run(stop)
        finally:
            watcher.cancel()
            scheduler.shutdown()
            # A pending read cannot be interrupted; leave it behind
            input_pool.shutdown(wait=False)

    async def _watch_for_exit(self, stop: asyncio.Event, pool: ThreadPoolExecutor) -> None:
        loop = asyncio.get_running_loop()
        while not stop.is_set():
            try:
                line = await loop.run_in_executor(pool, self._read, "(auto)> ")
            except EOFError:
                stop.set()
                return
            if line.strip() == "exit":
                stop.set()
                return

    # -- mode menu -------------------------------------------------------------

    def menu(self) -> int:
        """Top-level mode loop. Returns the process exit status."""
        while True:
            self.console.print("\nSelect Mode:\n  1. Manual\n  2. Automatic\n  3. Exit")
            try:
                raw = self._read("Choice: ")
            except EOFError:
                raw = ""

            try:
                choice = int(raw.strip())
            except ValueError:
                # Non-numeric selection ends the program
                self.console.print("Invalid input.")
                return 1

            if choice == 1:
                self.manual_mode()
            elif choice == 2:
                self.automatic_mode()
            elif choice == 3:
                self.console.print("Exiting kernel simulator.")
                return 0
            else:
                self.console.print("Invalid choice.")

    # -- internals -------------------------------------------------------------

    def _echo(self, subsystem_id: int, ss: Subsystem, message: str) -> None:
        self.console.print(message, style=STATUS_STYLES[ss.status], markup=False)
