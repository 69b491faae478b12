"""Entry point for the self-healing kernel simulator — `selfheal` console script."""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys
from pathlib import Path

from rich.console import Console
from rich.panel import Panel

from selfheal.audit.log import AuditLogger
from selfheal.config import settings
from selfheal.console import KernelShell
from selfheal.health.machine import HealthMachine
from selfheal.health.scheduler import AutoScheduler
from selfheal.subsystems.registry import SubsystemRegistry

console = Console()
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)


def build_shell(seed: int | None = None) -> KernelShell:
    """Wire registry, audit log and state machine from settings."""
    registry = SubsystemRegistry.from_yaml(Path(settings.subsystems_file))
    audit = AuditLogger(max_bytes=settings.max_log_bytes)
    machine = HealthMachine(registry, audit)
    return KernelShell(
        machine,
        manual_log=Path(settings.manual_log_path),
        auto_log=Path(settings.auto_log_path),
        console=console,
        rng=random.Random(seed if seed is not None else settings.random_seed),
    )


def run_headless(ticks: int | None, seed: int | None) -> None:
    """Run automatic mode without operator input until N ticks or Ctrl-C."""
    shell = build_shell(seed)
    scheduler = AutoScheduler(shell.machine, shell.auto_log, shell.rng)
    console.print(Panel(f"Automatic mode → {shell.auto_log}", style="bold blue"))
    try:
        reports = asyncio.run(scheduler.run(asyncio.Event(), max_ticks=ticks))
    except KeyboardInterrupt:
        console.print("[dim]Interrupted[/dim]")
        return
    finally:
        scheduler.shutdown()

    crashes = sum(1 for r in reports if r.crashed)
    heals = sum(len(r.healed) for r in reports)
    console.print(f"\n[dim]Ticks: {len(reports)} | Crashes: {crashes} | Heals: {heals}[/dim]")
    shell.show_status()


def main() -> None:
    parser = argparse.ArgumentParser(description="Self-healing kernel simulator")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("menu", help="Interactive mode menu (default)")
    sub.add_parser("manual", help="Go straight to the manual command prompt")

    auto_parser = sub.add_parser("auto", help="Run automatic mode headless")
    auto_parser.add_argument("--ticks", type=int, default=None, help="Stop after N ticks")
    auto_parser.add_argument("--seed", type=int, default=None, help="Failure injector seed")

    args = parser.parse_args()

    if args.command == "auto":
        run_headless(args.ticks, args.seed)
    elif args.command == "manual":
        build_shell().manual_mode()
    else:
        console.print(Panel("Self-Healing Kernel Simulator", style="bold green"))
        sys.exit(build_shell().menu())


if __name__ == "__main__":
    main()
