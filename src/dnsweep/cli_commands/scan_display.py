"""Live progress panel and summary table for scans."""

import asyncio
import time
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from typing import Any

from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from dnsweep.engine import (
    ProbeOutcome,
    ProbeResult,
    ResolveOutcome,
    ResolveStatus,
    ScanRun,
    ScanStats,
)


@dataclass
class ScanProgressState:
    """Tracks task counts and discoveries for the live display."""

    completed: int = 0
    issued: int = 0
    resolved_names: int = 0
    open_ports: int = 0
    started: float = field(default_factory=time.perf_counter)
    complete: bool = False

    @property
    def elapsed(self) -> float:
        return time.perf_counter() - self.started

    def update(self, stats: ScanStats, event: Any) -> None:
        self.completed = stats.completed
        self.issued = stats.issued
        if isinstance(event, ResolveOutcome) and event.addresses:
            self.resolved_names += 1
        elif isinstance(event, ProbeResult) and event.outcome == ProbeOutcome.OPEN:
            self.open_ports += 1


def create_scan_panel(state: ScanProgressState, target: str) -> Panel:
    """Build a Rich Panel showing scan progress."""
    if state.complete:
        status = Text("✓ Complete", style="green")
    else:
        status = Text("● Scanning", style="cyan")

    content = Text()
    content.append_text(status)
    content.append(
        f"    ⏱ {state.elapsed:.1f}s    {state.completed}/{state.issued} tasks",
        style="dim",
    )
    content.append("\n")
    content.append(
        f"{state.resolved_names} names resolved, {state.open_ports} open ports",
        style="green",
    )

    return Panel(
        content,
        title="[bold cyan]dnsweep[/]",
        subtitle=f"[dim]{target}[/]",
        border_style="cyan",
        padding=(0, 1),
    )


async def run_scan_with_live_display(
    scan_coro_factory: Callable[..., Coroutine[Any, Any, ScanRun]],
    target: str,
    console: Any,
) -> ScanRun:
    """Run a scan coroutine with a Rich Live progress panel.

    Args:
        scan_coro_factory: callable(**kwargs) returning the scan coroutine.
            Receives an ``on_progress=callback`` kwarg.
        target: scan target for the panel subtitle.
        console: Rich Console instance.
    """
    state = ScanProgressState()

    with Live(create_scan_panel(state, target), console=console, refresh_per_second=4) as live:
        scan_task = asyncio.ensure_future(scan_coro_factory(on_progress=state.update))
        while not scan_task.done():
            await asyncio.wait({scan_task}, timeout=0.25)
            live.update(create_scan_panel(state, target))

        state.complete = True
        live.update(create_scan_panel(state, target))

    return scan_task.result()


def create_summary_table(run: ScanRun) -> Table:
    """Summarize a finished run: per-name addresses and visible ports, then totals."""
    table = Table(title=f"Exposure of {run.report.name}", show_lines=False)
    table.add_column("Name", style="cyan")
    table.add_column("Address", style="bold white")
    table.add_column("Ports", style="green")

    for entry in run.report.entries():
        if not entry.addresses:
            table.add_row(entry.name, "[dim]—[/]", "")
            continue
        for idx, (ip, ports) in enumerate(entry.addresses):
            if ports is None:
                port_text = ""
            else:
                port_text = ", ".join(str(p) for p in ports) or "[dim]none[/]"
            table.add_row(entry.name if idx == 0 else "", ip, port_text)

    return table


def format_stats(stats: ScanStats) -> str:
    """One-line run statistics for the console."""
    resolved = stats.resolutions.get(ResolveStatus.RESOLVED, 0)
    parts = [
        f"{stats.names} names",
        f"{resolved} resolved",
        f"{stats.probes.get(ProbeOutcome.OPEN, 0)} open",
        f"{stats.probes.get(ProbeOutcome.FILTERED, 0)} filtered",
        f"{stats.probes.get(ProbeOutcome.CLOSED, 0)} closed",
        f"{len(stats.failures)} failed",
        f"{stats.elapsed:.2f}s",
    ]
    if stats.skipped:
        parts.append(f"{stats.skipped} skipped")
    if stats.invalid_labels:
        parts.append(f"{stats.invalid_labels} invalid labels ignored")
    return " | ".join(parts)
