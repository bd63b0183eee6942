"""Bounded two-level fan-out: names to addresses to ports."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Protocol

from .assembler import ReportAssembler
from .errors import ProbeError
from .models import (
    ProbeOutcome,
    ProbeResult,
    ProbeTask,
    ResolveOutcome,
    ResolveTask,
    RunConfig,
    ScanRun,
    ScanStats,
    SkippedTask,
    TaskEvent,
    TaskFailure,
)
from .targets import build_targets

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ScanStats, TaskEvent], None]

_CLOSED = object()


class Resolver(Protocol):
    async def resolve(self, name: str, timeout: float) -> ResolveOutcome: ...


class Prober(Protocol):
    async def probe(self, address: str, port: int, timeout: float) -> ProbeOutcome: ...


class ResultFunnel:
    """Bounded channel from many workers to the single result consumer."""

    def __init__(self, maxsize: int):
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)

    async def put(self, event: TaskEvent) -> None:
        await self._queue.put(event)

    async def close(self) -> None:
        await self._queue.put(_CLOSED)

    def __aiter__(self):
        return self

    async def __anext__(self) -> TaskEvent:
        item = await self._queue.get()
        if item is _CLOSED:
            raise StopAsyncIteration
        return item


class ScanCoordinator:
    """Run resolution and probe tasks on one fixed pool of workers.

    Both task kinds share a single FIFO ready queue, so the concurrency ceiling
    covers the whole run rather than each phase. A finished resolution pushes
    its probe tasks back onto the same queue. Every task yields exactly one
    event (outcome, failure or skip) into the result funnel.
    """

    def __init__(
        self,
        config: RunConfig,
        resolver: Resolver,
        prober: Prober,
        *,
        on_progress: ProgressCallback | None = None,
    ):
        self.config = config
        self.resolver = resolver
        self.prober = prober
        self.on_progress = on_progress
        self._work: asyncio.Queue = asyncio.Queue()
        self._expired = asyncio.Event()
        self._probed: set[str] = set()
        self._stats = ScanStats()

    async def run(self) -> ScanRun:
        if self._stats.issued:
            raise RuntimeError("ScanCoordinator instances run only once")
        config = self.config
        rejected: list[str] = []
        names = build_targets(config.target, config.subdomains, rejected=rejected)
        assembler = ReportAssembler.from_config(names, config)
        stats = self._stats
        stats.names = len(names)
        stats.invalid_labels = len(rejected)
        funnel = ResultFunnel(maxsize=config.concurrency * 4)

        logger.info(
            "Scanning %s: %d names, %d ports, concurrency %d",
            config.target,
            len(names),
            len(config.ports) if config.ports is not None else 0,
            config.concurrency,
        )

        for name in names:
            self._enqueue(ResolveTask(name))

        started = time.perf_counter()
        collector = asyncio.create_task(self._collect(funnel, assembler))
        workers = [
            asyncio.create_task(self._worker(funnel)) for _ in range(config.concurrency)
        ]
        deadline = None
        if config.deadline is not None:
            deadline = asyncio.get_running_loop().call_later(config.deadline, self._expire)

        try:
            await self._work.join()
            await funnel.close()
            await collector
        finally:
            if deadline is not None:
                deadline.cancel()
            for worker in workers:
                worker.cancel()
            collector.cancel()
            await asyncio.gather(*workers, collector, return_exceptions=True)

        stats.elapsed = time.perf_counter() - started
        stats.deadline_expired = self._expired.is_set()
        logger.info(
            "Scan of %s finished in %.2fs: %d tasks, %d failed, %d skipped",
            config.target,
            stats.elapsed,
            stats.issued,
            len(stats.failures),
            stats.skipped,
        )
        return ScanRun(config=config, report=assembler.build(), stats=stats)

    def _enqueue(self, task: ResolveTask | ProbeTask) -> None:
        self._work.put_nowait(task)
        self._stats.issued += 1

    def _expire(self) -> None:
        logger.info(
            "Run deadline of %ss reached; no further tasks will start", self.config.deadline
        )
        self._expired.set()

    async def _worker(self, funnel: ResultFunnel) -> None:
        while True:
            task = await self._work.get()
            try:
                if self._expired.is_set():
                    event: TaskEvent = SkippedTask(task)
                else:
                    try:
                        event = await self._execute(task)
                    except Exception as exc:
                        logger.warning("Task %s failed: %s", task, exc)
                        event = TaskFailure(
                            task=task,
                            error=str(exc) or type(exc).__name__,
                            transient=isinstance(exc, ProbeError),
                        )
                await funnel.put(event)
            finally:
                self._work.task_done()

    async def _execute(self, task: ResolveTask | ProbeTask) -> TaskEvent:
        if isinstance(task, ProbeTask):
            outcome = await self.prober.probe(task.address, task.port, self.config.probe_timeout)
            return ProbeResult(task.address, task.port, outcome)

        result = await self.resolver.resolve(task.name, self.config.resolve_timeout)
        if self.config.ports is not None and not self._expired.is_set():
            for address in result.addresses:
                # Probe each address once even when several names share it.
                if address in self._probed:
                    continue
                self._probed.add(address)
                for port in self.config.ports:
                    self._enqueue(ProbeTask(address, port))
        return result

    async def _collect(self, funnel: ResultFunnel, assembler: ReportAssembler) -> None:
        async for event in funnel:
            self._stats.record(event)
            assembler.add(event)
            if self.on_progress is not None:
                try:
                    self.on_progress(self._stats, event)
                except Exception:
                    logger.warning("Progress callback failed", exc_info=True)


async def run_scan(
    config: RunConfig,
    resolver: Resolver,
    prober: Prober,
    *,
    on_progress: ProgressCallback | None = None,
) -> ScanRun:
    """Run one scan with the given collaborators and return its report."""
    coordinator = ScanCoordinator(config, resolver, prober, on_progress=on_progress)
    return await coordinator.run()
