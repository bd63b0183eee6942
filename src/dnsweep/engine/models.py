"""Data models for the resolution-and-scan engine."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from .errors import ConfigError
from .targets import normalize_domain, parse_nameserver, parse_ports

SUPPORTED_RECORD_TYPES = ("A", "AAAA")


def _check_duration(label: str, value: object) -> None:
    """Durations must be finite positive numbers; NaN and inf are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{label} must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise ConfigError(f"{label} must be a finite number > 0, got {value!r}")


class ResolveStatus(StrEnum):
    """Classification of a single name resolution."""

    RESOLVED = "resolved"
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    TRANSIENT_ERROR = "transient_error"


class ProbeOutcome(StrEnum):
    """Classification of a single TCP probe."""

    OPEN = "open"
    CLOSED = "closed"
    FILTERED = "filtered"


@dataclass(frozen=True)
class ResolveOutcome:
    """Result of resolving one name.

    ``addresses`` is deduplicated and kept in discovery order. It is empty for
    every status other than ``RESOLVED`` (and may be empty for ``RESOLVED`` too,
    when the name exists but has no address records).
    """

    name: str
    status: ResolveStatus
    addresses: tuple[str, ...] = ()
    error: str | None = None
    attempts: int = 1


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of one (address, port) probe."""

    address: str
    port: int
    outcome: ProbeOutcome


@dataclass(frozen=True)
class PortSpec:
    """Immutable, sorted, duplicate-free set of TCP ports."""

    ports: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        for port in self.ports:
            if isinstance(port, bool) or not isinstance(port, int):
                raise ConfigError(f"Invalid port: {port!r}")
            if port < 1 or port > 65535:
                raise ConfigError(f"Invalid port: {port}")
        object.__setattr__(self, "ports", tuple(sorted(set(self.ports))))

    @classmethod
    def parse(cls, spec: str) -> PortSpec:
        """Build a PortSpec from text such as ``"22,80,8000-8100"``."""
        return cls(tuple(parse_ports(spec)))

    def __iter__(self):
        return iter(self.ports)

    def __len__(self) -> int:
        return len(self.ports)

    def __contains__(self, port: object) -> bool:
        return port in self.ports


@dataclass(frozen=True)
class RunConfig:
    """Read-only configuration for one scan run.

    Validation happens here, before the engine schedules anything; every
    problem is raised as :class:`ConfigError`.
    """

    target: str
    subdomains: tuple[str, ...] = ()
    concurrency: int = 10
    resolve_timeout: float = 1.0
    probe_timeout: float = 1.0
    ports: PortSpec | None = None
    deadline: float | None = None
    nameserver: str | None = None
    record_types: tuple[str, ...] = ("A",)
    include_filtered: bool = False
    include_closed: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "target", normalize_domain(self.target))
        object.__setattr__(self, "subdomains", tuple(self.subdomains))

        if isinstance(self.concurrency, bool) or not isinstance(self.concurrency, int):
            raise ConfigError(f"Concurrency must be an integer, got {self.concurrency!r}")
        if self.concurrency < 1:
            raise ConfigError(f"Concurrency must be >= 1, got {self.concurrency}")
        _check_duration("Resolution timeout", self.resolve_timeout)
        _check_duration("Probe timeout", self.probe_timeout)
        if self.deadline is not None:
            _check_duration("Run deadline", self.deadline)

        if self.ports is not None:
            if not isinstance(self.ports, PortSpec):
                object.__setattr__(self, "ports", PortSpec(tuple(self.ports)))
            if not self.ports:
                raise ConfigError("Port set is empty; omit ports for a DNS-only run")

        record_types = tuple(rtype.upper() for rtype in self.record_types)
        if not record_types:
            raise ConfigError("At least one record type is required")
        for rtype in record_types:
            if rtype not in SUPPORTED_RECORD_TYPES:
                raise ConfigError(f"Unsupported record type: {rtype}")
        object.__setattr__(self, "record_types", tuple(dict.fromkeys(record_types)))

        if self.nameserver is not None:
            parse_nameserver(self.nameserver)

    @property
    def probing_enabled(self) -> bool:
        return self.ports is not None

    @property
    def nameserver_address(self) -> tuple[str, int] | None:
        if self.nameserver is None:
            return None
        return parse_nameserver(self.nameserver)


@dataclass(frozen=True)
class ResolveTask:
    """Work item: resolve one name."""

    name: str


@dataclass(frozen=True)
class ProbeTask:
    """Work item: probe one port on one address."""

    address: str
    port: int


@dataclass(frozen=True)
class TaskFailure:
    """Terminal record for a task that raised instead of returning an outcome."""

    task: ResolveTask | ProbeTask
    error: str
    transient: bool = False


@dataclass(frozen=True)
class SkippedTask:
    """Terminal record for a queued task dropped after the run deadline."""

    task: ResolveTask | ProbeTask


TaskEvent = ResolveOutcome | ProbeResult | TaskFailure | SkippedTask


@dataclass(frozen=True)
class ScanReport:
    """Assembled report tree.

    The root entry carries ``subdomains``; nested entries leave it as ``None``.
    ``addresses`` holds ``(ip, ports)`` pairs where ``ports`` is ``None`` when
    probing was disabled for the run.
    """

    name: str
    addresses: tuple[tuple[str, tuple[int, ...] | None], ...] = ()
    subdomains: tuple[ScanReport, ...] | None = None

    def entries(self) -> list[ScanReport]:
        """Return the root followed by its subdomain entries."""
        return [self, *(self.subdomains or ())]

    def entry(self, name: str) -> ScanReport | None:
        for item in self.entries():
            if item.name == name:
                return item
        return None

    @property
    def ips(self) -> list[str]:
        return [ip for ip, _ in self.addresses]

    def to_dict(self) -> dict[str, Any]:
        addresses = []
        for ip, ports in self.addresses:
            item: dict[str, Any] = {"ip": ip}
            if ports is not None:
                item["ports"] = list(ports)
            addresses.append(item)

        data: dict[str, Any] = {"name": self.name, "addresses": addresses}
        if self.subdomains is not None:
            data["subdomains"] = [sub.to_dict() for sub in self.subdomains]
        return data


@dataclass
class ScanStats:
    """Run statistics; outcome counters are updated by the result consumer."""

    names: int = 0
    invalid_labels: int = 0
    issued: int = 0
    resolutions: Counter = field(default_factory=Counter)
    probes: Counter = field(default_factory=Counter)
    failures: list[TaskFailure] = field(default_factory=list)
    skipped: int = 0
    deadline_expired: bool = False
    elapsed: float = 0.0

    @property
    def completed(self) -> int:
        return (
            sum(self.resolutions.values())
            + sum(self.probes.values())
            + len(self.failures)
            + self.skipped
        )

    def record(self, event: TaskEvent) -> None:
        if isinstance(event, ResolveOutcome):
            self.resolutions[event.status] += 1
        elif isinstance(event, ProbeResult):
            self.probes[event.outcome] += 1
        elif isinstance(event, TaskFailure):
            self.failures.append(event)
        elif isinstance(event, SkippedTask):
            self.skipped += 1


@dataclass(frozen=True)
class ScanRun:
    """Everything a finished run produces."""

    config: RunConfig
    report: ScanReport
    stats: ScanStats
