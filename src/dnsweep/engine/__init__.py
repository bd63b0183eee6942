"""Concurrent resolution-and-scan engine."""

from .assembler import ReportAssembler
from .coordinator import ResultFunnel, ScanCoordinator, run_scan
from .errors import ConfigError, DnsweepError, ProbeError
from .models import (
    PortSpec,
    ProbeOutcome,
    ProbeResult,
    ProbeTask,
    ResolveOutcome,
    ResolveStatus,
    ResolveTask,
    RunConfig,
    ScanReport,
    ScanRun,
    ScanStats,
    SkippedTask,
    TaskEvent,
    TaskFailure,
)
from .output import render_report, write_report
from .prober import TCPProber
from .resolver import DNSResolver
from .targets import build_targets, load_wordlist, parse_nameserver, parse_ports

__all__ = [
    "ConfigError",
    "DNSResolver",
    "DnsweepError",
    "PortSpec",
    "ProbeError",
    "ProbeOutcome",
    "ProbeResult",
    "ProbeTask",
    "ReportAssembler",
    "ResolveOutcome",
    "ResolveStatus",
    "ResolveTask",
    "ResultFunnel",
    "RunConfig",
    "ScanCoordinator",
    "ScanReport",
    "ScanRun",
    "ScanStats",
    "SkippedTask",
    "TCPProber",
    "TaskEvent",
    "TaskFailure",
    "build_targets",
    "load_wordlist",
    "parse_nameserver",
    "parse_ports",
    "render_report",
    "run_scan",
    "write_report",
]
