"""Fan-in of task results into the ordered report tree."""

from __future__ import annotations

import ipaddress
from collections.abc import Sequence

from .models import (
    ProbeOutcome,
    ProbeResult,
    ResolveOutcome,
    RunConfig,
    ScanReport,
    TaskEvent,
)


def _address_key(ip: str) -> tuple[int, int, str]:
    """Sort IPv4 before IPv6, numerically within each family."""
    try:
        parsed = ipaddress.ip_address(ip)
    except ValueError:
        return (99, 0, ip)
    return (parsed.version, int(parsed), ip)


class ReportAssembler:
    """Collect resolutions and probe results in any order, then build the tree.

    Names keep their enumeration order (root first). Addresses under a name are
    sorted numerically and ports ascending, so the output only depends on the
    outcomes received, never on their arrival order. Probe results are grouped
    by address value: a name that shares an address with another name reports
    the same ports.
    """

    def __init__(
        self,
        names: Sequence[str],
        *,
        probing: bool,
        include_filtered: bool = False,
        include_closed: bool = False,
    ):
        if not names:
            raise ValueError("At least the root name is required")
        self.names = list(names)
        self.probing = probing
        visible = {ProbeOutcome.OPEN}
        if include_filtered:
            visible.add(ProbeOutcome.FILTERED)
        if include_closed:
            visible.add(ProbeOutcome.CLOSED)
        self.visible = frozenset(visible)
        self._addresses: dict[str, tuple[str, ...]] = {}
        self._ports: dict[str, dict[int, ProbeOutcome]] = {}

    @classmethod
    def from_config(cls, names: Sequence[str], config: RunConfig) -> ReportAssembler:
        return cls(
            names,
            probing=config.probing_enabled,
            include_filtered=config.include_filtered,
            include_closed=config.include_closed,
        )

    def add(self, event: TaskEvent) -> None:
        """Record one task result; failures and skips carry no report data."""
        if isinstance(event, ResolveOutcome):
            self._addresses[event.name] = event.addresses
        elif isinstance(event, ProbeResult):
            self._ports.setdefault(event.address, {})[event.port] = event.outcome

    def _entry(self, name: str, *, root: bool) -> ScanReport:
        addresses = []
        for ip in sorted(set(self._addresses.get(name, ())), key=_address_key):
            ports = None
            if self.probing:
                results = self._ports.get(ip, {})
                ports = tuple(
                    port for port in sorted(results) if results[port] in self.visible
                )
            addresses.append((ip, ports))
        return ScanReport(
            name=name,
            addresses=tuple(addresses),
            subdomains=() if root else None,
        )

    def build(self) -> ScanReport:
        root = self._entry(self.names[0], root=True)
        subdomains = tuple(self._entry(name, root=False) for name in self.names[1:])
        return ScanReport(name=root.name, addresses=root.addresses, subdomains=subdomains)
