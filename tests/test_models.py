"""Tests for engine data models."""

import math

import pytest

from dnsweep.engine import (
    ConfigError,
    PortSpec,
    ProbeOutcome,
    ProbeResult,
    ResolveOutcome,
    ResolveStatus,
    RunConfig,
    ScanReport,
    ScanStats,
    SkippedTask,
    TaskFailure,
)
from dnsweep.engine.models import ProbeTask, ResolveTask


class TestPortSpec:
    """Tests for the PortSpec value type."""

    def test_sorted_and_deduplicated(self):
        spec = PortSpec((443, 80, 443, 22))
        assert spec.ports == (22, 80, 443)
        assert list(spec) == [22, 80, 443]
        assert len(spec) == 3
        assert 80 in spec
        assert 8080 not in spec

    def test_parse(self):
        assert PortSpec.parse("8000-8002,80").ports == (80, 8000, 8001, 8002)

    @pytest.mark.parametrize("ports", [(0,), (65536,), ("80",), (True,)])
    def test_rejects_invalid_ports(self, ports):
        with pytest.raises(ConfigError):
            PortSpec(ports)


class TestRunConfig:
    """Tests for run configuration validation."""

    def test_defaults(self):
        config = RunConfig(target="Example.com")
        assert config.target == "example.com"
        assert config.concurrency == 10
        assert config.ports is None
        assert config.probing_enabled is False
        assert config.record_types == ("A",)
        assert config.nameserver_address is None

    def test_ports_are_coerced_to_portspec(self):
        config = RunConfig(target="example.com", ports=[443, 80])
        assert isinstance(config.ports, PortSpec)
        assert config.ports.ports == (80, 443)
        assert config.probing_enabled is True

    def test_nameserver_address(self):
        config = RunConfig(target="example.com", nameserver="1.1.1.1:5353")
        assert config.nameserver_address == ("1.1.1.1", 5353)

    def test_record_types_normalized(self):
        config = RunConfig(target="example.com", record_types=("a", "AAAA", "A"))
        assert config.record_types == ("A", "AAAA")

    @pytest.mark.parametrize(
        "overrides",
        [
            {"concurrency": 0},
            {"concurrency": 2.5},
            {"resolve_timeout": 0},
            {"probe_timeout": -1},
            {"deadline": 0},
            {"resolve_timeout": math.nan},
            {"probe_timeout": math.nan},
            {"deadline": math.nan},
            {"probe_timeout": math.inf},
            {"deadline": -math.inf},
            {"resolve_timeout": "1.0"},
            {"probe_timeout": None},
            {"deadline": True},
            {"ports": ()},
            {"ports": []},
            {"record_types": ()},
            {"record_types": ("MX",)},
            {"nameserver": "not-an-ip"},
            {"target": ""},
        ],
    )
    def test_invalid_configuration(self, overrides):
        values = {"target": "example.com", **overrides}
        with pytest.raises(ConfigError):
            RunConfig(**values)

    def test_infinite_timeout_message(self):
        with pytest.raises(ConfigError, match="Probe timeout must be a finite number"):
            RunConfig(target="example.com", probe_timeout=float("inf"))

    def test_ports_none_is_dns_only(self):
        assert RunConfig(target="example.com", ports=None).probing_enabled is False


class TestScanReport:
    """Tests for report tree serialization."""

    def test_to_dict_with_ports(self):
        report = ScanReport(
            name="example.com",
            addresses=(("5.6.7.8", ()),),
            subdomains=(ScanReport("www.example.com", (("1.2.3.4", (80,)),)),),
        )
        assert report.to_dict() == {
            "name": "example.com",
            "addresses": [{"ip": "5.6.7.8", "ports": []}],
            "subdomains": [
                {"name": "www.example.com", "addresses": [{"ip": "1.2.3.4", "ports": [80]}]}
            ],
        }

    def test_to_dict_without_probing(self):
        report = ScanReport("example.com", (("5.6.7.8", None),), subdomains=())
        assert report.to_dict() == {
            "name": "example.com",
            "addresses": [{"ip": "5.6.7.8"}],
            "subdomains": [],
        }

    def test_entry_lookup(self):
        www = ScanReport("www.example.com")
        report = ScanReport("example.com", subdomains=(www,))
        assert report.entry("www.example.com") is www
        assert report.entry("example.com") is report
        assert report.entry("ftp.example.com") is None
        assert [e.name for e in report.entries()] == ["example.com", "www.example.com"]


class TestScanStats:
    """Tests for run statistics bookkeeping."""

    def test_record_counts_each_event_kind(self):
        stats = ScanStats(issued=5)
        stats.record(ResolveOutcome("example.com", ResolveStatus.RESOLVED, ("1.2.3.4",)))
        stats.record(ResolveOutcome("www.example.com", ResolveStatus.NOT_FOUND))
        stats.record(ProbeResult("1.2.3.4", 80, ProbeOutcome.OPEN))
        stats.record(TaskFailure(ProbeTask("1.2.3.4", 81), "boom", transient=True))
        stats.record(SkippedTask(ResolveTask("mail.example.com")))

        assert stats.resolutions[ResolveStatus.RESOLVED] == 1
        assert stats.resolutions[ResolveStatus.NOT_FOUND] == 1
        assert stats.probes[ProbeOutcome.OPEN] == 1
        assert len(stats.failures) == 1
        assert stats.skipped == 1
        assert stats.completed == stats.issued

    def test_enum_values_serialize_as_strings(self):
        assert str(ResolveStatus.TRANSIENT_ERROR) == "transient_error"
        assert ProbeOutcome.FILTERED == "filtered"
