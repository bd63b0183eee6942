"""Test configuration and fixtures for dnsweep."""

import asyncio
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from dnsweep.config import ENV_KEYS
from dnsweep.engine import ProbeOutcome, ResolveOutcome, ResolveStatus


class ConcurrencyGauge:
    """Counts tasks running at the same time."""

    def __init__(self):
        self.active = 0
        self.max_active = 0

    def enter(self) -> None:
        self.active += 1
        self.max_active = max(self.max_active, self.active)

    def exit(self) -> None:
        self.active -= 1


class FakeResolver:
    """Resolver returning canned answers.

    ``answers`` maps a name to a list of addresses, a ResolveStatus, or an
    exception instance to raise. Unknown names are NOT_FOUND.
    """

    def __init__(
        self,
        answers: dict,
        delays: dict[str, float] | None = None,
        gauge: ConcurrencyGauge | None = None,
    ):
        self.answers = answers
        self.delays = delays or {}
        self.gauge = gauge
        self.calls: list[str] = []

    async def resolve(self, name: str, timeout: float) -> ResolveOutcome:
        self.calls.append(name)
        if self.gauge:
            self.gauge.enter()
        try:
            await asyncio.sleep(self.delays.get(name, 0))
        finally:
            if self.gauge:
                self.gauge.exit()
        value = self.answers.get(name, ResolveStatus.NOT_FOUND)
        if isinstance(value, Exception):
            raise value
        if isinstance(value, ResolveStatus):
            return ResolveOutcome(name, value)
        return ResolveOutcome(name, ResolveStatus.RESOLVED, tuple(value))


class FakeProber:
    """Prober returning canned outcomes keyed by (address, port)."""

    def __init__(
        self,
        outcomes: dict | None = None,
        default: ProbeOutcome = ProbeOutcome.CLOSED,
        delays: dict[tuple[str, int], float] | None = None,
        gauge: ConcurrencyGauge | None = None,
    ):
        self.outcomes = outcomes or {}
        self.default = default
        self.delays = delays or {}
        self.gauge = gauge
        self.calls: list[tuple[str, int]] = []

    async def probe(self, address: str, port: int, timeout: float) -> ProbeOutcome:
        self.calls.append((address, port))
        if self.gauge:
            self.gauge.enter()
        try:
            await asyncio.sleep(self.delays.get((address, port), 0))
        finally:
            if self.gauge:
                self.gauge.exit()
        value = self.outcomes.get((address, port), self.default)
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Keep tests away from the real ~/.dnsweep and DNSWEEP_* variables."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    return home


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def gauge() -> ConcurrencyGauge:
    return ConcurrencyGauge()


@pytest.fixture
def make_resolver() -> Callable[..., FakeResolver]:
    return FakeResolver


@pytest.fixture
def make_prober() -> Callable[..., FakeProber]:
    return FakeProber


@pytest.fixture
def scenario_resolver() -> FakeResolver:
    """example.com -> 5.6.7.8, www -> 1.2.3.4, mail does not resolve."""
    return FakeResolver(
        {
            "example.com": ["5.6.7.8"],
            "www.example.com": ["1.2.3.4"],
            "mail.example.com": ResolveStatus.NOT_FOUND,
        }
    )


@pytest.fixture
def scenario_prober() -> FakeProber:
    """1.2.3.4: 80 open, 443 filtered; everything else closed."""
    return FakeProber(
        {
            ("1.2.3.4", 80): ProbeOutcome.OPEN,
            ("1.2.3.4", 443): ProbeOutcome.FILTERED,
            ("5.6.7.8", 80): ProbeOutcome.CLOSED,
        }
    )
