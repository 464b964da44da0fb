"""Pytest configuration and shared doubles for chain-balance-monitor tests."""

from datetime import UTC, datetime

import pytest

from chain_balance_monitor.core.models import (
    BalanceResult,
    ChainDescriptor,
    FetchFailure,
    FetchKind,
    MonitoringState,
)
from chain_balance_monitor.core.monitor import MonitorLoop
from chain_balance_monitor.core.registry import ChainRegistry
from chain_balance_monitor.fetchers import format_amount
from chain_balance_monitor.report import PlainMarkup, ReportFormatter

WALLET = "0x1234567890abcdef1234567890abcdef12345678"
FIXED_NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=UTC)


def fixed_clock() -> datetime:
    return FIXED_NOW


class FakeFetcher:
    """Returns a canned raw balance, a failure, or raises."""

    def __init__(self, raw: int | None = None, error: Exception | None = None) -> None:
        self.raw = raw
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def fetch(self, descriptor: ChainDescriptor, address: str) -> BalanceResult | FetchFailure:
        self.calls.append((descriptor.name, address))
        if self.error is not None:
            raise self.error
        if self.raw is None:
            return FetchFailure(chain=descriptor.name, reason="simulated")
        return BalanceResult(
            symbol=descriptor.symbol,
            raw_amount=self.raw,
            formatted_amount=format_amount(self.raw, descriptor.decimals),
        )


class FakeNotifier:
    """Records delivered messages."""

    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.sent: list[tuple[int | str | None, str]] = []

    async def send(self, chat_id: int | str | None, text: str) -> bool:
        self.sent.append((chat_id, text))
        return self.succeed


class FakeScheduler:
    """In-memory scheduler; ``fire`` runs the callback like a tick would."""

    def __init__(self) -> None:
        self.started: list[tuple[object, float]] = []
        self.cancelled: list[object] = []
        self.active: dict[int, object] = {}
        self._next = 0

    def start(self, callback, interval: float) -> int:
        self._next += 1
        self.started.append((callback, interval))
        self.active[self._next] = callback
        return self._next

    def cancel(self, handle) -> None:
        if handle is None or handle not in self.active:
            return
        self.cancelled.append(handle)
        del self.active[handle]

    async def fire(self) -> int:
        """Run every live schedule once; returns how many fired."""
        callbacks = list(self.active.values())
        for callback in callbacks:
            await callback()
        return len(callbacks)


def make_descriptor(name: str, symbol: str, kind: FetchKind = FetchKind.NATIVE_RPC) -> ChainDescriptor:
    url = "https://rpc.example/v2/key" if kind == FetchKind.NATIVE_RPC else "https://explorer.example/{address}"
    return ChainDescriptor(name=name, endpoint_url=url, symbol=symbol, kind=kind)


@pytest.fixture
def descriptors() -> list[ChainDescriptor]:
    return [
        make_descriptor("ARB Sepolia", "ARB"),
        make_descriptor("Base Sepolia", "BASE"),
        make_descriptor("Unichain Sepolia", "UNI"),
        make_descriptor("Blast Sepolia", "BLAST", FetchKind.TOKEN_REST),
    ]


@pytest.fixture
def fetchers() -> dict[str, FakeFetcher]:
    return {
        "ARB Sepolia": FakeFetcher(raw=1_234_500_000_000_000_000),
        "Base Sepolia": FakeFetcher(raw=0),
        "Unichain Sepolia": FakeFetcher(raw=None),
        "Blast Sepolia": FakeFetcher(raw=2 * 10**18),
    }


@pytest.fixture
def registry(descriptors, fetchers) -> ChainRegistry:
    return ChainRegistry(descriptors, fetchers=fetchers)


@pytest.fixture
def state() -> MonitoringState:
    return MonitoringState()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def formatter() -> ReportFormatter:
    return ReportFormatter(PlainMarkup(), interval_minutes=10, clock=fixed_clock)


@pytest.fixture
def monitor(state, registry, formatter, notifier) -> MonitorLoop:
    return MonitorLoop(state, registry, WALLET, formatter, notifier)
