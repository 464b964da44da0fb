"""Tests for the monitor loop."""

import asyncio

from chain_balance_monitor.core.models import FetchFailure
from chain_balance_monitor.core.monitor import MonitorLoop
from chain_balance_monitor.core.registry import ChainRegistry
from conftest import WALLET, FakeFetcher, FakeNotifier


async def test_collect_balances_in_registry_order(monitor, fetchers):
    results = await monitor.collect_balances()

    assert [entry.chain for entry in results] == ["ARB Sepolia", "Base Sepolia", "Unichain Sepolia", "Blast Sepolia"]
    assert [entry.ok for entry in results] == [True, True, False, True]
    assert results[0].result.formatted_amount == "1.2345"
    assert fetchers["ARB Sepolia"].calls == [("ARB Sepolia", WALLET)]


async def test_collect_named_subset_with_unknown_chain(monitor, fetchers):
    """Unknown chains are reported as failures, not dropped."""
    results = await monitor.collect_balances(["Blast Sepolia", "Polygon Amoy"])

    assert [entry.chain for entry in results] == ["Blast Sepolia", "Polygon Amoy"]
    assert results[0].ok
    assert isinstance(results[1].result, FetchFailure)
    assert fetchers["ARB Sepolia"].calls == []


async def test_run_cycle_idle_does_nothing(monitor, notifier, fetchers):
    delivered = await monitor.run_cycle()

    assert delivered is False
    assert notifier.sent == []
    assert all(fetcher.calls == [] for fetcher in fetchers.values())


async def test_full_cycle_report_with_one_failure(monitor, state, notifier):
    """Three successes and one failure give four chain lines in registry order."""
    state.active = True
    state.target_chat_id = 42

    delivered = await monitor.run_cycle()

    assert delivered is True
    assert len(notifier.sent) == 1
    chat_id, report = notifier.sent[0]
    assert chat_id == 42

    chain_lines = [line for line in report.splitlines() if line.startswith("• ")]
    assert chain_lines == [
        "• ARB Sepolia: 1.2345 ARB",
        "• Base Sepolia: 0.0000 BASE",
        "• Unichain Sepolia: Failed to fetch",
        "• Blast Sepolia: 2.0000 BLAST",
    ]


async def test_delivery_failure_is_not_an_error(state, registry, formatter):
    notifier = FakeNotifier(succeed=False)
    monitor = MonitorLoop(state, registry, WALLET, formatter, notifier)
    state.active = True

    assert await monitor.tick() is True
    assert len(notifier.sent) == 1


async def test_tick_reports_unexpected_error(state, descriptors, formatter, notifier):
    fetchers = {d.name: FakeFetcher(raw=0) for d in descriptors}
    fetchers["Base Sepolia"] = FakeFetcher(error=RuntimeError("boom"))
    monitor = MonitorLoop(state, ChainRegistry(descriptors, fetchers=fetchers), WALLET, formatter, notifier)
    state.active = True

    assert await monitor.tick() is False
    assert notifier.sent == []
    assert monitor.is_running is False


async def test_overlapping_tick_is_skipped(state, descriptors, formatter, notifier):
    """A tick arriving while a cycle is in flight does not start a second cycle."""
    release = asyncio.Event()

    class SlowFetcher(FakeFetcher):
        async def fetch(self, descriptor, address):
            await release.wait()
            return await super().fetch(descriptor, address)

    slow = SlowFetcher(raw=0)
    fetchers = {d.name: FakeFetcher(raw=0) for d in descriptors}
    fetchers["ARB Sepolia"] = slow
    monitor = MonitorLoop(state, ChainRegistry(descriptors, fetchers=fetchers), WALLET, formatter, notifier)
    state.active = True

    first = asyncio.create_task(monitor.tick())
    await asyncio.sleep(0)
    assert monitor.is_running

    assert await monitor.tick() is True
    release.set()
    assert await first is True

    assert len(slow.calls) == 1
    assert len(notifier.sent) == 1
    assert monitor.is_running is False
