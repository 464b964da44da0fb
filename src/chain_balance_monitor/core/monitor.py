"""Balance monitor loop: one poll cycle per scheduled tick."""

import logging
from typing import Protocol

from chain_balance_monitor.core.models import ChainBalance, FetchFailure, MonitoringState
from chain_balance_monitor.core.registry import ChainRegistry
from chain_balance_monitor.report.formatter import ReportFormatter

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Delivers a rendered message to a chat."""

    async def send(self, chat_id: int | str | None, text: str) -> bool:
        """Send ``text``; return False instead of raising when delivery fails."""
        ...


class MonitorLoop:
    """
    Fetches every chain balance and delivers one report per cycle.

    The loop only reads MonitoringState. A tick never raises: an unexpected
    error is logged and reported back as ``False`` so the owner of the state
    can stop monitoring.

    Parameters
    ----------
    state : MonitoringState
        Shared monitoring state
    registry : ChainRegistry
        Chains to poll, in report order
    wallet_address : str
        Monitored address
    formatter : ReportFormatter
        Report renderer
    notifier : Notifier
        Report delivery

    """

    def __init__(
        self,
        state: MonitoringState,
        registry: ChainRegistry,
        wallet_address: str,
        formatter: ReportFormatter,
        notifier: Notifier,
    ) -> None:
        self.state = state
        self.registry = registry
        self.wallet_address = wallet_address
        self.formatter = formatter
        self.notifier = notifier
        self._in_flight = False

    @property
    def is_running(self) -> bool:
        """Whether a cycle is currently in flight."""
        return self._in_flight

    async def collect_balances(self, names: list[str] | None = None) -> list[ChainBalance]:
        """
        Fetch balances sequentially.

        Parameters
        ----------
        names : list[str] | None
            Chains to fetch in this order; every registry chain when None

        Returns
        -------
        list[ChainBalance]
            One entry per requested chain, failures included

        """
        results = []
        for name in self.registry.names() if names is None else names:
            descriptor = self.registry.lookup(name)
            fetcher = self.registry.fetcher_for(name)
            if descriptor is None or fetcher is None:
                logger.error("Unknown chain: %s", name)
                results.append(ChainBalance(chain=name, result=FetchFailure(chain=name, reason="unknown chain")))
                continue

            result = await fetcher.fetch(descriptor, self.wallet_address)
            results.append(ChainBalance(chain=name, result=result))
        return results

    async def run_cycle(self) -> bool:
        """
        Run one poll cycle if monitoring is active.

        Returns
        -------
        bool
            True if a report was delivered

        """
        if not self.state.active:
            return False

        logger.info("Starting balance monitoring")
        results = await self.collect_balances()
        report = self.formatter.format(self.wallet_address, results)

        delivered = await self.notifier.send(self.state.target_chat_id, report)
        if delivered:
            logger.info("Balance updates sent")
        else:
            logger.warning("Balance report was not delivered")
        return delivered

    async def tick(self) -> bool:
        """
        Scheduled entry point.

        Returns
        -------
        bool
            False if the cycle failed unexpectedly, True otherwise
            (including a tick skipped because a cycle is still in flight)

        """
        if self._in_flight:
            logger.warning("Previous poll cycle still running; skipping this tick")
            return True

        self._in_flight = True
        try:
            await self.run_cycle()
        except Exception:
            logger.exception("Monitoring Error")
            return False
        finally:
            self._in_flight = False
        return True
