"""Command controller: the start/stop/status state machine."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta
from typing import Any, Protocol

from chain_balance_monitor.core.models import MonitoringState
from chain_balance_monitor.core.monitor import MonitorLoop
from chain_balance_monitor.report.formatter import format_interval, utc_now
from chain_balance_monitor.report.markup import Markup

logger = logging.getLogger(__name__)

STATUS_TIME_FORMAT = "%H:%M:%S UTC"


class Scheduler(Protocol):
    """Starts a recurring callback and cancels it by handle."""

    def start(self, callback: Callable[[], Awaitable[Any]], interval: float) -> Any:
        """Schedule ``callback`` every ``interval`` seconds; return a handle."""
        ...

    def cancel(self, handle: Any) -> None:
        """Cancel a schedule. Must be safe to call with None or twice."""
        ...


class CommandController:
    """
    Owns MonitoringState and the recurring schedule.

    Idle -> Running on ``start``; Running -> Idle on ``stop`` or when a tick
    fails (fail-safe stop). Each command returns the reply text for the chat
    that issued it.

    Parameters
    ----------
    state : MonitoringState
        Shared monitoring state (this controller is its only writer)
    monitor : MonitorLoop
        Poll cycle runner
    scheduler : Scheduler
        Recurring task backend
    wallet_address : str
        Monitored address, shown in confirmations
    markup : Markup
        Reply styling
    interval_minutes : int
        Poll interval
    clock : Callable[[], datetime]
        Time source for status estimates

    """

    def __init__(
        self,
        state: MonitoringState,
        monitor: MonitorLoop,
        scheduler: Scheduler,
        wallet_address: str,
        markup: Markup,
        interval_minutes: int = 10,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.state = state
        self.monitor = monitor
        self.scheduler = scheduler
        self.wallet_address = wallet_address
        self.markup = markup
        self.interval_minutes = interval_minutes
        self.clock = clock
        self._background: set[asyncio.Task] = set()
        self._session = 0

    @property
    def interval(self) -> timedelta:
        """Poll interval."""
        return timedelta(minutes=self.interval_minutes)

    async def start(self, chat_id: int | str, issuer: str) -> str:
        """
        Handle the start command.

        Parameters
        ----------
        chat_id : int | str
            Chat that issued the command; becomes the report destination
        issuer : str
            Display name of the issuing user

        Returns
        -------
        str
            Reply for the issuing chat

        """
        m = self.markup
        if self.state.active:
            return "⚠️ Monitoring is already active! Use /stop first."

        self._session += 1
        self.state.target_chat_id = chat_id
        self.state.active = True
        self.state.started_at = self.clock()
        self.state.schedule_handle = self.scheduler.start(self._run_tick, self.interval.total_seconds())

        # First report goes out now rather than after one full interval
        task = asyncio.create_task(self._run_tick())
        self._background.add(task)
        task.add_done_callback(self._background.discard)

        logger.info("Monitoring started by %s", issuer)
        return (
            f"✅ {m.bold('Monitoring Activated!')}\n\n"
            f"📍 Address: {m.code(m.escape(self.wallet_address))}\n"
            f"⏱ Interval: {format_interval(self.interval_minutes)}\n"
            f"👤 Started By: {m.escape(issuer)}"
        )

    async def stop(self, issuer: str) -> str:
        """Handle the stop command."""
        m = self.markup
        if not self.state.active:
            return "ℹ️ No active monitoring."

        self._deactivate()
        logger.info("Monitoring stopped by %s", issuer)
        return (
            f"🛑 {m.bold('Monitoring Stopped')}\n\n"
            f"📍 Address: {m.code(m.escape(self.wallet_address))}\n"
            f"👤 Stopped By: {m.escape(issuer)}"
        )

    async def status(self) -> str:
        """Handle the status command. Read-only."""
        m = self.markup
        next_update = self.next_update_time()
        if next_update is None:
            return f"🔴 {m.bold('Balance monitor is currently inactive')}\nUse /start to begin monitoring"
        return (
            f"🟢 {m.bold('Balance monitor is actively monitoring')}\n"
            f"Next update at {next_update.strftime(STATUS_TIME_FORMAT)}"
        )

    def next_update_time(self) -> datetime | None:
        """
        Estimated next report time.

        This is now + interval, not the scheduler's real countdown.

        Returns
        -------
        datetime | None
            Estimate, or None when monitoring is idle

        """
        if not self.state.active:
            return None
        return self.clock() + self.interval

    def fail_safe(self, reason: str) -> None:
        """Stop monitoring after a failed cycle so it cannot stay silently broken."""
        if not self.state.active and self.state.schedule_handle is None:
            return
        logger.error("Fail-safe stop engaged: %s", reason)
        self._deactivate()

    async def wait_for_background(self) -> None:
        """Wait for out-of-band cycles started by ``start`` to finish."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel the schedule and any out-of-band cycle."""
        if self.state.active:
            self._deactivate()
        for task in list(self._background):
            task.cancel()
        await self.wait_for_background()

    async def _run_tick(self) -> None:
        session = self._session
        ok = await self.monitor.tick()
        # A cycle outliving its session must not stop the one started after it
        if not ok and session == self._session:
            self.fail_safe("poll cycle raised an unexpected error")

    def _deactivate(self) -> None:
        handle = self.state.schedule_handle
        self.state.active = False
        self.state.schedule_handle = None
        self.scheduler.cancel(handle)
