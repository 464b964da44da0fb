"""Cancellable periodic tasks on top of the Telegram job queue."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from telegram.ext import ContextTypes, Job, JobQueue

logger = logging.getLogger(__name__)

TickCallback = Callable[[], Awaitable[Any]]


class JobQueueScheduler:
    """
    Scheduler backed by python-telegram-bot's JobQueue.

    Parameters
    ----------
    job_queue : JobQueue
        The application's job queue
    name : str
        Job name shown in job queue listings

    """

    def __init__(self, job_queue: JobQueue, name: str = "balance-monitor") -> None:
        self.job_queue = job_queue
        self.name = name

    def start(self, callback: TickCallback, interval: float) -> Job:
        async def _run(context: ContextTypes.DEFAULT_TYPE) -> None:
            await callback()

        # The first tick fires after one interval; callers run the initial cycle themselves
        job = self.job_queue.run_repeating(
            _run,
            interval=interval,
            first=interval,
            name=self.name,
            job_kwargs={"max_instances": 1, "coalesce": True},
        )
        logger.info("Scheduled %s every %.0f seconds", self.name, interval)
        return job

    def cancel(self, handle: Job | None) -> None:
        if handle is None or handle.removed:
            return
        handle.schedule_removal()
        logger.info("Cancelled %s schedule", self.name)
