"""Telegram delivery, command handling, and scheduling."""

from chain_balance_monitor.bot.scheduler import JobQueueScheduler
from chain_balance_monitor.bot.telegram import (
    TelegramCommands,
    TelegramNotifier,
    build_application,
    describe_user,
)

__all__ = [
    "JobQueueScheduler",
    "TelegramCommands",
    "TelegramNotifier",
    "build_application",
    "describe_user",
]
