"""Tests for the Telegram adapter and job queue scheduler."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram import User
from telegram.constants import ParseMode
from telegram.error import TelegramError

from chain_balance_monitor.bot import JobQueueScheduler, TelegramCommands, TelegramNotifier, describe_user
from chain_balance_monitor.bot.telegram import startup_banner


def make_bot(error: Exception | None = None) -> MagicMock:
    bot = MagicMock()
    bot.send_message = AsyncMock(side_effect=error)
    return bot


def make_update(chat_id: int = 99, user: User | None = None) -> MagicMock:
    update = MagicMock()
    update.effective_chat.id = chat_id
    update.effective_user = user
    update.effective_message.reply_text = AsyncMock()
    return update


async def test_notifier_sends_html():
    bot = make_bot()

    assert await TelegramNotifier(bot).send(42, "<b>hi</b>") is True
    bot.send_message.assert_awaited_once_with(chat_id=42, text="<b>hi</b>", parse_mode=ParseMode.HTML)


async def test_notifier_without_bot_is_noop():
    assert await TelegramNotifier(None).send(42, "hi") is False


async def test_notifier_without_chat():
    bot = make_bot()

    assert await TelegramNotifier(bot).send(None, "hi") is False
    bot.send_message.assert_not_awaited()


async def test_notifier_swallows_telegram_errors():
    bot = make_bot(TelegramError("chat not found"))

    assert await TelegramNotifier(bot).send(42, "hi") is False


def test_describe_user():
    assert describe_user(User(id=1, first_name="Ada", is_bot=False, username="ada")) == "@ada"
    assert describe_user(User(id=1, first_name="Ada", last_name="Lovelace", is_bot=False)) == "Ada Lovelace"
    assert describe_user(None) == "unknown user"


def test_startup_banner():
    banner = startup_banner(4)

    assert banner.startswith("MULTI-CHAIN BALANCE MONITOR")
    assert "4 chains supported" in banner


def test_scheduler_runs_repeating_job():
    job_queue = MagicMock()
    scheduler = JobQueueScheduler(job_queue)

    handle = scheduler.start(AsyncMock(), 600)

    assert handle is job_queue.run_repeating.return_value
    kwargs = job_queue.run_repeating.call_args.kwargs
    assert kwargs["interval"] == 600
    assert kwargs["first"] == 600
    assert kwargs["name"] == "balance-monitor"
    assert kwargs["job_kwargs"] == {"max_instances": 1, "coalesce": True}


async def test_scheduled_job_invokes_callback():
    job_queue = MagicMock()
    callback = AsyncMock()
    JobQueueScheduler(job_queue).start(callback, 60)

    job_callback = job_queue.run_repeating.call_args.args[0]
    await job_callback(MagicMock())

    callback.assert_awaited_once_with()


def test_scheduler_cancel_is_idempotent():
    scheduler = JobQueueScheduler(MagicMock())
    job = MagicMock()
    job.removed = False

    scheduler.cancel(job)
    job.removed = True
    scheduler.cancel(job)
    scheduler.cancel(None)

    job.schedule_removal.assert_called_once_with()


@pytest.fixture
def controller() -> MagicMock:
    controller = MagicMock()
    controller.start = AsyncMock(return_value="started")
    controller.stop = AsyncMock(return_value="stopped")
    controller.status = AsyncMock(return_value="status")
    return controller


async def test_start_command_replies_with_controller_text(controller):
    update = make_update(chat_id=7, user=User(id=1, first_name="Ada", is_bot=False, username="ada"))

    await TelegramCommands(controller).start(update, MagicMock())

    controller.start.assert_awaited_once_with(7, "@ada")
    update.effective_message.reply_text.assert_awaited_once_with("started", parse_mode=ParseMode.HTML)


async def test_stop_and_status_commands(controller):
    commands = TelegramCommands(controller)
    update = make_update(user=User(id=5, first_name="Bob", is_bot=False))

    await commands.stop(update, MagicMock())
    await commands.status(update, MagicMock())

    controller.stop.assert_awaited_once_with("Bob")
    controller.status.assert_awaited_once_with()
    assert update.effective_message.reply_text.await_count == 2


async def test_command_errors_are_logged_not_raised(controller):
    controller.status = AsyncMock(side_effect=RuntimeError("boom"))
    update = make_update()

    await TelegramCommands(controller).status(update, MagicMock())

    update.effective_message.reply_text.assert_not_awaited()


async def test_command_without_chat_is_ignored(controller):
    update = make_update()
    update.effective_chat = None

    await TelegramCommands(controller).start(update, MagicMock())

    controller.start.assert_not_awaited()


def test_command_handlers_registered(controller):
    handlers = TelegramCommands(controller).handlers()

    assert [next(iter(handler.commands)) for handler in handlers] == ["start", "stop", "status"]
