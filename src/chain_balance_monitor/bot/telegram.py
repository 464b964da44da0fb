"""Telegram adapter: notifier, command handlers, and application wiring."""

import logging
from collections.abc import Awaitable, Callable

import httpx
from telegram import Bot, Update, User
from telegram.constants import ParseMode
from telegram.error import TelegramError
from telegram.ext import Application, CommandHandler, ContextTypes

from chain_balance_monitor import __version__
from chain_balance_monitor.bot.scheduler import JobQueueScheduler
from chain_balance_monitor.config import Settings
from chain_balance_monitor.core.controller import CommandController
from chain_balance_monitor.core.models import MonitoringState
from chain_balance_monitor.core.monitor import MonitorLoop
from chain_balance_monitor.core.registry import ChainRegistry
from chain_balance_monitor.data import load_chains
from chain_balance_monitor.report import HtmlMarkup, ReportFormatter

logger = logging.getLogger(__name__)


class TelegramNotifier:
    """
    Sends HTML messages through a Telegram bot.

    With no bot (initialization failed) every send is a logged no-op that
    returns False.

    Parameters
    ----------
    bot : Bot | None
        Telegram bot, or None in degraded mode

    """

    def __init__(self, bot: Bot | None) -> None:
        self.bot = bot

    async def send(self, chat_id: int | str | None, text: str) -> bool:
        if self.bot is None:
            logger.error("Telegram Bot not initialized")
            return False
        if chat_id is None:
            logger.error("No Telegram chat configured for delivery")
            return False

        try:
            await self.bot.send_message(chat_id=chat_id, text=text, parse_mode=ParseMode.HTML)
        except TelegramError as e:
            logger.error("Telegram Message Error: %s", e)
            return False
        return True


def describe_user(user: User | None) -> str:
    """Issuer shown in confirmations: @username, else full name, else id."""
    if user is None:
        return "unknown user"
    if user.username:
        return f"@{user.username}"
    return user.full_name or str(user.id)


class TelegramCommands:
    """
    /start, /stop and /status handlers bound to a CommandController.

    Handlers never raise: errors are logged at this boundary.

    """

    def __init__(self, controller: CommandController) -> None:
        self.controller = controller

    async def start(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._respond(update, "start", lambda chat_id, issuer: self.controller.start(chat_id, issuer))

    async def stop(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._respond(update, "stop", lambda chat_id, issuer: self.controller.stop(issuer))

    async def status(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._respond(update, "status", lambda chat_id, issuer: self.controller.status())

    def handlers(self) -> list[CommandHandler]:
        return [
            CommandHandler("start", self.start),
            CommandHandler("stop", self.stop),
            CommandHandler("status", self.status),
        ]

    async def _respond(
        self,
        update: Update,
        command: str,
        action: Callable[[int, str], Awaitable[str]],
    ) -> None:
        try:
            chat = update.effective_chat
            message = update.effective_message
            if chat is None or message is None:
                logger.warning("Ignoring /%s without a chat", command)
                return

            reply = await action(chat.id, describe_user(update.effective_user))
            await message.reply_text(reply, parse_mode=ParseMode.HTML)
        except Exception:
            logger.exception("Error handling /%s", command)


def startup_banner(chain_count: int) -> str:
    """Announcement sent to the default chat when the bot comes online."""
    return f"MULTI-CHAIN BALANCE MONITOR\nv{__version__} | {chain_count} chains supported"


def build_application(settings: Settings) -> Application:
    """
    Wire the monitor into a python-telegram-bot Application.

    Parameters
    ----------
    settings : Settings
        Runtime configuration

    Returns
    -------
    Application
        Application with command handlers, startup notice and cleanup hooks

    Raises
    ------
    telegram.error.InvalidToken
        If the bot token is empty or malformed
    RuntimeError
        If the job queue is unavailable
    ValueError
        If the chain configuration is invalid

    """
    application = (
        Application.builder()
        .token(settings.telegram_bot_token)
        .post_init(_post_init)
        .post_shutdown(_post_shutdown)
        .build()
    )
    if application.job_queue is None:
        msg = 'JobQueue unavailable; install "python-telegram-bot[job-queue]"'
        raise RuntimeError(msg)

    client = httpx.AsyncClient(timeout=settings.request_timeout)
    registry = ChainRegistry(
        load_chains(settings.alchemy_api_key, settings.chains_file),
        client,
        timeout=settings.request_timeout,
    )

    markup = HtmlMarkup()
    state = MonitoringState(target_chat_id=settings.telegram_chat_id)
    notifier = TelegramNotifier(application.bot)
    monitor = MonitorLoop(
        state,
        registry,
        settings.wallet_address,
        ReportFormatter(markup, settings.interval_minutes),
        notifier,
    )
    controller = CommandController(
        state,
        monitor,
        JobQueueScheduler(application.job_queue),
        settings.wallet_address,
        markup,
        interval_minutes=settings.interval_minutes,
    )

    application.add_handlers(TelegramCommands(controller).handlers())
    application.bot_data.update(
        controller=controller,
        notifier=notifier,
        http_client=client,
        default_chat_id=settings.telegram_chat_id,
        chain_count=len(registry),
    )
    logger.info("Monitoring %s on %d chains", settings.wallet_address, len(registry))
    return application


async def _post_init(application: Application) -> None:
    notifier: TelegramNotifier = application.bot_data["notifier"]
    chat_id = application.bot_data.get("default_chat_id")
    if chat_id is None:
        return

    banner = startup_banner(application.bot_data["chain_count"])
    if not await notifier.send(chat_id, HtmlMarkup().pre(banner)):
        logger.error("Error sending startup banner")


async def _post_shutdown(application: Application) -> None:
    controller: CommandController = application.bot_data["controller"]
    client: httpx.AsyncClient = application.bot_data["http_client"]
    await controller.shutdown()
    await client.aclose()
