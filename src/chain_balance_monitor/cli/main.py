"""CLI for the multi-chain balance monitor."""

import asyncio
import logging

import httpx
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.traceback import install
from telegram import Bot
from telegram.error import InvalidToken, TelegramError

from chain_balance_monitor.bot.telegram import TelegramNotifier, build_application
from chain_balance_monitor.config import ConfigError, Settings
from chain_balance_monitor.core.models import BalanceResult, ChainBalance, MonitoringState
from chain_balance_monitor.core.monitor import MonitorLoop
from chain_balance_monitor.core.registry import ChainRegistry
from chain_balance_monitor.data import load_chains
from chain_balance_monitor.logging_config import setup_logging
from chain_balance_monitor.report import HtmlMarkup, ReportFormatter, redact_address

# Install rich traceback handler
install(show_locals=False)

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="chain-balance-monitor",
    help="Report a wallet's balances across several chains to a Telegram chat",
    add_completion=False,
)

console = Console()


def _load_settings(*, require_bot: bool, require_wallet: bool = True) -> Settings:
    try:
        return Settings.from_env(require_bot=require_bot, require_wallet=require_wallet)
    except ConfigError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {e}")
        raise typer.Exit(code=1) from e


@app.command()
def run(
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
) -> None:
    """
    Start the Telegram bot and wait for /start, /stop and /status.

    If the bot cannot be initialized the error is logged and the process
    exits with status 1 instead of a traceback. Stop with Ctrl+C.
    """
    settings = _load_settings(require_bot=True)
    setup_logging(settings.log_file, "DEBUG" if debug else settings.log_level)

    try:
        application = build_application(settings)
    except (TelegramError, RuntimeError, ValueError, OSError) as e:
        logger.error("Telegram Bot Initialization Error: %s", e)
        raise typer.Exit(code=1) from e

    logger.info("Telegram Bot Initialized")
    try:
        # run_polling installs its own SIGINT handler and returns on interrupt
        application.run_polling(drop_pending_updates=True)
    except TelegramError as e:
        logger.error("Telegram Bot Error: %s", e)
        raise typer.Exit(code=1) from e

    logger.info("Bot stopped by user.")


@app.command()
def check(
    chain: list[str] | None = typer.Option(None, "--chain", "-c", help="Chain to query (repeatable)"),
    address: str | None = typer.Option(None, "--address", "-a", help="Wallet address (default: WALLET_ADDRESS)"),
    send: bool = typer.Option(False, "--send", "-s", help="Also send the report to TELEGRAM_CHAT_ID"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
) -> None:
    """
    Run a single poll cycle now and print the balances.

    Examples:

        # All configured chains
        chain-balance-monitor check

        # One chain, another address
        chain-balance-monitor check --chain "Base Sepolia" --address 0xABC...
    """
    settings = _load_settings(require_bot=send, require_wallet=address is None)
    setup_logging(None, "DEBUG" if debug else "WARNING")
    wallet = address or settings.wallet_address

    console.print(f"\n[bold cyan]Fetching balances for:[/bold cyan] {wallet}")
    try:
        results = asyncio.run(_check(settings, wallet, chain or None, send))
    except (ValueError, OSError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1) from e

    _output_table(wallet, results)
    if results and not any(entry.ok for entry in results):
        raise typer.Exit(code=1)


@app.command()
def list_chains() -> None:
    """List the configured chains in report order."""
    settings = _load_settings(require_bot=False, require_wallet=False)
    try:
        descriptors = load_chains(path=settings.chains_file)
    except (ValueError, OSError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1) from e

    table = Table(title="Configured Chains", show_header=True, header_style="bold magenta")
    table.add_column("Chain", style="cyan")
    table.add_column("Symbol", style="green")
    table.add_column("Kind", style="yellow")
    table.add_column("Host", style="dim")

    for descriptor in descriptors:
        # Host only: endpoint paths may carry API keys
        table.add_row(descriptor.name, descriptor.symbol, descriptor.kind.value, httpx.URL(descriptor.endpoint_url).host)

    console.print(table)


async def _check(
    settings: Settings,
    wallet: str,
    chains: list[str] | None,
    send: bool,
) -> list[ChainBalance]:
    """Collect balances once, optionally delivering the HTML report."""
    formatter = ReportFormatter(HtmlMarkup(), settings.interval_minutes)

    async with httpx.AsyncClient(timeout=settings.request_timeout) as client:
        registry = ChainRegistry(
            load_chains(settings.alchemy_api_key, settings.chains_file),
            client,
            timeout=settings.request_timeout,
        )
        state = MonitoringState(active=True, target_chat_id=settings.telegram_chat_id)
        monitor = MonitorLoop(state, registry, wallet, formatter, TelegramNotifier(None))
        results = await monitor.collect_balances(chains)

    if send:
        delivered = await _deliver(settings, formatter.format(wallet, results))
        console.print("[green]Report sent[/green]" if delivered else "[yellow]Report was not delivered[/yellow]")
    return results


async def _deliver(settings: Settings, report: str) -> bool:
    try:
        bot = Bot(settings.telegram_bot_token)
    except InvalidToken as e:
        logger.error("Telegram Bot Initialization Error: %s", e)
        return await TelegramNotifier(None).send(settings.telegram_chat_id, report)

    try:
        async with bot:
            return await TelegramNotifier(bot).send(settings.telegram_chat_id, report)
    except TelegramError as e:
        logger.error("Telegram Bot Initialization Error: %s", e)
        return False


def _output_table(wallet: str, results: list[ChainBalance]) -> None:
    """Output balances as a rich table."""
    table = Table(
        title=f"Balances for {redact_address(wallet)}",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Chain", style="cyan")
    table.add_column("Balance", style="white", justify="right")
    table.add_column("Symbol", style="green")
    table.add_column("Status", style="yellow")

    for entry in results:
        if isinstance(entry.result, BalanceResult):
            table.add_row(entry.chain, entry.result.formatted_amount, entry.result.symbol, "✓")
        else:
            table.add_row(entry.chain, "-", "-", f"[red]Failed to fetch[/red] [dim]{escape(entry.result.reason)}[/dim]")

    console.print("\n")
    console.print(table)
    console.print("\n")


if __name__ == "__main__":
    app()
