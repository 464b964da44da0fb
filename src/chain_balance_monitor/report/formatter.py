"""Balance report rendering."""

from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from chain_balance_monitor.core.models import BalanceResult, ChainBalance
from chain_balance_monitor.report.markup import Markup

REPORT_TITLE = "MULTI-CHAIN BALANCE MONITOR"
FAILED_MARKER = "Failed to fetch"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(UTC)


def redact_address(address: str) -> str:
    """
    Shorten an address to its first 6 and last 4 characters.

    Addresses shorter than 10 characters are returned unchanged.

    Examples
    --------
    >>> redact_address("0x1234567890abcdef1234567890abcdef12345678")
    '0x1234...5678'

    """
    if len(address) < 10:
        return address
    return f"{address[:6]}...{address[-4:]}"


def format_interval(minutes: int) -> str:
    """Human-readable interval, e.g. '10 minutes'."""
    return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"


class ReportFormatter:
    """
    Assembles one balance report from a poll cycle's results.

    Parameters
    ----------
    markup : Markup
        Styling dialect of the delivery channel
    interval_minutes : int
        Update interval stated in the footer
    clock : Callable[[], datetime]
        Source of the report timestamp

    """

    def __init__(
        self,
        markup: Markup,
        interval_minutes: int = 10,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.markup = markup
        self.interval_minutes = interval_minutes
        self.clock = clock

    def format(self, wallet_address: str, results: Sequence[ChainBalance]) -> str:
        """
        Render the report.

        Parameters
        ----------
        wallet_address : str
            Monitored address (redacted in the header)
        results : Sequence[ChainBalance]
            Per-chain results, already in registry order

        Returns
        -------
        str
            Report text; every chain in ``results`` gets exactly one line

        """
        m = self.markup
        timestamp = self.clock().strftime(TIMESTAMP_FORMAT)

        lines = [
            m.bold(REPORT_TITLE),
            "",
            f"Time: {timestamp}",
            f"Address: {m.code(m.escape(redact_address(wallet_address)))}",
            "",
            m.bold("BALANCES:"),
        ]
        lines.extend(self.format_line(entry) for entry in results)
        lines.append("")
        lines.append(m.code(f"Next update: {format_interval(self.interval_minutes)}"))
        return "\n".join(lines)

    def format_line(self, entry: ChainBalance) -> str:
        """Render a single chain's line."""
        m = self.markup
        name = m.escape(entry.chain)
        if isinstance(entry.result, BalanceResult):
            return f"• {name}: {m.bold(entry.result.formatted_amount)} {m.escape(entry.result.symbol)}"
        return f"• {name}: {m.italic(FAILED_MARKER)}"
