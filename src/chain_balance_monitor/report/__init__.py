"""Report formatting and chat markup."""

from chain_balance_monitor.report.formatter import ReportFormatter, format_interval, redact_address, utc_now
from chain_balance_monitor.report.markup import HtmlMarkup, Markup, PlainMarkup

__all__ = [
    "HtmlMarkup",
    "Markup",
    "PlainMarkup",
    "ReportFormatter",
    "format_interval",
    "redact_address",
    "utc_now",
]
