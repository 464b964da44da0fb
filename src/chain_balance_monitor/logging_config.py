"""
Logging configuration for the balance monitor.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.logging import RichHandler


def setup_logging(
    log_file: Path | str | None = "blockchain_telegram_bot.log",
    level: int | str = logging.INFO,
) -> logging.Logger:
    """
    Configure logging with console and file handlers.

    Parameters
    ----------
    log_file : Path | str | None
        Rotating log file path, or None for console only
    level : int | str
        Root log level

    Returns
    -------
    logging.Logger
        Configured package logger

    """
    log_formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    # Console handler: rich renders its own timestamp and level columns
    console_handler = RichHandler(rich_tracebacks=True, show_path=False)
    console_handler.setLevel(level)

    handlers: list[logging.Handler] = [console_handler]

    if log_file:
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10 MB per file
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(log_formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    # httpx logs full request URLs at INFO, and Alchemy URLs embed the API key
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return logging.getLogger("chain_balance_monitor")
