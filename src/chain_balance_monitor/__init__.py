"""Multi-chain wallet balance monitor with Telegram reporting."""

__version__ = "0.1.0"
