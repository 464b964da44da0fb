"""Settings loaded from the environment (and an optional .env file)."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator


class ConfigError(Exception):
    """Raised when required settings are missing or invalid."""


class Settings(BaseModel):
    """
    Runtime configuration.

    Attributes
    ----------
    telegram_bot_token : str
        Bot API token
    telegram_chat_id : int | str | None
        Default chat for the startup notice and reports before /start rebinds it
    alchemy_api_key : str
        Key substituted into Alchemy RPC endpoints
    wallet_address : str
        Monitored wallet
    interval_minutes : int
        Poll interval
    request_timeout : float
        Per-request HTTP timeout in seconds
    chains_file : Path | None
        Alternative chains YAML file
    log_file : Path | None
        Rotating log file; None disables file logging
    log_level : str
        Root log level

    """

    telegram_bot_token: str = ""
    telegram_chat_id: int | str | None = None
    alchemy_api_key: str = ""
    wallet_address: str = ""
    interval_minutes: int = Field(default=10, ge=1)
    request_timeout: float = Field(default=10.0, gt=0)
    chains_file: Path | None = None
    log_file: Path | None = Path("blockchain_telegram_bot.log")
    log_level: str = "INFO"

    @field_validator("telegram_chat_id", mode="before")
    @classmethod
    def _parse_chat_id(cls, value: object) -> object:
        # Numeric ids arrive as strings from the environment; '@channel' names stay strings
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None
            if value.lstrip("-").isdigit():
                return int(value)
        return value

    @field_validator("wallet_address", "telegram_bot_token", "alchemy_api_key")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    @field_validator("log_level")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.strip().upper()

    @classmethod
    def from_env(
        cls,
        env_file: Path | str | None = None,
        *,
        require_bot: bool = True,
        require_wallet: bool = True,
    ) -> "Settings":
        """
        Build settings from environment variables.

        Values already present in the environment take precedence over the
        .env file.

        Parameters
        ----------
        env_file : Path | str | None
            .env file to load; searched for from the working directory when None
        require_bot : bool
            Fail if TELEGRAM_BOT_TOKEN is missing
        require_wallet : bool
            Fail if WALLET_ADDRESS is missing

        Returns
        -------
        Settings
            Validated settings

        Raises
        ------
        ConfigError
            If a required variable is missing or a value is invalid

        """
        load_dotenv(env_file)

        required = []
        if require_bot:
            required.append("TELEGRAM_BOT_TOKEN")
        if require_wallet:
            required.append("WALLET_ADDRESS")
        for name in required:
            if not os.getenv(name, "").strip():
                msg = f"{name} environment variable not set"
                raise ConfigError(msg)

        values: dict[str, object] = {
            "telegram_bot_token": os.getenv("TELEGRAM_BOT_TOKEN", ""),
            "telegram_chat_id": os.getenv("TELEGRAM_CHAT_ID"),
            "alchemy_api_key": os.getenv("ALCHEMY_API_KEY", ""),
            "wallet_address": os.getenv("WALLET_ADDRESS", ""),
        }
        optional = {
            "interval_minutes": "MONITOR_INTERVAL_MINUTES",
            "request_timeout": "REQUEST_TIMEOUT_SECONDS",
            "chains_file": "CHAINS_FILE",
            "log_file": "LOG_FILE",
            "log_level": "LOG_LEVEL",
        }
        for field, env_name in optional.items():
            raw = os.getenv(env_name)
            if raw:
                values[field] = raw

        try:
            return cls(**values)
        except ValidationError as e:
            msg = f"Invalid configuration: {e}"
            raise ConfigError(msg) from e
