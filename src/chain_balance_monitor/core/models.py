"""Data models for chains, balances, and monitoring state."""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FetchKind(StrEnum):
    """How a chain's balance is queried."""

    NATIVE_RPC = "native_rpc"
    TOKEN_REST = "token_rest"


class ChainDescriptor(BaseModel):
    """
    Static description of a monitored chain.

    Attributes
    ----------
    name : str
        Unique display name (e.g., 'ARB Sepolia')
    endpoint_url : str
        JSON-RPC URL, or REST URL template containing ``{address}``
    symbol : str
        Symbol shown next to the balance
    kind : FetchKind
        Fetch strategy used for this chain
    extra_headers : dict[str, str]
        Additional HTTP headers sent with every request
    decimals : int
        Scale exponent applied to the raw integer balance

    """

    model_config = ConfigDict(frozen=True)

    name: str
    endpoint_url: str
    symbol: str
    kind: FetchKind
    extra_headers: dict[str, str] = Field(default_factory=dict)
    decimals: int = Field(default=18, ge=0)


class BalanceResult(BaseModel):
    """
    Successfully fetched balance.

    Attributes
    ----------
    symbol : str
        Chain symbol
    raw_amount : int
        Unscaled integer balance as reported by the chain
    formatted_amount : str
        Scaled balance with exactly four fractional digits

    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    raw_amount: int
    formatted_amount: str


class FetchFailure(BaseModel):
    """Marker for a balance that could not be fetched."""

    model_config = ConfigDict(frozen=True)

    chain: str
    reason: str = ""


class ChainBalance(BaseModel):
    """Outcome of one chain's fetch within a poll cycle."""

    model_config = ConfigDict(frozen=True)

    chain: str
    result: BalanceResult | FetchFailure

    @property
    def ok(self) -> bool:
        """Whether the fetch succeeded."""
        return isinstance(self.result, BalanceResult)


class MonitoringState(BaseModel):
    """
    Process-wide monitoring state.

    Created once by the entry point and handed to both the command controller
    (the only writer) and the monitor loop (reader).

    Attributes
    ----------
    active : bool
        Whether periodic monitoring is running
    target_chat_id : int | str | None
        Chat that receives reports
    schedule_handle : Any
        Opaque handle returned by the scheduler, None when idle
    started_at : datetime | None
        When monitoring was last activated

    """

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    active: bool = False
    target_chat_id: int | str | None = None
    schedule_handle: Any = None
    started_at: datetime | None = None
