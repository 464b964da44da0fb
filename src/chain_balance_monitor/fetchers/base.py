"""Base balance fetcher and fetch-strategy registry."""

import logging
from abc import ABC, abstractmethod
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import ClassVar, Protocol

import httpx

from chain_balance_monitor.core.models import BalanceResult, ChainDescriptor, FetchFailure, FetchKind

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

_FOUR_PLACES = Decimal("0.0001")


def format_amount(raw_amount: int, decimals: int = 18) -> str:
    """
    Scale a raw integer balance and render it with four fractional digits.

    Parameters
    ----------
    raw_amount : int
        Unscaled balance (e.g., wei)
    decimals : int
        Scale exponent

    Returns
    -------
    str
        Balance rounded half-up to four places, without grouping separators

    Examples
    --------
    >>> format_amount(1234500000000000000)
    '1.2345'
    >>> format_amount(0)
    '0.0000'

    """
    with localcontext() as ctx:
        # Enough precision for 256-bit balances without exponent rounding
        ctx.prec = max(28, len(str(abs(raw_amount))) + decimals + 8)
        scaled = Decimal(raw_amount).scaleb(-decimals)
        return f"{scaled.quantize(_FOUR_PLACES, rounding=ROUND_HALF_UP):f}"


class BalanceFetcher(Protocol):
    """Capability interface shared by every fetch strategy."""

    async def fetch(self, descriptor: ChainDescriptor, address: str) -> BalanceResult | FetchFailure:
        """Return the balance of ``address`` on the described chain, or a failure marker."""
        ...


class FetcherRegistry:
    """
    Maps each FetchKind to the fetcher class implementing it.

    Fetchers register themselves with the @FetcherRegistry.register decorator
    when the fetchers package is imported.

    """

    _fetchers: ClassVar[dict[FetchKind, type["BaseBalanceFetcher"]]] = {}

    @classmethod
    def register(cls, fetcher_class: type["BaseBalanceFetcher"]) -> type["BaseBalanceFetcher"]:
        """
        Decorator to register a fetcher class under its ``kind``.

        Raises
        ------
        ValueError
            If the class does not define ``kind``

        """
        kind = getattr(fetcher_class, "kind", None)
        if kind is None:
            msg = f"Fetcher {fetcher_class.__name__} must define 'kind' attribute"
            raise ValueError(msg)

        cls._fetchers[FetchKind(kind)] = fetcher_class
        return fetcher_class

    @classmethod
    def get_fetcher(cls, kind: FetchKind) -> type["BaseBalanceFetcher"] | None:
        """Get the fetcher class registered for ``kind``."""
        return cls._fetchers.get(kind)

    @classmethod
    def list_kinds(cls) -> list[FetchKind]:
        """List all registered kinds."""
        return list(cls._fetchers.keys())


class BaseBalanceFetcher(ABC):
    """
    Abstract base class for balance fetchers.

    Subclasses implement ``_fetch_raw`` and list the exceptions that mean
    "this chain could not be read" in ``recoverable_errors``. Those are
    logged and turned into a FetchFailure; the caller never sees them.

    Parameters
    ----------
    client : httpx.AsyncClient
        Shared HTTP client
    timeout : float
        Per-request timeout in seconds

    """

    kind: ClassVar[FetchKind | None] = None
    recoverable_errors: ClassVar[tuple[type[Exception], ...]] = (ValueError,)

    def __init__(self, client: httpx.AsyncClient, timeout: float = DEFAULT_TIMEOUT) -> None:
        if self.kind is None:
            msg = f"{self.__class__.__name__} must define 'kind' attribute"
            raise ValueError(msg)
        self.client = client
        self.timeout = timeout

    async def fetch(self, descriptor: ChainDescriptor, address: str) -> BalanceResult | FetchFailure:
        """
        Fetch and normalize the balance of ``address`` on ``descriptor``.

        Returns
        -------
        BalanceResult | FetchFailure
            Normalized balance, or a failure marker if the request failed

        """
        try:
            raw_amount = await self._fetch_raw(descriptor, address)
        except self.recoverable_errors as e:
            logger.error("Error fetching %s balance: %s", descriptor.name, e)
            return FetchFailure(chain=descriptor.name, reason=str(e))

        return BalanceResult(
            symbol=descriptor.symbol,
            raw_amount=raw_amount,
            formatted_amount=format_amount(raw_amount, descriptor.decimals),
        )

    @abstractmethod
    async def _fetch_raw(self, descriptor: ChainDescriptor, address: str) -> int:
        """Return the unscaled integer balance."""
