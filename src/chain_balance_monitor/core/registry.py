"""Ordered chain registry with fetch strategies bound at construction."""

import logging
from collections.abc import Iterable, Iterator

import httpx

from chain_balance_monitor.core.models import ChainDescriptor, FetchKind
from chain_balance_monitor.fetchers import BalanceFetcher, FetcherRegistry
from chain_balance_monitor.fetchers.base import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)


class ChainRegistry:
    """
    Immutable, ordered collection of monitored chains.

    Each descriptor is paired with the fetcher for its ``kind`` once, when the
    registry is built. Iteration always follows insertion order so reports are
    laid out deterministically.

    Parameters
    ----------
    descriptors : Iterable[ChainDescriptor]
        Chains in report order
    client : httpx.AsyncClient
        HTTP client shared by all fetchers
    timeout : float
        Per-request timeout in seconds
    fetchers : dict[str, BalanceFetcher] | None
        Explicit fetcher per chain name, overriding kind-based selection

    Raises
    ------
    ValueError
        If a chain name is repeated or a kind has no registered fetcher

    """

    def __init__(
        self,
        descriptors: Iterable[ChainDescriptor],
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        fetchers: dict[str, BalanceFetcher] | None = None,
    ) -> None:
        self._descriptors: list[ChainDescriptor] = []
        self._by_name: dict[str, ChainDescriptor] = {}
        self._fetchers: dict[str, BalanceFetcher] = {}
        overrides = fetchers or {}
        by_kind: dict[FetchKind, BalanceFetcher] = {}

        for descriptor in descriptors:
            if descriptor.name in self._by_name:
                msg = f"Duplicate chain name: {descriptor.name}"
                raise ValueError(msg)

            fetcher = overrides.get(descriptor.name)
            if fetcher is None:
                if descriptor.kind not in by_kind:
                    fetcher_class = FetcherRegistry.get_fetcher(descriptor.kind)
                    if fetcher_class is None:
                        msg = f"No fetcher registered for kind '{descriptor.kind}'"
                        raise ValueError(msg)
                    if client is None:
                        msg = f"An HTTP client is required to fetch {descriptor.name}"
                        raise ValueError(msg)
                    by_kind[descriptor.kind] = fetcher_class(client, timeout=timeout)
                fetcher = by_kind[descriptor.kind]

            self._descriptors.append(descriptor)
            self._by_name[descriptor.name] = descriptor
            self._fetchers[descriptor.name] = fetcher

        logger.debug("Chain registry built: %s", ", ".join(self.names()))

    def lookup(self, name: str) -> ChainDescriptor | None:
        """
        Get a chain descriptor by name.

        Parameters
        ----------
        name : str
            Chain name

        Returns
        -------
        ChainDescriptor | None
            Descriptor or None if the chain is unknown

        """
        return self._by_name.get(name)

    def fetcher_for(self, name: str) -> BalanceFetcher | None:
        """Get the fetcher bound to a chain, or None if the chain is unknown."""
        return self._fetchers.get(name)

    def names(self) -> list[str]:
        """Chain names in registry order."""
        return [descriptor.name for descriptor in self._descriptors]

    def descriptors(self) -> list[ChainDescriptor]:
        """Chain descriptors in registry order."""
        return list(self._descriptors)

    def __iter__(self) -> Iterator[ChainDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name
