"""
YachtBot — Base Market Data Adapter Interface
All market data adapters must implement this interface.
"""
from abc import ABC, abstractmethod
from typing import Iterable, List

from yachtbot.data.models import TickerQuote


class BaseMarketDataAdapter(ABC):
    """Abstract base class for market data adapters."""

    def __init__(self, source: str):
        self.source = source
        self._session = None

    @abstractmethod
    async def connect(self) -> None:
        """Initialize connection / session."""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Clean up connection / session."""
        pass

    @abstractmethod
    async def fetch_by_id(self, coin_id: str) -> TickerQuote:
        """Fetch the quote stored at one provider identifier."""
        pass

    @abstractmethod
    async def fetch_all(self) -> List[TickerQuote]:
        """Fetch the full catalog, uncapped."""
        pass

    async def fetch_by_ids(self, coin_ids: Iterable[str]) -> List[TickerQuote]:
        """Fetch several identifiers one request at a time, in sorted order."""
        return [await self.fetch_by_id(coin_id) for coin_id in sorted(set(coin_ids))]
