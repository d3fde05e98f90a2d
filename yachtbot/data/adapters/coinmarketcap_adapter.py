"""
YachtBot — CoinMarketCap Data Adapter
Single-attempt fetches against the public v1 ticker API.
"""
import asyncio
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import aiohttp
from pydantic import ValidationError

from yachtbot.config.settings import MarketDataSettings
from yachtbot.data.adapters.base import BaseMarketDataAdapter
from yachtbot.data.models import TickerQuote
from yachtbot.errors import FetchError
from yachtbot.utils.logger import get_logger

logger = get_logger("coinmarketcap_adapter")


class CoinMarketCapAdapter(BaseMarketDataAdapter):
    """CoinMarketCap ticker adapter. No retries: any failure is a FetchError."""

    def __init__(self, settings: MarketDataSettings):
        super().__init__(source="coinmarketcap")
        self.settings = settings
        self.base_url = settings.base_url.rstrip("/")

    async def connect(self) -> None:
        timeout = aiohttp.ClientTimeout(total=self.settings.timeout_seconds)
        self._session = aiohttp.ClientSession(timeout=timeout)
        logger.info("coinmarketcap_adapter_connected", base_url=self.base_url)

    async def disconnect(self) -> None:
        if self._session:
            await self._session.close()
            self._session = None
        logger.info("coinmarketcap_adapter_disconnected")

    async def fetch_by_id(self, coin_id: str) -> TickerQuote:
        """Fetch the quote for one provider id such as 'bitcoin'."""
        if not coin_id or not coin_id.strip():
            raise FetchError("refusing to fetch an empty coin id")

        url = f"{self.base_url}/ticker/{quote(coin_id.strip(), safe='')}/"
        quotes = await self._get_quotes(url)
        if not quotes:
            logger.warning("coinmarketcap_empty_result", coin_id=coin_id)
            raise FetchError(f"no quote returned for {coin_id!r}")
        return quotes[0]

    async def fetch_all(self) -> List[TickerQuote]:
        """Fetch every listed coin/token; limit=0 disables the page cap."""
        quotes = await self._get_quotes(f"{self.base_url}/ticker/", params={"limit": "0"})
        logger.info("coinmarketcap_catalog_fetched", count=len(quotes))
        return quotes

    async def _get_quotes(
        self, url: str, params: Optional[Dict[str, str]] = None
    ) -> List[TickerQuote]:
        if not self._session:
            await self.connect()

        try:
            async with self._session.get(url, params=params) as resp:
                if resp.status != 200:
                    logger.warning("coinmarketcap_bad_response", status=resp.status, url=url)
                    raise FetchError(f"bad response from {url}: {resp.status} {resp.reason}")
                payload = await resp.json(content_type=None)
        except FetchError:
            raise
        except asyncio.TimeoutError:
            logger.error("coinmarketcap_timeout", url=url, timeout=self.settings.timeout_seconds)
            raise FetchError(f"timed out after {self.settings.timeout_seconds}s: {url}")
        except aiohttp.ClientError as e:
            logger.error("coinmarketcap_request_exception", url=url, error=str(e))
            raise FetchError(f"request to {url} failed: {e}") from e
        except ValueError as e:
            logger.error("coinmarketcap_decode_exception", url=url, error=str(e))
            raise FetchError(f"undecodable payload from {url}: {e}") from e

        return self._decode(url, payload)

    @staticmethod
    def _decode(url: str, payload: Any) -> List[TickerQuote]:
        if not isinstance(payload, list):
            raise FetchError(f"expected a JSON array from {url}, got {type(payload).__name__}")
        try:
            return [TickerQuote.model_validate(item) for item in payload]
        except ValidationError as e:
            logger.error("coinmarketcap_schema_mismatch", url=url, error=str(e))
            raise FetchError(f"unexpected quote shape from {url}") from e
