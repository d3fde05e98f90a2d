"""
YachtBot — Test Configuration & Fixtures
Shared fixtures for all test modules.
"""
import pytest
import pytest_asyncio

from yachtbot.config.settings import AppSettings, DatabaseSettings, SlackSettings
from yachtbot.data.adapters.base import BaseMarketDataAdapter
from yachtbot.data.models import TickerQuote
from yachtbot.db.schema import init_db, ticker_table
from yachtbot.db.symbol_index import SymbolIndex
from yachtbot.errors import FetchError


class StubFetcher(BaseMarketDataAdapter):
    """In-memory market data adapter."""

    def __init__(self, quotes=None, error=None):
        super().__init__(source="stub")
        self.quotes = list(quotes or [])
        self.error = error
        self.requested = []
        self.connected = False

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.connected = False

    async def fetch_by_id(self, coin_id):
        self.requested.append(coin_id)
        if self.error:
            raise self.error
        for q in self.quotes:
            if q.id == coin_id:
                return q
        raise FetchError(f"no quote returned for {coin_id!r}")

    async def fetch_all(self):
        if self.error:
            raise self.error
        return list(self.quotes)


class StubSlackClient:
    """Records chat.postMessage calls instead of hitting Slack."""

    def __init__(self):
        self.posted = []

    async def chat_postMessage(self, **kwargs):
        self.posted.append(kwargs)
        return {"ok": True}


@pytest.fixture
def bitcoin_quote():
    return TickerQuote(
        id="bitcoin", name="Bitcoin", symbol="BTC", rank="1",
        price_usd="10000.00", price_btc="1.0",
        percent_change_1h="0.5", percent_change_24h="-20", percent_change_7d="5",
    )


@pytest.fixture
def ethereum_quote():
    return TickerQuote(
        id="ethereum", name="Ethereum", symbol="ETH", rank="2",
        price_usd="800.00", price_btc="0.08",
        percent_change_1h="-0.1", percent_change_24h="3.5", percent_change_7d="-12.25",
    )


@pytest.fixture
def stub_fetcher(bitcoin_quote, ethereum_quote):
    return StubFetcher(quotes=[bitcoin_quote, ethereum_quote])


@pytest.fixture
def stub_slack():
    return StubSlackClient()


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'yachtbot_test.db'}"


@pytest.fixture
def test_settings(db_url):
    return AppSettings(
        database=DatabaseSettings(url=db_url, table="tickers", timeout_seconds=5.0),
        slack=SlackSettings(bot_token="xoxb-test", signing_secret=""),
    )


@pytest_asyncio.fixture
async def symbol_index(db_url):
    table = ticker_table("tickers")
    engine = await init_db(db_url, table)
    yield SymbolIndex(engine, table, timeout_seconds=5.0)
    await engine.dispose()
