"""
YachtBot — Component Wiring
Builds every long-lived collaborator once at startup and hands them out
explicitly; nothing below the entry points reaches for globals.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from slack_sdk.signature import SignatureVerifier
from sqlalchemy.ext.asyncio import AsyncEngine

from yachtbot.config.settings import AppSettings
from yachtbot.data.adapters.base import BaseMarketDataAdapter
from yachtbot.data.adapters.coinmarketcap_adapter import CoinMarketCapAdapter
from yachtbot.db.schema import init_db, ticker_table
from yachtbot.db.symbol_index import SymbolIndex
from yachtbot.engines.lookup import PriceLookupService
from yachtbot.engines.refresh import RefreshJob
from yachtbot.slack.responder import SlackResponder
from yachtbot.utils.logger import get_logger

logger = get_logger("bootstrap")


@dataclass
class BotContext:
    settings: AppSettings
    engine: AsyncEngine
    fetcher: BaseMarketDataAdapter
    index: SymbolIndex
    lookup: PriceLookupService
    refresh: RefreshJob
    responder: SlackResponder
    verifier: Optional[SignatureVerifier] = None
    counters: Dict[str, Any] = field(default_factory=lambda: {
        "events_received": 0,
        "lookups": 0,
        "refreshes": 0,
        "errors": 0,
    })

    async def close(self) -> None:
        await self.fetcher.disconnect()
        await self.engine.dispose()
        logger.info("context_closed")


async def build_context(
    settings: AppSettings,
    fetcher: Optional[BaseMarketDataAdapter] = None,
    slack_client: Any = None,
) -> BotContext:
    """Connect the store and the market data adapter and wire the services."""
    db = settings.database
    table = ticker_table(db.table)
    engine = await init_db(db.url, table, echo=db.echo_sql)
    index = SymbolIndex(engine, table, timeout_seconds=db.timeout_seconds)

    if fetcher is None:
        fetcher = CoinMarketCapAdapter(settings.market)
    await fetcher.connect()

    verifier = None
    if settings.slack.signing_secret:
        verifier = SignatureVerifier(settings.slack.signing_secret)

    logger.info("context_ready", table=db.table, source=fetcher.source,
                signature_check=verifier is not None)
    return BotContext(
        settings=settings,
        engine=engine,
        fetcher=fetcher,
        index=index,
        lookup=PriceLookupService(index, fetcher),
        refresh=RefreshJob(fetcher, index),
        responder=SlackResponder(settings.slack, client=slack_client),
        verifier=verifier,
    )
