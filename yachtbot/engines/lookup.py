"""
YachtBot — Price Lookup Service
Runs one chat message through resolve -> fetch -> derive -> present and
decides what, if anything, to reply.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from yachtbot.data.adapters.base import BaseMarketDataAdapter
from yachtbot.data.models import PresentationMessage
from yachtbot.db.symbol_index import SymbolIndex
from yachtbot.engines.metrics import derive
from yachtbot.errors import (
    FetchError, QuoteParseError, StorageError, SymbolNotFoundError,
)
from yachtbot.slack.presenter import present
from yachtbot.utils.helpers import last_token, normalize_ticker
from yachtbot.utils.logger import get_logger

logger = get_logger("price_lookup")

# Checked in order before any lookup, against the normalized symbol
CANNED_REPLIES: Tuple[Tuple[str, str], ...] = (
    ("XVG", ":joy::joy::joy:"),
    ("USD", ":trash:"),
)

NOT_FOUND_REPLY = "Sorry, I don't know the ticker {symbol} :shrug:"
FAILURE_REPLY = "Sorry, I couldn't get a price for {symbol} right now :sweat:"


@dataclass
class Reply:
    """Either a plain text reply or a single price attachment."""
    text: Optional[str] = None
    message: Optional[PresentationMessage] = None


def canned_reply(symbol: str) -> Optional[str]:
    ticker = normalize_ticker(symbol)
    for trigger, reply in CANNED_REPLIES:
        if ticker == trigger:
            return reply
    return None


class PriceLookupService:
    """Glue between the symbol index, the market data adapter and the presenter."""

    def __init__(self, index: SymbolIndex, fetcher: BaseMarketDataAdapter):
        self.index = index
        self.fetcher = fetcher

    async def lookup(self, symbol: str) -> PresentationMessage:
        """
        Build the price attachment for one ticker symbol.
        Raises SymbolNotFoundError, StorageError, FetchError or QuoteParseError.
        """
        coin_id = await self.index.resolve(symbol)
        quote = await self.fetcher.fetch_by_id(coin_id)
        metric = derive(quote)
        logger.info("price_lookup_ok", symbol=symbol, coin_id=coin_id,
                    pct_24h=quote.percent_change_24h)
        return present(quote, metric)

    async def handle_text(self, text: str, quiet: bool = False) -> Optional[Reply]:
        """
        Turn a message into a reply. Never raises for lookup failures.
        With quiet set, failures produce no reply instead of an apology.
        """
        symbol = last_token(text or "")
        if symbol is None:
            return None

        canned = canned_reply(symbol)
        if canned is not None:
            return Reply(text=canned)

        display = normalize_ticker(symbol) or symbol
        try:
            return Reply(message=await self.lookup(symbol))
        except SymbolNotFoundError:
            if quiet:
                return None
            return Reply(text=NOT_FOUND_REPLY.format(symbol=display))
        except (FetchError, QuoteParseError, StorageError) as e:
            logger.error("price_lookup_failed", symbol=symbol,
                         error_type=type(e).__name__, error=str(e))
            if quiet:
                return None
            return Reply(text=FAILURE_REPLY.format(symbol=display))
