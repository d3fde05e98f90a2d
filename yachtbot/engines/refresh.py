"""
YachtBot — Symbol Index Refresh Job
Pulls the full CoinMarketCap catalog and replaces the ticker -> id index.
"""
from dataclasses import dataclass
from typing import Dict, Iterable

from yachtbot.data.adapters.base import BaseMarketDataAdapter
from yachtbot.data.models import TickerQuote
from yachtbot.db.symbol_index import SymbolIndex
from yachtbot.utils.helpers import normalize_ticker, utc_timestamp
from yachtbot.utils.logger import get_logger

logger = get_logger("refresh_job")


@dataclass
class RefreshResult:
    count: int
    finished_at: str

    def to_dict(self) -> Dict[str, object]:
        return {"count": self.count, "finished_at": self.finished_at}


def build_mapping(quotes: Iterable[TickerQuote]) -> Dict[str, str]:
    """Normalized symbol -> id. Later duplicates win; blank entries are skipped."""
    mapping: Dict[str, str] = {}
    for q in quotes:
        ticker = normalize_ticker(q.symbol)
        coin_id = q.id.strip()
        if not ticker or not coin_id:
            continue
        mapping[ticker] = coin_id
    return mapping


class RefreshJob:
    """
    Rebuilds the symbol index from scratch.
    Fetch errors abort before anything is written; storage errors roll the
    whole replacement back. Both propagate to the caller.
    """

    def __init__(self, fetcher: BaseMarketDataAdapter, index: SymbolIndex):
        self.fetcher = fetcher
        self.index = index

    async def run(self) -> RefreshResult:
        logger.info("refresh_started")
        quotes = await self.fetcher.fetch_all()
        mapping = build_mapping(quotes)
        count = await self.index.replace_all(mapping)
        result = RefreshResult(count=count, finished_at=utc_timestamp())
        logger.info("refresh_finished", quotes=len(quotes), rows=count)
        return result
