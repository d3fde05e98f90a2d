"""
YachtBot — Symbol Index
Resolves ticker symbols to CoinMarketCap ids and replaces the whole index
on refresh.

The refresh job is the only writer. replace_all clears and refills the
table inside one transaction, so a concurrent resolve sees either the old
index or the new one, never an empty table.
"""
import asyncio
from typing import Awaitable, Dict, Mapping, TypeVar

from sqlalchemy import Table, delete, func, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from yachtbot.errors import StorageError, SymbolNotFoundError
from yachtbot.utils.helpers import normalize_ticker
from yachtbot.utils.logger import get_logger

logger = get_logger("symbol_index")

T = TypeVar("T")


class SymbolIndex:
    """Ticker -> provider id lookup backed by a SQL table."""

    def __init__(self, engine: AsyncEngine, table: Table, timeout_seconds: float = 10.0):
        self.engine = engine
        self.table = table
        self.timeout_seconds = timeout_seconds

    async def _bounded(self, operation: str, call: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.error("symbol_index_timeout", operation=operation, timeout=self.timeout_seconds)
            raise StorageError(f"{operation} timed out after {self.timeout_seconds}s")
        except SQLAlchemyError as e:
            logger.error("symbol_index_error", operation=operation, error=str(e))
            raise StorageError(f"{operation} failed: {e}") from e

    async def resolve(self, symbol: str) -> str:
        """Return the provider id for a ticker; '$btc' and 'BTC' are the same key."""
        ticker = normalize_ticker(symbol)
        if not ticker:
            raise SymbolNotFoundError(symbol)

        coin_id = await self._bounded("resolve", self._select_id(ticker))
        if not coin_id:
            logger.info("symbol_not_found", symbol=symbol, ticker=ticker)
            raise SymbolNotFoundError(symbol)
        return coin_id

    async def _select_id(self, ticker: str):
        stmt = select(self.table.c.id).where(self.table.c.ticker == ticker)
        async with self.engine.connect() as conn:
            result = await conn.execute(stmt)
            return result.scalar_one_or_none()

    async def replace_all(self, mapping: Mapping[str, str]) -> int:
        """Swap the index contents for mapping in a single transaction."""
        rows = [{"ticker": ticker, "id": coin_id} for ticker, coin_id in mapping.items()]
        await self._bounded("replace_all", self._replace(rows))
        logger.info("symbol_index_replaced", rows=len(rows), table=self.table.name)
        return len(rows)

    async def _replace(self, rows) -> None:
        async with self.engine.begin() as conn:
            await conn.execute(delete(self.table))
            if rows:
                await conn.execute(insert(self.table), rows)

    async def count(self) -> int:
        return await self._bounded("count", self._count())

    async def _count(self) -> int:
        async with self.engine.connect() as conn:
            result = await conn.execute(select(func.count()).select_from(self.table))
            return result.scalar_one()

    async def snapshot(self) -> Dict[str, str]:
        """Full index contents as a dict."""
        return await self._bounded("snapshot", self._snapshot())

    async def _snapshot(self) -> Dict[str, str]:
        async with self.engine.connect() as conn:
            result = await conn.execute(select(self.table.c.ticker, self.table.c.id))
            return {ticker: coin_id for ticker, coin_id in result.all()}
