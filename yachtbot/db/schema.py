"""
YachtBot — Database Schema Design
SQLAlchemy table for the ticker symbol -> CoinMarketCap id lookup.
"""
from sqlalchemy import Column, MetaData, String, Table
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine


def ticker_table(name: str = "tickers", metadata: MetaData = None) -> Table:
    """Lookup table; the name comes from configuration."""
    return Table(
        name,
        metadata if metadata is not None else MetaData(),
        Column("ticker", String(32), primary_key=True),
        Column("id", String(128), nullable=False),
    )


async def init_db(db_url: str, table: Table, echo: bool = False) -> AsyncEngine:
    """Create the engine and the lookup table if it does not exist yet."""
    engine = create_async_engine(db_url, echo=echo)
    async with engine.begin() as conn:
        await conn.run_sync(table.metadata.create_all)
    return engine
