"""
YachtBot — Common Utility Functions
"""
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

CENTS = Decimal("0.01")


def utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(timezone.utc)


def utc_timestamp() -> str:
    """Return current UTC timestamp as ISO string."""
    return utc_now().isoformat()


def normalize_ticker(symbol: str) -> str:
    """Normalize a ticker for index lookups: $btc -> BTC."""
    return symbol.replace("$", "").strip().upper()


def last_token(text: str) -> Optional[str]:
    """Return the last whitespace-separated token of a message, if any."""
    tokens = text.split()
    if not tokens:
        return None
    return tokens[-1]


def to_cents(value: Union[Decimal, float, str]) -> Decimal:
    """Round half-up to two decimal places."""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_usd(value: Union[Decimal, float, str]) -> str:
    """Format a dollar amount: 123.456 -> $123.46."""
    return f"${to_cents(value)}"


def format_currency(value: Union[Decimal, float, str]) -> str:
    """Format a signed dollar amount with the sign before the dollar sign."""
    amount = Decimal(str(value))
    if amount < 0:
        return f"-{format_usd(-amount)}"
    return format_usd(amount)
