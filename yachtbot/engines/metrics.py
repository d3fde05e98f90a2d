"""
YachtBot — Metric Deriver
Turns the provider's percent changes into dollar deltas and picks the
presentation band for a quote.

No financial decisions better be made out of this: the dollar deltas are
reconstructed from rounded percent changes, not from historical prices.
"""
from decimal import Decimal, DecimalException, InvalidOperation
from typing import Tuple

from yachtbot.data.models import Band, DerivedMetric, TickerQuote
from yachtbot.errors import QuoteParseError
from yachtbot.utils.helpers import to_cents

HUNDRED = Decimal(100)
ONE = Decimal(1)

# (exclusive upper bound, band), lowest first
BANDS: Tuple[Tuple[Decimal, Band], ...] = (
    (Decimal(-50), Band(color="#d7191c", emoji=":trash::fire:")),
    (Decimal(-25), Band(color="#d7191c", emoji=":smoking:")),
    (Decimal(-10), Band(color="#fdae61", emoji=":thinking_face:")),
    (Decimal(0), Band(color="#FAD898", emoji=":zzz:")),
    (Decimal(25), Band(color="#FAD898", emoji=":beers:")),
    (Decimal(50), Band(color="#a6d96a", emoji=":champagne:")),
    (Decimal(100), Band(color="#1a9641", emoji=":racing_car:")),
    (Decimal(1000), Band(color="#1a9641", emoji=":motor_boat:")),
)
TOP_BAND = Band(color="#000000", emoji=":full_moon_with_face:")


def parse_decimal(field: str, value: str) -> Decimal:
    """Parse a provider number; anything but a finite decimal is rejected."""
    try:
        number = Decimal(value.strip())
    except (InvalidOperation, AttributeError):
        raise QuoteParseError(field, value)
    if not number.is_finite():
        raise QuoteParseError(field, value)
    return number


def dollar_difference(price: Decimal, pct_change: Decimal) -> Decimal:
    """
    Dollar change implied by a percent change and today's price.

    Yesterday's price is price / (1 + pct/100); the delta is today's price
    minus that. A -100% change has no previous price and raises
    DivisionByZero or InvalidOperation.
    """
    price_before = price / (ONE + pct_change / HUNDRED)
    return price - price_before


def _check_renderable(field: str, raw: str, value: Decimal) -> None:
    # values past the context precision cannot be rounded to cents
    try:
        to_cents(value)
    except InvalidOperation:
        raise QuoteParseError(field, raw)


def _checked_difference(field: str, raw: str, price: Decimal, pct: Decimal) -> Decimal:
    try:
        delta = dollar_difference(price, pct)
    except DecimalException:
        raise QuoteParseError(field, raw)
    _check_renderable(field, raw, delta)
    return delta


def classify_band(pct_24h: Decimal) -> Band:
    """Pick color and emoji from the 24h percent change."""
    for upper, band in BANDS:
        if pct_24h < upper:
            return band
    return TOP_BAND


def derive(quote: TickerQuote) -> DerivedMetric:
    """Compute the derived metrics for one quote."""
    price = parse_decimal("price_usd", quote.price_usd)
    pct_24h = parse_decimal("percent_change_24h", quote.percent_change_24h)
    pct_7d = parse_decimal("percent_change_7d", quote.percent_change_7d)

    _check_renderable("price_usd", quote.price_usd, price)
    change_24h = _checked_difference("percent_change_24h", quote.percent_change_24h, price, pct_24h)
    change_7d = _checked_difference("percent_change_7d", quote.percent_change_7d, price, pct_7d)

    return DerivedMetric(
        price_usd=price,
        pct_24h=pct_24h,
        pct_7d=pct_7d,
        change_24h=change_24h,
        change_7d=change_7d,
        band=classify_band(pct_24h),
    )
