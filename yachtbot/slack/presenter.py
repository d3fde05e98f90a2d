"""
YachtBot — Slack Message Presenter
Builds the price attachment shown in Slack.
https://api.slack.com/docs/message-attachments
"""
from decimal import Decimal

from yachtbot.data.models import (
    AttachmentField, DerivedMetric, PresentationMessage, TickerQuote,
)
from yachtbot.utils.helpers import format_currency, format_usd

FALLBACK = "Cryptocurrency Price"
FOOTER = "ESKETIT"
COIN_URL = "https://coinmarketcap.com/currencies/{id}/"


def format_change(change: Decimal, pct: str) -> str:
    """-2500 and '-20' -> '-$2500.00 (-20%)'."""
    return f"{format_currency(change)} ({pct}%)"


def present(quote: TickerQuote, metric: DerivedMetric) -> PresentationMessage:
    """Assemble the attachment for a quote and its derived metrics."""
    return PresentationMessage(
        title=f"Price of {quote.name} - ${quote.symbol} {metric.band.emoji}",
        title_link=COIN_URL.format(id=quote.id),
        fallback=FALLBACK,
        color=metric.band.color,
        fields=[
            AttachmentField(title="Price USD", value=format_usd(metric.price_usd)),
            AttachmentField(title="Price BTC", value=quote.price_btc),
            AttachmentField(
                title="24H Change",
                value=format_change(metric.change_24h, quote.percent_change_24h),
            ),
            AttachmentField(
                title="7D Change",
                value=format_change(metric.change_7d, quote.percent_change_7d),
            ),
        ],
        footer=FOOTER,
    )
