"""
YachtBot — Data Models for Market Data and Replies
Canonical data structures shared by the lookup pipeline and the refresh job.
"""
from decimal import Decimal
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TickerQuote(BaseModel):
    """
    One CoinMarketCap ticker record.

    The provider sends every numeric value as a string, so all fields stay
    strings here; parsing happens in the metrics engine. Missing or null
    fields become "".
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = ""
    name: str = ""
    symbol: str = ""
    rank: str = ""
    price_usd: str = ""
    price_btc: str = ""
    volume_24h_usd: str = Field(default="", alias="24h_volume_usd")
    market_cap_usd: str = ""
    available_supply: str = ""
    total_supply: str = ""
    max_supply: str = ""
    percent_change_1h: str = ""
    percent_change_24h: str = ""
    percent_change_7d: str = ""
    last_updated: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class Band(BaseModel):
    """Presentation band picked from the 24h percent change."""
    model_config = ConfigDict(frozen=True)

    color: str
    emoji: str


class DerivedMetric(BaseModel):
    """Dollar deltas recovered from percent changes, plus the 24h band."""
    model_config = ConfigDict(frozen=True)

    price_usd: Decimal
    pct_24h: Decimal
    pct_7d: Decimal
    change_24h: Decimal
    change_7d: Decimal
    band: Band


class AttachmentField(BaseModel):
    title: str
    value: str
    short: bool = True


class PresentationMessage(BaseModel):
    """A single Slack message attachment."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    title_link: str
    fallback: str
    color: str
    attachment_fields: List[AttachmentField] = Field(alias="fields")
    footer: str

    def to_attachment(self) -> Dict[str, Any]:
        """Slack attachment payload, keys as the Web API expects them."""
        return self.model_dump(by_alias=True)
