"""
YachtBot — Tests for the Metric Deriver
Dollar deltas, band classification and numeric parsing.
"""
import pytest
from decimal import Decimal

from yachtbot.data.models import TickerQuote
from yachtbot.engines.metrics import (
    BANDS, TOP_BAND, classify_band, derive, dollar_difference, parse_decimal,
)
from yachtbot.errors import QuoteParseError


# ─── Dollar Difference ──────────────────────────────────────────

class TestDollarDifference:
    def test_negative_twenty_percent(self):
        delta = dollar_difference(Decimal("10000.00"), Decimal("-20"))
        assert delta == Decimal("-2500")

    def test_positive_change_recovers_previous_price(self):
        # 100 -> 125 is +25%
        delta = dollar_difference(Decimal("125"), Decimal("25"))
        assert delta == Decimal("25")

    def test_zero_change(self):
        assert dollar_difference(Decimal("42.5"), Decimal("0")) == 0

    def test_percent_is_normalized_to_a_fraction(self):
        # price * pct / 100 would give -2000; the previous-price identity gives -2500
        delta = dollar_difference(Decimal("10000"), Decimal("-20"))
        assert delta != Decimal("-2000")
        # price / (pct + 1) without normalizing would be wildly off
        assert delta != Decimal("10000") - Decimal("10000") / Decimal("-19")


# ─── Band Classification ────────────────────────────────────────

class TestBands:
    @pytest.mark.parametrize("pct,emoji", [
        ("-50.01", ":trash::fire:"),
        ("-50", ":smoking:"),
        ("-25", ":thinking_face:"),
        ("-10", ":zzz:"),
        ("-0.01", ":zzz:"),
        ("0", ":beers:"),
        ("24.99", ":beers:"),
        ("25", ":champagne:"),
        ("50", ":racing_car:"),
        ("100", ":motor_boat:"),
        ("999.99", ":motor_boat:"),
        ("1000", ":full_moon_with_face:"),
    ])
    def test_boundaries(self, pct, emoji):
        assert classify_band(Decimal(pct)).emoji == emoji

    def test_colors(self):
        assert classify_band(Decimal("-80")).color == "#d7191c"
        assert classify_band(Decimal("-20")).color == "#fdae61"
        assert classify_band(Decimal("10")).color == "#FAD898"
        assert classify_band(Decimal("30")).color == "#a6d96a"
        assert classify_band(Decimal("500")).color == "#1a9641"
        assert classify_band(Decimal("5000")) == TOP_BAND
        assert TOP_BAND.color == "#000000"

    def test_bands_are_ordered(self):
        bounds = [upper for upper, _ in BANDS]
        assert bounds == sorted(bounds)


# ─── Derive ─────────────────────────────────────────────────────

class TestDerive:
    def test_derive(self, bitcoin_quote):
        metric = derive(bitcoin_quote)
        assert metric.price_usd == Decimal("10000.00")
        assert metric.change_24h == Decimal("-2500")
        assert metric.pct_7d == Decimal("5")
        assert metric.change_7d.quantize(Decimal("0.01")) == Decimal("476.19")
        assert metric.band.emoji == ":thinking_face:"

    def test_band_uses_24h_only(self, bitcoin_quote):
        quote = bitcoin_quote.model_copy(update={"percent_change_7d": "-90"})
        assert derive(quote).band.emoji == ":thinking_face:"

    @pytest.mark.parametrize("field", ["price_usd", "percent_change_24h", "percent_change_7d"])
    def test_missing_field_is_parse_error(self, bitcoin_quote, field):
        quote = bitcoin_quote.model_copy(update={field: ""})
        with pytest.raises(QuoteParseError) as exc:
            derive(quote)
        assert exc.value.field == field

    def test_garbage_is_parse_error(self, bitcoin_quote):
        quote = bitcoin_quote.model_copy(update={"price_usd": "ten bucks"})
        with pytest.raises(QuoteParseError):
            derive(quote)

    def test_minus_hundred_percent_is_parse_error(self, bitcoin_quote):
        quote = bitcoin_quote.model_copy(update={"percent_change_24h": "-100"})
        with pytest.raises(QuoteParseError) as exc:
            derive(quote)
        assert exc.value.field == "percent_change_24h"

    def test_price_too_large_to_round_is_parse_error(self, bitcoin_quote):
        quote = bitcoin_quote.model_copy(update={"price_usd": "1e30"})
        with pytest.raises(QuoteParseError) as exc:
            derive(quote)
        assert exc.value.field == "price_usd"

    def test_delta_too_large_to_round_is_parse_error(self, bitcoin_quote):
        quote = bitcoin_quote.model_copy(
            update={"percent_change_24h": "-99.99999999999999999999999999"})
        with pytest.raises(QuoteParseError) as exc:
            derive(quote)
        assert exc.value.field == "percent_change_24h"

    def test_one_hour_change_not_required(self):
        quote = TickerQuote(id="x", name="X", symbol="X", price_usd="1",
                            percent_change_24h="1", percent_change_7d="1")
        assert derive(quote).band.emoji == ":beers:"


class TestParseDecimal:
    def test_parses_scientific_notation(self):
        assert parse_decimal("price_usd", "1.5e-05") == Decimal("0.000015")

    @pytest.mark.parametrize("value", ["NaN", "Infinity", "-inf", "", "1,000"])
    def test_rejects_non_finite_and_junk(self, value):
        with pytest.raises(QuoteParseError):
            parse_decimal("price_usd", value)
