"""
YachtBot — Error Taxonomy
Every failure on the lookup path and in the refresh job is one of these.
"""


class YachtBotError(Exception):
    """Base class for all bot errors."""


class SymbolNotFoundError(YachtBotError):
    """No row in the symbol index matches the requested ticker."""

    def __init__(self, symbol: str):
        super().__init__(f"unknown ticker symbol: {symbol!r}")
        self.symbol = symbol


class FetchError(YachtBotError):
    """Transport failure, non-200 status or undecodable market data payload."""


class QuoteParseError(YachtBotError):
    """A numeric quote field is not a valid decimal number."""

    def __init__(self, field: str, value: str):
        super().__init__(f"{field} is not a number: {value!r}")
        self.field = field
        self.value = value


class StorageError(YachtBotError):
    """Reading or writing the symbol index failed."""
