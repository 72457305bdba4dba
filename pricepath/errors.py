"""Exception types raised by pricepath."""


class PricePathError(Exception):
    """Base class for all pricepath errors."""


class InsufficientDataError(PricePathError):
    """Historical price series too short to estimate drift and volatility."""

    def __init__(self, ticker: str, available: int, required: int):
        self.ticker = ticker
        self.available = available
        self.required = required
        super().__init__(f"Insufficient price data for {ticker}")


class DataSourceError(PricePathError):
    """A collaborator (price, mention or classifier source) failed."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"{source}: {message}")


class ConfigurationError(PricePathError):
    """Required configuration (usually an API credential) is missing."""
