"""Price and time services consumed by MAC curve evaluation."""

from .frame_source import FramePriceSource
from .interfaces import NO_MARKET_PRICE, MarketPriceSource
from .modeltime import Modeltime

__all__ = ["FramePriceSource", "MarketPriceSource", "Modeltime", "NO_MARKET_PRICE"]
