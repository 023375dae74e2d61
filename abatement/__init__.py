"""Marginal abatement cost curve engine public API."""

from __future__ import annotations

from abatement.curves import PointSetCurve, XYDataPoint
from abatement.mac import MacCurveConfiguration, MacCurveEvaluator, ReductionStrategy
from abatement.markets import FramePriceSource, MarketPriceSource, Modeltime, NO_MARKET_PRICE

__all__ = [
    "FramePriceSource",
    "MacCurveConfiguration",
    "MacCurveEvaluator",
    "MarketPriceSource",
    "Modeltime",
    "NO_MARKET_PRICE",
    "PointSetCurve",
    "ReductionStrategy",
    "XYDataPoint",
]
