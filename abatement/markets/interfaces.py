"""Contracts for the price services consumed by the abatement engine."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

# Returned by a price source when no market exists for the request.
NO_MARKET_PRICE: Optional[float] = None


@runtime_checkable
class MarketPriceSource(Protocol):
    """Read-only view of market prices keyed by market, region and period."""

    def get_price(
        self,
        market_name: str,
        region: str,
        period: int,
        must_exist: bool = True,
    ) -> float | None:
        """Return the price or ``NO_MARKET_PRICE`` when the market is unknown.

        ``must_exist`` signals whether a missing market is unexpected; sources
        should report it but still return ``NO_MARKET_PRICE``.
        """
        ...


__all__ = ["MarketPriceSource", "NO_MARKET_PRICE"]
