"""Market price source backed by a long-format pandas DataFrame."""

from __future__ import annotations

from logging import getLogger
from pathlib import Path
from typing import Mapping

import pandas as pd

from .interfaces import NO_MARKET_PRICE
from .modeltime import Modeltime

logger = getLogger(__name__)

PRICE_COLUMNS = ("market", "region", "price")


class FramePriceSource:
    """Serve prices from rows of ``market, region, period|year, price``.

    Rows keyed by ``year`` are mapped onto periods through ``modeltime``.
    Rows with a non-numeric price or period are dropped with a warning; a
    repeated key keeps the last row.
    """

    def __init__(self, prices: pd.DataFrame, modeltime: Modeltime | None = None):
        self.modeltime = modeltime
        self._prices = self._index_frame(prices)

    @classmethod
    def from_mapping(cls, prices: Mapping[tuple[str, str, int], float]) -> "FramePriceSource":
        rows = [
            {"market": market, "region": region, "period": period, "price": price}
            for (market, region, period), price in prices.items()
        ]
        frame = pd.DataFrame(rows, columns=["market", "region", "period", "price"])
        return cls(frame)

    @classmethod
    def from_csv(cls, path: Path | str, modeltime: Modeltime | None = None) -> "FramePriceSource":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Price file not found: {path}")
        return cls(pd.read_csv(path), modeltime)

    def _index_frame(self, prices: pd.DataFrame) -> dict[tuple[str, str, int], float]:
        missing = set(PRICE_COLUMNS) - set(prices.columns)
        if missing:
            raise ValueError(
                "Price frame is missing required columns: " + ", ".join(sorted(missing))
            )

        working = prices.copy()
        if "period" not in working.columns:
            if "year" not in working.columns:
                raise ValueError("Price frame requires a 'period' or 'year' column")
            if self.modeltime is None:
                raise ValueError("A Modeltime is required to map price years onto periods")
            years = pd.to_numeric(working["year"], errors="coerce")
            known = years.isin(self.modeltime.years)
            if (~known).any():
                logger.warning(
                    'Dropping %d price rows for years outside the model horizon', int((~known).sum())
                )
            working = working[known].copy()
            working["period"] = [self.modeltime.yr_to_per(int(year)) for year in years[known]]

        working["market"] = working["market"].astype(str).str.strip()
        working["region"] = working["region"].astype(str).str.strip()
        working["period"] = pd.to_numeric(working["period"], errors="coerce")
        working["price"] = pd.to_numeric(working["price"], errors="coerce")

        invalid = working["period"].isna() | working["price"].isna()
        if invalid.any():
            logger.warning('Dropping %d price rows with non-numeric values', int(invalid.sum()))
        working = working[~invalid]

        return {
            (market, region, int(period)): float(price)
            for market, region, period, price in working.loc[
                :, ["market", "region", "period", "price"]
            ].itertuples(index=False)
        }

    def get_price(
        self,
        market_name: str,
        region: str,
        period: int,
        must_exist: bool = True,
    ) -> float | None:
        price = self._prices.get((market_name, region, int(period)))
        if price is None:
            if must_exist:
                logger.warning(
                    'Market %s does not exist in region %s for period %s', market_name, region, period
                )
            return NO_MARKET_PRICE
        return price

    def markets(self) -> set[str]:
        return {market for market, _, _ in self._prices}

    def __len__(self) -> int:
        return len(self._prices)
