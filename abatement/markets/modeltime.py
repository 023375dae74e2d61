"""Model period/year bookkeeping."""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class Modeltime:
    """Ordered model years indexed by period.

    Period 0 is the base period. Each period is labelled by its year; a
    calendar year between two model years belongs to the later period.
    """

    years: tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.years:
            raise ValueError("Modeltime requires at least one model year")
        if any(later <= earlier for earlier, later in zip(self.years, self.years[1:])):
            raise ValueError(f"Model years must be strictly increasing: {list(self.years)}")

    @classmethod
    def from_years(cls, years: Iterable[int | str | float]) -> "Modeltime":
        try:
            normalized = tuple(int(year) for year in years)
        except (TypeError, ValueError) as exc:
            raise TypeError("Model years must be integers") from exc
        return cls(normalized)

    @property
    def base_period(self) -> int:
        return 0

    @property
    def base_year(self) -> int:
        return self.years[0]

    @property
    def end_year(self) -> int:
        return self.years[-1]

    @property
    def max_period(self) -> int:
        return len(self.years)

    def periods(self) -> range:
        return range(self.max_period)

    def per_to_yr(self, period: int) -> int:
        if period < 0 or period >= self.max_period:
            raise IndexError(f"Period {period} outside model horizon 0..{self.max_period - 1}")
        return self.years[period]

    def yr_to_per(self, year: int) -> int:
        """Return the period containing ``year``, clamped to the model horizon."""

        index = bisect.bisect_left(self.years, int(year))
        return min(index, self.max_period - 1)
