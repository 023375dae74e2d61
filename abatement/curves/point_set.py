"""Piecewise-linear curves defined by explicit control points."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import Iterable, Iterator

import numpy as np

logger = getLogger(__name__)


@dataclass(frozen=True)
class XYDataPoint:
    """Single control point of a curve."""

    x: float
    y: float


class PointSetCurve:
    """Piecewise-linear curve over a set of control points.

    Points are kept sorted by ``x``. Adding a point at an ``x`` that already
    exists replaces the earlier point (last write wins). Queries outside
    ``[min_x, max_x]`` return ``None`` rather than extrapolating; callers clamp
    before asking.
    """

    def __init__(self, points: Iterable[XYDataPoint] | None = None):
        self._xs = np.empty(0, dtype=float)
        self._ys = np.empty(0, dtype=float)
        for point in points or ():
            self.add_point(point.x, point.y)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[float, float]]) -> "PointSetCurve":
        curve = cls()
        for x, y in pairs:
            curve.add_point(x, y)
        return curve

    def add_point(self, x: float, y: float) -> None:
        x = float(x)
        y = float(y)
        index = int(np.searchsorted(self._xs, x))
        if index < len(self._xs) and self._xs[index] == x:
            logger.debug(
                'Replacing curve point at x=%s: y %s -> %s', x, self._ys[index], y
            )
            self._ys[index] = y
            return
        self._xs = np.insert(self._xs, index, x)
        self._ys = np.insert(self._ys, index, y)

    def min_x(self) -> float | None:
        if len(self._xs) == 0:
            return None
        return float(self._xs[0])

    def max_x(self) -> float | None:
        if len(self._xs) == 0:
            return None
        return float(self._xs[-1])

    def value_at(self, x: float) -> float | None:
        """Return the interpolated y at ``x`` or ``None`` when ``x`` is not covered."""

        if len(self._xs) == 0:
            return None
        x = float(x)
        if np.isnan(x) or x < self._xs[0] or x > self._xs[-1]:
            return None

        index = int(np.searchsorted(self._xs, x))
        if self._xs[index] == x:
            return float(self._ys[index])

        x_lo, x_hi = self._xs[index - 1], self._xs[index]
        y_lo, y_hi = self._ys[index - 1], self._ys[index]
        return float(y_lo + (y_hi - y_lo) * (x - x_lo) / (x_hi - x_lo))

    def sorted_pairs(self) -> list[tuple[float, float]]:
        return [(float(x), float(y)) for x, y in zip(self._xs, self._ys)]

    def copy(self) -> "PointSetCurve":
        clone = PointSetCurve()
        clone._xs = self._xs.copy()
        clone._ys = self._ys.copy()
        return clone

    def __len__(self) -> int:
        return len(self._xs)

    def __iter__(self) -> Iterator[XYDataPoint]:
        for x, y in self.sorted_pairs():
            yield XYDataPoint(x, y)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PointSetCurve):
            return NotImplemented
        return self.sorted_pairs() == other.sorted_pairs()

    def __repr__(self) -> str:
        return f'PointSetCurve({self.sorted_pairs()!r})'
