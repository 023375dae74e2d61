"""Carbon price and reduction adjustments applied around a MAC curve lookup.

Each function is pure: it reads the configuration, the curve and the injected
price/time services and returns a new price or a multiplier.
"""

from __future__ import annotations

from logging import getLogger

from abatement import constants
from abatement.curves.point_set import PointSetCurve
from abatement.mac.config import MacCurveConfiguration
from abatement.markets.interfaces import NO_MARKET_PRICE, MarketPriceSource
from abatement.markets.modeltime import Modeltime

logger = getLogger(__name__)


def shift_fuel_price(
    config: MacCurveConfiguration,
    curve: PointSetCurve,
    prices: MarketPriceSource,
    region: str,
    period: int,
    carbon_price: float,
) -> float:
    """Return the carbon price shifted by the shift fuel's price movement.

    The shift spans ``fuel_shift_range`` for a fuel price running from half to
    double its base-period value, and narrows towards half of that range as the
    carbon price approaches the top of the curve. The result stays within the
    curve's tax range.
    """

    min_price = curve.min_x()
    max_price = curve.max_x()
    if min_price is None or max_price is None:
        return carbon_price

    fuel = config.curve_shift_fuel_name
    fuel_price = prices.get_price(fuel, region, period)
    fuel_base_price = prices.get_price(fuel, region, constants.FUEL_SHIFT_BASE_PERIOD)

    price_change_ratio = 1.0
    if fuel_price is NO_MARKET_PRICE or fuel_price == 0:
        pass
    elif fuel_base_price is NO_MARKET_PRICE:
        logger.warning(
            'No base period price for shift fuel %s in %s; skipping fuel shift', fuel, region
        )
    else:
        price_change_ratio = fuel_base_price / fuel_price

    if max_price == min_price:
        convergence_factor = 1.0
    else:
        convergence_factor = 0.5 + 0.5 * ((max_price - carbon_price) / (max_price - min_price))

    shifted = carbon_price + (
        constants.NORM_FACTOR
        * (1 - price_change_ratio)
        * config.fuel_shift_range
        * convergence_factor
    )
    return min(max(shifted, min_price), max_price)


def cost_reduction_multiplier(
    modeltime: Modeltime,
    period: int,
    cost_reduction_rate: float,
    base_cost_year: int,
) -> float:
    """Return the carbon price multiplier for abatement getting cheaper over time.

    Periods outside the model horizon have no year; they log an error and are
    left undiscounted.
    """

    if cost_reduction_rate != 0:
        try:
            year = modeltime.per_to_yr(period)
        except IndexError as exc:
            logger.error('Unable to apply cost reduction in period %s: %s', period, exc)
            return 1.0
        number_years = year - base_cost_year
        if number_years > 0:
            return 1 / (1 + cost_reduction_rate) ** number_years
    return 1.0


def phase_in_multiplier(period: int, phase_in: float) -> float:
    """Ramp the curve in linearly over ``phase_in`` periods.

    With ``phase_in == 3`` the multiplier is 0 in period 1, then 1/3, 2/3 and 1
    from period 4 onwards.
    """

    if (period - 1) < phase_in and phase_in >= 1:
        return (period - 1) / phase_in
    return 1.0


def tech_change_multiplier(
    period: int,
    final_reduction_period: int,
    max_reduction: float,
    final_reduction: float,
) -> float:
    """Return the reduction multiplier for technology change towards ``final_reduction``.

    Raises ``ZeroDivisionError`` when ``final_reduction_period`` equals
    ``TECH_CHANGE_START_PERIOD``. Periods before the start period give
    negative multipliers.
    """

    change = max_reduction / final_reduction
    start = constants.TECH_CHANGE_START_PERIOD
    if period <= final_reduction_period:
        return change * (period - start) / (final_reduction_period - start)
    return change


__all__ = [
    "cost_reduction_multiplier",
    "phase_in_multiplier",
    "shift_fuel_price",
    "tech_change_multiplier",
]
