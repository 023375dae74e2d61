"""Authoritative constants shared by the MAC curve engine."""

from __future__ import annotations

from .constants_overrides import get_constant


# Every MAC curve is keyed off this market's price.
CARBON_MARKET: str = get_constant("CARBON_MARKET", "CO2", str)

# Scales (1 - priceChangeRatio) so a halving of the fuel price maps to -0.6
# and a tripling to 0.4 of the shift range.
NORM_FACTOR: float = get_constant("NORM_FACTOR", 0.6, float)

# Fuel shifts compare against this period's fuel price.
FUEL_SHIFT_BASE_PERIOD: int = get_constant("FUEL_SHIFT_BASE_PERIOD", 1, int)

# Offset in (period - 2) / (finalReductionPeriod - 2) of the technology change
# ramp. Periods below it yield negative multipliers; a final reduction period
# equal to it is a division by zero.
TECH_CHANGE_START_PERIOD: int = get_constant("TECH_CHANGE_START_PERIOD", 2, int)

MAC_TABLE_NAME = "mac"
REDUCTIONS_FILENAME = "reductions.csv"


__all__ = [
    "CARBON_MARKET",
    "NORM_FACTOR",
    "FUEL_SHIFT_BASE_PERIOD",
    "TECH_CHANGE_START_PERIOD",
    "MAC_TABLE_NAME",
    "REDUCTIONS_FILENAME",
]
