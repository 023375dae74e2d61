"""Configuration value object for MAC curve evaluation."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Callable

from abatement.markets.modeltime import Modeltime


@dataclass(frozen=True)
class MacCurveConfiguration:
    """Scalar parameters steering how a MAC curve is applied.

    Attributes
    ----------
    phase_in:
        Number of periods over which the curve ramps from 0 to full effect.
        Values below 1 disable the ramp.
    cost_reduction_rate:
        Annual fractional rate at which abatement becomes cheaper.
    base_cost_year:
        Calendar year from which cost reductions accrue.
    fuel_shift_range:
        Carbon price shift range driven by the shift fuel's price; 0 disables
        the shift.
    curve_shift_fuel_name:
        Market used for the fuel shift.
    final_reduction:
        Long-run reduction target reached through technology change; 0
        disables the ramp.
    final_reduction_year:
        Year by which ``final_reduction`` is reached.
    no_below_zero:
        Force the reduction to 0 whenever the effective carbon price is
        negative.
    """

    base_cost_year: int
    final_reduction_year: int
    phase_in: float = 1.0
    cost_reduction_rate: float = 0.0
    fuel_shift_range: float = 0.0
    curve_shift_fuel_name: str = ""
    final_reduction: float = 0.0
    no_below_zero: bool = False

    @classmethod
    def defaults(cls, modeltime: Modeltime) -> "MacCurveConfiguration":
        return cls(
            base_cost_year=modeltime.per_to_yr(modeltime.base_period),
            final_reduction_year=modeltime.end_year,
        )

    def default_values(self, modeltime: Modeltime) -> dict[str, Any]:
        defaults = type(self).defaults(modeltime)
        return {item.name: getattr(defaults, item.name) for item in fields(self)}


def coerce_bool(value: Any) -> bool:
    """Interpret ``value`` as a boolean flag."""

    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"true", "t", "yes", "y", "1", "on"}:
            return True
        if normalized in {"false", "f", "no", "n", "0", "off"}:
            return False
    raise ValueError(f"{value!r} is not a boolean value")


def coerce_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not an integer")
    number = float(value)
    if not number.is_integer():
        raise ValueError(f"{value!r} is not an integer")
    return int(number)


def coerce_str(value: Any) -> str:
    if value is None:
        raise ValueError("missing value")
    return str(value).strip()


# Declarative field name -> (attribute, converter)
CONFIG_FIELDS: dict[str, tuple[str, Callable[[Any], Any]]] = {
    "phaseIn": ("phase_in", float),
    "costReductionRate": ("cost_reduction_rate", float),
    "baseCostYear": ("base_cost_year", coerce_int),
    "fuelShiftRange": ("fuel_shift_range", float),
    "curveShiftFuelName": ("curve_shift_fuel_name", coerce_str),
    "finalReduction": ("final_reduction", float),
    "finalReductionYear": ("final_reduction_year", coerce_int),
    "noBelowZero": ("no_below_zero", coerce_bool),
}

ATTRIBUTE_FIELDS = {attribute: name for name, (attribute, _) in CONFIG_FIELDS.items()}

# Order in which scalar fields are written out.
SERIALIZED_ORDER = (
    "noBelowZero",
    "fuelShiftRange",
    "curveShiftFuelName",
    "costReductionRate",
    "baseCostYear",
    "phaseIn",
    "finalReduction",
    "finalReductionYear",
)


def canonical_field_name(name: str) -> str:
    """Return the declarative field name for ``name`` (snake case accepted)."""

    stripped = str(name).strip()
    return ATTRIBUTE_FIELDS.get(stripped, stripped)


__all__ = [
    "ATTRIBUTE_FIELDS",
    "CONFIG_FIELDS",
    "MacCurveConfiguration",
    "SERIALIZED_ORDER",
    "canonical_field_name",
    "coerce_bool",
    "coerce_int",
    "coerce_str",
]
