"""Marginal abatement cost curve evaluation for a single gas/sector."""

from __future__ import annotations

import dataclasses
from logging import getLogger
from typing import Any, Iterable, Mapping

from abatement import constants
from abatement.curves.point_set import PointSetCurve
from abatement.mac.adjusters import (
    cost_reduction_multiplier,
    phase_in_multiplier,
    shift_fuel_price,
    tech_change_multiplier,
)
from abatement.mac.config import (
    CONFIG_FIELDS,
    SERIALIZED_ORDER,
    MacCurveConfiguration,
    canonical_field_name,
)
from abatement.markets.interfaces import NO_MARKET_PRICE, MarketPriceSource
from abatement.markets.modeltime import Modeltime

logger = getLogger(__name__)

REDUCTION_FIELD = "reduction"


class MacCurveEvaluator:
    """Emissions reduction driven by a marginal abatement cost curve.

    The curve maps a carbon price (x) to the fraction of emissions reduced
    (y, 0 = none, 1 = all). Between control points the reduction is linearly
    interpolated. Prices are read from the injected ``prices`` source and
    periods translated to years through ``modeltime``.

    Configuration and curve are populated once through :meth:`parse`; all
    queries afterwards leave the evaluator unchanged.
    """

    def __init__(
        self,
        prices: MarketPriceSource,
        modeltime: Modeltime,
        name: str = "MAC",
        config: MacCurveConfiguration | None = None,
        curve: PointSetCurve | None = None,
    ):
        self.name = name
        self.prices = prices
        self.modeltime = modeltime
        self.config = config if config is not None else MacCurveConfiguration.defaults(modeltime)
        self.curve = curve if curve is not None else PointSetCurve()

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------
    def parse(self, fields: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> None:
        """Populate the configuration and curve from attribute/value pairs.

        ``reduction`` entries hold ``(tax, value)`` pairs, ``{"tax", "value"}``
        mappings, or lists of either. Unrecognised names are logged and
        skipped. The curve is rebuilt from the parsed points.
        """

        items = fields.items() if isinstance(fields, Mapping) else fields
        updates: dict[str, Any] = {}
        curve = PointSetCurve()

        for raw_name, value in items:
            name = canonical_field_name(raw_name)
            if name == REDUCTION_FIELD:
                for tax, reduction in _reduction_entries(value, self.name):
                    curve.add_point(tax, reduction)
            elif name in CONFIG_FIELDS:
                attribute, converter = CONFIG_FIELDS[name]
                try:
                    updates[attribute] = converter(value)
                except (TypeError, ValueError) as exc:
                    logger.warning(
                        'Invalid value %r for %s in %s; keeping %r: %s',
                        value,
                        name,
                        self.name,
                        updates.get(attribute, getattr(self.config, attribute)),
                        exc,
                    )
            else:
                logger.warning(
                    'Unrecognized field %s found while parsing %s.', raw_name, constants.MAC_TABLE_NAME
                )

        self.config = dataclasses.replace(self.config, **updates)
        self.curve = curve

    # ------------------------------------------------------------------
    # Calculation
    # ------------------------------------------------------------------
    def init_calc(self, gas_name: str) -> None:
        """Check the curve once before the model starts solving."""

        if self.curve.max_x() is None:
            logger.error('MAC for gas %s appears to have no data.', gas_name)

    def find_reduction(self, region: str, period: int) -> float:
        """Return the fraction of emissions reduced in ``region`` for ``period``.

        The result is not clamped to [0, 1].
        """

        carbon_price = self.prices.get_price(constants.CARBON_MARKET, region, period, False)
        if carbon_price is NO_MARKET_PRICE:
            carbon_price = 0.0

        if self.config.fuel_shift_range != 0:
            carbon_price = shift_fuel_price(
                self.config, self.curve, self.prices, region, period, carbon_price
            )

        carbon_price *= cost_reduction_multiplier(
            self.modeltime, period, self.config.cost_reduction_rate, self.config.base_cost_year
        )

        reduction = self.get_mac_value(carbon_price)
        if self.config.no_below_zero and carbon_price < 0:
            reduction = 0.0

        max_reduction = self.max_reduction()
        reduction *= phase_in_multiplier(period, self.config.phase_in)

        final_reduction_period = self.modeltime.yr_to_per(self.config.final_reduction_year)
        if self.config.final_reduction > max_reduction and final_reduction_period > 1:
            try:
                reduction *= tech_change_multiplier(
                    period, final_reduction_period, max_reduction, self.config.final_reduction
                )
            except ZeroDivisionError:
                logger.error(
                    'Technology change ramp for %s is undefined with final reduction period %d; '
                    'reduction left unscaled.',
                    self.name,
                    final_reduction_period,
                )
        return reduction

    def get_mac_value(self, carbon_price: float) -> float:
        """Look up the curve at ``carbon_price`` capped to the curve's top price.

        Returns 0 and logs an error when the curve cannot be evaluated.
        """

        max_tax = self.curve.max_x()
        effective_price = carbon_price if max_tax is None else min(carbon_price, max_tax)
        reduction = self.curve.value_at(effective_price)
        if reduction is None:
            logger.error(
                'An error occurred when evaluating MAC curve %s at carbon price %s.',
                self.name,
                carbon_price,
            )
            return 0.0
        return reduction

    def max_reduction(self) -> float:
        max_tax = self.curve.max_x()
        if max_tax is None:
            return self.get_mac_value(0.0)
        return self.get_mac_value(max_tax)

    # ------------------------------------------------------------------
    # Copy and output
    # ------------------------------------------------------------------
    def copy(self) -> "MacCurveEvaluator":
        """Return an independent evaluator sharing only the price/time services."""

        return MacCurveEvaluator(
            self.prices,
            self.modeltime,
            name=self.name,
            config=dataclasses.replace(self.config),
            curve=self.curve.copy(),
        )

    def to_mapping(self) -> dict[str, Any]:
        """Return the parse fields needed to rebuild this evaluator.

        Scalars equal to their defaults are omitted.
        """

        defaults = self.config.default_values(self.modeltime)
        out: dict[str, Any] = {}
        for name in SERIALIZED_ORDER:
            attribute, _ = CONFIG_FIELDS[name]
            value = getattr(self.config, attribute)
            if value != defaults[attribute]:
                out[name] = value
        out[REDUCTION_FIELD] = [
            {"tax": tax, "value": value} for tax, value in self.curve.sorted_pairs()
        ]
        return out

    def debug_mapping(self, region: str, period: int) -> dict[str, Any]:
        """Return every parameter and control point plus the period's reduction."""

        out: dict[str, Any] = {"name": self.name, "period": period, "region": region}
        for name in SERIALIZED_ORDER:
            attribute, _ = CONFIG_FIELDS[name]
            out[name] = getattr(self.config, attribute)
        out["taxVal"] = [tax for tax, _ in self.curve.sorted_pairs()]
        out["reductionVal"] = [value for _, value in self.curve.sorted_pairs()]
        out["reduction"] = self.find_reduction(region, period)
        return out

    def __repr__(self) -> str:
        return f'MacCurveEvaluator(name={self.name!r}, points={len(self.curve)})'


def _reduction_entries(value: Any, owner: str) -> list[tuple[float, float]]:
    """Normalise a ``reduction`` field value into ``(tax, value)`` pairs."""

    if isinstance(value, Mapping) or _is_pair(value):
        candidates: Iterable[Any] = [value]
    elif isinstance(value, (list, tuple)):
        candidates = value
    else:
        logger.warning('Ignoring reduction entry %r in %s', value, owner)
        return []

    pairs: list[tuple[float, float]] = []
    for entry in candidates:
        try:
            if isinstance(entry, Mapping):
                pairs.append((float(entry["tax"]), float(entry["value"])))
            elif _is_pair(entry):
                tax, reduction = entry
                pairs.append((float(tax), float(reduction)))
            else:
                raise ValueError("expected a (tax, value) pair")
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning('Ignoring reduction entry %r in %s: %s', entry, owner, exc)
    return pairs


def _is_pair(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) == 2
        and not any(isinstance(item, (list, tuple, Mapping)) for item in value)
    )


__all__ = ["MacCurveEvaluator", "REDUCTION_FIELD"]
