from __future__ import annotations

import logging

import pytest

from abatement.mac import MacCurveConfiguration, MacCurveEvaluator, ReductionStrategy
from tests.mac_helpers import build_evaluator, carbon_prices, modeltime, price_source


def test_reduction_interpolates_carbon_price() -> None:
    evaluator = build_evaluator(carbon_prices("USA", {5: 75.0}))

    assert evaluator.find_reduction("USA", 5) == pytest.approx(0.35)


def test_repeated_queries_are_identical() -> None:
    evaluator = build_evaluator(carbon_prices("USA", {5: 75.0}))

    first = evaluator.find_reduction("USA", 5)
    second = evaluator.find_reduction("USA", 5)

    assert first == second


def test_carbon_price_above_curve_uses_top_reduction() -> None:
    evaluator = build_evaluator(carbon_prices("USA", {5: 150.0}))

    assert evaluator.find_reduction("USA", 5) == 0.5
    assert evaluator.max_reduction() == 0.5


def test_missing_carbon_market_is_zero_price() -> None:
    evaluator = build_evaluator({}, curve=[(0.0, 0.1), (100.0, 0.5)])

    assert evaluator.find_reduction("USA", 5) == pytest.approx(0.1)


def test_no_below_zero_on_base_curve_gives_zero() -> None:
    evaluator = build_evaluator(carbon_prices("USA", {5: -10.0}), {"noBelowZero": True})

    assert evaluator.find_reduction("USA", 5) == 0.0


def test_no_below_zero_forces_zero_reduction_for_negative_price() -> None:
    curve = [(-20.0, 0.3), (0.0, 0.0), (50.0, 0.2), (100.0, 0.5)]
    prices = carbon_prices("USA", {5: -10.0})

    unclamped = build_evaluator(prices, curve=curve)
    clamped = build_evaluator(prices, {"noBelowZero": True}, curve=curve)

    assert unclamped.find_reduction("USA", 5) == pytest.approx(0.15)
    assert clamped.find_reduction("USA", 5) == 0.0


def test_cost_reduction_discounts_carbon_price_before_lookup() -> None:
    evaluator = build_evaluator(
        carbon_prices("USA", {3: 100.0}),
        {"costReductionRate": 0.05, "baseCostYear": 2010},
    )

    effective_price = 100.0 / 1.05**10
    expected = 0.2 + 0.3 * (effective_price - 50.0) / 50.0
    assert evaluator.find_reduction("USA", 3) == pytest.approx(expected)


def test_phase_in_scales_reduction() -> None:
    evaluator = build_evaluator(carbon_prices("USA", {1: 100.0, 3: 100.0}), {"phaseIn": 4})

    assert evaluator.find_reduction("USA", 1) == 0.0
    assert evaluator.find_reduction("USA", 3) == pytest.approx(0.25)


def test_default_phase_in_zeroes_first_period() -> None:
    evaluator = build_evaluator(carbon_prices("USA", {1: 100.0, 2: 100.0}))

    assert evaluator.find_reduction("USA", 1) == 0.0
    assert evaluator.find_reduction("USA", 2) == 0.5


def test_fuel_shift_moves_effective_price() -> None:
    prices = carbon_prices("USA", {5: 50.0})
    prices.update({("natural gas", "USA", 1): 4.0, ("natural gas", "USA", 5): 8.0})
    evaluator = build_evaluator(
        prices, {"fuelShiftRange": 20.0, "curveShiftFuelName": "natural gas"}
    )

    assert evaluator.find_reduction("USA", 5) == pytest.approx(0.2 + 0.3 * 4.5 / 50.0)


def test_final_reduction_ramps_technology_change() -> None:
    evaluator = build_evaluator(
        carbon_prices("USA", {5: 100.0, 9: 100.0}),
        {"finalReduction": 1.0, "finalReductionYear": 2040},
    )

    # final reduction period is 7; change = 0.5 / 1.0
    assert evaluator.find_reduction("USA", 5) == pytest.approx(0.5 * 0.5 * 3 / 5)
    assert evaluator.find_reduction("USA", 9) == pytest.approx(0.5 * 0.5)


def test_final_reduction_within_curve_is_ignored() -> None:
    evaluator = build_evaluator(
        carbon_prices("USA", {5: 100.0}),
        {"finalReduction": 0.4, "finalReductionYear": 2040},
    )

    assert evaluator.find_reduction("USA", 5) == 0.5


def test_final_reduction_period_two_is_logged_and_unscaled(
    caplog: pytest.LogCaptureFixture,
) -> None:
    evaluator = build_evaluator(
        carbon_prices("USA", {2: 100.0, 5: 100.0}),
        {"finalReduction": 1.0, "finalReductionYear": 2015},
    )

    with caplog.at_level(logging.ERROR):
        reduction = evaluator.find_reduction("USA", 2)

    assert reduction == 0.5
    assert "Technology change ramp for CH4 is undefined" in caplog.text

    caplog.clear()
    with caplog.at_level(logging.ERROR):
        after_final = evaluator.find_reduction("USA", 5)

    assert after_final == pytest.approx(0.5 * 0.5)
    assert "Technology change ramp" not in caplog.text


def test_cost_reduction_outside_horizon_does_not_raise(
    caplog: pytest.LogCaptureFixture,
) -> None:
    evaluator = build_evaluator(carbon_prices("USA", {10: 75.0}), {"costReductionRate": 0.05})

    with caplog.at_level(logging.ERROR):
        reduction = evaluator.find_reduction("USA", 10)

    assert reduction == pytest.approx(0.35)
    assert "Unable to apply cost reduction in period 10" in caplog.text


def test_empty_curve_reduces_nothing_and_logs(caplog: pytest.LogCaptureFixture) -> None:
    evaluator = MacCurveEvaluator(price_source(carbon_prices("USA", {5: 75.0})), modeltime())

    with caplog.at_level(logging.ERROR):
        evaluator.init_calc("CH4")
        reduction = evaluator.find_reduction("USA", 5)

    assert reduction == 0.0
    assert "MAC for gas CH4 appears to have no data." in caplog.text
    assert "An error occurred when evaluating MAC curve" in caplog.text


def test_init_calc_is_silent_with_data(caplog: pytest.LogCaptureFixture) -> None:
    evaluator = build_evaluator({})

    with caplog.at_level(logging.ERROR):
        evaluator.init_calc("CH4")

    assert caplog.records == []


def test_defaults_follow_modeltime() -> None:
    evaluator = MacCurveEvaluator(price_source({}), modeltime())

    assert evaluator.config == MacCurveConfiguration(base_cost_year=2005, final_reduction_year=2050)
    assert evaluator.config.phase_in == 1.0
    assert evaluator.config.no_below_zero is False


def test_parse_accepts_pairs_aliases_and_point_shapes() -> None:
    evaluator = MacCurveEvaluator(price_source({}), modeltime())
    evaluator.parse(
        [
            ("phase_in", "3"),
            ("noBelowZero", "true"),
            ("baseCostYear", 2010.0),
            ("curveShiftFuelName", " natural gas "),
            ("reduction", {"tax": 50, "value": 0.2}),
            ("reduction", (0, 0.0)),
            ("reduction", [[100, 0.5]]),
        ]
    )

    assert evaluator.config.phase_in == 3.0
    assert evaluator.config.no_below_zero is True
    assert evaluator.config.base_cost_year == 2010
    assert evaluator.config.curve_shift_fuel_name == "natural gas"
    assert evaluator.curve.sorted_pairs() == [(0.0, 0.0), (50.0, 0.2), (100.0, 0.5)]


def test_parse_warns_on_unknown_and_invalid_fields(caplog: pytest.LogCaptureFixture) -> None:
    evaluator = MacCurveEvaluator(price_source({}), modeltime())

    with caplog.at_level(logging.WARNING):
        evaluator.parse(
            {
                "gwp": 21,
                "phaseIn": "soon",
                "baseCostYear": 2010.5,
                "reduction": [(0, 0.0), ("high", 0.5)],
            }
        )

    assert "Unrecognized field gwp" in caplog.text
    assert "Invalid value 'soon' for phaseIn" in caplog.text
    assert "Invalid value 2010.5 for baseCostYear" in caplog.text
    assert "Ignoring reduction entry" in caplog.text
    assert evaluator.config.phase_in == 1.0
    assert evaluator.config.base_cost_year == 2005
    assert evaluator.curve.sorted_pairs() == [(0.0, 0.0)]


def test_to_mapping_omits_defaults_and_round_trips() -> None:
    prices = carbon_prices("USA", {period: 20.0 * period for period in range(10)})
    evaluator = build_evaluator(
        prices,
        {"phaseIn": 3, "costReductionRate": 0.02, "finalReduction": 0.9, "finalReductionYear": 2040},
    )

    mapping = evaluator.to_mapping()

    assert mapping == {
        "costReductionRate": 0.02,
        "phaseIn": 3.0,
        "finalReduction": 0.9,
        "finalReductionYear": 2040,
        "reduction": [
            {"tax": 0.0, "value": 0.0},
            {"tax": 50.0, "value": 0.2},
            {"tax": 100.0, "value": 0.5},
        ],
    }

    rebuilt = MacCurveEvaluator(evaluator.prices, evaluator.modeltime, name="CH4")
    rebuilt.parse(mapping)
    for period in range(10):
        assert rebuilt.find_reduction("USA", period) == evaluator.find_reduction("USA", period)


def test_copy_does_not_share_curve_or_config() -> None:
    evaluator = build_evaluator(carbon_prices("USA", {5: 75.0}))
    clone = evaluator.copy()

    clone.curve.add_point(75.0, 0.9)
    clone.parse({"phaseIn": 10, "reduction": [(0, 0.0), (100, 1.0)]})

    assert evaluator.find_reduction("USA", 5) == pytest.approx(0.35)
    assert evaluator.config.phase_in == 1.0
    assert clone.find_reduction("USA", 5) == pytest.approx(0.75 * 4 / 10)


def test_debug_mapping_lists_every_parameter() -> None:
    evaluator = build_evaluator(carbon_prices("USA", {5: 75.0}))

    debug = evaluator.debug_mapping("USA", 5)

    assert debug["noBelowZero"] is False
    assert debug["phaseIn"] == 1.0
    assert debug["taxVal"] == [0.0, 50.0, 100.0]
    assert debug["reductionVal"] == [0.0, 0.2, 0.5]
    assert debug["reduction"] == pytest.approx(0.35)


def test_evaluator_satisfies_reduction_strategy() -> None:
    assert isinstance(build_evaluator({}), ReductionStrategy)
