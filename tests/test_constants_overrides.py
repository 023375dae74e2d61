"""Tests for environment and configuration overrides of abatement constants."""

from __future__ import annotations

import importlib
import logging
import os
from pathlib import Path

import pytest

import abatement.constants as constants
import abatement.constants_overrides as overrides


@pytest.fixture(autouse=True)
def _restore_constants(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("GHGMAC_NORM_FACTOR", raising=False)
    monkeypatch.delenv("GHGMAC_TECH_CHANGE_START_PERIOD", raising=False)
    monkeypatch.delenv("GHGMAC_RUN_CONFIG", raising=False)
    yield
    monkeypatch.undo()
    _reload_constants()


def _reload_constants() -> object:
    overrides.clear_cache()
    return importlib.reload(constants)


def test_defaults_without_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GHGMAC_RUN_CONFIG", str(tmp_path / "absent.toml"))

    module = _reload_constants()

    assert module.NORM_FACTOR == pytest.approx(0.6)
    assert module.CARBON_MARKET == "CO2"
    assert module.FUEL_SHIFT_BASE_PERIOD == 1
    assert module.TECH_CHANGE_START_PERIOD == 2
    assert overrides.constant_sources()["NORM_FACTOR"] == "default"


def test_environment_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GHGMAC_NORM_FACTOR", "0.25")

    module = _reload_constants()

    assert module.NORM_FACTOR == pytest.approx(0.25)
    assert overrides.constant_sources()["NORM_FACTOR"] == "env"


def test_run_config_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    config_path = tmp_path / "run_config.toml"
    config_path.write_text(
        "years = [2005]\n[abatement.constants]\nnorm_factor = 0.5\nCARBON_MARKET = 'CO2e'\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("GHGMAC_RUN_CONFIG", str(config_path))

    module = _reload_constants()

    assert module.NORM_FACTOR == pytest.approx(0.5)
    assert module.CARBON_MARKET == "CO2e"
    assert overrides.constant_sources()["CARBON_MARKET"] == "run_config"


def test_invalid_override_falls_back(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setenv("GHGMAC_TECH_CHANGE_START_PERIOD", "two")

    with caplog.at_level(logging.WARNING):
        module = _reload_constants()

    assert module.TECH_CHANGE_START_PERIOD == 2
    assert "Invalid override for TECH_CHANGE_START_PERIOD" in caplog.text


def test_scoped_run_config_restores_previous_values(tmp_path: Path) -> None:
    config_path = tmp_path / "run_config.toml"
    config_path.write_text("[abatement.constants]\nNORM_FACTOR = 0.3\n", encoding="utf-8")
    _reload_constants()
    previous_path = overrides.active_run_config_path()

    with overrides.run_config_overrides(config_path) as sources:
        assert constants.NORM_FACTOR == pytest.approx(0.3)
        assert sources["NORM_FACTOR"] == "run_config"
        assert overrides.active_run_config_path() == config_path

    assert constants.NORM_FACTOR == pytest.approx(0.6)
    assert overrides.active_run_config_path() == previous_path
    assert "GHGMAC_RUN_CONFIG" not in os.environ


def test_scoped_run_config_restores_on_error(tmp_path: Path) -> None:
    config_path = tmp_path / "run_config.toml"
    config_path.write_text("[abatement.constants]\nNORM_FACTOR = 0.3\n", encoding="utf-8")

    with pytest.raises(RuntimeError):
        with overrides.run_config_overrides(config_path):
            raise RuntimeError("solve failed")

    assert constants.NORM_FACTOR == pytest.approx(0.6)
