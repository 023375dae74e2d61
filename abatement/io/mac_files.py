"""Reading and writing MAC curve definitions and reduction tables."""

from __future__ import annotations

from logging import getLogger
from pathlib import Path
from typing import Any, Iterable, Mapping

import pandas as pd
import tomlkit

try:  # pragma: no cover - Python < 3.11 fallback
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - dependency fallback
    import tomli as tomllib  # type: ignore[import-not-found]

from abatement import constants
from abatement.mac.evaluator import REDUCTION_FIELD, MacCurveEvaluator
from abatement.markets.interfaces import MarketPriceSource
from abatement.markets.modeltime import Modeltime

logger = getLogger(__name__)

MacKey = tuple[str, str]

_ENTRY_KEYS = {"gas", "sector", "points_file"}
_POINT_COLUMNS = ("tax", "reduction")


def load_reduction_points(path: Path | str) -> list[tuple[float, float]]:
    """Return ``(tax, reduction)`` pairs from a CSV with ``tax`` and ``reduction`` columns."""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Reduction points file not found: {path}")

    frame = pd.read_csv(path)
    frame.columns = [str(column).strip().lower() for column in frame.columns]
    missing = set(_POINT_COLUMNS) - set(frame.columns)
    if missing:
        raise ValueError(
            f"{path.name} is missing required columns: " + ", ".join(sorted(missing))
        )

    for column in _POINT_COLUMNS:
        frame[column] = pd.to_numeric(frame[column], errors="coerce")
    invalid = frame["tax"].isna() | frame["reduction"].isna()
    if invalid.any():
        logger.warning('Dropping %d non-numeric rows from %s', int(invalid.sum()), path)
    frame = frame[~invalid]

    return [(float(tax), float(value)) for tax, value in zip(frame["tax"], frame["reduction"])]


def load_mac_file(
    path: Path | str,
    prices: MarketPriceSource,
    modeltime: Modeltime,
) -> dict[MacKey, MacCurveEvaluator]:
    """Build one evaluator per ``[[mac]]`` entry of a TOML document.

    Each entry names its ``gas`` and optional ``sector`` and carries the
    evaluator's parse fields. Control points come from ``reduction`` and/or a
    ``points_file`` CSV resolved relative to the document.
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"MAC definition file not found: {path}")
    try:
        with path.open("rb") as handle:
            document = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Unable to parse MAC definition file {path}: {exc}") from exc

    entries = document.get(constants.MAC_TABLE_NAME, [])
    if isinstance(entries, Mapping):
        entries = [entries]
    if not isinstance(entries, list):
        raise TypeError(f"'{constants.MAC_TABLE_NAME}' in {path} must be an array of tables")

    evaluators: dict[MacKey, MacCurveEvaluator] = {}
    for position, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            raise TypeError(f"Entry {position} of '{constants.MAC_TABLE_NAME}' in {path} is not a table")
        gas = str(entry.get("gas", "")).strip()
        if not gas:
            raise ValueError(f"Entry {position} of '{constants.MAC_TABLE_NAME}' in {path} has no gas")
        sector = str(entry.get("sector", "")).strip()
        key = (gas, sector)
        if key in evaluators:
            logger.warning('Duplicate MAC for gas %s sector %r in %s; using the later one', gas, sector, path)

        fields: list[tuple[str, Any]] = [
            (name, value) for name, value in entry.items() if name not in _ENTRY_KEYS
        ]
        points_file = entry.get("points_file")
        if points_file:
            points_path = Path(points_file)
            if not points_path.is_absolute():
                points_path = path.parent / points_path
            fields.append((REDUCTION_FIELD, load_reduction_points(points_path)))

        evaluator = MacCurveEvaluator(prices, modeltime, name=_label(key))
        evaluator.parse(fields)
        evaluators[key] = evaluator

    logger.info('Loaded %d MAC curves from %s', len(evaluators), path)
    return evaluators


def write_mac_file(path: Path | str, evaluators: Mapping[MacKey, MacCurveEvaluator]) -> Path:
    """Write ``evaluators`` as a TOML document readable by :func:`load_mac_file`."""

    path = Path(path)
    document = tomlkit.document()
    tables = tomlkit.aot()
    for (gas, sector), evaluator in evaluators.items():
        entry = tomlkit.table()
        entry.add("gas", gas)
        if sector:
            entry.add("sector", sector)
        mapping = evaluator.to_mapping()
        for name, value in mapping.items():
            if name == REDUCTION_FIELD:
                continue
            entry.add(name, value)
        points = tomlkit.array()
        for record in mapping[REDUCTION_FIELD]:
            point = tomlkit.inline_table()
            point.update(record)
            points.append(point)
        entry.add(REDUCTION_FIELD, points.multiline(True))
        tables.append(entry)
    document.add(constants.MAC_TABLE_NAME, tables)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(tomlkit.dumps(document), encoding="utf-8")
    return path


def reduction_table(
    evaluators: Mapping[MacKey, MacCurveEvaluator],
    regions: Iterable[str],
    modeltime: Modeltime,
    periods: Iterable[int] | None = None,
) -> pd.DataFrame:
    """Evaluate every curve for every region and period."""

    columns = ["gas", "sector", "region", "period", "year", "reduction"]
    selected = list(periods) if periods is not None else list(modeltime.periods())
    rows = [
        {
            "gas": gas,
            "sector": sector,
            "region": region,
            "period": period,
            "year": modeltime.per_to_yr(period),
            "reduction": evaluator.find_reduction(region, period),
        }
        for (gas, sector), evaluator in evaluators.items()
        for region in regions
        for period in selected
    ]
    return pd.DataFrame(rows, columns=columns)


def _label(key: MacKey) -> str:
    gas, sector = key
    return f"{gas}/{sector}" if sector else gas


__all__ = ["load_mac_file", "load_reduction_points", "reduction_table", "write_mac_file"]
