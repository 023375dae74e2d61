"""Emissions reduction strategies driven by marginal abatement cost curves."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol, runtime_checkable

from .config import MacCurveConfiguration
from .evaluator import MacCurveEvaluator


@runtime_checkable
class ReductionStrategy(Protocol):
    """Capabilities an emissions object needs from a reduction strategy."""

    name: str

    def parse(self, fields: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> None:
        ...

    def init_calc(self, gas_name: str) -> None:
        ...

    def find_reduction(self, region: str, period: int) -> float:
        ...

    def copy(self) -> "ReductionStrategy":
        ...


__all__ = ["MacCurveConfiguration", "MacCurveEvaluator", "ReductionStrategy"]
