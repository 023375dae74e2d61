"""Curve primitives used by the abatement engine."""

from .point_set import PointSetCurve, XYDataPoint

__all__ = ["PointSetCurve", "XYDataPoint"]
