"""
Display-interval estimation and curve sampling for plotting collaborators.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence, Tuple, Union

import math

from metcalc.config import PLOT_SAMPLES, PLOT_VALUE_LIMIT
from metcalc.errors import ExpressionParseError
from metcalc.expression import Expression, parse_expression

Points = Union[Mapping[str, object], Sequence[object]]


@dataclass(frozen=True)
class DisplayDomain:
    start: float
    end: float


@dataclass(frozen=True)
class CurveSample:
    """Finite samples of f over a domain plus a padded y-range."""

    domain: DisplayDomain
    points: List[Tuple[float, float]] = field(default_factory=list)
    y_min: Optional[float] = None
    y_max: Optional[float] = None


def _numeric(points: Optional[Points]) -> List[float]:
    if points is None:
        return []
    values = points.values() if isinstance(points, Mapping) else points
    return [
        float(v)
        for v in values
        if isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)
    ]


def estimate_display_domain(
    root: Optional[float] = None, initial_points: Optional[Points] = None
) -> DisplayDomain:
    """
    ``[root - 3, root + 3]`` when a root is known, otherwise two units
    around the initial points, otherwise ``[-5, 5]``. Non-numeric initial
    points are ignored.
    """
    if root is not None and math.isfinite(root):
        return DisplayDomain(root - 3.0, root + 3.0)
    xs = _numeric(initial_points)
    if xs:
        return DisplayDomain(min(xs) - 2.0, max(xs) + 2.0)
    return DisplayDomain(-5.0, 5.0)


def sample_function(
    expr: Union[str, Expression],
    domain: DisplayDomain,
    samples: int = PLOT_SAMPLES,
) -> CurveSample:
    """
    Evaluate f at ``samples + 1`` evenly spaced points over ``domain``.

    Invalid points and values with ``|y| >= PLOT_VALUE_LIMIT`` are skipped.
    The y-range is widened by 10% of its span on each side.
    """
    if samples < 1:
        raise ValueError("samples must be at least 1")
    if not isinstance(expr, Expression):
        try:
            expr = parse_expression(expr)
        except ExpressionParseError:
            return CurveSample(domain)

    step = (domain.end - domain.start) / samples
    points = []
    for i in range(samples + 1):
        x = domain.start + i * step
        result = expr(x)
        if result.ok and abs(result.value) < PLOT_VALUE_LIMIT:
            points.append((x, result.value))

    if not points:
        return CurveSample(domain)
    ys = [y for _, y in points]
    margin = (max(ys) - min(ys)) * 0.1
    return CurveSample(domain, points, min(ys) - margin, max(ys) + margin)
