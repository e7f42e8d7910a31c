"""
Input validation performed before a run starts.

Every check returns a :class:`ValidationResult` instead of raising so a UI
layer can show the message directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import combinations
from typing import Any, Dict, Mapping, Sequence, Union

import math

from metcalc.config import DISTINCT_TOLERANCE, PROBE_POINTS
from metcalc.errors import ExpressionParseError
from metcalc.expression import Expression, parse_expression


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    message: str
    values: Dict[str, float] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.valid


def validate_expression(expr: Union[str, Expression]) -> ValidationResult:
    """
    Check that ``expr`` parses and is finite on at least half of the
    probe points. Isolated singularities (``1/x`` at 0) are tolerated.
    """
    if not isinstance(expr, Expression):
        try:
            expr = parse_expression(expr)
        except ExpressionParseError as exc:
            return ValidationResult(False, f"Syntax error: {exc}")

    finite = sum(1 for x in PROBE_POINTS if expr(x).ok)
    if 2 * finite >= len(PROBE_POINTS):
        return ValidationResult(True, "Valid function")
    return ValidationResult(False, "Invalid function or no finite values")


def validate_distinct_points(
    points: Union[Mapping[str, float], Sequence[float]],
) -> ValidationResult:
    """Reject any pair of initial points closer than ``DISTINCT_TOLERANCE``."""
    if not isinstance(points, Mapping):
        points = {f"point {idx}": value for idx, value in enumerate(points, start=1)}

    for (name_a, a), (name_b, b) in combinations(points.items(), 2):
        if abs(a - b) < DISTINCT_TOLERANCE:
            return ValidationResult(
                False,
                f"Initial points must be different: {name_a} and {name_b} "
                f"are both {a:g}.",
            )
    return ValidationResult(True, "Valid points", dict(points))


def validate_numeric_inputs(fields: Mapping[str, Any]) -> ValidationResult:
    """
    Parse each field as a finite real number. The first failing field
    stops the check; on success ``values`` holds the parsed floats.
    """
    values: Dict[str, float] = {}
    for name, raw in fields.items():
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            return ValidationResult(False, f"Please fill in the field {name}.")
        if isinstance(raw, bool):
            return ValidationResult(False, f"{name} must be a valid number.")
        try:
            number = float(raw)
        except (TypeError, ValueError):
            return ValidationResult(False, f"{name} must be a valid number.")
        if math.isnan(number):
            return ValidationResult(False, f"{name} must be a valid number.")
        if math.isinf(number):
            return ValidationResult(False, f"{name} must be a finite number.")
        values[name] = number
    return ValidationResult(True, "Valid inputs", values)


def validate_bracket(
    expr: Union[str, Expression], a: float, b: float
) -> ValidationResult:
    """Check that f is finite at ``a`` and ``b`` and changes sign between them."""
    if not isinstance(expr, Expression):
        try:
            expr = parse_expression(expr)
        except ExpressionParseError as exc:
            return ValidationResult(False, f"Syntax error: {exc}")

    fa, fb = expr(a), expr(b)
    for name, x, result in (("a", a, fa), ("b", b, fb)):
        if not result.ok:
            return ValidationResult(
                False, f"f({name}) could not be evaluated at x = {x:g}: {result.reason}"
            )
    # Exact zero at an end is a bracket. Sign test; the product can underflow.
    if fa.value != 0 and fb.value != 0 and (fa.value < 0) == (fb.value < 0):
        return ValidationResult(
            False,
            f"f(a) and f(b) must have opposite signs for bisection "
            f"(f({a:g}) = {fa.value:.6g}, f({b:g}) = {fb.value:.6g}).",
        )
    return ValidationResult(True, "Valid bracket", {"f(a)": fa.value, "f(b)": fb.value})
