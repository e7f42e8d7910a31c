"""Derivative provider for Newton-Raphson."""

from __future__ import annotations

from typing import Callable, Union

import logging
import sympy as sp

from metcalc.config import FINITE_DIFFERENCE_STEP
from metcalc.errors import ExpressionParseError
from metcalc.expression import (
    X_SYMBOL,
    EvaluationResult,
    Expression,
    Invalid,
    Value,
    evaluate_compiled,
    parse_expression,
)

logger = logging.getLogger(__name__)

DerivativeFunction = Callable[[float], EvaluationResult]

DERIVATIVE_MODES = ("symbolic", "numeric")


def central_difference(
    expr: Expression, x: float, h: float = FINITE_DIFFERENCE_STEP
) -> EvaluationResult:
    """Approximate f'(x) with ``(f(x+h) - f(x-h)) / 2h``."""
    forward = expr(x + h)
    if not forward.ok:
        return forward
    backward = expr(x - h)
    if not backward.ok:
        return backward
    return Value((forward.value - backward.value) / (2.0 * h))


def build_derivative(expr: Expression, mode: str = "symbolic") -> DerivativeFunction:
    """
    Return a callable computing f'(x) as an :class:`EvaluationResult`.

    In ``"symbolic"`` mode the expression is differentiated with sympy. Where
    the symbolic form cannot be evaluated but f itself can, the centered
    difference is used for that point instead.
    """
    if mode not in DERIVATIVE_MODES:
        raise ValueError(f"Unknown derivative mode: {mode}")
    if mode == "numeric":
        return lambda x: central_difference(expr, x)

    derivative = sp.diff(expr.sympy_expr, X_SYMBOL)
    if derivative.has(sp.Derivative):
        logger.debug("No closed-form derivative for %s; using differences", expr.text)
        return lambda x: central_difference(expr, x)
    func = sp.lambdify(X_SYMBOL, derivative, "math")

    def wrapper(x: float) -> EvaluationResult:
        result = evaluate_compiled(func, x)
        if result.ok or not expr(x).ok:
            return result
        logger.debug("Symbolic f' invalid at x=%r (%s); using differences", x, result.reason)
        return central_difference(expr, x)

    return wrapper


def derivative_at(
    expr: Union[str, Expression], x: float, mode: str = "symbolic"
) -> EvaluationResult:
    if not isinstance(expr, Expression):
        try:
            expr = parse_expression(expr)
        except ExpressionParseError as exc:
            return Invalid(str(exc))
    return build_derivative(expr, mode)(x)


def derivative_text(expr: Union[str, Expression]) -> str:
    """Symbolic derivative as display text, e.g. ``"3*x**2 - 2"``."""
    try:
        if not isinstance(expr, Expression):
            expr = parse_expression(expr)
        return str(sp.diff(expr.sympy_expr, X_SYMBOL))
    except ExpressionParseError:
        return "Could not compute the derivative"
