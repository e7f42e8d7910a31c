"""
Expression evaluator.

Turns user text such as ``"x^3 - 2*x + 1"`` or ``"cos(x) - x"`` into a
compiled callable and evaluates it at arbitrary real ``x``. Evaluation never
raises: every outcome is either a :class:`Value` holding a finite float or an
:class:`Invalid` carrying the reason (division by zero, domain error,
overflow, complex result, ...).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Union

import math
import sympy as sp

from metcalc.errors import ExpressionParseError


# --------------------------------------------------------------------------- #
# Parsing
# --------------------------------------------------------------------------- #

X_SYMBOL = sp.Symbol("x", real=True)

# Names users coming from calculator syntax expect to work.
_LOCALS = {
    "x": X_SYMBOL,
    "e": sp.E,
    "pi": sp.pi,
    "ln": sp.log,
}


@dataclass(frozen=True)
class Expression:
    """A parsed formula in the single free variable ``x``."""

    text: str
    sympy_expr: sp.Expr = field(repr=False)
    func: Callable[[float], object] = field(repr=False, compare=False)

    def __call__(self, x: float) -> "EvaluationResult":
        return evaluate_compiled(self.func, x)


def parse_expression(text: str) -> Expression:
    """
    Parse and compile ``text`` into an :class:`Expression`.

    Raises
    ------
    ExpressionParseError
        Empty input, invalid syntax, a non-scalar expression or a free
        symbol other than ``x``.
    """
    if not isinstance(text, str) or not text.strip():
        raise ExpressionParseError("Function expression cannot be empty.")
    try:
        sympy_expr = sp.sympify(text, locals=_LOCALS)
    except (sp.SympifyError, SyntaxError, TypeError) as exc:
        raise ExpressionParseError(f"Invalid function expression: {text}") from exc

    if not isinstance(sympy_expr, sp.Expr):
        raise ExpressionParseError(
            f"Expression must be a single real-valued formula in x: {text}"
        )
    unknown = sympy_expr.free_symbols - {X_SYMBOL}
    if unknown:
        names = ", ".join(sorted(str(symbol) for symbol in unknown))
        raise ExpressionParseError(f"Unknown symbol(s) in expression: {names}")

    try:
        func = sp.lambdify(X_SYMBOL, sympy_expr, "math")
    except Exception as exc:  # printer has no "math" translation for a node
        raise ExpressionParseError(f"Cannot compile expression: {text}") from exc
    return Expression(text=text, sympy_expr=sympy_expr, func=func)


# --------------------------------------------------------------------------- #
# Evaluation results
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class Value:
    value: float

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Invalid:
    reason: str

    @property
    def ok(self) -> bool:
        return False


EvaluationResult = Union[Value, Invalid]


def _to_float(evaluated) -> EvaluationResult:
    """Convert a raw lambdified result into a tagged result."""
    if isinstance(evaluated, complex):
        if abs(evaluated.imag) > 1e-9:
            return Invalid("complex result")
        evaluated = evaluated.real
    try:
        number = float(evaluated)
    except (TypeError, ValueError):
        return Invalid(f"non-numeric result: {evaluated}")
    if math.isnan(number):
        return Invalid("result is not a number")
    if math.isinf(number):
        return Invalid("result is infinite")
    return Value(number)


def evaluate_compiled(func: Callable[[float], object], x: float) -> EvaluationResult:
    try:
        evaluated = func(x)
    except ZeroDivisionError:
        return Invalid("division by zero")
    except OverflowError:
        return Invalid("numerical overflow")
    except Exception as exc:  # math domain errors, unprintable sympy leftovers
        return Invalid(str(exc) or exc.__class__.__name__)
    return _to_float(evaluated)


def evaluate(expr: Union[str, Expression], x: float) -> EvaluationResult:
    """
    Evaluate ``expr`` at ``x``.

    ``expr`` may be raw text, in which case a parse failure is reported as
    ``Invalid`` instead of raising.
    """
    if not isinstance(expr, Expression):
        try:
            expr = parse_expression(expr)
        except ExpressionParseError as exc:
            return Invalid(str(exc))
    return expr(x)
