"""
Iteration engine: bisection, secant, Newton-Raphson and Müller.

Each method is written as an unbounded generator of
:class:`~metcalc.model.IterationRecord` rows. A single driver applies the
shared convergence policy, enforces ``max_iterations`` and turns every
failure into a well-formed :class:`~metcalc.model.RunResult`, so callers
never need to catch exceptions from a run.

Convergence: a step converges when ``|f(estimate)| < tolerance`` or its
step-size metric is below ``tolerance``; the function-value test is
checked first and the record that converged names the test that fired.
"""

from __future__ import annotations

from dataclasses import replace
from itertools import count, islice
from typing import Any, Callable, Iterator, Mapping, Optional, Tuple, Union

import logging
import math

from metcalc.config import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    EPSILON,
    METHOD_CONFIGS,
    get_config,
)
from metcalc.derivative import build_derivative
from metcalc.errors import (
    DivergenceError,
    EvaluationInvalid,
    PreconditionViolation,
    RootFindingError,
)
from metcalc.expression import EvaluationResult, Expression, parse_expression
from metcalc.model import (
    BisectionInputs,
    Criterion,
    IterationRecord,
    Method,
    MullerInputs,
    NewtonInputs,
    RunResult,
    SecantInputs,
    Status,
)
from metcalc.validation import (
    validate_bracket,
    validate_distinct_points,
    validate_numeric_inputs,
)

logger = logging.getLogger(__name__)

MethodInputs = Union[BisectionInputs, SecantInputs, NewtonInputs, MullerInputs]
Steps = Iterator[IterationRecord]


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


class _RootAtStart(Exception):
    """An initial point is already an exact root."""

    def __init__(self, x: float, fx: float):
        super().__init__(x, fx)
        self.x = x
        self.fx = fx


def _check_exact_roots(*pairs: Tuple[float, float]) -> None:
    """Stop before iterating when a starting point already has f(x) == 0."""
    for x, fx in pairs:
        if fx == 0.0:
            raise _RootAtStart(x, fx)


def _value(
    func: Callable[[float], EvaluationResult], x: float, label: str = "f"
) -> float:
    if not math.isfinite(x):
        raise EvaluationInvalid(x, "iterate is not finite", label)
    result = func(x)
    if not result.ok:
        raise EvaluationInvalid(x, result.reason, label)
    return result.value


def _check_convergence(
    f_value: float, step: float, tol: float
) -> Optional[Criterion]:
    if abs(f_value) < tol:
        return Criterion.FUNCTION_VALUE
    if step < tol:
        return Criterion.STEP_SIZE
    return None


def _check_settings(tolerance: float, max_iterations: int) -> None:
    if isinstance(tolerance, bool) or not isinstance(tolerance, (int, float)):
        raise PreconditionViolation("Tolerance must be a number.")
    if not math.isfinite(tolerance) or tolerance <= 0:
        raise PreconditionViolation("Tolerance must be a positive finite number.")
    if isinstance(max_iterations, bool) or not isinstance(max_iterations, int):
        raise PreconditionViolation("Maximum iterations must be a whole number.")
    if max_iterations < 1:
        raise PreconditionViolation("Maximum iterations must be at least 1.")


def _base_result(method: Method) -> RunResult:
    return RunResult(method=method, columns=METHOD_CONFIGS[method].columns)


def _finalize(
    result: RunResult,
    *,
    status: Status,
    root: Optional[float],
    function_value: Optional[float],
    message: Optional[str] = None,
    criterion: Optional[Criterion] = None,
) -> RunResult:
    result.status = status
    result.root = root
    result.function_value = function_value
    result.error_message = message
    result.criterion = criterion
    return result


# --------------------------------------------------------------------------- #
# Method steps
# --------------------------------------------------------------------------- #


def _bisection_steps(expr: Expression, a: float, b: float) -> Steps:
    if a > b:
        a, b = b, a
    fa, fb = _value(expr, a), _value(expr, b)
    _check_exact_roots((a, fa), (b, fb))
    # Sign test; f(a) * f(b) can underflow to 0.
    if (fa < 0) == (fb < 0):
        raise PreconditionViolation(
            "f(a) and f(b) must have opposite signs for bisection "
            f"(f({a:g}) = {fa:.6g}, f({b:g}) = {fb:.6g})."
        )

    for i in count(1):
        c = (a + b) / 2.0
        fc = _value(expr, c)
        yield IterationRecord(i, {"a": a, "b": b}, c, fc, (b - a) / 2.0)
        if (fc < 0) == (fa < 0):
            a, fa = c, fc
        else:
            b, fb = c, fc


def _secant_steps(expr: Expression, x0: float, x1: float) -> Steps:
    fx0, fx1 = _value(expr, x0), _value(expr, x1)
    _check_exact_roots((x1, fx1), (x0, fx0))
    for i in count(1):
        denominator = fx1 - fx0
        if abs(denominator) < EPSILON:
            raise DivergenceError(
                f"Division by zero in the secant step: f({x0:g}) and f({x1:g}) "
                "are equal."
            )
        x2 = x1 - fx1 * (x1 - x0) / denominator
        fx2 = _value(expr, x2)
        yield IterationRecord(i, {"x_prev": x0, "x_curr": x1}, x2, fx2, abs(x2 - x1))
        x0, fx0 = x1, fx1
        x1, fx1 = x2, fx2


def _newton_steps(
    expr: Expression, df: Callable[[float], EvaluationResult], x: float
) -> Steps:
    fx = _value(expr, x)
    for i in count(1):
        dfx = _value(df, x, "f'")
        if abs(dfx) < EPSILON:
            raise DivergenceError(
                f"Derivative too small at x = {x:g} (f'(x) = {dfx:.3g}); "
                "Newton-Raphson cannot proceed."
            )
        x_new = x - fx / dfx
        fx_new = _value(expr, x_new)
        yield IterationRecord(
            i, {"x": x, "f(x)": fx, "f'(x)": dfx}, x_new, fx_new, abs(x_new - x)
        )
        x, fx = x_new, fx_new


def _muller_steps(expr: Expression, x0: float, x1: float, x2: float) -> Steps:
    f0, f1, f2 = _value(expr, x0), _value(expr, x1), _value(expr, x2)
    _check_exact_roots((x2, f2), (x1, f1), (x0, f0))
    for i in count(1):
        h1, h2 = x1 - x0, x2 - x1
        if min(abs(h1), abs(h2), abs(h1 + h2)) < EPSILON:
            raise DivergenceError(
                "Interpolation points collapsed; Müller's method cannot proceed."
            )
        d1 = (f1 - f0) / h1
        d2 = (f2 - f1) / h2
        a = (d2 - d1) / (h2 + h1)
        b = a * h2 + d2
        c = f2
        discriminant = b * b - 4.0 * a * c
        if discriminant < 0:
            raise DivergenceError(
                f"Negative discriminant ({discriminant:.6g}) at iteration {i}: "
                "the interpolating parabola only has complex roots."
            )
        root = math.sqrt(discriminant)
        # Larger magnitude denominator avoids cancellation.
        denominator = b + root if abs(b + root) >= abs(b - root) else b - root
        if abs(denominator) < EPSILON:
            raise DivergenceError("Division by zero in the Müller step.")
        dx = -2.0 * c / denominator
        x3 = x2 + dx
        f3 = _value(expr, x3)
        yield IterationRecord(i, {"x0": x0, "x1": x1, "x2": x2}, x3, f3, abs(dx))
        x0, f0 = x1, f1
        x1, f1 = x2, f2
        x2, f2 = x3, f3


def _steps_for(expr: Expression, inputs: MethodInputs, derivative_mode: str) -> Steps:
    if isinstance(inputs, BisectionInputs):
        return _bisection_steps(expr, inputs.a, inputs.b)
    if isinstance(inputs, SecantInputs):
        return _secant_steps(expr, inputs.x0, inputs.x1)
    if isinstance(inputs, NewtonInputs):
        return _newton_steps(expr, build_derivative(expr, derivative_mode), inputs.x0)
    if isinstance(inputs, MullerInputs):
        return _muller_steps(expr, inputs.x0, inputs.x1, inputs.x2)
    raise TypeError(f"Unsupported inputs: {inputs!r}")


# --------------------------------------------------------------------------- #
# Driver
# --------------------------------------------------------------------------- #


def _drive(
    result: RunResult, steps: Steps, tolerance: float, max_iterations: int
) -> RunResult:
    record = None
    for record in islice(steps, max_iterations):
        criterion = _check_convergence(record.f_estimate, record.error, tolerance)
        logger.debug(
            "%s iter %d: estimate=%r f=%r error=%r",
            result.method.value, record.iteration, record.estimate,
            record.f_estimate, record.error,
        )
        if criterion is not None:
            result.iterations.append(replace(record, criterion=criterion))
            return _finalize(
                result,
                status=Status.CONVERGED,
                root=record.estimate,
                function_value=record.f_estimate,
                criterion=criterion,
            )
        result.iterations.append(record)

    return _finalize(
        result,
        status=Status.MAX_ITERATIONS_REACHED,
        root=record.estimate,
        function_value=record.f_estimate,
        message="Maximum iterations reached without convergence.",
    )


def run(
    expression: Union[str, Expression],
    inputs: MethodInputs,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    *,
    derivative_mode: str = "symbolic",
) -> RunResult:
    """
    Run the method selected by the type of ``inputs``.

    Parameters
    ----------
    expression : f(x) as text or an already parsed :class:`Expression`.
    inputs : one of ``BisectionInputs``, ``SecantInputs``, ``NewtonInputs``
        or ``MullerInputs``.
    tolerance : threshold for both |f(x)| and the step-size metric.
    max_iterations : upper bound on the number of steps.
    derivative_mode : ``"symbolic"`` or ``"numeric"`` (Newton only).

    Every failure (parse error, invalid evaluation, failed precondition,
    undefined step) is reported through ``status`` and ``error_message``.
    """
    result = _base_result(inputs.method)
    try:
        expr = (
            expression
            if isinstance(expression, Expression)
            else parse_expression(expression)
        )
        _check_settings(tolerance, max_iterations)
        distinct = validate_distinct_points(inputs.points())
        if not distinct:
            raise PreconditionViolation(distinct.message)
        steps = _steps_for(expr, inputs, derivative_mode)
        result = _drive(result, steps, tolerance, max_iterations)
    except _RootAtStart as start:
        result = _finalize(
            result,
            status=Status.CONVERGED,
            root=start.x,
            function_value=start.fx,
            criterion=Criterion.FUNCTION_VALUE,
        )
    except RootFindingError as exc:
        result = _finalize(
            result,
            status=Status.DIVERGED_OR_INVALID,
            root=None,
            function_value=None,
            message=str(exc),
        )
        logger.info("%s run failed: %s", result.method.value, exc)

    logger.debug(
        "%s finished: status=%s iterations=%d criterion=%s",
        result.method.value, result.status.value, len(result.iterations),
        result.criterion.value if result.criterion else None,
    )
    return result


def bisection(
    expr: Union[str, Expression],
    a: float,
    b: float,
    tol: float = DEFAULT_TOLERANCE,
    max_iter: int = DEFAULT_MAX_ITERATIONS,
) -> RunResult:
    return run(expr, BisectionInputs(a, b), tol, max_iter)


def secant(
    expr: Union[str, Expression],
    x0: float,
    x1: float,
    tol: float = DEFAULT_TOLERANCE,
    max_iter: int = DEFAULT_MAX_ITERATIONS,
) -> RunResult:
    return run(expr, SecantInputs(x0, x1), tol, max_iter)


def newton_raphson(
    expr: Union[str, Expression],
    x0: float,
    tol: float = DEFAULT_TOLERANCE,
    max_iter: int = DEFAULT_MAX_ITERATIONS,
    derivative_mode: str = "symbolic",
) -> RunResult:
    return run(expr, NewtonInputs(x0), tol, max_iter, derivative_mode=derivative_mode)


def muller(
    expr: Union[str, Expression],
    x0: float,
    x1: float,
    x2: float,
    tol: float = DEFAULT_TOLERANCE,
    max_iter: int = DEFAULT_MAX_ITERATIONS,
) -> RunResult:
    return run(expr, MullerInputs(x0, x1, x2), tol, max_iter)


# --------------------------------------------------------------------------- #
# Public runner
# --------------------------------------------------------------------------- #


def solve(
    method: Union[str, Method],
    *,
    function_expr: str,
    params: Mapping[str, Any],
    tolerance: Any = None,
    max_iterations: Any = None,
    derivative_mode: str = "symbolic",
) -> RunResult:
    """
    Entry point for UI layers that hold raw form values.

    Parameters
    ----------
    method : method tag (``"bisection"``, ``"secant"``, ``"newton"``,
        ``"muller"``) or :class:`Method`.
    function_expr : f(x) expression supplied by the user.
    params : raw initial-point values keyed by the method's field names.
    tolerance, max_iterations : optional overrides; ``None`` or an empty
        string selects the default.

    Raises
    ------
    ValueError
        Unknown method tag.
    """
    config = get_config(method)
    result = _base_result(config.method)

    checked = validate_numeric_inputs(
        {name: params.get(name) for name in config.field_names}
    )
    overrides = validate_numeric_inputs(
        {
            name: value
            for name, value in (
                ("tolerance", tolerance),
                ("max_iterations", max_iterations),
            )
            if value is not None and value != ""
        }
    )
    checks = [checked, overrides]
    if checked and config.requires_sign_change:
        checks.append(
            validate_bracket(
                function_expr, *(checked.values[name] for name in config.field_names)
            )
        )
    for check in checks:
        if not check:
            logger.info("%s rejected input: %s", config.method.value, check.message)
            return _finalize(
                result,
                status=Status.DIVERGED_OR_INVALID,
                root=None,
                function_value=None,
                message=check.message,
            )

    tol = overrides.values.get("tolerance", DEFAULT_TOLERANCE)
    max_iter = overrides.values.get("max_iterations", DEFAULT_MAX_ITERATIONS)
    if isinstance(max_iter, float) and max_iter.is_integer():
        max_iter = int(max_iter)

    return run(
        function_expr,
        config.inputs_type(**checked.values),
        tol,
        max_iter,
        derivative_mode=derivative_mode,
    )
