"""
metcalc: single-variable root finding by bisection, secant, Newton-Raphson
and Müller's method.

Typical use::

    from metcalc import solve, summarize

    result = solve("newton", function_expr="cos(x) - x", params={"x0": 0.5},
                   tolerance=1e-8)
    print(summarize(result).headline)
"""

from metcalc.config import DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE, METHOD_CONFIGS
from metcalc.derivative import derivative_at, derivative_text
from metcalc.domain import DisplayDomain, estimate_display_domain, sample_function
from metcalc.errors import (
    DivergenceError,
    EvaluationInvalid,
    ExpressionParseError,
    PreconditionViolation,
    RootFindingError,
)
from metcalc.expression import Expression, Invalid, Value, evaluate, parse_expression
from metcalc.methods import bisection, muller, newton_raphson, run, secant, solve
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
from metcalc.reporting import Summary, iteration_rows, summarize
from metcalc.validation import (
    ValidationResult,
    validate_bracket,
    validate_distinct_points,
    validate_expression,
    validate_numeric_inputs,
)

__version__ = "0.1.0"
