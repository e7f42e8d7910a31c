"""
Process-wide defaults and per-method static metadata.

Everything here is read-only; ``METHOD_CONFIGS`` is a mapping proxy so
concurrent runs can share it freely.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple, Type

from metcalc.model import (
    BisectionInputs,
    Method,
    MullerInputs,
    NewtonInputs,
    SecantInputs,
)

DEFAULT_TOLERANCE = 1e-6
DEFAULT_MAX_ITERATIONS = 50

# Guard for near-zero denominators and derivatives.
EPSILON = 1e-12
# Initial points closer than this are considered identical.
DISTINCT_TOLERANCE = 1e-10
FINITE_DIFFERENCE_STEP = 1e-6

PROBE_POINTS: Tuple[float, ...] = (0.0, 1.0, -1.0, 0.5, 2.0, -2.0)

PLOT_SAMPLES = 300
PLOT_VALUE_LIMIT = 1e6


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    default: float


@dataclass(frozen=True)
class Example:
    text: str
    value: str


@dataclass(frozen=True)
class MethodConfig:
    method: Method
    label: str
    fields: Tuple[FieldSpec, ...]
    default_function: str
    examples: Tuple[Example, ...]
    inputs_type: Type
    columns: Tuple[str, ...]
    requires_sign_change: bool = False

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(spec.name for spec in self.fields)

    def default_inputs(self):
        return self.inputs_type(**{spec.name: spec.default for spec in self.fields})


_CONFIGS = {
    Method.BISECTION: MethodConfig(
        method=Method.BISECTION,
        label="Bisection Method",
        fields=(
            FieldSpec("a", "Lower bound (a)", 0.0),
            FieldSpec("b", "Upper bound (b)", 1.0),
        ),
        default_function="cos(x) - x",
        examples=(
            Example("x³ + 4x² - 10", "x^3 + 4*x^2 - 10"),
            Example("x² - 2", "x^2 - 2"),
            Example("cos(x) - x", "cos(x) - x"),
            Example("e^(-x) - x", "e^(-x) - x"),
        ),
        inputs_type=BisectionInputs,
        columns=("iteration", "a", "b", "c", "f(c)", "error"),
        requires_sign_change=True,
    ),
    Method.SECANT: MethodConfig(
        method=Method.SECANT,
        label="Secant Method",
        fields=(
            FieldSpec("x0", "First point (x0)", 2.0),
            FieldSpec("x1", "Second point (x1)", 3.0),
        ),
        default_function="x^2 - 6",
        examples=(
            Example("x² - 6", "x^2 - 6"),
            Example("x³ - x - 1", "x^3 - x - 1"),
            Example("ln(x) - 1", "ln(x) - 1"),
        ),
        inputs_type=SecantInputs,
        columns=("iteration", "x_prev", "x_curr", "x_next", "f(x_next)", "error"),
    ),
    Method.NEWTON: MethodConfig(
        method=Method.NEWTON,
        label="Newton-Raphson Method",
        fields=(FieldSpec("x0", "Initial guess (x0)", 2.0),),
        default_function="x^3 - 2*x - 5",
        examples=(
            Example("x³ - 2x - 5", "x^3 - 2*x - 5"),
            Example("cos(x) - x", "cos(x) - x"),
            Example("e^x - 3x", "e^x - 3*x"),
        ),
        inputs_type=NewtonInputs,
        columns=("iteration", "x", "f(x)", "f'(x)", "x_next", "f(x_next)", "error"),
    ),
    Method.MULLER: MethodConfig(
        method=Method.MULLER,
        label="Müller Method",
        fields=(
            FieldSpec("x0", "First point (x0)", 1.0),
            FieldSpec("x1", "Second point (x1)", 1.5),
            FieldSpec("x2", "Third point (x2)", 2.0),
        ),
        default_function="x^3 - 13*x - 12",
        examples=(
            Example("x³ - 13x - 12", "x^3 - 13*x - 12"),
            Example("x² - 4", "x^2 - 4"),
            Example("sin(x) - x/2", "sin(x) - x/2"),
        ),
        inputs_type=MullerInputs,
        columns=("iteration", "x0", "x1", "x2", "x3", "f(x3)", "error"),
    ),
}

METHOD_CONFIGS: Mapping[Method, MethodConfig] = MappingProxyType(_CONFIGS)


def get_config(method) -> MethodConfig:
    """Look up the configuration for a :class:`Method` or its tag."""
    return METHOD_CONFIGS[Method(method)]
