import math

import pytest

from metcalc.derivative import build_derivative, derivative_at, derivative_text
from metcalc.expression import Value, parse_expression


def test_symbolic_derivative():
    assert derivative_at("x^3", 2.0) == Value(12.0)


def test_derivative_of_reciprocal_at_one():
    assert derivative_at("1/x", 1.0).value == pytest.approx(-1.0)


def test_numeric_derivative():
    result = derivative_at("sin(x)", 0.0, mode="numeric")
    assert result.value == pytest.approx(1.0, abs=1e-8)


def test_numeric_and_symbolic_agree():
    expr = parse_expression("exp(x) - 3*x")
    symbolic = build_derivative(expr)(1.3).value
    numeric = build_derivative(expr, "numeric")(1.3).value
    assert numeric == pytest.approx(symbolic, rel=1e-6)


def test_singular_derivative_is_invalid():
    # f(0) = 0 is fine but f' blows up and f(-h) is undefined
    assert not derivative_at("sqrt(x)", 0.0).ok


def test_derivative_text():
    assert derivative_text("x^3") == "3*x**2"
    assert derivative_text("x +") == "Could not compute the derivative"


def test_unknown_mode():
    with pytest.raises(ValueError):
        build_derivative(parse_expression("x"), "automatic")


def test_zero_derivative_is_reported_as_zero():
    assert derivative_at("x^3", 0.0) == Value(0.0)
    assert math.isclose(derivative_at("cos(x)", 0.0).value, 0.0, abs_tol=1e-15)
