import math

import pytest

from metcalc.errors import ExpressionParseError
from metcalc.expression import Invalid, Value, evaluate, parse_expression


def test_evaluates_caret_as_power():
    assert evaluate("x^2 - 2", 2.0) == Value(2.0)


def test_zero_is_a_value_not_invalid():
    result = evaluate("x", 0.0)
    assert result.ok
    assert result == Value(0.0)


@pytest.mark.parametrize(
    "expr, x",
    [
        ("1/x", 0.0),
        ("log(x)", -1.0),
        ("sqrt(x)", -4.0),
        ("exp(x)", 1000.0),
        ("x**0.5", -1.0),
    ],
)
def test_invalid_points_are_reported_not_raised(expr, x):
    result = evaluate(expr, x)
    assert isinstance(result, Invalid)
    assert not result.ok
    assert result.reason


def test_division_by_zero_reason():
    assert evaluate("1/x", 0.0) == Invalid("division by zero")


def test_constants_and_ln_alias():
    assert evaluate("e^x", 0.0) == Value(1.0)
    assert evaluate("ln(x)", math.e).value == pytest.approx(1.0)
    assert evaluate("sin(pi*x)", 0.5).value == pytest.approx(1.0)


def test_unbounded_inputs_are_accepted():
    assert evaluate("x/1e200", 1e250).value == pytest.approx(1e50)


def test_parse_error_becomes_invalid_in_evaluate():
    result = evaluate("x +", 1.0)
    assert not result.ok
    assert "Invalid function expression" in result.reason


@pytest.mark.parametrize("text", ["", "   ", "x +", "x > 1", "(x, 1)"])
def test_parse_rejects_bad_input(text):
    with pytest.raises(ExpressionParseError):
        parse_expression(text)


def test_parse_rejects_other_symbols():
    with pytest.raises(ExpressionParseError, match="y"):
        parse_expression("x + y")


def test_parsed_expression_is_reusable():
    expr = parse_expression("cos(x) - x")
    values = [expr(x).value for x in (0.0, 0.0, 1.0)]
    assert values[0] == values[1] == 1.0
    assert values[2] == pytest.approx(math.cos(1.0) - 1.0)
