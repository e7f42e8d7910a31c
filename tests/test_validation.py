import pytest

from metcalc.validation import (
    validate_bracket,
    validate_distinct_points,
    validate_expression,
    validate_numeric_inputs,
)


@pytest.mark.parametrize("expr", ["x^2 - 2", "1/x", "log(x)", "tan(x)"])
def test_valid_expressions(expr):
    assert validate_expression(expr).valid


def test_pervasive_domain_errors_are_rejected():
    result = validate_expression("sqrt(x - 10)")
    assert not result.valid
    assert result.message == "Invalid function or no finite values"


def test_syntax_error_message():
    result = validate_expression("x +")
    assert not result
    assert result.message.startswith("Syntax error")


def test_identical_points_are_named():
    result = validate_distinct_points({"x0": 1.0, "x1": 1.0})
    assert not result.valid
    assert "x0" in result.message and "x1" in result.message


def test_nearly_identical_points():
    assert not validate_distinct_points([1.0, 1.0 + 1e-11]).valid
    assert validate_distinct_points([1.0, 1.001, 2.0]).valid


def test_any_pair_is_checked():
    result = validate_distinct_points({"x0": 1.0, "x1": 2.0, "x2": 1.0})
    assert not result.valid
    assert "x0 and x2" in result.message


def test_numeric_inputs_parse_values():
    result = validate_numeric_inputs({"a": "2", "b": 3})
    assert result.valid
    assert result.values == {"a": 2.0, "b": 3.0}


@pytest.mark.parametrize(
    "fields, message",
    [
        ({"a": "1.5", "b": ""}, "Please fill in the field b."),
        ({"a": None}, "Please fill in the field a."),
        ({"a": "abc"}, "a must be a valid number."),
        ({"a": "nan"}, "a must be a valid number."),
        ({"a": "inf"}, "a must be a finite number."),
        ({"a": "x", "b": ""}, "a must be a valid number."),
    ],
)
def test_numeric_inputs_first_failure(fields, message):
    result = validate_numeric_inputs(fields)
    assert not result.valid
    assert result.message == message


def test_bracket_with_sign_change():
    assert validate_bracket("x^2 - 2", 0.0, 2.0).valid


def test_bracket_without_sign_change():
    result = validate_bracket("x^2 + 1", -1.0, 1.0)
    assert not result.valid
    assert "opposite signs" in result.message


def test_bracket_with_invalid_endpoint():
    result = validate_bracket("log(x)", 0.0, 2.0)
    assert not result.valid
    assert "f(a)" in result.message


def test_bracket_with_tiny_same_sign_values():
    result = validate_bracket("exp(-400)*(x^2 + 1)", -1.0, 1.0)
    assert not result.valid
    assert "opposite signs" in result.message


def test_bracket_with_root_at_endpoint():
    assert validate_bracket("x - 1", 1.0, 3.0).valid
