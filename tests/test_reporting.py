from metcalc.methods import bisection, newton_raphson
from metcalc.model import Status
from metcalc.reporting import format_value, iteration_rows, summarize


def test_converged_summary():
    result = newton_raphson("cos(x) - x", 0.5, tol=1e-8)
    summary = summarize(result)
    assert summary.converged
    assert summary.status is Status.CONVERGED
    assert summary.headline == f"Converged in {len(result.iterations)} iterations"
    assert summary.root == result.root
    assert summary.function_value == result.function_value
    assert summary.message is None


def test_max_iterations_summary():
    result = bisection("x^2 - 2", 0.0, 2.0, max_iter=3)
    summary = summarize(result)
    assert not summary.converged
    assert summary.headline == "Maximum iterations reached"
    assert summary.root == result.iterations[-1].estimate
    assert summary.iterations == 3


def test_failed_summary_passes_message_through():
    result = bisection("x^2 + 1", -1.0, 1.0)
    summary = summarize(result)
    assert summary.status is Status.DIVERGED_OR_INVALID
    assert summary.message == result.error_message
    assert summary.headline == f"Error: {result.error_message}"
    assert summary.root is None


def test_iteration_rows_are_formatted():
    result = bisection("x^2 - 2", 0.0, 2.0, max_iter=2)
    rows = iteration_rows(result, decimals=3)
    assert rows[0] == {
        "iteration": "1",
        "a": "0.000",
        "b": "2.000",
        "c": "1.000",
        "f(c)": "-1.000",
        "error": "1.000",
    }
    assert rows[1]["a"] == "1.000"


def test_format_value():
    assert format_value(None) == "---"
    assert format_value(float("nan")) == "---"
    assert format_value(3) == "3"
    assert format_value(0.5, 2) == "0.50"
    assert format_value("n/a") == "n/a"
