import pytest

from metcalc.domain import DisplayDomain, estimate_display_domain, sample_function


def test_root_window():
    assert estimate_display_domain(1.0, {"x0": 10.0}) == DisplayDomain(-2.0, 4.0)


def test_initial_points_window_ignores_non_numeric():
    domain = estimate_display_domain(None, {"x0": 1.0, "x1": 3, "note": "abc"})
    assert domain == DisplayDomain(-1.0, 5.0)


def test_initial_points_as_sequence():
    assert estimate_display_domain(None, [2.0, -1.0]) == DisplayDomain(-3.0, 4.0)


@pytest.mark.parametrize("points", [None, {}, {"x0": None}, []])
def test_default_window(points):
    assert estimate_display_domain(None, points) == DisplayDomain(-5.0, 5.0)


def test_sample_linear_function():
    curve = sample_function("x", DisplayDomain(-1.0, 1.0), samples=4)
    assert [x for x, _ in curve.points] == [-1.0, -0.5, 0.0, 0.5, 1.0]
    assert curve.y_min == pytest.approx(-1.2)
    assert curve.y_max == pytest.approx(1.2)


def test_sample_skips_singularities():
    curve = sample_function("1/x", DisplayDomain(-1.0, 1.0), samples=2)
    assert curve.points == [(-1.0, -1.0), (1.0, 1.0)]


def test_sample_skips_huge_values():
    curve = sample_function("exp(x)", DisplayDomain(0.0, 20.0), samples=2)
    assert [x for x, _ in curve.points] == [0.0, 10.0]


def test_sample_bad_expression():
    curve = sample_function("x +", DisplayDomain(-5.0, 5.0))
    assert curve.points == []
    assert curve.y_min is None and curve.y_max is None
