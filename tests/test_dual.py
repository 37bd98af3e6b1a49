import math

import numpy as np
import pytest

from proxad.dual import (
    Dual,
    cos,
    exp,
    log,
    maximum,
    minimum,
    power,
    sin,
    sqrt,
    value_of,
)


@pytest.mark.parametrize(
    "func, derivative",
    [
        (sin, math.cos),
        (cos, lambda v: -math.sin(v)),
        (exp, math.exp),
        (log, lambda v: 1.0 / v),
        (sqrt, lambda v: 0.5 / math.sqrt(v)),
    ],
)
def test_elementary_first_derivatives(func, derivative):
    v = 0.7
    result = func(Dual(v, 1.0))
    assert result.value == pytest.approx(func(v))
    assert result.gradient == pytest.approx(derivative(v))


def test_float_inputs_give_floats():
    assert sin(0.3) == pytest.approx(math.sin(0.3))
    assert power(2.0, 3.0) == pytest.approx(math.pow(2.0, 3.0))


def test_product_and_quotient_rules():
    a = Dual(3.0, 1.0)
    b = Dual(2.0, 0.0)
    assert (a * b).gradient == pytest.approx(2.0)
    assert (a / b).gradient == pytest.approx(1.0 / 2.0)
    assert (b / a).gradient == pytest.approx(-2.0 / 9.0)


def test_reflected_operators():
    x = Dual(2.0, 1.0)
    assert (1.0 - x).gradient == pytest.approx(-1.0)
    assert (4.0 / x).gradient == pytest.approx(-4.0 / 4.0)
    assert (5.0 + x).value == pytest.approx(7.0)
    assert (-x).gradient == pytest.approx(-1.0)


def test_numpy_scalar_defers_to_dual():
    result = np.float64(2.0) * Dual(3.0, 1.0)
    assert isinstance(result, Dual)
    assert result.gradient == pytest.approx(2.0)


def test_power_with_dual_exponent():
    result = power(2.0, Dual(1.5, 1.0))
    assert result.value == pytest.approx(math.pow(2.0, 1.5))
    assert result.gradient == pytest.approx(math.pow(2.0, 1.5) * math.log(2.0))
    via_operator = 2.0 ** Dual(1.5, 1.0)
    assert via_operator.gradient == pytest.approx(result.gradient)


def test_power_zero_exponent_has_zero_derivative():
    result = power(Dual(0.0, 1.0), 0)
    assert result.gradient == 0.0


def test_composite_matches_finite_difference():
    def g(x):
        return sqrt(x) * exp(-x) + x ** 2.5

    v, h = 1.3, 1e-6
    fd = (g(v + h) - g(v - h)) / (2 * h)
    assert g(Dual(v, 1.0)).gradient == pytest.approx(fd, rel=1e-6)


def test_nested_dual_gives_second_derivative():
    v = 0.4
    x = Dual(Dual(v, 1.0), Dual(1.0, 0.0))
    assert exp(x).gradient.gradient == pytest.approx(math.exp(v))
    assert sin(x).gradient.gradient == pytest.approx(-math.sin(v))


def test_value_of_unwraps_nested():
    x = Dual(Dual(1.25, 3.0), Dual(1.0, 0.0))
    assert value_of(x) == 1.25
    assert float(x) == 1.25


def test_comparisons_use_values():
    assert Dual(1.0, 5.0) < Dual(2.0, -3.0)
    assert Dual(2.0, 0.0) > 1.5
    assert Dual(2.0, 9.0) >= Dual(2.0, -9.0)


def test_maximum_and_minimum_select():
    a = Dual(1.0, 2.0)
    b = Dual(5.0, 7.0)
    assert maximum(a, b) is b
    assert minimum(a, b) is a
    wrapped = maximum(a, 3.0)
    assert wrapped.value == 3.0 and wrapped.gradient == 0.0
    assert minimum(4.0, b).value == 4.0
    assert maximum(2.0, 6.0) == 6.0


def test_maximum_tie_averages_gradient():
    result = maximum(Dual(1.0, 2.0), Dual(1.0, 4.0))
    assert result.value == pytest.approx(1.0)
    assert result.gradient == pytest.approx(3.0)


def test_log_domain_error():
    with pytest.raises(ValueError):
        log(Dual(-1.0, 1.0))