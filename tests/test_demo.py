import io
import math

import numpy as np
import pytest

from proxad.demo import (
    ExampleFunction,
    ExampleVectorFunction,
    main,
    reference_gradient,
    reference_hessian,
    reference_hessian_tensor,
    reference_jacobian,
    run,
)

POINTS = [
    [0.5, 1.0, -1.0],
    [1.3, -0.4, 2.0],
    [-0.7, 0.2, 0.9],
]


def test_value_matches_closed_form():
    x = [0.5, 1.0, -1.0]
    expected = math.sin(0.5) * math.exp(1.0) + (-1.0) ** 3
    assert ExampleFunction()(x) == pytest.approx(expected)


@pytest.mark.parametrize("x", POINTS)
def test_gradient_matches_reference(x):
    np.testing.assert_allclose(
        ExampleFunction().gradient(x), reference_gradient(x), atol=1e-12
    )


@pytest.mark.parametrize("x", POINTS)
def test_hessian_matches_reference(x):
    np.testing.assert_allclose(
        ExampleFunction().hessian(x), reference_hessian(x), atol=1e-12
    )


@pytest.mark.parametrize("x", POINTS)
def test_jacobian_matches_reference(x):
    f = ExampleVectorFunction()
    np.testing.assert_allclose(f.jacobian(x), reference_jacobian(x), atol=1e-12)


@pytest.mark.parametrize("x", POINTS)
def test_hessian_tensor_matches_reference(x):
    f = ExampleVectorFunction()
    np.testing.assert_allclose(
        f.hessian_tensor(x), reference_hessian_tensor(x), atol=1e-12
    )


def test_reference_tensor_is_symmetric():
    h = reference_hessian_tensor([0.3, -1.1, 0.8])
    assert h.shape == (3, 3, 2)
    np.testing.assert_allclose(h, np.transpose(h, (1, 0, 2)))


def test_vector_value():
    x = [0.5, 1.0, -1.0]
    values = ExampleVectorFunction()(x)
    np.testing.assert_allclose(values, [math.sin(0.5), math.cos(-0.5)])


def test_run_reports_small_errors():
    out = io.StringIO()
    errors = run(out)
    assert set(errors) == {"jacobian", "hessian", "jacobian2",
                           "hessian2[0]", "hessian2[1]"}
    assert max(errors.values()) < 1e-12
    text = out.getvalue()
    assert text.startswith("Value : ")
    assert "Hessian[1] error: " in text


def test_main_prints_and_returns_zero(capsys):
    assert main([]) == 0
    captured = capsys.readouterr().out
    assert "Jacobian2 error: " in captured


def test_main_rejects_unknown_option():
    with pytest.raises(SystemExit):
        main(["--bogus"])