import numpy as np
import pytest

from proxad.energies import (
    AnisoDiffusionEnergy,
    DiffEnergy,
    DiffusionEnergy,
    HeteroDiffusionEnergy,
    LinearElasticityEnergy,
    MassEnergy,
)


def test_mass_energy_gradient_is_identity_map():
    f = MassEnergy(3)
    x = np.array([0.5, -1.0, 2.0])
    assert np.allclose(f.gradient(x), x)
    assert np.allclose(f.hessian(x), np.eye(3))


def test_mass_energy_value_matches_half_gradient_dot():
    f = MassEnergy(3)
    x = np.array([0.5, -1.0, 2.0])
    assert f(x) == pytest.approx(0.5 * float(f.gradient(x) @ x))


def test_diffusion_energy_gradient_and_hessian():
    f = DiffusionEnergy(2)
    x = np.array([0.3, 0.7])
    assert np.allclose(f.gradient(x), x)
    assert np.allclose(f.hessian(x), np.eye(2))


def test_hetero_diffusion_uses_constant_kappa():
    f = HeteroDiffusionEnergy(2, 3.0)
    x = np.array([1.0, -2.0])
    assert np.allclose(f.gradient(x), 3.0 * x)
    assert np.allclose(f.hessian(x), 3.0 * np.eye(2))


def test_hetero_diffusion_reads_kappa_from_context():
    f = HeteroDiffusionEnergy(2, lambda ctx: ctx["kappa"])
    x = np.array([1.0, 2.0])
    assert np.allclose(f.gradient(x, {"kappa": 5.0}), 5.0 * x)
    assert f(x, {"kappa": 2.0}) == pytest.approx(2.0 * MassEnergy(2)(x))


def test_hetero_diffusion_without_context_fails():
    f = HeteroDiffusionEnergy(2, lambda ctx: ctx["kappa"])
    with pytest.raises(RuntimeError):
        f([1.0, 2.0])


def test_aniso_diffusion_hessian_is_symmetrised_kappa():
    kappa = np.array([[2.0, 1.0], [0.0, 3.0]])
    f = AnisoDiffusionEnergy(2, kappa)
    x = np.array([0.4, -0.6])
    assert np.allclose(f.hessian(x), kappa + kappa.T)
    assert np.allclose(f.gradient(x), (kappa + kappa.T) @ x)


def test_aniso_diffusion_rejects_wrong_shape():
    with pytest.raises(ValueError):
        AnisoDiffusionEnergy(2, np.eye(3))


def test_aniso_diffusion_checks_shape_from_context():
    f = AnisoDiffusionEnergy(2, lambda ctx: ctx)
    with pytest.raises(ValueError):
        f([1.0, 1.0], np.eye(3))


def test_diff_energy_vanishes_at_target():
    target = [1.0, 2.0]
    f = DiffEnergy(MassEnergy(2), target)
    assert f(target) == pytest.approx(0.0)


def test_diff_energy_gradient_is_shifted():
    target = np.array([1.0, 2.0])
    f = DiffEnergy(MassEnergy(2), target)
    x = np.array([0.5, -0.5])
    assert np.allclose(f.gradient(x), x - target)


def test_diff_energy_callable_target():
    f = DiffEnergy(MassEnergy(2), lambda ctx: ctx, dim=2)
    x = np.array([3.0, 4.0])
    assert np.allclose(f.gradient(x, np.array([1.0, 1.0])), x - 1.0)
    assert f(x, x) == pytest.approx(0.0)


def test_diff_energy_rejects_mismatched_target():
    with pytest.raises(ValueError):
        DiffEnergy(MassEnergy(2), [1.0, 2.0, 3.0])
    with pytest.raises(ValueError):
        DiffEnergy(MassEnergy(2), lambda ctx: ctx, dim=3)


def test_diff_energy_without_target_fails():
    f = DiffEnergy(MassEnergy(2))
    with pytest.raises(RuntimeError):
        f([1.0, 2.0])


def test_set_target_replaces_target():
    f = DiffEnergy(MassEnergy(2), [0.0, 0.0])
    f.set_target([1.0, 1.0])
    assert f([1.0, 1.0]) == pytest.approx(0.0)


def test_elasticity_rotation_has_zero_energy():
    f = LinearElasticityEnergy(2, 1.0, 1.0)
    assert f([0.0, 1.0, -1.0, 0.0]) == pytest.approx(0.0)


def test_elasticity_dilation_value():
    f = LinearElasticityEnergy(2, 1.0, 1.0)
    assert f([1.0, 0.0, 0.0, 1.0]) == pytest.approx(4.0)


def test_elasticity_is_quadratic_and_symmetric():
    f = LinearElasticityEnergy(2, 2.0, 0.5)
    x = np.array([0.1, 0.4, -0.2, 0.3])
    assert f(2.0 * x) == pytest.approx(4.0 * f(x))
    h = f.hessian(x)
    assert np.allclose(h, h.T)
    assert np.allclose(f.gradient(x), h @ x)


def test_elasticity_gradient_matches_finite_differences():
    f = LinearElasticityEnergy(2, 1.5, 0.7)
    x = np.array([0.1, 0.4, -0.2, 0.3])
    step = 1e-6
    numeric = np.array(
        [(f(x + step * e) - f(x - step * e)) / (2 * step) for e in np.eye(4)]
    )
    assert np.allclose(f.gradient(x), numeric, atol=1e-6)


def test_elasticity_parameters_from_context():
    f = LinearElasticityEnergy(2, lambda ctx: ctx["lam"], lambda ctx: ctx["mu"])
    x = [1.0, 0.0, 0.0, 1.0]
    base = LinearElasticityEnergy(2, 1.0, 1.0)
    assert f(x, {"lam": 2.0, "mu": 2.0}) == pytest.approx(2.0 * base(x))