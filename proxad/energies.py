"""Common quadratic energies used as objectives and building blocks.

Point-dependent parameters may be given as plain numbers or arrays, or as
callables of a context. A callable is evaluated in ``process_parameters``.
"""

from __future__ import annotations

import numpy as np

from .functions import ADFunction


def _resolve(source, context):
    return source(context) if callable(source) else source


def _dot(a, b):
    return sum((u * v for u, v in zip(a, b)), 0.0)


def _require(value, name, owner):
    if value is None:
        raise RuntimeError(
            f"{owner}: parameter '{name}' is not available; "
            "evaluate with a context or call process_parameters first"
        )
    return value


class MassEnergy(ADFunction):
    """``0.5 * x . x``."""

    def __init__(self, n_var):
        super().__init__(n_var)

    def evaluate(self, x):
        return 0.5 * _dot(x, x)


class DiffusionEnergy(ADFunction):
    """``0.5 * grad u . grad u``."""

    def __init__(self, dim):
        super().__init__(dim)

    def evaluate(self, x):
        return 0.5 * _dot(x, x)


class HeteroDiffusionEnergy(ADFunction):
    """``0.5 * kappa * grad u . grad u`` with a scalar, possibly varying, ``kappa``."""

    def __init__(self, dim, kappa):
        super().__init__(dim)
        self._kappa_source = kappa
        self.kappa = None if callable(kappa) else float(kappa)

    def process_parameters(self, context):
        self.kappa = float(_resolve(self._kappa_source, context))

    def evaluate(self, x):
        kappa = _require(self.kappa, "kappa", type(self).__name__)
        return (kappa * 0.5) * _dot(x, x)


class AnisoDiffusionEnergy(ADFunction):
    """``sum_ij kappa_ij * grad_i u * grad_j u`` with a ``dim`` by ``dim`` matrix."""

    def __init__(self, dim, kappa):
        super().__init__(dim)
        self._kappa_source = kappa
        self.kappa = None if callable(kappa) else self._checked(kappa)

    def _checked(self, matrix):
        matrix = np.asarray(matrix, dtype=float)
        if matrix.shape != (self.n_input, self.n_input):
            raise ValueError(
                "AnisoDiffusionEnergy: kappa must be a square matrix of size dim"
            )
        return matrix.tolist()

    def process_parameters(self, context):
        self.kappa = self._checked(_resolve(self._kappa_source, context))

    def evaluate(self, x):
        kappa = _require(self.kappa, "kappa", type(self).__name__)
        return sum(
            (k_ij * xi * xj
             for row, xi in zip(kappa, x)
             for k_ij, xj in zip(row, x)),
            0.0,
        )


class DiffEnergy(ADFunction):
    """``energy(x - target)`` with a fixed or point-dependent ``target``."""

    def __init__(self, energy, target=None, dim=None):
        super().__init__(energy.n_input)
        self.energy = energy
        self._target_source = None
        self._target = None
        if target is not None:
            self.set_target(target, dim)

    def _checked(self, value, dim=None):
        values = np.atleast_1d(np.asarray(value, dtype=float)).ravel()
        if dim is not None and values.size != int(dim):
            raise ValueError(
                f"DiffEnergy: target has size {values.size}, declared {dim}"
            )
        if values.size != self.n_input:
            raise ValueError(
                "DiffEnergy: target must have the same dimension as energy"
            )
        return values.tolist()

    def set_target(self, target, dim=None):
        """Use ``target``, an array or a callable of a context, from now on."""
        if callable(target):
            size = self.n_input if dim is None else int(dim)
            if size != self.n_input:
                raise ValueError(
                    "DiffEnergy: target must have the same dimension as energy"
                )
            self._target_source = target
            self._target = None
        else:
            self._target_source = None
            self._target = self._checked(target, dim)

    def process_parameters(self, context):
        self.energy.process_parameters(context)
        if self._target_source is not None:
            self._target = self._checked(self._target_source(context))

    def evaluate(self, x):
        target = _require(self._target, "target", type(self).__name__)
        return self.energy.evaluate([xi - ti for xi, ti in zip(x, target)])


class LinearElasticityEnergy(ADFunction):
    """``0.5 * lambda * (div u)^2 + mu * |sym grad u|^2``.

    The input is the displacement gradient flattened row by row.
    """

    def __init__(self, dim, lame_lambda, lame_mu):
        super().__init__(dim * dim)
        self.dim = int(dim)
        self._lambda_source = lame_lambda
        self._mu_source = lame_mu
        self.lame_lambda = None if callable(lame_lambda) else float(lame_lambda)
        self.lame_mu = None if callable(lame_mu) else float(lame_mu)

    def process_parameters(self, context):
        self.lame_lambda = float(_resolve(self._lambda_source, context))
        self.lame_mu = float(_resolve(self._mu_source, context))

    def evaluate(self, x):
        owner = type(self).__name__
        lame_lambda = _require(self.lame_lambda, "lame_lambda", owner)
        lame_mu = _require(self.lame_mu, "lame_mu", owner)
        d = self.dim
        divergence = sum((x[i * d + i] for i in range(d)), 0.0)
        h1_norm = 0.0
        for i in range(d):
            for j in range(d):
                symm = 0.5 * (x[i * d + j] + x[j * d + i])
                h1_norm = h1_norm + symm * symm
        return 0.5 * lame_lambda * (divergence * divergence) + lame_mu * h1_norm