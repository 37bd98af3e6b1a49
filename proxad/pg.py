"""Proximal Galerkin building blocks: step-size rules, dual entropies and the
augmented proximal functional.

Point-dependent parameters may be plain numbers or arrays. They may also be
callables of a context, evaluated in ``process_parameters``.
"""

from __future__ import annotations

import math
import warnings
from abc import abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from itertools import accumulate
from numbers import Integral

import numpy as np

from .dual import exp, log, sqrt
from .functions import ADFunction


class RuleType(IntEnum):
    """Available step-size rules."""

    CONSTANT = 0  # alpha0
    POLY = 1  # alpha0 * (iter+1)**ratio
    EXP = 2  # alpha0 * ratio**iter
    DOUBLE_EXP = 3  # alpha0 * ratio**(ratio2**iter)


@dataclass
class PGStepSizeRule:
    """Step size ``alpha`` of the proximal Galerkin iteration, capped at ``max_alpha``."""

    rule_type: RuleType
    alpha0: float = 1.0
    max_alpha: float = 1e06
    ratio: float = -1.0
    ratio2: float = -1.0

    def __post_init__(self):
        try:
            self.rule_type = RuleType(int(self.rule_type))
        except ValueError:
            raise ValueError("PGStepSizeRule: invalid rule type") from None
        if self.alpha0 <= 0:
            raise ValueError("PGStepSizeRule: alpha0 must be positive")
        if self.max_alpha < self.alpha0:
            raise ValueError(
                "PGStepSizeRule: max_alpha must be greater than or equal to alpha0"
            )
        if self.rule_type is RuleType.POLY and self.ratio <= 0:
            raise ValueError("PGStepSizeRule: ratio must be positive for POLY rule")
        if self.rule_type is RuleType.EXP and self.ratio <= 1:
            raise ValueError(
                "PGStepSizeRule: ratio must be greater than 1 for EXP rule"
            )
        if self.rule_type is RuleType.DOUBLE_EXP and (
            self.ratio <= 1 or self.ratio2 <= 1
        ):
            raise ValueError(
                "PGStepSizeRule: ratio and ratio2 must be greater than 1 "
                "for DOUBLE_EXP rule"
            )

    def get(self, iteration):
        """The step size for the given iteration."""
        try:
            if self.rule_type is RuleType.POLY:
                alpha = self.alpha0 * (iteration + 1) ** self.ratio
            elif self.rule_type is RuleType.EXP:
                alpha = self.alpha0 * self.ratio ** iteration
            elif self.rule_type is RuleType.DOUBLE_EXP:
                alpha = self.alpha0 * self.ratio ** (self.ratio2 ** iteration)
            else:
                alpha = self.alpha0
        except OverflowError:
            alpha = math.inf
        return min(alpha, self.max_alpha)


def _param(source, context):
    return float(source(context) if callable(source) else source)


def _require(value, name, owner):
    if value is None:
        raise RuntimeError(
            f"{owner}: parameter '{name}' is not available; "
            "evaluate with a context or call process_parameters first"
        )
    return value


class ADEntropy(ADFunction):
    """Base class for dual entropy functions."""

    @abstractmethod
    def evaluate(self, x):
        """Return the dual entropy for the list of entries ``x``."""


class ShannonEntropy(ADEntropy):
    """Dual of the Shannon entropy with a half bound.

    ``sign=1`` bounds from below, ``sign=-1`` from above.
    """

    def __init__(self, bound, sign=1):
        super().__init__(1)
        if sign not in (1, -1):
            raise ValueError("ShannonEntropy: sign must be 1 or -1")
        self.bound = bound
        self.sign = sign
        self.shift = None if callable(bound) else float(bound)

    def process_parameters(self, context):
        self.shift = _param(self.bound, context)

    def evaluate(self, x):
        shift = _require(self.shift, "bound", type(self).__name__)
        return self.sign * exp(x[0] * self.sign) + shift * x[0]


class FermiDiracEntropy(ADEntropy):
    """Dual of the Fermi-Dirac entropy with ``[lower, upper]`` bounds."""

    def __init__(self, lower_bound, upper_bound):
        super().__init__(1)
        self.lower_bound = lower_bound
        self.upper_bound = upper_bound
        self.shift = None
        self.scale = None
        if not callable(lower_bound) and not callable(upper_bound):
            self.process_parameters(None)

    def process_parameters(self, context):
        self.shift = _param(self.lower_bound, context)
        self.scale = _param(self.upper_bound, context) - self.shift

    def evaluate(self, x):
        owner = type(self).__name__
        shift = _require(self.shift, "lower_bound", owner)
        scale = _require(self.scale, "upper_bound", owner)
        z = x[0] * scale
        # log(1 + exp(z)) evaluated without overflow
        if z > 0:
            return z + log(1.0 + exp(-z)) + shift * x[0]
        return log(1.0 + exp(z)) + shift * x[0]


class HellingerEntropy(ADEntropy):
    """Dual of the Hellinger entropy with a positive bound."""

    def __init__(self, bound):
        super().__init__(1)
        self.bound = bound
        self.scale = None
        if not callable(bound):
            self.process_parameters(None)

    def process_parameters(self, context):
        scale = _param(self.bound, context)
        if scale <= 0:
            raise ValueError("HellingerEntropy: bound must be positive")
        self.scale = scale

    def evaluate(self, x):
        scale = _require(self.scale, "bound", type(self).__name__)
        norm = sum((xi * xi for xi in x), 0.0)
        return sqrt(1 + norm * (scale * scale))


class SimplexEntropy(ADEntropy):
    """Dual of the simplex (categorical) entropy, ``x_i >= 0, sum x_i = bound``."""

    def __init__(self, bound):
        super().__init__(1)
        self.bound = bound
        self.scale = None
        if not callable(bound):
            self.process_parameters(None)

    def process_parameters(self, context):
        scale = _param(self.bound, context)
        if scale < 0:
            raise ValueError("SimplexEntropy: bound must be non-negative")
        if scale == 0:
            warnings.warn(
                "SimplexEntropy: bound is zero, entropy is undefined",
                RuntimeWarning,
                stacklevel=2,
            )
        self.scale = scale

    def evaluate(self, x):
        scale = _require(self.scale, "bound", type(self).__name__)
        return scale * log(sum((exp(xi) for xi in x), 0.0))


class ADPGFunctional(ADFunction):
    """Proximal Galerkin functional over ``[u, psi_1, psi_2, ...]``.

    ``L(u, psi) = f(u) + (1/alpha) * sum_i (u_i . (psi_i - psi_k_i) - E_i*(psi_i))``,
    where ``u_i`` is the block of ``u`` starting at ``primal_begin[i]``.
    """

    def __init__(self, f, dual_entropy, latent_k=None, primal_begin=None):
        single = isinstance(dual_entropy, ADFunction)
        entropies = [dual_entropy] if single else list(dual_entropy)
        if not entropies:
            raise ValueError("ADPGFunctional: at least one dual entropy is required")
        if primal_begin is None:
            if not single:
                raise ValueError(
                    "ADPGFunctional: primal_begin is required for several entropies"
                )
            primal_begin = [0]
        elif isinstance(primal_begin, Integral):
            primal_begin = [primal_begin]
        primal = [int(p) for p in primal_begin]
        if len(primal) != len(entropies):
            raise ValueError(
                "ADPGFunctional: primal_begin must have the same size as "
                f"dual_entropy: {len(primal)} != {len(entropies)}"
            )
        sizes = [e.n_input for e in entropies]
        if any(p + s > f.n_input for p, s in zip(primal, sizes)):
            raise ValueError(
                "ADPGFunctional: f.n_input must be at least "
                "primal_begin[i] + dual_entropy[i].n_input for all i"
            )
        super().__init__(f.n_input + sum(sizes))
        self.f = f
        self.dual_entropy = entropies
        self.primal_idx = primal
        self.entropy_size = sizes
        self.dual_idx = list(accumulate(sizes, initial=f.n_input))[:-1]
        self.alpha = 1.0
        self.latent_k = [[0.0] * s for s in sizes]
        self._latent_sources = [None] * len(entropies)
        if latent_k is not None:
            sources = [latent_k] if single else list(latent_k)
            if len(sources) != len(entropies):
                raise ValueError(
                    "ADPGFunctional: latent_k must have the same size as "
                    f"dual_entropy: {len(sources)} != {len(entropies)}"
                )
            for index, source in enumerate(sources):
                self.set_prev_latent(source, index)

    def _check_index(self, index):
        if not 0 <= index < len(self.dual_entropy):
            raise IndexError(
                f"ADPGFunctional: index must be in [0, {len(self.dual_entropy)})"
            )

    def _checked_latent(self, value, index):
        values = np.atleast_1d(np.asarray(value, dtype=float)).ravel()
        if values.size != self.entropy_size[index]:
            raise ValueError(
                "ADPGFunctional: latent must have the same dimension as "
                "dual_entropy.n_input"
            )
        return values.tolist()

    def set_prev_latent(self, latent, index=0):
        """Set the proximal centre ``psi_k`` of entropy ``index``: an array or a callable."""
        self._check_index(index)
        if not callable(latent):
            self.latent_k[index] = self._checked_latent(latent, index)
        self._latent_sources[index] = latent

    def prev_latent(self, index=0):
        """The proximal centre source of entropy ``index`` as given, or ``None``."""
        self._check_index(index)
        return self._latent_sources[index]

    def process_parameters(self, context):
        for index, (source, entropy) in enumerate(
            zip(self._latent_sources, self.dual_entropy)
        ):
            if source is None:
                raise RuntimeError(
                    "ADPGFunctional: previous latent is not set; "
                    "use set_prev_latent() to set it"
                )
            if callable(source):
                self.latent_k[index] = self._checked_latent(source(context), index)
            entropy.process_parameters(context)
        self.f.process_parameters(context)

    def _blocks(self):
        return zip(
            self.dual_entropy,
            self.primal_idx,
            self.dual_idx,
            self.entropy_size,
            self.latent_k,
        )

    def evaluate(self, x):
        primal = list(x[: self.f.n_input])
        cross = 0.0
        dual_sum = 0.0
        for entropy, p, d, size, centre in self._blocks():
            latent = list(x[d:d + size])
            cross = cross + sum(
                (u * (psi - psi_k)
                 for u, psi, psi_k in zip(primal[p:p + size], latent, centre)),
                0.0,
            )
            dual_sum = dual_sum + entropy.evaluate(latent)
        return self.f.evaluate(primal) + (1.0 / self.alpha) * (cross - dual_sum)

    def gradient(self, x, context=None):
        values = np.asarray(self._prepare(x, context))
        n = self.f.n_input
        result = np.zeros(self.n_input)
        result[:n] = self.f.gradient(values[:n])
        for entropy, p, d, size, centre in self._blocks():
            x_dual = values[d:d + size]
            jac = entropy.gradient(x_dual)
            result[p:p + size] += (x_dual - np.asarray(centre)) / self.alpha
            result[d:d + size] = (values[p:p + size] - jac) / self.alpha
        return result

    def hessian(self, x, context=None):
        values = np.asarray(self._prepare(x, context))
        n = self.f.n_input
        result = np.zeros((self.n_input, self.n_input))
        result[:n, :n] = self.f.hessian(values[:n])
        for entropy, p, d, size, _ in self._blocks():
            x_dual = values[d:d + size]
            result[d:d + size, d:d + size] = entropy.hessian(x_dual) * (-1.0 / self.alpha)
            offsets = np.arange(size)
            result[d + offsets, p + offsets] = 1.0 / self.alpha
            result[p + offsets, d + offsets] = 1.0 / self.alpha
        return result