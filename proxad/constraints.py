"""Lagrangian and augmented Lagrangian functionals with equality constraints."""

from __future__ import annotations

import numpy as np

from .functions import ADFunction

_OBJECTIVE_ONLY = -2
_FULL = -1


class Lagrangian(ADFunction):
    """``f(x) + sum_i lambda_i * c_i(x)`` over the input ``[x, lambda]``."""

    def __init__(self, objective):
        super().__init__(objective.n_input)
        self.objective = objective
        self.constraints: list[ADFunction] = []
        self.eq_rhs: list[float] = []
        self._mode = _FULL

    def add_eq_constraint(self, constraint, target=0.0):
        """Add ``c(x) = target``; one multiplier is appended to the input."""
        self.n_input += 1
        self.constraints.append(constraint)
        self.eq_rhs.append(float(target))
        return self

    def set_eq_rhs(self, index, target):
        self.eq_rhs[index] = float(target)
        return self

    def full_mode(self):
        """Evaluate ``f(x) + sum lambda_i c_i(x)``."""
        self._mode = _FULL

    def objective_mode(self):
        """Evaluate ``f(x)`` only."""
        self._mode = _OBJECTIVE_ONLY

    def eq_constraint_mode(self, comp):
        """Evaluate ``c_comp(x)`` only."""
        if not 0 <= comp < len(self.constraints):
            raise ValueError(
                f"Lagrangian: comp must be in [0, {len(self.constraints)})"
            )
        self._mode = comp

    def process_parameters(self, context):
        self.objective.process_parameters(context)
        for constraint in self.constraints:
            constraint.process_parameters(context)

    def evaluate(self, x):
        n = self.objective.n_input
        primal = list(x[:n])
        multipliers = x[n:n + len(self.constraints)]
        if self._mode >= 0:
            return self.constraints[self._mode].evaluate(primal)
        result = self.objective.evaluate(primal)
        if self._mode == _OBJECTIVE_ONLY:
            return result
        for constraint, multiplier in zip(self.constraints, multipliers):
            result = result + constraint.evaluate(primal) * multiplier
        return result


class ALFunctional(ADFunction):
    """``f(x) + sum_i (lambda_i c_i(x) + mu/2 c_i(x)^2)`` with ``c_i = g_i - target_i``."""

    def __init__(self, objective):
        super().__init__(objective.n_input)
        self.objective = objective
        self.constraints: list[ADFunction] = []
        self.eq_rhs: list[float] = []
        self.lambdas = np.zeros(0)
        self.penalty = 1.0
        self._mode = _FULL

    def add_eq_constraint(self, constraint, target=0.0):
        """Add ``constraint(x) = target`` with a zero multiplier."""
        self.constraints.append(constraint)
        self.eq_rhs.append(float(target))
        self.lambdas = np.append(self.lambdas, 0.0)
        return self

    def set_eq_rhs(self, index, target):
        self.eq_rhs[index] = float(target)
        return self

    def set_lambda(self, values):
        values = np.asarray(values, dtype=float).ravel()
        if values.size != self.lambdas.size:
            raise ValueError("ALFunctional: lambda size mismatch")
        self.lambdas = values.copy()

    def set_penalty(self, mu):
        if mu < 0.0:
            raise ValueError("ALFunctional: mu must be non-negative")
        self.penalty = float(mu)

    def al_mode(self):
        """Evaluate the full augmented Lagrangian."""
        self._mode = _FULL

    def objective_mode(self):
        """Evaluate ``f(x)`` only."""
        self._mode = _OBJECTIVE_ONLY

    def eq_constraint_mode(self, comp):
        """Evaluate ``c_comp(x)`` only."""
        if not 0 <= comp < len(self.constraints):
            raise ValueError(
                f"ALFunctional: comp must be in [0, {len(self.constraints)})"
            )
        self._mode = comp

    def process_parameters(self, context):
        self.objective.process_parameters(context)
        for constraint in self.constraints:
            constraint.process_parameters(context)

    def _term(self, x, index):
        cx = self.constraints[index].evaluate(x) - self.eq_rhs[index]
        if self._mode >= 0:
            return cx
        return cx * (float(self.lambdas[index]) + self.penalty * 0.5 * cx)

    def evaluate(self, x):
        if self._mode >= 0:
            return self._term(x, self._mode)
        result = self.objective.evaluate(x)
        if self._mode == _OBJECTIVE_ONLY:
            return result
        for index in range(len(self.constraints)):
            result = result + self._term(x, index)
        return result