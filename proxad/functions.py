"""Scalar and vector functions differentiated with forward-mode dual numbers.

A subclass implements ``evaluate(x)`` once, written generically over the
entries of ``x``. ``x`` is a list that holds floats, first-order duals, or
nested duals. Gradients and Hessians then follow automatically.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from numbers import Real
from typing import Any, Callable

import numpy as np

from .dual import Dual, value_of


def _first(result) -> float:
    if not isinstance(result, Dual):
        return 0.0
    return value_of(result.gradient)


def _second(result) -> float:
    if not isinstance(result, Dual):
        return 0.0
    inner = result.gradient
    if not isinstance(inner, Dual):
        return 0.0
    return value_of(inner.gradient)


def _as_values(x, n_input: int, owner: str) -> list:
    values = np.asarray(x, dtype=float).ravel().tolist()
    if len(values) != n_input:
        raise ValueError(
            f"{owner}: input has size {len(values)}, expected n_input={n_input}"
        )
    return values


def _first_order_inputs(values, direction):
    return [Dual(v, 1.0 if k == direction else 0.0) for k, v in enumerate(values)]


def _second_order_inputs(values, i, j):
    return [
        Dual(Dual(v, 1.0 if k == i else 0.0), Dual(1.0 if k == j else 0.0, 0.0))
        for k, v in enumerate(values)
    ]


class ADFunction(ABC):
    """A scalar function of ``n_input`` variables."""

    def __init__(self, n_input):
        self.n_input = int(n_input)

    def process_parameters(self, context):
        """Update point-dependent parameters from ``context``; nothing by default."""

    @abstractmethod
    def evaluate(self, x):
        """Return the function value for the list of entries ``x``."""

    def _prepare(self, x, context):
        if context is not None:
            self.process_parameters(context)
        return _as_values(x, self.n_input, type(self).__name__)

    def __call__(self, x, context=None):
        return value_of(self.evaluate(self._prepare(x, context)))

    def gradient(self, x, context=None):
        """Gradient at ``x`` by forward-mode differentiation."""
        values = self._prepare(x, context)
        return np.array(
            [
                _first(self.evaluate(_first_order_inputs(values, i)))
                for i in range(len(values))
            ],
            dtype=float,
        )

    def hessian(self, x, context=None):
        """Symmetric Hessian at ``x`` by forward-over-forward differentiation."""
        values = self._prepare(x, context)
        n = len(values)
        result = np.zeros((n, n))
        for i in range(n):
            for j in range(i + 1):
                entry = _second(self.evaluate(_second_order_inputs(values, i, j)))
                result[i, j] = result[j, i] = entry
        return result

    def __mul__(self, other):
        if isinstance(other, ADFunction):
            return ProductADFunction(self, other)
        if isinstance(other, Real):
            return ScaledADFunction(self, other)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, Real):
            return ScaledADFunction(self, other)
        return NotImplemented

    def __truediv__(self, other):
        if isinstance(other, ADFunction):
            return QuotientADFunction(self, other)
        if isinstance(other, Real):
            return ScaledADFunction(self, 1.0 / other)
        return NotImplemented

    def __rtruediv__(self, other):
        if isinstance(other, Real):
            return ReciprocalADFunction(self, other)
        return NotImplemented

    def __add__(self, other):
        if isinstance(other, ADFunction):
            return SumADFunction(self, other, 1.0)
        if isinstance(other, Real):
            return ShiftedADFunction(self, other)
        return NotImplemented

    def __radd__(self, other):
        if isinstance(other, Real):
            return ShiftedADFunction(self, other)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, ADFunction):
            return SumADFunction(self, other, -1.0)
        if isinstance(other, Real):
            return ShiftedADFunction(self, -other)
        return NotImplemented


class ADVectorFunction(ADFunction):
    """A function from ``n_input`` to ``n_output`` variables.

    Here ``gradient`` returns the value and ``hessian`` returns the Jacobian.
    This matches the scalar API one derivative down.
    """

    def __init__(self, n_input, n_output):
        if n_input <= 0 or n_output <= 0:
            raise ValueError(
                "ADVectorFunction: n_input and n_output must be positive"
            )
        super().__init__(n_input)
        self.n_output = int(n_output)

    @abstractmethod
    def evaluate(self, x):
        """Return a sequence of ``n_output`` entries for the list ``x``."""

    def _outputs(self, x):
        out = list(self.evaluate(x))
        if len(out) != self.n_output:
            raise ValueError(
                f"{type(self).__name__}: produced {len(out)} outputs, "
                f"expected n_output={self.n_output}"
            )
        return out

    def __call__(self, x, context=None):
        values = self._prepare(x, context)
        return np.array([value_of(v) for v in self._outputs(values)], dtype=float)

    def jacobian(self, x, context=None):
        """Jacobian of shape ``(n_output, n_input)``."""
        values = self._prepare(x, context)
        result = np.zeros((self.n_output, self.n_input))
        for i in range(self.n_input):
            out = self._outputs(_first_order_inputs(values, i))
            result[:, i] = [_first(v) for v in out]
        return result

    def hessian_tensor(self, x, context=None):
        """Second derivatives of shape ``(n_input, n_input, n_output)``."""
        values = self._prepare(x, context)
        n = self.n_input
        result = np.zeros((n, n, self.n_output))
        for i in range(n):
            for j in range(i + 1):
                out = self._outputs(_second_order_inputs(values, i, j))
                entries = [_second(v) for v in out]
                result[i, j, :] = entries
                result[j, i, :] = entries
        return result

    def gradient(self, x, context=None):
        return self(x, context)

    def hessian(self, x, context=None):
        return self.jacobian(x, context)


def _require_same_inputs(name, f1, f2):
    if f1.n_input != f2.n_input:
        raise ValueError(f"{name}: f1 and f2 must have the same n_input")


class ProductADFunction(ADFunction):
    """``f1(x) * f2(x)``."""

    def __init__(self, f1, f2):
        _require_same_inputs("ProductADFunction", f1, f2)
        super().__init__(f1.n_input)
        self.f1 = f1
        self.f2 = f2

    def process_parameters(self, context):
        self.f1.process_parameters(context)
        self.f2.process_parameters(context)

    def evaluate(self, x):
        return self.f1.evaluate(x) * self.f2.evaluate(x)


class ScaledADFunction(ADFunction):
    """``f1(x) * a``."""

    def __init__(self, f1, a):
        super().__init__(f1.n_input)
        self.f1 = f1
        self.a = a

    def process_parameters(self, context):
        self.f1.process_parameters(context)

    def evaluate(self, x):
        return self.f1.evaluate(x) * self.a


class SumADFunction(ADFunction):
    """``f1(x) + b * f2(x)``."""

    def __init__(self, f1, f2, b=1.0):
        _require_same_inputs("SumADFunction", f1, f2)
        super().__init__(f1.n_input)
        self.f1 = f1
        self.f2 = f2
        self.b = b

    def process_parameters(self, context):
        self.f1.process_parameters(context)
        self.f2.process_parameters(context)

    def evaluate(self, x):
        return self.f1.evaluate(x) + self.b * self.f2.evaluate(x)


class ShiftedADFunction(ADFunction):
    """``f1(x) + b``."""

    def __init__(self, f1, b):
        super().__init__(f1.n_input)
        self.f1 = f1
        self.b = b

    def process_parameters(self, context):
        self.f1.process_parameters(context)

    def evaluate(self, x):
        return self.f1.evaluate(x) + self.b


class QuotientADFunction(ADFunction):
    """``f1(x) / f2(x)``."""

    def __init__(self, f1, f2):
        _require_same_inputs("QuotientADFunction", f1, f2)
        super().__init__(f1.n_input)
        self.f1 = f1
        self.f2 = f2

    def process_parameters(self, context):
        self.f1.process_parameters(context)
        self.f2.process_parameters(context)

    def evaluate(self, x):
        return self.f1.evaluate(x) / self.f2.evaluate(x)


class ReciprocalADFunction(ADFunction):
    """``a / f1(x)``."""

    def __init__(self, f1, a):
        super().__init__(f1.n_input)
        self.f1 = f1
        self.a = a

    def process_parameters(self, context):
        self.f1.process_parameters(context)

    def evaluate(self, x):
        return self.a / self.f1.evaluate(x)


class ConstantADFunction(ADFunction):
    """A constant whose ``value`` may be changed at any time."""

    def __init__(self, value, n_input):
        super().__init__(n_input)
        self.value = value

    def evaluate(self, x):
        return self.value

    def gradient(self, x, context=None):
        return np.zeros(np.asarray(x, dtype=float).size)

    def hessian(self, x, context=None):
        n = np.asarray(x, dtype=float).size
        return np.zeros((n, n))


@dataclass
class _Input:
    source: Callable[[Any], Any]
    offset: int
    size: int


class DifferentiableCoefficient:
    """Evaluate an ``ADFunction`` on inputs gathered from callables of a context."""

    def __init__(self, f):
        self.f = f
        self._inputs: list[_Input] = []
        self._size = 0

    def add_input(self, source, size=1):
        """Append ``source(context)``, a scalar or ``size`` values; returns ``self``."""
        if self._size >= self.f.n_input:
            raise ValueError(
                "DifferentiableCoefficient: too many input variables added. "
                f"n_input={self.f.n_input}, index={self._size}"
            )
        if size <= 0:
            raise ValueError("DifferentiableCoefficient: size must be positive")
        self._inputs.append(_Input(source, self._size, int(size)))
        self._size += int(size)
        return self

    def inputs(self, context):
        """The input vector gathered at ``context``."""
        x = np.zeros(self._size)
        for item in self._inputs:
            value = np.asarray(item.source(context), dtype=float).reshape(item.size)
            x[item.offset:item.offset + item.size] = value
        return x

    def __call__(self, context):
        return self.f(self.inputs(context), context)

    def gradient(self, context):
        return self.f.gradient(self.inputs(context), context)

    def hessian(self, context):
        return self.f.hessian(self.inputs(context), context)