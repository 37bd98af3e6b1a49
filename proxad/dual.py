"""Forward-mode dual numbers that nest for second derivatives.

A ``Dual`` carries a value and a directional derivative. Both parts may be
plain floats or further ``Dual`` numbers. This allows forward-over-forward
evaluation of Hessians.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any


@dataclass(eq=False)
class Dual:
    """A number ``value + gradient * eps`` with ``eps**2 == 0``."""

    value: Any
    gradient: Any = 0.0

    # Make numpy scalars defer to the reflected operators below.
    __array_ufunc__ = None

    def __add__(self, other):
        if isinstance(other, Dual):
            return Dual(self.value + other.value, self.gradient + other.gradient)
        if isinstance(other, Real):
            return Dual(self.value + other, self.gradient)
        return NotImplemented

    __radd__ = __add__

    def __sub__(self, other):
        if isinstance(other, Dual):
            return Dual(self.value - other.value, self.gradient - other.gradient)
        if isinstance(other, Real):
            return Dual(self.value - other, self.gradient)
        return NotImplemented

    def __rsub__(self, other):
        if isinstance(other, Real):
            return Dual(other - self.value, -self.gradient)
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, Dual):
            return Dual(
                self.value * other.value,
                self.value * other.gradient + self.gradient * other.value,
            )
        if isinstance(other, Real):
            return Dual(self.value * other, self.gradient * other)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other):
        if isinstance(other, Dual):
            return Dual(
                self.value / other.value,
                (self.gradient * other.value - self.value * other.gradient)
                / (other.value * other.value),
            )
        if isinstance(other, Real):
            return Dual(self.value / other, self.gradient / other)
        return NotImplemented

    def __rtruediv__(self, other):
        if isinstance(other, Real):
            return Dual(
                other / self.value,
                -other * self.gradient / (self.value * self.value),
            )
        return NotImplemented

    def __neg__(self):
        return Dual(-self.value, -self.gradient)

    def __pos__(self):
        return self

    def __abs__(self):
        return -self if value_of(self) < 0 else self

    def __pow__(self, exponent):
        if isinstance(exponent, (Dual, Real)):
            return power(self, exponent)
        return NotImplemented

    def __rpow__(self, base):
        if isinstance(base, Real):
            return power(base, self)
        return NotImplemented

    def __lt__(self, other):
        return value_of(self) < value_of(other)

    def __le__(self, other):
        return value_of(self) <= value_of(other)

    def __gt__(self, other):
        return value_of(self) > value_of(other)

    def __ge__(self, other):
        return value_of(self) >= value_of(other)

    def __float__(self):
        return value_of(self)


def value_of(x) -> float:
    """Return the innermost real value of ``x``."""
    while isinstance(x, Dual):
        x = x.value
    return float(x)


def sin(x):
    """Sine of a real or dual number."""
    if isinstance(x, Dual):
        return Dual(sin(x.value), cos(x.value) * x.gradient)
    return math.sin(x)


def cos(x):
    """Cosine of a real or dual number."""
    if isinstance(x, Dual):
        return Dual(cos(x.value), -sin(x.value) * x.gradient)
    return math.cos(x)


def exp(x):
    """Exponential of a real or dual number."""
    if isinstance(x, Dual):
        e = exp(x.value)
        return Dual(e, e * x.gradient)
    return math.exp(x)


def log(x):
    """Natural logarithm of a real or dual number."""
    if isinstance(x, Dual):
        return Dual(log(x.value), x.gradient / x.value)
    return math.log(x)


def sqrt(x):
    """Square root of a real or dual number."""
    if isinstance(x, Dual):
        s = sqrt(x.value)
        return Dual(s, x.gradient / (2.0 * s))
    return math.sqrt(x)


def power(x, p):
    """``x`` raised to ``p``; either may be dual."""
    if isinstance(p, Dual):
        return exp(p * log(x))
    if isinstance(x, Dual):
        if p == 0:
            return Dual(power(x.value, 0.0), x.gradient * 0.0)
        return Dual(power(x.value, p), p * power(x.value, p - 1) * x.gradient)
    return math.pow(x, p)


def maximum(a, b):
    """Larger of ``a`` and ``b``; on a tie of duals, their average (a subgradient)."""
    if not isinstance(a, Dual):
        if not isinstance(b, Dual):
            return max(a, b)
        a, b = b, a
    if a > b:
        return a
    if a < b:
        return b if isinstance(b, Dual) else Dual(b, 0.0)
    return 0.5 * (a + b)


def minimum(a, b):
    """Smaller of ``a`` and ``b``; on a tie of duals, their average (a subgradient)."""
    if not isinstance(a, Dual):
        if not isinstance(b, Dual):
            return min(a, b)
        a, b = b, a
    if a < b:
        return a
    if a > b:
        return b if isinstance(b, Dual) else Dual(b, 0.0)
    return 0.5 * (a + b)