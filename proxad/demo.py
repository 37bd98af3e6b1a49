"""Compare automatic derivatives with hand-written ones on two small functions."""

from __future__ import annotations

import argparse
import math
import sys

import numpy as np

from .dual import cos, exp, power, sin
from .functions import ADFunction, ADVectorFunction


class ExampleFunction(ADFunction):
    """``sin(x0) * exp(x1) + x2**3``."""

    def __init__(self):
        super().__init__(3)

    def evaluate(self, x):
        return sin(x[0]) * exp(x[1]) + power(x[2], 3.0)


class ExampleVectorFunction(ADVectorFunction):
    """``[sin(x0*x1), cos(x0*x1*x2)]``."""

    def __init__(self):
        super().__init__(3, 2)

    def evaluate(self, x):
        return [sin(x[0] * x[1]), cos(x[0] * x[1] * x[2])]


def reference_gradient(x):
    """Hand-written gradient of ``ExampleFunction``."""
    x0, x1, x2 = np.asarray(x, dtype=float)
    return np.array([
        math.cos(x0) * math.exp(x1),
        math.sin(x0) * math.exp(x1),
        3.0 * x2 ** 2,
    ])


def reference_hessian(x):
    """Hand-written Hessian of ``ExampleFunction``."""
    x0, x1, x2 = np.asarray(x, dtype=float)
    s, c, e = math.sin(x0), math.cos(x0), math.exp(x1)
    return np.array([
        [-s * e, c * e, 0.0],
        [c * e, s * e, 0.0],
        [0.0, 0.0, 6.0 * x2],
    ])


def reference_jacobian(x):
    """Hand-written Jacobian of ``ExampleVectorFunction``."""
    x0, x1, x2 = np.asarray(x, dtype=float)
    cxy = math.cos(x0 * x1)
    sxyz = math.sin(x0 * x1 * x2)
    return np.array([
        [x1 * cxy, x0 * cxy, 0.0],
        [-x1 * x2 * sxyz, -x0 * x2 * sxyz, -x0 * x1 * sxyz],
    ])


def reference_hessian_tensor(x):
    """Hand-written second derivatives of ``ExampleVectorFunction``, shape (3, 3, 2)."""
    x_, y, z = np.asarray(x, dtype=float)
    h = np.zeros((3, 3, 2))
    sxy, cxy = math.sin(x_ * y), math.cos(x_ * y)
    sxyz, cxyz = math.sin(x_ * y * z), math.cos(x_ * y * z)

    h[0, 0, 0] = -y * y * sxy
    h[0, 1, 0] = h[1, 0, 0] = cxy - x_ * y * sxy
    h[1, 1, 0] = -x_ * x_ * sxy

    h[0, 0, 1] = -y * y * z * z * cxyz
    h[1, 0, 1] = h[0, 1, 1] = -x_ * y * z * z * cxyz - z * sxyz
    h[2, 0, 1] = h[0, 2, 1] = -x_ * y * y * z * cxyz - y * sxyz
    h[1, 1, 1] = -x_ * x_ * z * z * cxyz
    h[2, 1, 1] = h[1, 2, 1] = -x_ * x_ * y * z * cxyz - x_ * sxyz
    h[2, 2, 1] = -x_ * x_ * y * y * cxyz
    return h


def _format_vector(v) -> str:
    return " ".join(f"{value:g}" for value in v) + "\n"


def _format_matrix(m, last_linebreak=True) -> str:
    rows = ["".join(f"{value:g} " for value in row) + ";" for row in m]
    return "\n".join(rows) + ("\n" if last_linebreak else "")


def run(stream=None):
    """Print the comparison to ``stream`` and return the errors by name."""
    out = sys.stdout if stream is None else stream
    x = np.array([0.5, 1.0, -1.0])

    f = ExampleFunction()
    jac, jac_ref = f.gradient(x), reference_gradient(x)
    hess, hess_ref = f.hessian(x), reference_hessian(x)

    f2 = ExampleVectorFunction()
    jac2, jac2_ref = f2.jacobian(x), reference_jacobian(x)
    hess2, hess2_ref = f2.hessian_tensor(x), reference_hessian_tensor(x)

    errors = {
        "jacobian": float(np.linalg.norm(jac - jac_ref)),
        "hessian": float(np.max(np.abs(hess - hess_ref))),
        "jacobian2": float(np.max(np.abs(jac2 - jac2_ref))),
    }
    for k in range(hess2.shape[2]):
        errors[f"hessian2[{k}]"] = float(
            np.max(np.abs(hess2[:, :, k] - hess2_ref[:, :, k]))
        )

    out.write(f"Value : {f(x):g}\n")
    out.write("Jacobian  : " + _format_vector(jac))
    out.write("Reference : " + _format_vector(jac_ref))
    out.write("Hessian : \n" + _format_matrix(hess))
    out.write("Reference: \n" + _format_matrix(hess_ref))
    out.write("\n")
    out.write(f"Jacobian error: {errors['jacobian']:g}\n")
    out.write(f"Hessian error: {errors['hessian']:g}\n")
    out.write("-------------------------\n")
    out.write("Jacobian2 : \n" + _format_matrix(jac2))
    out.write("Reference : \n" + _format_matrix(jac2_ref))
    out.write("Hess2 : \n")
    for k in range(hess2.shape[2]):
        out.write("{ " + _format_matrix(hess2[:, :, k], False) + " }\n")
    out.write("Reference : \n")
    for k in range(hess2_ref.shape[2]):
        out.write("{ " + _format_matrix(hess2_ref[:, :, k], False) + " }\n")
    out.write("\n")
    out.write(f"Jacobian2 error: {errors['jacobian2']:g}\n")
    for k in range(hess2.shape[2]):
        out.write(f"Hessian[{k}] error: {errors[f'hessian2[{k}]']:g}\n")
    out.flush()
    return errors


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Compare automatic and hand-written derivatives."
    )
    parser.parse_args(argv)
    run(sys.stdout)
    return 0