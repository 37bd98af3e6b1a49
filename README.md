# proxad

`proxad` differentiates scalar and vector energy functionals exactly, using
forward-mode dual numbers. Gradients come from first-order duals. Hessians
come from nested, second-order duals and are assumed symmetric. The package
contains these modules:

- `proxad.dual`: the `Dual` number and the helpers `value_of`, `sin`, `cos`,
  `exp`, `log`, `sqrt`, `power`, `maximum` and `minimum`. The helpers work
  on plain floats and on duals. When `maximum` or `minimum` meets a tie
  between duals, it returns their average.
- `proxad.functions`: the base classes `ADFunction` and `ADVectorFunction`.
  It also holds the arithmetic on functionals: `ProductADFunction`,
  `ScaledADFunction`, `SumADFunction`, `ShiftedADFunction`,
  `QuotientADFunction`, `ReciprocalADFunction` and `ConstantADFunction`.
  These are also reached through `*`, `/`, `+` and `-` between functions and
  numbers. Finally it has `DifferentiableCoefficient`, which assembles a
  function's input from several sources and gives its value, gradient or
  Hessian.
- `proxad.energies`: `MassEnergy`, `DiffusionEnergy`,
  `HeteroDiffusionEnergy`, `AnisoDiffusionEnergy`, `DiffEnergy` and
  `LinearElasticityEnergy`.
- `proxad.constraints`: `Lagrangian` and the augmented Lagrangian
  `ALFunctional`. Each switches between full, objective-only and
  single-constraint evaluation.
- `proxad.pg`: proximal Galerkin building blocks. These are the step-size
  schedules `PGStepSizeRule` with `RuleType`, the dual entropies
  `ShannonEntropy`, `FermiDiracEntropy`, `HellingerEntropy` and
  `SimplexEntropy`, and the coupled functional `ADPGFunctional`. It gives
  its gradient and Hessian in closed form around the objective's own
  derivatives.
- `proxad.logger`: `TableLogger`, which prints monitored values as table
  rows and can also write them to a CSV file.
- `proxad.demo`: a demonstration that compares automatic and hand-written
  derivatives.

## Installation

```
pip install .
```

NumPy is the only runtime dependency. The tests need pytest; install it with
`pip install .[test]`.

## Writing a function

Subclass `ADFunction` and implement `evaluate(x)`. Here `x` is a list whose
entries may be floats or duals. Write the body with the helpers from
`proxad.dual`. One body then gives the value, the gradient and the Hessian.

```python
import numpy as np
from proxad.dual import sin, exp, power
from proxad.functions import ADFunction

class MyFunction(ADFunction):
    def __init__(self):
        super().__init__(3)

    def evaluate(self, x):
        return sin(x[0]) * exp(x[1]) + power(x[2], 3.0)

f = MyFunction()
x = np.array([0.5, 1.0, -1.0])
f(x)            # value, a float
f.gradient(x)   # array of length 3
f.hessian(x)    # 3x3 array
```

If the input does not have `n_input` entries, a `ValueError` is raised.

A function whose parameters depend on a point or on other outside data
overrides `process_parameters(context)`. When you pass a context other than
`None` to `__call__`, `gradient` or `hessian`, that method is called with it
before the evaluation.

The ready-made energies and entropies take parameters in two forms. A number
or an array is used as it is. A callable is evaluated with the context in
`process_parameters`. A parameter given as a callable must be resolved
before the first evaluation. If it is not, a `RuntimeError` is raised.

Vector-valued functions subclass `ADVectorFunction`. Their `evaluate` returns
a sequence of `n_output` entries. They provide `jacobian`, of shape
`(n_output, n_input)`, and `hessian_tensor`, of shape
`(n_input, n_input, n_output)`. To match the scalar interface one derivative
down, `gradient` returns the value and `hessian` returns the Jacobian.

## Proximal Galerkin step sizes

```python
from proxad.pg import PGStepSizeRule, RuleType

rule = PGStepSizeRule(RuleType.EXP, alpha0=1.0, max_alpha=1e4, ratio=2.0)
[rule.get(k) for k in range(4)]   # [1.0, 2.0, 4.0, 8.0]
```

Every rule is capped at `max_alpha`. An invalid combination of rule and
ratios raises `ValueError`.

## Logging a table

```python
from proxad.logger import TableLogger

step = 0
with TableLogger(width=10) as table:
    table.append("step", lambda: step)
    table.save_when_print("run")   # also writes run.csv
    for step in range(3):
        table.print_row()
```

## Demonstration

```
proxad-demo
```

This prints the value, the Jacobians and the Hessians of two small
functions. It prints each next to its hand-written reference, followed by
the errors between them.

## What the package does not do

`proxad` evaluates functionals and their derivatives at single points. It has
no meshes, no finite element spaces, no assembly into global systems and no
linear or nonlinear solvers. It does not visualise results either. To use
its functionals in a simulation, call them from your own discretisation and
solver code.