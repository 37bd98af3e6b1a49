"""Forward-mode automatic differentiation of energy functionals, with constrained and proximal Galerkin functionals, entropies, step-size rules and a table logger."""

__version__ = "0.1.0"

__all__ = ["constraints", "demo", "dual", "energies", "functions", "logger", "pg"]