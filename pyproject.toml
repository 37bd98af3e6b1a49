[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "proxad"
version = "0.1.0"
description = "Forward-mode automatic differentiation of energy functionals, with proximal Galerkin and augmented Lagrangian helpers"
requires-python = ">=3.10"
keywords = [
    "automatic differentiation",
    "dual numbers",
    "hessian",
    "proximal galerkin",
    "augmented lagrangian",
    "entropy",
    "optimization",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
proxad-demo = "proxad.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["proxad"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
