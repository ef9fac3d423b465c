"""
Core infrastructure for pylinearmaps.

This module provides shared abstractions and utilities used by the
operator algebra (pylinearmaps.maps) and the solver strategies
(pylinearmaps.solvers).

Key components:
    protocols: ApplyFunction, MutatingApplyFunction, Solver protocols
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Scratch buffers, in-place kernels, tolerance tiers
"""

from pylinearmaps.core.protocols import ApplyFunction, MutatingApplyFunction, Solver
from pylinearmaps.core.exceptions import (
    LinearMapsError,
    ValidationError,
    DimensionError,
    AdjointNotDefinedError,
    NumericalError,
    SingularMatrixError,
    NotPositiveDefiniteError,
    ConvergenceError,
)

__all__ = [
    # Protocols
    "ApplyFunction",
    "MutatingApplyFunction",
    "Solver",
    # Exceptions
    "LinearMapsError",
    "ValidationError",
    "DimensionError",
    "AdjointNotDefinedError",
    "NumericalError",
    "SingularMatrixError",
    "NotPositiveDefiniteError",
    "ConvergenceError",
]
