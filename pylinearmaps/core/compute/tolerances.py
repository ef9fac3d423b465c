"""
Tolerance tiers for numerical validation.

Defines precision expectations for different compute paths:
- FP64: double precision (float64 / complex128)
- FP32: single precision (float32 / complex64)
- SOLVER_DEFAULT: default stopping tolerance for iterative solvers
- PROPERTY_CHECK: tolerance for the opt-in check of claimed properties

Used by test suite, iterative solver defaults and WrappedMap(check=True).
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import DTypeLike


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Reference: lazy application must match the dense product to rounding
FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='fp64',
    description='Double precision, matches dense matmul up to rounding',
)

# Single precision operands
FP32 = ToleranceTier(
    rtol=1e-4,
    atol=1e-5,
    name='fp32',
    description='Single precision, matches dense matmul up to rounding',
)

# Iterative solvers (CG, MINRES, GMRES) stop at this relative residual
SOLVER_DEFAULT = ToleranceTier(
    rtol=1e-8,
    atol=0.0,
    name='solver_default',
    description='Default stopping criterion for iterative solvers',
)

# Tolerance used when verifying claimed symmetry/hermitian-ness on request
PROPERTY_CHECK = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='property_check',
    description='Structural property verification on wrapped matrices',
)


def select_tolerance(dtype: DTypeLike) -> ToleranceTier:
    """Select appropriate comparison tier for a given dtype."""
    dtype = np.dtype(dtype)
    if dtype in (np.dtype(np.float32), np.dtype(np.complex64)):
        return FP32
    return FP64
