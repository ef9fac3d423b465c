"""
Solver strategies for InverseMap.

This package adapts external linear solvers (scipy.sparse.linalg Krylov
methods, scipy.linalg factorizations) to the Solver protocol
solver(A, b, out) -> None. No solver algorithm is implemented here.

Public API:
    cg, minres, gmres, bicgstab        iterative, default tolerances
    make_cg, make_minres, ...          configured iterative strategies
    direct, cholesky                   dense factorizations
    get_solver(name_or_callable)       name dispatch

Example:
    >>> from pylinearmaps import inverse
    >>> from pylinearmaps.solvers import make_cg
    >>> Ainv = inverse(A, solver=make_cg(rtol=1e-12))
"""

from pylinearmaps.solvers.iterative import (
    cg,
    minres,
    gmres,
    bicgstab,
    make_cg,
    make_minres,
    make_gmres,
    make_bicgstab,
)
from pylinearmaps.solvers.direct import direct, cholesky
from pylinearmaps.solvers.dispatch import SolverChoice, get_solver, available_solvers

__all__ = [
    # Iterative
    "cg",
    "minres",
    "gmres",
    "bicgstab",
    "make_cg",
    "make_minres",
    "make_gmres",
    "make_bicgstab",
    # Direct
    "direct",
    "cholesky",
    # Dispatch
    "SolverChoice",
    "get_solver",
    "available_solvers",
]
