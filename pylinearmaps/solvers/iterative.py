"""
Iterative solver strategies backed by scipy.sparse.linalg.

Each strategy has the Solver signature solver(A, b, out) -> None and is
meant to be plugged into InverseMap. The Krylov iterations themselves are
scipy's; this module only adapts calling conventions and turns scipy's
info codes into exceptions:

    info > 0   ConvergenceError (iteration budget exhausted)
    info < 0   NumericalError (illegal input or breakdown)

Configured variants come from the make_* factories:

    strict_cg = make_cg(rtol=1e-12, maxiter=500)
    Ainv = inverse(A, solver=strict_cg)
"""

import logging
from typing import Any, Callable

import numpy as np
import scipy.sparse.linalg as spla
from numpy.typing import NDArray

from pylinearmaps.core.compute.tolerances import SOLVER_DEFAULT
from pylinearmaps.core.exceptions import ConvergenceError, NumericalError
from pylinearmaps.core.protocols import Solver
from pylinearmaps.maps.conversion import as_scipy_operator

logger = logging.getLogger(__name__)


def _run_krylov(
    method: Callable[..., tuple[NDArray[Any], int]],
    name: str,
    A: Any,
    b: NDArray[Any],
    out: NDArray[Any],
    *,
    rtol: float,
    maxiter: int | None,
    preconditioner: Any,
    **options: Any,
) -> None:
    op = as_scipy_operator(A)
    M = as_scipy_operator(preconditioner) if preconditioner is not None else None
    iterations = 0

    def count(_):
        nonlocal iterations
        iterations += 1

    solution, info = method(op, b, rtol=rtol, maxiter=maxiter, M=M, callback=count, **options)

    if info < 0:
        raise NumericalError(f"{name}: illegal input or breakdown (info={info})")
    if info > 0:
        b_norm = np.linalg.norm(b)
        residual = float(np.linalg.norm(b - op.matvec(solution)) / b_norm) if b_norm > 0 else None
        raise ConvergenceError(
            f"{name} did not converge after {info} iterations "
            f"(relative residual {residual}, rtol {rtol})",
            iterations=int(info),
            final_residual=residual,
            reason='max_iterations',
            threshold=rtol,
        )

    logger.debug("%s converged in %d iterations for %s system", name, iterations, A.shape)
    np.copyto(out, solution, casting='same_kind')


def make_cg(
    rtol: float = SOLVER_DEFAULT.rtol,
    atol: float = SOLVER_DEFAULT.atol,
    maxiter: int | None = None,
    preconditioner: Any = None,
) -> Solver:
    """
    Conjugate gradients. Requires a hermitian positive definite operator;
    this is not checked.
    """
    def cg(A, b, out):
        _run_krylov(spla.cg, 'cg', A, b, out, rtol=rtol, atol=atol,
                    maxiter=maxiter, preconditioner=preconditioner)
    return cg


def make_minres(
    rtol: float = SOLVER_DEFAULT.rtol,
    maxiter: int | None = None,
    preconditioner: Any = None,
) -> Solver:
    """MINRES for hermitian (possibly indefinite) operators."""
    def minres(A, b, out):
        _run_krylov(spla.minres, 'minres', A, b, out, rtol=rtol,
                    maxiter=maxiter, preconditioner=preconditioner)
    return minres


def make_gmres(
    rtol: float = SOLVER_DEFAULT.rtol,
    atol: float = SOLVER_DEFAULT.atol,
    restart: int | None = None,
    maxiter: int | None = None,
    preconditioner: Any = None,
) -> Solver:
    """Restarted GMRES for general square operators."""
    def gmres(A, b, out):
        _run_krylov(spla.gmres, 'gmres', A, b, out, rtol=rtol, atol=atol, restart=restart,
                    maxiter=maxiter, preconditioner=preconditioner, callback_type='pr_norm')
    return gmres


def make_bicgstab(
    rtol: float = SOLVER_DEFAULT.rtol,
    atol: float = SOLVER_DEFAULT.atol,
    maxiter: int | None = None,
    preconditioner: Any = None,
) -> Solver:
    """BiCGSTAB for general square operators."""
    def bicgstab(A, b, out):
        _run_krylov(spla.bicgstab, 'bicgstab', A, b, out, rtol=rtol, atol=atol,
                    maxiter=maxiter, preconditioner=preconditioner)
    return bicgstab


cg = make_cg()
minres = make_minres()
gmres = make_gmres()
bicgstab = make_bicgstab()
