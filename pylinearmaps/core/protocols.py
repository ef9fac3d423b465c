"""
Core protocols for pylinearmaps.

These define the structural interfaces of the collaborators an operator
talks to: user-supplied apply functions and solver strategies. We use
Protocol (structural typing) rather than ABC (nominal typing) so that plain
functions, lambdas and callable objects all qualify.

Design Principles:
    - Minimal contracts: prescribe only what's truly universal
    - Callables in, callables out: no registration or subclassing required
"""

from typing import Protocol, Any, runtime_checkable

import numpy as np
from numpy.typing import NDArray


@runtime_checkable
class ApplyFunction(Protocol):
    """
    Out-of-place apply function: y = f(x).

    Receives a 1D vector of length n_cols and returns a 1D vector of
    length n_rows. Must not modify x.
    """

    def __call__(self, x: NDArray[np.inexact[Any]]) -> NDArray[np.inexact[Any]]:
        ...


@runtime_checkable
class MutatingApplyFunction(Protocol):
    """
    In-place apply function: f(y, x) overwrites y with the product.

    y is a pre-sized, writable 1D buffer of length n_rows. Must not
    modify x. The return value is ignored.
    """

    def __call__(self, y: NDArray[np.inexact[Any]], x: NDArray[np.inexact[Any]]) -> Any:
        ...


@runtime_checkable
class Solver(Protocol):
    """
    Linear-solve strategy used by InverseMap.

    Given an operator A, a right-hand side b (1D) and an output buffer,
    writes an approximate solution of A x = b into out.

    Strategies signal failure by raising (ConvergenceError for iterative
    non-convergence, SingularMatrixError / NotPositiveDefiniteError for
    direct factorizations). InverseMap forwards these unchanged.
    """

    def __call__(self, A: Any, b: NDArray[np.inexact[Any]], out: NDArray[np.inexact[Any]]) -> None:
        ...
