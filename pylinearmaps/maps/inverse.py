"""
InverseMap: A^{-1} as an operator, backed by a linear solver.

Applying inverse(A, solver) to b calls solver(A, b, out) every time; no
factorization or solution is cached. The solver is an external strategy
(see pylinearmaps.solvers) and its failures propagate unchanged.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from pylinearmaps.core.compute.kernels import axpby_owned_into
from pylinearmaps.core.protocols import Solver
from pylinearmaps.core.validation import check_square
from pylinearmaps.maps.base import LinearMap

logger = logging.getLogger(__name__)


class InverseMap(LinearMap):
    """
    Lazy inverse of a square operator.

    Args:
        lmap: Square operator (or array) to invert
        solver: Callable solver(A, b, out) -> None, or the name of a
            registered strategy ('cg', 'minres', 'gmres', 'bicgstab',
            'direct', 'cholesky')

    Shape and flags mirror the wrapped operator: the inverse of a
    symmetric / hermitian / positive-definite operator has the same
    property. Whether A is actually invertible is not checked.
    """

    def __init__(self, lmap: Any, solver: Solver | str = 'cg'):
        from pylinearmaps.maps.factory import linear_map
        from pylinearmaps.solvers import get_solver
        lmap = linear_map(lmap)
        check_square(lmap.shape, 'InverseMap')
        self._lmap = lmap
        self._solver = get_solver(solver)

    @property
    def lmap(self) -> LinearMap:
        return self._lmap

    @property
    def solver(self) -> Solver:
        return self._solver

    @property
    def shape(self) -> tuple[int, int]:
        return self._lmap.shape

    @property
    def dtype(self) -> np.dtype:
        return self._lmap.dtype

    @property
    def is_symmetric(self) -> bool:
        return self._lmap.is_symmetric

    @property
    def is_hermitian(self) -> bool:
        return self._lmap.is_hermitian

    @property
    def is_posdef(self) -> bool:
        return self._lmap.is_posdef

    def _apply_into(self, out, x, alpha, beta, workspace):
        _solve_columns(self._lmap, self._solver, out, x, alpha, beta, workspace)

    def _adjoint_apply_into(self, out, x, alpha, beta, workspace):
        from pylinearmaps.maps.transpose import adjoint
        _solve_columns(adjoint(self._lmap), self._solver, out, x, alpha, beta, workspace)

    def _transpose_apply_into(self, out, x, alpha, beta, workspace):
        from pylinearmaps.maps.transpose import transpose
        _solve_columns(transpose(self._lmap), self._solver, out, x, alpha, beta, workspace)

    def _adjoint(self) -> LinearMap:
        from pylinearmaps.maps.transpose import adjoint
        return InverseMap(adjoint(self._lmap), self._solver)

    def _transpose(self) -> LinearMap:
        from pylinearmaps.maps.transpose import transpose
        return InverseMap(transpose(self._lmap), self._solver)

    def __repr__(self) -> str:
        name = getattr(self._solver, '__name__', type(self._solver).__name__)
        return f"InverseMap({self._lmap!r}, solver={name})"


def _solve_columns(A, solver, out, x, alpha, beta, workspace):
    n = out.shape[0]
    for j in range(x.shape[1]):
        # Solvers get contiguous 1D buffers they own for the duration of the call
        with workspace.borrow((n,), out.dtype) as b, workspace.borrow((n,), out.dtype) as sol:
            np.copyto(b, x[:, j], casting='same_kind')
            logger.debug("InverseMap: solving %s system, column %d", A.shape, j)
            solver(A, b, sol)
            axpby_owned_into(alpha, sol, beta, out[:, j])


def inverse(A: Any, solver: Solver | str = 'cg') -> InverseMap:
    """Lazy A^{-1} backed by the given solver strategy."""
    return InverseMap(A, solver)
