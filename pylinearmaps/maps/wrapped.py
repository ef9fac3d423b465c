"""
WrappedMap: an operator backed by an existing dense or sparse matrix.

The matrix is referenced, not copied. Property flags are taken from the
caller; by default nothing is claimed, because deducing symmetry from the
data costs O(n^2) and is only done when explicitly requested via
check=True.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
import scipy.sparse as sp
from numpy.typing import NDArray

from pylinearmaps.core.compute.kernels import axpby_owned_into
from pylinearmaps.core.compute.tolerances import PROPERTY_CHECK
from pylinearmaps.core.compute.workspace import Workspace
from pylinearmaps.core.exceptions import ValidationError
from pylinearmaps.core.validation import check_operand
from pylinearmaps.maps.base import LinearMap
from pylinearmaps.maps.properties import resolve_flags

logger = logging.getLogger(__name__)


class WrappedMap(LinearMap):
    """
    Lazy view of a numpy array or scipy.sparse matrix.

    Args:
        matrix: 2D numpy array (or array-like) or scipy.sparse matrix/array
        symmetric: Caller's claim that matrix == matrix.T
        hermitian: Caller's claim that matrix == matrix.conj().T
        posdef: Caller's claim that matrix is positive definite
        check: If True, verify the symmetric/hermitian claims against the
            data once, raising ValidationError on mismatch

    For real matrices symmetric and hermitian imply each other. Claims on a
    non-square matrix raise ValidationError.
    """

    def __init__(
        self,
        matrix: Any,
        *,
        symmetric: bool = False,
        hermitian: bool = False,
        posdef: bool = False,
        check: bool = False,
    ):
        matrix = check_operand(matrix, 'matrix')
        self._matrix = matrix
        self._symmetric, self._hermitian, self._posdef = resolve_flags(
            matrix.shape,
            not np.issubdtype(matrix.dtype, np.complexfloating),
            symmetric=symmetric,
            hermitian=hermitian,
            posdef=posdef,
            name='WrappedMap',
        )
        if check:
            self._verify_claims()

    def _verify_claims(self) -> None:
        M = self._matrix
        tol = PROPERTY_CHECK
        if sp.issparse(M):
            M = M.toarray()
        if self._symmetric and not np.allclose(M, M.T, rtol=tol.rtol, atol=tol.atol):
            raise ValidationError("WrappedMap: matrix claimed symmetric but M != M.T")
        if self._hermitian and not np.allclose(M, M.conj().T, rtol=tol.rtol, atol=tol.atol):
            raise ValidationError("WrappedMap: matrix claimed hermitian but M != M^H")
        logger.debug("verified property claims of %s matrix", M.shape)

    @property
    def matrix(self) -> Any:
        """The wrapped array (not a copy)."""
        return self._matrix

    @property
    def is_sparse(self) -> bool:
        return sp.issparse(self._matrix)

    @property
    def shape(self) -> tuple[int, int]:
        return tuple(self._matrix.shape)

    @property
    def dtype(self) -> np.dtype:
        return self._matrix.dtype

    @property
    def is_symmetric(self) -> bool:
        return self._symmetric

    @property
    def is_hermitian(self) -> bool:
        return self._hermitian

    @property
    def is_posdef(self) -> bool:
        return self._posdef

    def _apply_into(self, out, x, alpha, beta, workspace):
        _matmul_into(self._matrix, out, x, alpha, beta, workspace)

    def _transpose_apply_into(self, out, x, alpha, beta, workspace):
        _matmul_into(self._matrix.T, out, x, alpha, beta, workspace)

    def _adjoint_apply_into(self, out, x, alpha, beta, workspace):
        if self.is_real:
            _matmul_into(self._matrix.T, out, x, alpha, beta, workspace)
            return
        # A^H x = conj(A^T conj(x)); avoids materializing conj(A)
        with workspace.borrow(x.shape, out.dtype) as xc:
            np.conjugate(x, out=xc)
            with workspace.borrow(out.shape, out.dtype) as tmp:
                _matmul_into(self._matrix.T, tmp, xc, 1, 0, workspace)
                np.conjugate(tmp, out=tmp)
                axpby_owned_into(alpha, tmp, beta, out)


def _matmul_into(
    M: Any,
    out: NDArray[Any],
    x: NDArray[Any],
    alpha: Any,
    beta: Any,
    workspace: Workspace,
) -> None:
    """out = alpha * M @ x + beta * out for a dense or sparse M."""
    if sp.issparse(M):
        # scipy.sparse has no out= parameter; the product is allocated once
        axpby_owned_into(alpha, np.asarray(M @ x, dtype=out.dtype), beta, out)
        return
    if beta == 0:
        np.matmul(M, x, out=out)
        if alpha != 1:
            out *= alpha
        return
    with workspace.borrow(out.shape, out.dtype) as tmp:
        np.matmul(M, x, out=tmp)
        axpby_owned_into(alpha, tmp, beta, out)
