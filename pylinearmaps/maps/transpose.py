"""
Transpose and adjoint.

transpose(A) and adjoint(A) are lazy. They simplify before wrapping:

    transpose(A) is A            if A is symmetric
    adjoint(A) is A              if A is hermitian
    transpose(transpose(A)) is A (likewise for adjoint; and for real maps
                                  the two wrappers are interchangeable)

Combinators push the operation down to their children (a composition
reverses its chain, a scaled map conjugates its scalar, ...), so the
TransposeMap / AdjointMap wrappers only ever sit on top of leaves and
block maps.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from pylinearmaps.maps.base import LinearMap, conjugated_apply_into


class TransposeMap(LinearMap):
    """Lazy transpose of a LinearMap. Prefer transpose(A) over direct use."""

    def __init__(self, lmap: LinearMap):
        self._lmap = lmap

    @property
    def lmap(self) -> LinearMap:
        return self._lmap

    @property
    def shape(self) -> tuple[int, int]:
        m, n = self._lmap.shape
        return (n, m)

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
        self._lmap._transpose_apply_into(out, x, alpha, beta, workspace)

    def _transpose_apply_into(self, out, x, alpha, beta, workspace):
        self._lmap._apply_into(out, x, alpha, beta, workspace)

    def _adjoint_apply_into(self, out, x, alpha, beta, workspace):
        # (A^T)^H = conj(A)
        if self.is_real:
            self._lmap._apply_into(out, x, alpha, beta, workspace)
            return
        conjugated_apply_into(self._lmap._apply_into, out, x, alpha, beta, workspace)

    def __repr__(self) -> str:
        return f"TransposeMap({self._lmap!r})"


class AdjointMap(LinearMap):
    """Lazy conjugate transpose of a LinearMap. Prefer adjoint(A) over direct use."""

    def __init__(self, lmap: LinearMap):
        self._lmap = lmap

    @property
    def lmap(self) -> LinearMap:
        return self._lmap

    @property
    def shape(self) -> tuple[int, int]:
        m, n = self._lmap.shape
        return (n, m)

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
        self._lmap._adjoint_apply_into(out, x, alpha, beta, workspace)

    def _adjoint_apply_into(self, out, x, alpha, beta, workspace):
        self._lmap._apply_into(out, x, alpha, beta, workspace)

    def _transpose_apply_into(self, out, x, alpha, beta, workspace):
        # (A^H)^T = conj(A)
        if self.is_real:
            self._lmap._apply_into(out, x, alpha, beta, workspace)
            return
        conjugated_apply_into(self._lmap._apply_into, out, x, alpha, beta, workspace)

    def __repr__(self) -> str:
        return f"AdjointMap({self._lmap!r})"


def adjoint(A: Any) -> LinearMap:
    """
    Lazy conjugate transpose A^H.

    Args:
        A: LinearMap, numpy array or scipy.sparse matrix

    Returns:
        A LinearMap of shape (A.shape[1], A.shape[0])
    """
    from pylinearmaps.maps.factory import linear_map
    A = linear_map(A)
    if isinstance(A, AdjointMap):
        return A.lmap
    if isinstance(A, TransposeMap) and A.is_real:
        return A.lmap
    if A.is_hermitian:
        return A
    return A._adjoint()


def transpose(A: Any) -> LinearMap:
    """
    Lazy transpose A^T.

    Args:
        A: LinearMap, numpy array or scipy.sparse matrix

    Returns:
        A LinearMap of shape (A.shape[1], A.shape[0])
    """
    from pylinearmaps.maps.factory import linear_map
    A = linear_map(A)
    if isinstance(A, TransposeMap):
        return A.lmap
    if isinstance(A, AdjointMap) and A.is_real:
        return A.lmap
    if A.is_symmetric:
        return A
    return A._transpose()
