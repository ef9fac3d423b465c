"""
Conversions between LinearMaps and concrete scipy/numpy objects.

    to_dense(A)            numpy.ndarray
    to_sparse(A)           scipy.sparse.csr_array
    as_scipy_operator(A)   scipy.sparse.linalg.LinearOperator

as_scipy_operator is the bridge to downstream iterative algorithms
(scipy.sparse.linalg.eigsh, svds, cg, ...), which only ever call the
apply / adjoint-apply operations.
"""

import logging
import warnings
from typing import Any

import numpy as np
import scipy.sparse as sp
import scipy.sparse.linalg as spla
from numpy.typing import NDArray

from pylinearmaps.core.compute.workspace import Workspace
from pylinearmaps.maps.apply import apply
from pylinearmaps.maps.factory import linear_map
from pylinearmaps.maps.wrapped import WrappedMap

logger = logging.getLogger(__name__)

# Materializing more entries than this emits a RuntimeWarning
DENSE_WARNING_ENTRIES = 10 ** 8


def to_dense(A: Any) -> NDArray[Any]:
    """
    Materialize an operator as a dense array.

    Wrapped matrices are copied; everything else is applied to the
    identity, one column per basis vector.

    Args:
        A: LinearMap (or array)

    Returns:
        numpy.ndarray of shape A.shape and dtype A.dtype
    """
    A = linear_map(A)
    if A.size > DENSE_WARNING_ENTRIES:
        warnings.warn(
            f"materializing a {A.shape[0]} x {A.shape[1]} operator densely",
            RuntimeWarning,
            stacklevel=2,
        )
    if isinstance(A, WrappedMap):
        M = A.matrix
        return M.toarray() if sp.issparse(M) else np.array(M)
    logger.debug("materializing %s by applying it to the identity", A)
    return apply(A, np.eye(A.shape[1], dtype=A.dtype))


def to_sparse(A: Any) -> sp.csr_array:
    """
    Materialize an operator as a CSR sparse array.

    Wrapped sparse matrices convert without densifying; other operators
    are materialized densely first.
    """
    A = linear_map(A)
    if isinstance(A, WrappedMap) and A.is_sparse:
        return sp.csr_array(A.matrix)
    return sp.csr_array(to_dense(A))


def as_scipy_operator(A: Any) -> spla.LinearOperator:
    """
    Expose an operator through scipy's LinearOperator interface.

    The returned object shares one Workspace across all calls, so an
    iterative solver loop stops allocating scratch buffers after its
    first iteration. Not safe to share between threads.

    Args:
        A: LinearMap (or array)

    Returns:
        scipy.sparse.linalg.LinearOperator with matvec, rmatvec, matmat
        and rmatmat
    """
    A = linear_map(A)
    A_adj = A.H
    workspace = Workspace()

    def matvec(x):
        return apply(A, x, workspace=workspace)

    def rmatvec(x):
        return apply(A_adj, x, workspace=workspace)

    return spla.LinearOperator(
        A.shape,
        matvec=matvec,
        rmatvec=rmatvec,
        matmat=matvec,
        rmatmat=rmatvec,
        dtype=A.dtype,
    )
