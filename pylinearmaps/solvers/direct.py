"""
Direct solver strategies backed by scipy.linalg.

The operator is materialized densely and factorized on every call, so
these strategies suit small systems and reference computations. Nothing
is cached between applications of an InverseMap.
"""

import logging
from typing import Any

import numpy as np
import scipy.linalg
from numpy.typing import NDArray

from pylinearmaps.core.exceptions import NotPositiveDefiniteError, SingularMatrixError
from pylinearmaps.maps.conversion import to_dense

logger = logging.getLogger(__name__)


def direct(A: Any, b: NDArray[Any], out: NDArray[Any]) -> None:
    """
    Solve A x = b by LU (or symmetric-indefinite for hermitian A).

    Raises:
        SingularMatrixError: If A is exactly singular; carries the 2-norm
            condition number of the dense operator
    """
    M = to_dense(A)
    assume_a = 'her' if A.is_hermitian else 'gen'
    try:
        x = scipy.linalg.solve(M, b, assume_a=assume_a)
    except np.linalg.LinAlgError as e:
        raise SingularMatrixError(
            f"direct solve failed, operator is singular: {e}",
            matrix_name='A',
            condition_number=float(np.linalg.cond(M)),
        ) from e
    logger.debug("direct solve (%s) of %s system", assume_a, M.shape)
    np.copyto(out, x, casting='same_kind')


def cholesky(A: Any, b: NDArray[Any], out: NDArray[Any]) -> None:
    """
    Solve A x = b via Cholesky factorization.

    Raises:
        NotPositiveDefiniteError: If the factorization fails; carries the
            smallest eigenvalue of the lower triangle's hermitian part
    """
    M = to_dense(A)
    try:
        factor = scipy.linalg.cho_factor(M, lower=True)
    except np.linalg.LinAlgError as e:
        raise NotPositiveDefiniteError(
            f"Cholesky factorization failed: {e}",
            matrix_name='A',
            min_eigenvalue=float(np.linalg.eigvalsh(M)[0]),
        ) from e
    x = scipy.linalg.cho_solve(factor, b)
    logger.debug("cholesky solve of %s system", M.shape)
    np.copyto(out, x, casting='same_kind')
