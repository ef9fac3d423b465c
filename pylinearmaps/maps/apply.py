"""
Apply engine.

Public entry points for evaluating a (possibly composite) operator:

    apply(A, x)                                  -> new array
    apply_into(out, A, x, alpha=1, beta=0)       -> out, updated in place

apply_into computes out = alpha * A @ x + beta * out. Temporaries needed
by composite nodes come from a Workspace, which the caller may pass in
and reuse across calls so that repeated application (as in an iterative
solver loop) allocates nothing after the first call.
"""

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinearmaps.core.compute.workspace import Workspace
from pylinearmaps.core.validation import (
    check_array,
    check_input_vector,
    check_output,
    check_scalar,
)
from pylinearmaps.maps.base import LinearMap


def apply(
    A: LinearMap,
    x: ArrayLike,
    *,
    workspace: Workspace | None = None,
) -> NDArray[Any]:
    """
    Compute A @ x.

    Args:
        A: Operator of shape (m, n)
        x: Vector of length n, or matrix (n, k) whose columns are vectors
        workspace: Scratch-buffer pool; a fresh one is used if None

    Returns:
        Array of shape (m,) or (m, k), dtype result_type(A.dtype, x.dtype)

    Raises:
        ValidationError: If x is non-numeric
        DimensionError: If x does not match the operator's column count
    """
    x_arr = check_array(x, 'x')
    check_input_vector(x_arr, A.shape[1], 'x')

    dtype = np.result_type(A.dtype, x_arr.dtype)
    out = np.empty((A.shape[0],) + x_arr.shape[1:], dtype=dtype)
    _run(A, out, x_arr, 1, 0, workspace)
    return out


def apply_into(
    out: NDArray[Any],
    A: LinearMap,
    x: ArrayLike,
    alpha: Any = 1,
    beta: Any = 0,
    *,
    workspace: Workspace | None = None,
) -> NDArray[Any]:
    """
    In place: out = alpha * A @ x + beta * out.

    With beta == 0 the previous content of out is ignored. x must not
    share memory with out.

    Args:
        out: Pre-sized output buffer, shape (m,) or (m, k)
        A: Operator of shape (m, n)
        x: Vector of length n, or matrix (n, k)
        alpha: Scalar applied to the product
        beta: Scalar applied to the previous content of out
        workspace: Scratch-buffer pool; a fresh one is used if None

    Returns:
        out

    Raises:
        ValidationError: If out cannot hold the result dtype
        DimensionError: If shapes of out, A and x are inconsistent
    """
    alpha = check_scalar(alpha, 'alpha')
    beta = check_scalar(beta, 'beta')
    x_arr = check_array(x, 'x')
    check_input_vector(x_arr, A.shape[1], 'x')

    dtype = np.result_type(A.dtype, x_arr.dtype, alpha, beta)
    check_output(out, (A.shape[0],) + x_arr.shape[1:], dtype, 'out')
    if np.may_share_memory(out, x_arr):
        raise ValueError("out must not share memory with x")

    _run(A, out, x_arr, alpha, beta, workspace)
    return out


def _run(
    A: LinearMap,
    out: NDArray[Any],
    x: NDArray[Any],
    alpha: Any,
    beta: Any,
    workspace: Workspace | None,
) -> None:
    if workspace is None:
        workspace = Workspace()
    # Hooks always see (n, k) arrays; a vector becomes a one-column view
    if x.ndim == 1:
        A._apply_into(out[:, np.newaxis], x[:, np.newaxis], alpha, beta, workspace)
    else:
        A._apply_into(out, x, alpha, beta, workspace)
