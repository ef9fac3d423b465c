"""
In-place BLAS-1 style kernels used by the apply engine.

All functions write into a caller-supplied output and follow the
5-argument multiplication convention

    out = alpha * x + beta * out

where beta == 0 means the previous content of out is ignored entirely
(NaN or Inf in out does not leak into the result).
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray

from pylinearmaps.core.compute.workspace import Workspace


def scale_into(out: NDArray[Any], beta: Any) -> None:
    """out = beta * out, with beta == 0 zeroing out."""
    if beta == 0:
        out.fill(0)
    elif beta != 1:
        out *= beta


def axpby_into(
    alpha: Any,
    x: NDArray[Any],
    beta: Any,
    out: NDArray[Any],
    workspace: Workspace,
) -> None:
    """
    out = alpha * x + beta * out, without touching x.

    A scratch buffer is borrowed only when both alpha != 1 and beta != 0.

    Args:
        alpha: Scalar multiplying x
        x: Input array, same shape as out; not modified
        beta: Scalar multiplying the previous content of out
        out: Output array, updated in place
        workspace: Scratch-buffer pool
    """
    if beta == 0:
        if alpha == 1:
            np.copyto(out, x, casting='same_kind')
        else:
            np.multiply(x, alpha, out=out, casting='same_kind')
        return

    scale_into(out, beta)
    if alpha == 1:
        np.add(out, x, out=out, casting='same_kind')
        return

    with workspace.borrow(out.shape, out.dtype) as tmp:
        np.multiply(x, alpha, out=tmp, casting='same_kind')
        np.add(out, tmp, out=out, casting='same_kind')


def axpby_owned_into(
    alpha: Any,
    tmp: NDArray[Any],
    beta: Any,
    out: NDArray[Any],
) -> None:
    """
    out = alpha * tmp + beta * out, where tmp is a scratch buffer.

    Same as axpby_into but allowed to overwrite tmp, so no extra
    buffer is ever needed.
    """
    if beta == 0:
        if alpha == 1:
            np.copyto(out, tmp, casting='same_kind')
        else:
            np.multiply(tmp, alpha, out=out, casting='same_kind')
        return

    scale_into(out, beta)
    if alpha != 1:
        if np.can_cast(np.result_type(tmp.dtype, alpha), tmp.dtype, casting='same_kind'):
            tmp *= alpha
        else:
            tmp = tmp * alpha
    np.add(out, tmp, out=out, casting='same_kind')
