"""
linear_map(): the single entry point for turning things into operators.

    linear_map(A)                               A is a LinearMap: returned as is
    linear_map(M, symmetric=True)               array / sparse -> WrappedMap
    linear_map(f, shape=(m, n), adjoint=fc)     callable -> FunctionMap

Property claims are forwarded; nothing is deduced from the data.
"""

from typing import Any, Callable

import numpy as np
import scipy.sparse as sp
from numpy.typing import DTypeLike

from pylinearmaps.core.exceptions import ValidationError
from pylinearmaps.maps.base import LinearMap
from pylinearmaps.maps.function import FunctionMap
from pylinearmaps.maps.wrapped import WrappedMap


def linear_map(
    obj: Any,
    *,
    shape: tuple[int, int] | None = None,
    adjoint: Callable[..., Any] | None = None,
    mutating: bool = False,
    dtype: DTypeLike = np.float64,
    symmetric: bool = False,
    hermitian: bool = False,
    posdef: bool = False,
    check: bool = False,
) -> LinearMap:
    """
    Build a LinearMap from a matrix, a function or another LinearMap.

    Args:
        obj: LinearMap, numpy array / array-like, scipy.sparse matrix, or
            a callable applying the operator to a vector
        shape: (rows, cols), required for callables, ignored otherwise
        adjoint: Callable applying the adjoint (callables only)
        mutating: Callables use the f(y, x) in-place convention
        dtype: Element dtype (callables only)
        symmetric: Declared symmetry
        hermitian: Declared hermitian-ness
        posdef: Declared positive-definiteness
        check: Verify symmetric/hermitian claims on wrapped matrices

    Returns:
        LinearMap

    Raises:
        ValidationError: If obj cannot be interpreted, or flags are claimed
            for a LinearMap that is returned unchanged
    """
    if isinstance(obj, LinearMap):
        if symmetric or hermitian or posdef:
            raise ValidationError(
                "linear_map: cannot attach property claims to an existing LinearMap"
            )
        return obj

    if isinstance(obj, np.ndarray) or sp.issparse(obj) or not callable(obj):
        return WrappedMap(
            obj,
            symmetric=symmetric,
            hermitian=hermitian,
            posdef=posdef,
            check=check,
        )

    if shape is None:
        raise ValidationError("linear_map: shape is required for function-backed maps")
    return FunctionMap(
        obj,
        shape,
        adjoint=adjoint,
        mutating=mutating,
        dtype=dtype,
        symmetric=symmetric,
        hermitian=hermitian,
        posdef=posdef,
    )
