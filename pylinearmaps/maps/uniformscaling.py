"""
UniformScalingMap: lam * I_n without storing anything.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from pylinearmaps.core.compute.kernels import axpby_into
from pylinearmaps.core.exceptions import ValidationError
from pylinearmaps.core.validation import check_scalar
from pylinearmaps.maps.base import LinearMap, scalar_dtype
from pylinearmaps.maps.properties import is_real_scalar


class UniformScalingMap(LinearMap):
    """
    Scaled identity of order n.

    Always symmetric; hermitian for real lam; positive definite for
    real lam > 0.
    """

    def __init__(self, scalar: Any, n: int):
        scalar = check_scalar(scalar, 'scalar')
        if not isinstance(n, (int, np.integer)) or isinstance(n, bool) or n < 0:
            raise ValidationError(f"n: expected a non-negative integer, got {n!r}")
        self._scalar = scalar
        self._n = int(n)
        self._dtype = scalar_dtype(scalar)

    @property
    def scalar(self) -> Any:
        return self._scalar

    @property
    def shape(self) -> tuple[int, int]:
        return (self._n, self._n)

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def is_symmetric(self) -> bool:
        return True

    @property
    def is_hermitian(self) -> bool:
        return is_real_scalar(self._scalar)

    @property
    def is_posdef(self) -> bool:
        return is_real_scalar(self._scalar) and np.real(self._scalar) > 0

    def _apply_into(self, out, x, alpha, beta, workspace):
        axpby_into(alpha * self._scalar, x, beta, out, workspace)

    def _adjoint_apply_into(self, out, x, alpha, beta, workspace):
        axpby_into(alpha * np.conj(self._scalar), x, beta, out, workspace)

    def _transpose_apply_into(self, out, x, alpha, beta, workspace):
        self._apply_into(out, x, alpha, beta, workspace)

    def _adjoint(self) -> LinearMap:
        return UniformScalingMap(np.conj(self._scalar), self._n)

    def __repr__(self) -> str:
        return f"UniformScalingMap({self._scalar!r}, {self._n})"


def identity(n: int, dtype: Any = np.float64) -> UniformScalingMap:
    """Identity operator of order n."""
    return UniformScalingMap(np.dtype(dtype).type(1), n)
