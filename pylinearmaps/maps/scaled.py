"""
ScaledMap: lam * A, evaluated lazily.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from pylinearmaps.core.validation import check_scalar
from pylinearmaps.maps.base import LinearMap
from pylinearmaps.maps.properties import combination_flags


class ScaledMap(LinearMap):
    """
    Scalar multiple of an operator.

    Scaling a ScaledMap multiplies the scalars instead of nesting. The
    scalar is folded into alpha at apply time, so no temporary is needed.

    Flags follow the one-term linear-combination rules: symmetric and
    hermitian need a real scalar, posdef needs a real positive scalar.
    """

    def __init__(self, scalar: Any, lmap: LinearMap):
        from pylinearmaps.maps.factory import linear_map
        scalar = check_scalar(scalar, 'scalar')
        lmap = linear_map(lmap)
        if isinstance(lmap, ScaledMap):
            scalar = scalar * lmap.scalar
            lmap = lmap.lmap
        self._scalar = scalar
        self._lmap = lmap

    @property
    def scalar(self) -> Any:
        return self._scalar

    @property
    def lmap(self) -> LinearMap:
        return self._lmap

    @property
    def shape(self) -> tuple[int, int]:
        return self._lmap.shape

    @property
    def dtype(self) -> np.dtype:
        return np.result_type(self._scalar, self._lmap.dtype)

    @property
    def is_symmetric(self) -> bool:
        return combination_flags([self])[0]

    @property
    def is_hermitian(self) -> bool:
        return combination_flags([self])[1]

    @property
    def is_posdef(self) -> bool:
        return combination_flags([self])[2]

    def _apply_into(self, out, x, alpha, beta, workspace):
        self._lmap._apply_into(out, x, alpha * self._scalar, beta, workspace)

    def _adjoint_apply_into(self, out, x, alpha, beta, workspace):
        self._lmap._adjoint_apply_into(out, x, alpha * np.conj(self._scalar), beta, workspace)

    def _transpose_apply_into(self, out, x, alpha, beta, workspace):
        self._lmap._transpose_apply_into(out, x, alpha * self._scalar, beta, workspace)

    def _adjoint(self) -> LinearMap:
        from pylinearmaps.maps.transpose import adjoint
        return ScaledMap(np.conj(self._scalar), adjoint(self._lmap))

    def _transpose(self) -> LinearMap:
        from pylinearmaps.maps.transpose import transpose
        return ScaledMap(self._scalar, transpose(self._lmap))

    def __repr__(self) -> str:
        return f"ScaledMap({self._scalar!r}, {self._lmap!r})"
