"""
LinearCombination: A_1 + A_2 + ... + A_k, evaluated lazily.

Scalar weights live on the terms themselves (ScaledMap), so
2*A - 3*B is LinearCombination((ScaledMap(2, A), ScaledMap(-3, B))).
Application accumulates every term straight into the output through the
beta argument of the 5-argument product; plain terms need no temporary.
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from pylinearmaps.core.exceptions import ValidationError
from pylinearmaps.core.validation import check_same_shape
from pylinearmaps.maps.base import LinearMap
from pylinearmaps.maps.properties import combination_flags


class LinearCombination(LinearMap):
    """
    Sum of equally shaped operators.

    Nested sums are flattened. Shapes must match exactly
    (DimensionError otherwise); nothing is broadcast.

    Flags:
        symmetric  every term symmetric, every weight real
        hermitian  every term hermitian, every weight real
        posdef     every term posdef, weights real and non-negative,
                   at least one weight positive
    """

    def __init__(self, maps: Sequence[Any]):
        from pylinearmaps.maps.factory import linear_map
        flat: list[LinearMap] = []
        for A in maps:
            A = linear_map(A)
            if isinstance(A, LinearCombination):
                flat.extend(A.maps)
            else:
                flat.append(A)
        if not flat:
            raise ValidationError("LinearCombination: at least one operator required")
        check_same_shape([A.shape for A in flat], 'LinearCombination')
        self._maps = tuple(flat)

    @property
    def maps(self) -> tuple[LinearMap, ...]:
        return self._maps

    @property
    def shape(self) -> tuple[int, int]:
        return self._maps[0].shape

    @property
    def dtype(self) -> np.dtype:
        return np.result_type(*(A.dtype for A in self._maps))

    @property
    def is_symmetric(self) -> bool:
        return combination_flags(self._maps)[0]

    @property
    def is_hermitian(self) -> bool:
        return combination_flags(self._maps)[1]

    @property
    def is_posdef(self) -> bool:
        return combination_flags(self._maps)[2]

    def _apply_into(self, out, x, alpha, beta, workspace):
        for i, A in enumerate(self._maps):
            A._apply_into(out, x, alpha, beta if i == 0 else 1, workspace)

    def _adjoint_apply_into(self, out, x, alpha, beta, workspace):
        for i, A in enumerate(self._maps):
            A._adjoint_apply_into(out, x, alpha, beta if i == 0 else 1, workspace)

    def _transpose_apply_into(self, out, x, alpha, beta, workspace):
        for i, A in enumerate(self._maps):
            A._transpose_apply_into(out, x, alpha, beta if i == 0 else 1, workspace)

    def _adjoint(self) -> LinearMap:
        from pylinearmaps.maps.transpose import adjoint
        return LinearCombination([adjoint(A) for A in self._maps])

    def _transpose(self) -> LinearMap:
        from pylinearmaps.maps.transpose import transpose
        return LinearCombination([transpose(A) for A in self._maps])

    def __repr__(self) -> str:
        terms = " + ".join(repr(A) for A in self._maps)
        return f"LinearCombination({terms})"


def linear_combination(scalars: Sequence[Any], maps: Sequence[Any]) -> LinearCombination:
    """
    Build sum_i scalars[i] * maps[i].

    Args:
        scalars: Weights, one per operator
        maps: Operators (or arrays) of identical shape

    Returns:
        LinearCombination
    """
    from pylinearmaps.maps.scaled import ScaledMap
    if len(scalars) != len(maps):
        raise ValidationError(
            f"linear_combination: {len(scalars)} scalars for {len(maps)} operators"
        )
    return LinearCombination([ScaledMap(c, A) for c, A in zip(scalars, maps)])
